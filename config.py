"""
xBR 濾鏡的固定參數
改這些數值會改變畫面風格，不是執行期設定
"""

# 只支援 2 倍放大
SCALE = 2

# Packed pixel: 0x00RRGGBB
CHANNEL_MASK = 0xFF
PIXEL_MASK = 0xFFFFFF

# float -> uint32 轉換時的上限 (超過就 saturate)
U32_MAX = 0xFFFFFFFF

RED_SHIFT = 16
GREEN_SHIFT = 8
BLUE_SHIFT = 0

# Y'UV 權重，要偏重亮度 (Y) 才有效果
Y_WEIGHT = 48.0
U_WEIGHT = 7.0
V_WEIGHT = 6.0

# RGB 差值 -> Y'UV 的係數 (r, g, b)
Y_COEFFS = (0.299, 0.587, 0.114)
U_COEFFS = (-0.168736, -0.331264, 0.5)
V_COEFFS = (0.5, -0.418688, -0.081312)

# 偵測到邊緣時，候選像素與中心像素的混合比例
EDGE_BLEND_ALPHA = 0.5

VALID_EXTS = {".jpg", ".jpeg", ".png", ".bmp"}
