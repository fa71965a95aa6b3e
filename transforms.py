import numpy as np

import config
from utils import channel_f, pack_f

# 色差與混色全部用 float32 計算；
# 平手 (A == B) 在調色盤影像很常見，精度不同會改變判斷結果
_F32 = np.float32
_Y_COEFFS = tuple(_F32(c) for c in config.Y_COEFFS)
_U_COEFFS = tuple(_F32(c) for c in config.U_COEFFS)
_V_COEFFS = tuple(_F32(c) for c in config.V_COEFFS)
_Y_WEIGHT = _F32(config.Y_WEIGHT)
_U_WEIGHT = _F32(config.U_WEIGHT)
_V_WEIGHT = _F32(config.V_WEIGHT)
_ONE = _F32(1.0)

# --- 色差與混色 ---

def diff(pixel_a, pixel_b):
    """
    兩個像素的加權色差

    1. 取各通道的絕對差值
    2. 把差值轉到 Y'UV，分開亮度與色度
    3. 套用 Y'UV 權重，偏重亮度

    結果只拿來比大小，絕對值本身沒有意義
    """
    r = abs(channel_f(pixel_a, 'red') - channel_f(pixel_b, 'red'))
    b = abs(channel_f(pixel_a, 'blue') - channel_f(pixel_b, 'blue'))
    g = abs(channel_f(pixel_a, 'green') - channel_f(pixel_b, 'green'))
    return _weighted_yuv(r, g, b)


def _weighted_yuv(r, g, b):
    # scalar 與 ndarray 共用，運算順序一致才能保證兩條路徑結果相同
    y = r * _Y_COEFFS[0] + g * _Y_COEFFS[1] + b * _Y_COEFFS[2]
    u = r * _U_COEFFS[0] + g * _U_COEFFS[1] + b * _U_COEFFS[2]
    v = r * _V_COEFFS[0] + g * _V_COEFFS[1] + b * _V_COEFFS[2]
    return (y * _Y_WEIGHT) + (u * _U_WEIGHT) + (v * _V_WEIGHT)


def blend(pixel_a, pixel_b, alpha):
    """alpha * b + (1 - alpha) * a，逐通道計算後重新 pack"""
    alpha = _F32(alpha)
    reverse_alpha = _ONE - alpha
    return pack_f(
        (alpha * channel_f(pixel_b, 'red')) + (reverse_alpha * channel_f(pixel_a, 'red')),
        (alpha * channel_f(pixel_b, 'green')) + (reverse_alpha * channel_f(pixel_a, 'green')),
        (alpha * channel_f(pixel_b, 'blue')) + (reverse_alpha * channel_f(pixel_a, 'blue')),
    )


# --- 向量化版本 (Vectorized) ---
# 一次處理整張圖：每個像素以 (r, g, b) 三張 float32 平面表示

def to_planes(packed):
    """uint32 packed 陣列 -> (r, g, b) float32 平面"""
    packed = np.asarray(packed, dtype=np.uint32)
    return tuple(
        ((packed >> shift) & config.CHANNEL_MASK).astype(np.float32)
        for shift in (config.RED_SHIFT, config.GREEN_SHIFT, config.BLUE_SHIFT)
    )


def pack_planes(r, g, b):
    """float 平面 -> uint32 packed，截斷規則與 pack_f 相同"""
    out = np.zeros(np.shape(r), dtype=np.uint32)
    for plane, shift in ((r, config.RED_SHIFT), (g, config.GREEN_SHIFT), (b, config.BLUE_SHIFT)):
        # float64 才能精確表示 U32_MAX
        wide = np.asarray(plane, dtype=np.float64)
        clamped = np.where(wide > 0, np.minimum(wide, float(config.U32_MAX)), 0.0)
        truncated = clamped.astype(np.int64) & config.CHANNEL_MASK
        out |= truncated.astype(np.uint32) << np.uint32(shift)
    return out


def diff_planes(planes_a, planes_b):
    """diff 的逐元素版本"""
    ra, ga, ba = planes_a
    rb, gb, bb = planes_b
    return _weighted_yuv(np.abs(ra - rb), np.abs(ga - gb), np.abs(ba - bb))


def blend_planes(planes_a, planes_b, alpha):
    """blend 的逐元素版本，回傳 uint32 packed 陣列"""
    alpha = _F32(alpha)
    reverse_alpha = _ONE - alpha
    return pack_planes(*(
        (alpha * pb) + (reverse_alpha * pa)
        for pa, pb in zip(planes_a, planes_b)
    ))
