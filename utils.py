import numpy as np

import config

# --- Packed pixel (0x00RRGGBB) ---

_SHIFTS = {
    'red': config.RED_SHIFT,
    'green': config.GREEN_SHIFT,
    'blue': config.BLUE_SHIFT,
}


def channel(pixel, which):
    """取出單一通道 (0~255)，which 為 'red' / 'green' / 'blue'"""
    try:
        shift = _SHIFTS[which]
    except KeyError:
        raise ValueError(f"Unknown channel {which!r}, expected one of {sorted(_SHIFTS)}") from None
    return (int(pixel) >> shift) & config.CHANNEL_MASK


def channel_f(pixel, which):
    """同 channel，但回傳 float32 (色差與混色都用單精度計算)"""
    return np.float32(channel(pixel, which))


def pack(r, g, b):
    """三個 8-bit 通道 -> packed pixel，超過 8 bit 的部分直接截掉"""
    return (((r & config.CHANNEL_MASK) << config.RED_SHIFT)
            | ((g & config.CHANNEL_MASK) << config.GREEN_SHIFT)
            | ((b & config.CHANNEL_MASK) << config.BLUE_SHIFT))


def _truncate(value):
    # 等同 float -> uint32 的轉型：往 0 截斷，負數與 NaN 為 0，太大就停在 U32_MAX
    if not value > 0:
        return 0
    if value >= config.U32_MAX:
        return config.U32_MAX
    return int(value)


def pack_f(r, g, b):
    """float 通道 -> packed pixel (先轉成 uint32，再取低 8 bit)"""
    return pack(_truncate(r), _truncate(g), _truncate(b))


# --- 與影像陣列互轉 (decoder / encoder 用) ---

def pack_image(img_arr):
    """(H, W, 3) uint8 RGB -> 長度 H*W 的 uint32 packed 陣列"""
    if img_arr.ndim != 3 or img_arr.shape[2] < 3:
        raise ValueError(f"Expected an (H, W, 3) RGB array, got shape {img_arr.shape}")
    rgb = img_arr[:, :, :3].astype(np.uint32)
    packed = ((rgb[:, :, 0] << config.RED_SHIFT)
              | (rgb[:, :, 1] << config.GREEN_SHIFT)
              | (rgb[:, :, 2] << config.BLUE_SHIFT))
    return packed.ravel()


def unpack_image(buf, width, height):
    """packed 陣列 -> (H, W, 3) uint8 RGB"""
    packed = np.asarray(buf, dtype=np.uint32).reshape(height, width)
    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:, :, 0] = (packed >> config.RED_SHIFT) & config.CHANNEL_MASK
    img[:, :, 1] = (packed >> config.GREEN_SHIFT) & config.CHANNEL_MASK
    img[:, :, 2] = (packed >> config.BLUE_SHIFT) & config.CHANNEL_MASK
    return img


def calculate_psnr(img1, img2):
    """
    計算峰值訊號雜訊比 (PSNR)
    數值越高代表兩張圖越像 (通常 > 30dB 代表品質不錯)
    """
    mse = np.mean((img1.astype(np.float64) - img2.astype(np.float64)) ** 2)
    if mse == 0:
        return 100
    pixel_max = 255.0
    return 20 * np.log10(pixel_max / np.sqrt(mse))
