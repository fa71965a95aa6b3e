import numpy as np

import config

# ==========================================
# Part 1: xBR 鄰域取樣 (Neighborhood)
# ==========================================

# Matrix: 10 是 (0,0)，也就是目前的像素
#     -2 | -1|  0| +1| +2    (x)
# ______________________________
# -2 |     [ 0][ 1][ 2]
# -1 | [ 3][ 4][ 5][ 6][ 7]
#  0 | [ 8][ 9][10][11][12]
# +1 | [13][14][15][16][17]
# +2 |     [18][19][20]
# (y)|
NEIGHBORHOOD_OFFSETS = (
    (-1, -2), (0, -2), (1, -2),
    (-2, -1), (-1, -1), (0, -1), (1, -1), (2, -1),
    (-2, 0), (-1, 0), (0, 0), (1, 0), (2, 0),
    (-2, 1), (-1, 1), (0, 1), (1, 1), (2, 1),
    (-1, 2), (0, 2), (1, 2),
)

CENTER = 10
_RADIUS = 2


class SourceImage:
    """唯讀的來源影像：row-major packed pixels + 寬高"""
    __slots__ = ('pixels', 'width', 'height')

    def __init__(self, pixels, width, height):
        self.pixels = pixels
        self.width = width
        self.height = height

    def pixel_at(self, x, y):
        """超出邊界的座標一律回傳 0 (黑色)"""
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return 0
        return int(self.pixels[self.width * y + x]) & config.PIXEL_MASK


def neighborhood(image, x, y):
    """
    取出 (x, y) 周圍 21 格的菱形鄰域
    每個像素都建立新的 list，不跨像素共用
    """
    return [image.pixel_at(x + dx, y + dy) for dx, dy in NEIGHBORHOOD_OFFSETS]


def neighborhood_planes(image2d):
    """
    向量化版本：回傳 21 張 (H, W) 平面
    第 i 張平面的 [y, x] 等於 neighborhood(image, x, y)[i]
    """
    h, w = image2d.shape
    padded = np.pad(np.asarray(image2d, dtype=np.uint32) & config.PIXEL_MASK,
                    _RADIUS, mode='constant', constant_values=0)
    return [
        padded[_RADIUS + dy:_RADIUS + dy + h, _RADIUS + dx:_RADIUS + dx + w]
        for dx, dy in NEIGHBORHOOD_OFFSETS
    ]


# ==========================================
# Part 2: 比較用的重取樣 (實驗用)
# ==========================================

def downsample_average(img, ratio=0.5):
    """
    Area Average (區域平均)
    2x2 區塊取平均，用來從原圖產生低解析度輸入
    """
    if ratio != 1.0 / config.SCALE:
        raise ValueError(f"Only ratio=1/{config.SCALE} is supported, got {ratio}")
    h, w = img.shape[:2]
    h_even, w_even = h - (h % 2), w - (w % 2)
    cut = img[:h_even, :w_even].astype(np.float64)
    blocks = cut.reshape(h_even // 2, 2, w_even // 2, 2, *img.shape[2:])
    return np.round(blocks.mean(axis=(1, 3))).astype(img.dtype)


def upsample(img, target_h, target_w):
    """
    [Baseline] Nearest Neighbor (最近鄰)
    直接複製像素，速度最快，但有馬賽克
    """
    h, w = img.shape[:2]
    row_idx = np.clip((np.arange(target_h) * (h / target_h)).astype(int), 0, h - 1)
    col_idx = np.clip((np.arange(target_w) * (w / target_w)).astype(int), 0, w - 1)
    return img[row_idx[:, None], col_idx]


def upsample_bilinear(img, target_h, target_w):
    """
    [Method A] Bilinear Interpolation (雙線性插值)
    比 Baseline 平滑，但邊緣變糊
    """
    h, w = img.shape[:2]

    x_grid = np.clip((np.arange(target_w) + 0.5) * (w / target_w) - 0.5, 0, w - 1)
    y_grid = np.clip((np.arange(target_h) + 0.5) * (h / target_h) - 0.5, 0, h - 1)

    x0 = np.floor(x_grid).astype(int)
    x1 = np.minimum(x0 + 1, w - 1)
    y0 = np.floor(y_grid).astype(int)
    y1 = np.minimum(y0 + 1, h - 1)

    # 多出來的通道軸要能 broadcast
    extra = (1,) * (img.ndim - 2)
    wx = (x_grid - x0).reshape(1, -1, *extra)
    wy = (y_grid - y0).reshape(-1, 1, *extra)

    src = img.astype(np.float64)
    top = src[y0[:, None], x0] * (1 - wx) + src[y0[:, None], x1] * wx
    bottom = src[y1[:, None], x0] * (1 - wx) + src[y1[:, None], x1] * wx
    result = top * (1 - wy) + bottom * wy

    return np.clip(np.round(result), 0, 255).astype(img.dtype)
