"""
xBR 2x 放大濾鏡

每個來源像素取 21 格菱形鄰域，對輸出 2x2 區塊的四個子像素各自判斷
邊緣方向；有邊緣就把較接近的鄰居與中心像素各半混合，否則直接沿用中心像素。

兩種實作：
  - apply            : 逐像素的 baseline，直接對照規則表
  - apply_vectorized : 用 NumPy 一次算完整張圖，結果與 baseline 完全相同
"""

from collections import namedtuple

import numpy as np

import config
from sampler import CENTER, SourceImage, neighborhood, neighborhood_planes
from transforms import blend, blend_planes, diff, diff_planes, to_planes

SCALE = config.SCALE

# a_terms / b_terms 是四個色差配對，a_axis / b_axis 那一項乘 4
EdgeRule = namedtuple('EdgeRule', ['name', 'a_terms', 'a_axis', 'b_terms', 'b_axis', 'candidates'])

EDGE_RULES = (
    EdgeRule('top_left',
             ((10, 14), (10, 6), (4, 8), (4, 1)), (9, 5),
             ((9, 15), (9, 3), (5, 11), (5, 0)), (10, 4),
             (9, 5)),
    EdgeRule('top_right',
             ((10, 16), (10, 4), (6, 12), (6, 1)), (5, 11),
             ((11, 15), (11, 7), (9, 5), (5, 2)), (10, 6),
             (5, 11)),
    EdgeRule('bottom_left',
             ((10, 4), (10, 16), (14, 8), (14, 19)), (9, 15),
             ((9, 5), (9, 13), (11, 15), (15, 18)), (10, 14),
             (9, 15)),
    EdgeRule('bottom_right',
             ((10, 6), (10, 14), (16, 12), (16, 19)), (11, 15),
             ((9, 15), (15, 20), (15, 17), (5, 11)), (10, 16),
             (11, 15)),
)

# 每條規則在輸出 2x2 區塊中的位置 (dx, dy)，順序與 EDGE_RULES 相同
QUADRANT_OFFSETS = ((0, 0), (1, 0), (0, 1), (1, 1))

# 所有規則會用到的色差配對，每個像素只算一次
DIFF_PAIRS = tuple(sorted({
    pair
    for rule in EDGE_RULES
    for pair in (*rule.a_terms, rule.a_axis, *rule.b_terms, rule.b_axis,
                 *((CENTER, c) for c in rule.candidates))
}))


# 主軸那一項的權重 (float32，避免把總和升成 float64)
_AXIS_WEIGHT = np.float32(4.0)


def _weighted_sum(diffs, terms, axis):
    # float32 scalar 與 ndarray 共用，由左往右相加
    return diffs[terms[0]] + diffs[terms[1]] + diffs[terms[2]] + diffs[terms[3]] + _AXIS_WEIGHT * diffs[axis]


def pair_diffs(matrix):
    """鄰域內所有需要的色差，key 為 (i, j)"""
    return {(i, j): diff(matrix[i], matrix[j]) for i, j in DIFF_PAIRS}


def evaluate_rule(rule, matrix, diffs=None):
    """單一子像素的邊緣判斷，回傳輸出像素"""
    if diffs is None:
        diffs = pair_diffs(matrix)
    a = _weighted_sum(diffs, rule.a_terms, rule.a_axis)
    b = _weighted_sum(diffs, rule.b_terms, rule.b_axis)
    center = matrix[CENTER]
    if a < b:
        first, second = rule.candidates
        if diffs[(CENTER, first)] <= diffs[(CENTER, second)]:
            new_pixel = matrix[first]
        else:
            new_pixel = matrix[second]
        return blend(new_pixel, center, config.EDGE_BLEND_ALPHA)
    return center


def evaluate_rules(matrix):
    """四個子像素 (左上, 右上, 左下, 右下)"""
    diffs = pair_diffs(matrix)
    return tuple(evaluate_rule(rule, matrix, diffs) for rule in EDGE_RULES)


# --- Buffer ---

def get_buffer_for_size(width, height):
    """回傳 (全 0 的輸出 buffer, 輸出寬, 輸出高)"""
    out_w, out_h = width * SCALE, height * SCALE
    return np.zeros(out_w * out_h, dtype=np.uint32), out_w, out_h


def _length(seq, name):
    if isinstance(seq, np.ndarray) and seq.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {seq.shape}")
    return len(seq)


def _check_buffers(buf, image, width, height):
    if width < 0 or height < 0:
        raise ValueError(f"Invalid size {width}x{height}")
    expected_src = width * height
    expected_dst = (width * SCALE) * (height * SCALE)
    src_len = _length(image, 'source')
    dst_len = _length(buf, 'destination')
    if src_len != expected_src:
        raise ValueError(f"Source has {src_len} pixels, expected {expected_src} for {width}x{height}")
    if dst_len != expected_dst:
        raise ValueError(f"Destination has {dst_len} pixels, expected {expected_dst} "
                         f"for {width * SCALE}x{height * SCALE}")


# --- Scan driver ---

def apply(buf, image, width, height):
    """
    [Baseline] 套用 xBR 濾鏡
    buf 會被完整覆寫，每個輸出格只寫一次
    """
    _check_buffers(buf, image, width, height)

    source = SourceImage(image, width, height)
    scaled_width = width * SCALE

    for y in range(height):
        for x in range(width):
            matrix = neighborhood(source, x, y)
            for (dx, dy), pixel in zip(QUADRANT_OFFSETS, evaluate_rules(matrix)):
                buf[(y * SCALE + dy) * scaled_width + x * SCALE + dx] = pixel


def apply_vectorized(buf, image, width, height):
    """
    [Method A] 向量化版本
    21 張鄰域平面一次算完所有色差，再用 np.where 做邊緣選擇
    """
    _check_buffers(buf, image, width, height)
    if width == 0 or height == 0:
        return

    image2d = np.asarray(image, dtype=np.uint32).reshape(height, width)
    planes = neighborhood_planes(image2d)
    channels = [to_planes(p) for p in planes]
    diffs = {(i, j): diff_planes(channels[i], channels[j]) for i, j in DIFF_PAIRS}

    center = planes[CENTER]
    out = np.empty((height * SCALE, width * SCALE), dtype=np.uint32)

    for rule, (dx, dy) in zip(EDGE_RULES, QUADRANT_OFFSETS):
        a = _weighted_sum(diffs, rule.a_terms, rule.a_axis)
        b = _weighted_sum(diffs, rule.b_terms, rule.b_axis)

        first, second = rule.candidates
        take_first = diffs[(CENTER, first)] <= diffs[(CENTER, second)]
        new_pixel = tuple(
            np.where(take_first, p_first, p_second)
            for p_first, p_second in zip(channels[first], channels[second])
        )
        blended = blend_planes(new_pixel, channels[CENTER], config.EDGE_BLEND_ALPHA)

        out[dy::SCALE, dx::SCALE] = np.where(a < b, blended, center)

    if isinstance(buf, np.ndarray):
        buf[:] = out.ravel()
    else:
        buf[:] = out.ravel().tolist()


def resolve_method(method='baseline'):
    """'baseline' -> apply，其他名稱對應 apply_<method>"""
    if not method or method.lower() == 'baseline':
        return apply
    fn = globals().get(f"apply_{method.lower()}")
    if fn is None:
        raise ValueError(f"Unknown xBR method {method!r}, expected one of {available_methods()}")
    return fn


def available_methods():
    return ['baseline'] + sorted(name[len('apply_'):] for name in globals() if name.startswith('apply_'))


def upscale(image, width, height, method='baseline'):
    """配置 buffer 並套用濾鏡，回傳 (buffer, 輸出寬, 輸出高)"""
    apply_fn = resolve_method(method)
    buf, out_w, out_h = get_buffer_for_size(width, height)
    apply_fn(buf, image, width, height)
    return buf, out_w, out_h
