"""
pytest 設定：把專案根目錄加進 sys.path，並提供共用的測試影像。
"""

import os
import sys
from pathlib import Path

import numpy as np
import pytest

# 專案是平的模組結構 (xbr.py, sampler.py ...)，直接從根目錄匯入
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

# 測試環境沒有顯示器
os.environ.setdefault("MPLBACKEND", "Agg")

RED, GREEN, BLUE, WHITE = 0xFF0000, 0x00FF00, 0x0000FF, 0xFFFFFF


@pytest.fixture
def rgbw_image():
    """2x2：紅、綠 / 藍、白"""
    return [RED, GREEN, BLUE, WHITE], 2, 2


@pytest.fixture
def rgbw_expected():
    """rgbw_image 放大後的 4x4 結果 (row-major)"""
    return [
        0x7F0000, 0xFF0000, 0x007F00, 0x007F00,
        0x7F0000, 0xFF0000, 0x7FFF7F, 0x00FF00,
        0x0000FF, 0x7F007F, 0xFFFFFF, 0x7FFF7F,
        0x00007F, 0x0000FF, 0x7F7FFF, 0x7F7F7F,
    ]


@pytest.fixture
def random_image():
    """
    小張的隨機影像，顏色只從少數幾個挑，
    這樣 <= 的平手情況也會被測到。
    """
    def _make(width, height, seed=0, palette_size=6):
        rng = np.random.default_rng(seed)
        palette = rng.integers(0, 0x1000000, size=palette_size, dtype=np.uint32)
        palette[0] = 0
        idx = rng.integers(0, palette_size, size=width * height)
        return palette[idx].astype(np.uint32)
    return _make


@pytest.fixture
def rgb_array():
    """(H, W, 3) uint8 版本的 rgbw_image"""
    return np.array(
        [[[255, 0, 0], [0, 255, 0]],
         [[0, 0, 255], [255, 255, 255]]],
        dtype=np.uint8,
    )
