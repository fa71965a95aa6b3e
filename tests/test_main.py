"""
放大流程 (main.py) 的整合測試。
"""

import json

import numpy as np
import pytest
from PIL import Image

import main


def _save_png(path, arr):
    Image.fromarray(arr).save(path)
    return path


class TestUpscalePipeline:

    def test_result_and_stats(self, rgb_array):
        result, stats = main.upscale_pipeline(rgb_array)
        assert result.shape == (4, 4, 3)
        assert result.dtype == np.uint8
        # 紅色像素右上角的子像素沒有邊緣，保持原色
        assert result[0, 1].tolist() == [255, 0, 0]
        # 白色像素左上角沿用中心
        assert result[2, 2].tolist() == [255, 255, 255]
        assert stats['input_size'] == [2, 2]
        assert stats['output_size'] == [4, 4]
        for key in ('time_pack', 'time_upscale', 'time_unpack', 'total_time'):
            assert stats[key] >= 0

    def test_methods_agree(self, rgb_array):
        baseline, _ = main.upscale_pipeline(rgb_array, method='baseline')
        vectorized, stats = main.upscale_pipeline(rgb_array, method='vectorized')
        np.testing.assert_array_equal(baseline, vectorized)
        assert stats['method'] == 'vectorized'

    def test_unknown_method(self, rgb_array):
        with pytest.raises(ValueError):
            main.upscale_pipeline(rgb_array, method='nope')


class TestProcessImage:

    def test_writes_png_and_json(self, tmp_path, rgb_array):
        src = _save_png(tmp_path / "tile.png", rgb_array)
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        out_path = main.process_image(src, out_dir)

        assert out_path == out_dir / "result_tile.png"
        with Image.open(out_path) as img:
            assert img.size == (4, 4)
        summary = json.loads((out_dir / "result_tile.json").read_text(encoding="utf-8"))
        assert summary['image'] == "tile.png"
        assert summary['width'] == 2
        assert summary['stats']['output_size'] == [4, 4]

    def test_rgba_input(self, tmp_path):
        rgba = np.zeros((2, 3, 4), dtype=np.uint8)
        rgba[..., 3] = 128
        src = _save_png(tmp_path / "alpha.png", rgba)

        out_path = main.process_image(src, tmp_path)

        with Image.open(out_path) as img:
            assert img.mode == "RGB"
            assert img.size == (6, 4)

    def test_compare_side_by_side(self, tmp_path, rgb_array):
        src = _save_png(tmp_path / "tile.png", rgb_array)
        out_path = main.process_image(src, tmp_path, method='vectorized', compare=True)
        with Image.open(out_path) as img:
            assert img.size == (8, 4)

    def test_unreadable_image_is_skipped(self, tmp_path, capsys):
        bad = tmp_path / "broken.png"
        bad.write_bytes(b"not a png")
        assert main.process_image(bad, tmp_path) is None
        assert "[Skip]" in capsys.readouterr().out


class TestCli:

    def test_folder_mode(self, tmp_path, rgb_array):
        image_dir = tmp_path / "images"
        image_dir.mkdir()
        _save_png(image_dir / "a.png", rgb_array)
        _save_png(image_dir / "b.png", rgb_array[::-1])
        (image_dir / "notes.txt").write_text("ignored")

        main.main(['--image_dir', str(image_dir), '--output_dir', str(tmp_path / "outputs")])

        out_dir = tmp_path / "outputs" / "images"
        assert sorted(p.name for p in out_dir.glob("*.png")) == ["result_a.png", "result_b.png"]

    def test_single_image_mode(self, tmp_path, rgb_array):
        _save_png(tmp_path / "one.png", rgb_array)
        main.main(['--image_dir', str(tmp_path), '--image_name', 'one.png',
                   '--output_dir', str(tmp_path / "outputs"), '--method', 'vectorized'])
        assert (tmp_path / "outputs" / tmp_path.name / "result_one.png").exists()

    def test_bad_method(self, tmp_path):
        with pytest.raises(SystemExit):
            main.main(['--image_dir', str(tmp_path), '--method', 'hq2x'])
