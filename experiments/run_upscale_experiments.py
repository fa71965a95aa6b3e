"""
放大方法比較實驗

對資料夾中每張圖：
  1. 裁成偶數長寬
  2. 2x2 區域平均縮小成一半
  3. 用各種方法放大回原尺寸
  4. 與原圖比 PSNR，並記錄放大時間
"""

import argparse
import csv
from pathlib import Path
import sys
import time

import numpy as np
from PIL import Image

# 加入專案根目錄到 sys.path，方便匯入 main / config / utils / sampler 等模組
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import config
import sampler
import utils
import xbr


def _upscale_nearest(small):
    h, w, _ = small.shape
    return sampler.upsample(small, h * config.SCALE, w * config.SCALE)


def _upscale_bilinear(small):
    h, w, _ = small.shape
    return sampler.upsample_bilinear(small, h * config.SCALE, w * config.SCALE)


def _make_xbr(method):
    def _upscale(small):
        h, w, _ = small.shape
        buf, out_w, out_h = xbr.upscale(utils.pack_image(small), w, h, method=method)
        return utils.unpack_image(buf, out_w, out_h)
    return _upscale


UPSCALE_METHODS = {
    "nearest": _upscale_nearest,
    "bilinear": _upscale_bilinear,
    "xbr": _make_xbr("baseline"),
    "xbr_vectorized": _make_xbr("vectorized"),
}


def _load_and_crop_image(img_path: Path) -> np.ndarray:
    """讀圖 + 裁成偶數長寬，縮小後才能剛好放大回原尺寸。"""
    img_arr = np.array(Image.open(img_path).convert("RGB"))
    h, w, _ = img_arr.shape
    return img_arr[: h - (h % 2), : w - (w % 2), :]


def run_upscale_experiments(image_dir: Path, methods: list[str], output_csv: Path) -> None:
    image_dir = image_dir.resolve()
    images = sorted(
        [p for p in image_dir.iterdir() if p.suffix.lower() in config.VALID_EXTS]
    )

    if not images:
        print(f"No supported images found in {image_dir}")
        return

    print(f"=== Upscale Experiments on folder: {image_dir} ===")
    print(f"Methods: {methods}")
    print(f"Found {len(images)} images\n")

    rows = []

    for img_path in images:
        print(f"--- {img_path.name} ---")
        img_arr = _load_and_crop_image(img_path)
        h, w, _ = img_arr.shape
        small = sampler.downsample_average(img_arr)

        for name in methods:
            upscale_fn = UPSCALE_METHODS[name]

            t0 = time.perf_counter()
            recon = upscale_fn(small)
            up_time = (time.perf_counter() - t0) * 1000.0

            psnr = utils.calculate_psnr(img_arr, recon)

            rows.append(
                {
                    "image": img_path.name,
                    "width": w,
                    "height": h,
                    "upscale_method": name,
                    "psnr": psnr,
                    "time_upscale_ms": up_time,
                }
            )

            print(
                f"  [{name:15s}] "
                f"PSNR: {psnr:6.2f} dB | "
                f"Up: {up_time:8.1f} ms"
            )

        print("-" * 60)

    # 寫入 CSV
    output_csv = output_csv.resolve()
    output_csv.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["image", "width", "height", "upscale_method", "psnr", "time_upscale_ms"]

    with output_csv.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

    print(f"\n[Done] Upscale results written to: {output_csv}")


def main():
    parser = argparse.ArgumentParser(
        description="Compare xBR against nearest / bilinear 2x upscaling."
    )
    parser.add_argument(
        "--image_dir",
        type=str,
        default="images",
        help="Input image directory (default: images)",
    )
    parser.add_argument(
        "--methods",
        type=str,
        default=",".join(UPSCALE_METHODS),
        help=f"Comma-separated methods, any of: {', '.join(UPSCALE_METHODS)}",
    )
    parser.add_argument(
        "--output_csv",
        type=str,
        default="upscale_results.csv",
        help="Path to output CSV file (default: upscale_results.csv)",
    )

    args = parser.parse_args()

    methods = [p.strip() for p in args.methods.split(",") if p.strip()]
    unknown = [m for m in methods if m not in UPSCALE_METHODS]
    if unknown:
        parser.error(f"Unknown methods: {unknown}")

    run_upscale_experiments(Path(args.image_dir), methods, Path(args.output_csv))


if __name__ == "__main__":
    main()
