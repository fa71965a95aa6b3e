"""
把 upscale_results.csv 畫成一張總結圖

上圖：每張圖片 xBR 相對 nearest / bilinear 的 PSNR 增益 (dB)
下圖：每個方法的 PSNR 對放大時間 (ms, log 軸)，一個點代表一張圖
"""

import argparse
import csv
from collections import defaultdict
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

# 跟 xBR 比較的傳統方法
REFERENCE_METHODS = ("nearest", "bilinear")
XBR_METHOD = "xbr"

# 固定顏色，兩張子圖的方法才對得起來
METHOD_COLORS = {
    "nearest": "#C44E52",
    "bilinear": "#55A868",
    "xbr": "#4C72B0",
    "xbr_vectorized": "#8172B2",
}


def load_upscale_csv(csv_path: Path):
    rows = []
    with csv_path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for r in reader:
            try:
                rows.append(
                    {
                        "image": r["image"],
                        "method": r["upscale_method"],
                        "psnr": float(r["psnr"]),
                        "time_ms": float(r["time_upscale_ms"]),
                    }
                )
            except (KeyError, ValueError):
                continue
    return rows


def psnr_gains(rows, xbr_method=XBR_METHOD, references=REFERENCE_METHODS):
    """
    image -> {reference: xBR PSNR - reference PSNR}
    缺少 xBR 結果的圖片略過，缺少某個 reference 的就只留有的
    """
    by_image = defaultdict(dict)
    for r in rows:
        by_image[r["image"]][r["method"]] = r["psnr"]

    gains = {}
    for image, psnrs in by_image.items():
        if xbr_method not in psnrs:
            continue
        gains[image] = {
            ref: psnrs[xbr_method] - psnrs[ref]
            for ref in references
            if ref in psnrs
        }
    return gains


def plot_upscale_summary(rows, output_path: Path):
    gains = psnr_gains(rows)
    images = sorted(gains)
    methods = sorted({r["method"] for r in rows})

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(9, 9))

    # 圖 1：每張圖的 PSNR 增益，> 0 代表 xBR 比較好
    x = np.arange(len(images))
    width = 0.8 / len(REFERENCE_METHODS)
    for k, ref in enumerate(REFERENCE_METHODS):
        values = [gains[img].get(ref, np.nan) for img in images]
        offset = (k - (len(REFERENCE_METHODS) - 1) / 2) * width
        ax1.bar(x + offset, values, width, color=METHOD_COLORS.get(ref), label=f"xbr - {ref}")
    ax1.axhline(0.0, color="black", linewidth=0.8)
    ax1.set_xticks(x)
    ax1.set_xticklabels(images, rotation=45, ha="right")
    ax1.set_ylabel("PSNR Gain (dB)")
    ax1.set_title("xBR PSNR Gain per Image")
    ax1.legend(loc="upper right")

    # 圖 2：品質對速度
    for m in methods:
        mr = [r for r in rows if r["method"] == m]
        ax2.scatter(
            [r["time_ms"] for r in mr],
            [r["psnr"] for r in mr],
            color=METHOD_COLORS.get(m),
            label=m,
            alpha=0.8,
        )
    ax2.set_xscale("log")
    ax2.set_xlabel("Upscale Time (ms, log)")
    ax2.set_ylabel("PSNR (dB)")
    ax2.set_title("PSNR vs Upscale Time")
    ax2.grid(True, linestyle="--", alpha=0.4)
    ax2.legend()

    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    print(f"[Saved] {output_path}")
    return output_path


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Plot xBR vs nearest/bilinear summary from upscale_results.csv"
    )
    parser.add_argument(
        "--csv",
        type=str,
        default="upscale_results.csv",
        help="Path to upscale_results.csv (default: upscale_results.csv)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="plots/upscale_summary.png",
        help="Output plot path (default: plots/upscale_summary.png)",
    )
    args = parser.parse_args(argv)

    csv_path = Path(args.csv)
    if not csv_path.exists():
        print(f"CSV not found: {csv_path}")
        return

    rows = load_upscale_csv(csv_path)
    if not rows:
        print("No valid rows found in CSV.")
        return

    plot_upscale_summary(rows, Path(args.output))


if __name__ == "__main__":
    main()
