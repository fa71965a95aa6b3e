import argparse
import json
import time
from pathlib import Path

import numpy as np
from PIL import Image

# 引入模組
import config
import utils
import sampler
import xbr


def upscale_pipeline(img_arr, method='baseline'):
    """
    執行完整的 xBR 放大流程 (含效能監測)
    img_arr: (H, W, 3) uint8 RGB
    """
    h, w, _ = img_arr.shape
    stats = {}  # 用來存統計數據

    t_start = time.time()  # 開始計時

    # 1. RGB -> packed pixels
    t0 = time.time()
    source = utils.pack_image(img_arr)
    stats['time_pack'] = (time.time() - t0) * 1000  # ms

    # 2. xBR
    t0 = time.time()
    apply_fn = xbr.resolve_method(method)
    buf, out_w, out_h = xbr.get_buffer_for_size(w, h)
    apply_fn(buf, source, w, h)
    stats['time_upscale'] = (time.time() - t0) * 1000

    # 3. packed pixels -> RGB
    t0 = time.time()
    result_rgb = utils.unpack_image(buf, out_w, out_h)
    stats['time_unpack'] = (time.time() - t0) * 1000

    stats['method'] = method
    stats['input_size'] = [w, h]
    stats['output_size'] = [out_w, out_h]
    stats['total_time'] = (time.time() - t_start) * 1000

    return result_rgb, stats


def process_image(img_path, output_dir, method='baseline', compare=False):
    """讀取單張圖片，放大並存檔"""
    try:
        # xBR 不處理 alpha，直接轉成 RGB
        img = Image.open(img_path).convert('RGB')
    except Exception as e:
        print(f"[Skip] 無法讀取 {img_path.name}: {e}")
        return None

    img_arr = np.array(img)
    h, w, _ = img_arr.shape

    result_rgb, stats = upscale_pipeline(img_arr, method=method)

    # 顯示詳細數據
    print(f"--- {img_path.name} ---")
    print(f"  [Size]    {w}x{h} -> {stats['output_size'][0]}x{stats['output_size'][1]}")
    print(f"  [Time]    Pack: {stats['time_pack']:.1f}ms | xBR ({method}): {stats['time_upscale']:.1f}ms "
          f"| Unpack: {stats['time_unpack']:.1f}ms | Total: {stats['total_time']:.1f}ms")
    print("-" * 30)

    if compare:
        # 最近鄰與 xBR 並排，方便對比
        nearest = sampler.upsample(img_arr, h * config.SCALE, w * config.SCALE)
        out_arr = np.hstack((nearest, result_rgb))
    else:
        out_arr = result_rgb

    output_filename = output_dir / f"result_{img_path.stem}.png"
    Image.fromarray(out_arr.astype(np.uint8)).save(output_filename)

    # 另存 JSON 摘要
    summary = {
        'image': img_path.name,
        'width': w,
        'height': h,
        'stats': stats,
    }
    json_path = output_dir / f"result_{img_path.stem}.json"
    try:
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(summary, f, ensure_ascii=False, indent=2)
    except OSError as e:
        print(f"[Warn] 無法寫入 JSON: {e}")

    print(f"[Done] {img_path.name} -> {output_filename}")
    return output_filename


def main(argv=None):
    parser = argparse.ArgumentParser(description='xBR 2x pixel-art upscaler')
    parser.add_argument('--image_dir', type=str, default='images', help='圖片資料夾')
    parser.add_argument('--image_name', type=str, default=None, help='圖片名稱')
    parser.add_argument('--output_dir', type=str, default='outputs', help='輸出的資料夾路徑')
    parser.add_argument('--method', type=str, default='baseline',
                        help=f"xBR 實作（{'/'.join(xbr.available_methods())}）")
    parser.add_argument('--compare', action='store_true', help='輸出最近鄰與 xBR 的並排對照圖')
    args = parser.parse_args(argv)

    # 先檢查方法名稱，避免跑到一半才失敗
    try:
        xbr.resolve_method(args.method)
    except ValueError as e:
        parser.error(str(e))

    image_dir = Path(args.image_dir)
    output_dir = Path(args.output_dir) / image_dir.name
    output_dir.mkdir(exist_ok=True, parents=True)  # 自動建立輸出資料夾

    print(f"=== xBR Upscale Start ===")
    print(f"Input: {image_dir}")
    print(f"Output: {output_dir}")
    print(f"Method: {args.method}\n")

    if args.image_name:
        # 單張模式
        process_image(image_dir / args.image_name, output_dir, args.method, args.compare)
    elif image_dir.is_dir():
        # 資料夾模式
        images = sorted(p for p in image_dir.iterdir() if p.suffix.lower() in config.VALID_EXTS)

        if not images:
            print("資料夾內沒有支援的圖片格式。")
        else:
            print(f"找到 {len(images)} 張圖片，開始批次處理...")
            for img_file in images:
                process_image(img_file, output_dir, args.method, args.compare)
    else:
        print("輸入路徑不存在，請確認路徑是否正確。")


if __name__ == "__main__":
    main()
