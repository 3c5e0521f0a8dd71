"""
模拟章节位图的分页切片，输出每条切片的源像素区间与落版高度。

按运行期版式配置（内容宽度/单页最大内容高度）计算，不需要浏览器。

示例（1200px宽的章节按3倍截图）：
  python tools/simulate_pagination.py --width 3600 --height 12000
  python tools/simulate_pagination.py --width 3600 --height 12000 --remaining 120
"""

from __future__ import annotations

import argparse

from skillgenix.config import get_config
from skillgenix.doc_gen import plan_slices


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--width", type=int, required=True, help="bitmap width in px")
    ap.add_argument("--height", type=int, required=True, help="bitmap height in px")
    ap.add_argument("--remaining", type=float, default=None, help="free mm on the current page")
    args = ap.parse_args()

    layout = get_config().layout
    ratio = layout.content_width / args.width
    scaled = args.height * ratio
    remaining = layout.max_content_height if args.remaining is None else args.remaining
    print(f"content width {layout.content_width:.1f}mm, scaled height {scaled:.1f}mm, budget {remaining:.1f}mm")

    if scaled <= remaining:
        print("fits on the current page (1 block)")
        return

    slices = plan_slices(args.height, scaled, layout.max_content_height)
    first_moves = (slices[0][1] - slices[0][0]) * ratio > remaining
    print(f"{len(slices)} band(s); first band {'starts a new page' if first_moves else 'stays on current page'}")
    for i, (top, bottom) in enumerate(slices, start=1):
        print(f"  band {i}: rows {top}-{bottom} ({bottom - top}px) -> {(bottom - top) * ratio:.1f}mm")


if __name__ == "__main__":
    main()
