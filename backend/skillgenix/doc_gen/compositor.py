"""
页面排版器 - 章节位图落版与超长章节分页切片

职责：
1. 按内容宽度等比缩放章节位图
2. 剩余空间放得下则原位落版，游标下移
3. 放不下则切成 N = ceil(缩放高度 / 最大内容高度) 条等高切片，逐条落版，
   第一条之后每条都开新页
4. 截图失败的章节落一个占位块
5. 记录每次落版（页码/位置/源像素区间），供页码回填与测试核对

依赖：
- reportlab: 画布绘图
- Pillow: 源位图裁切

测试要点：
- test_plan_slices_partition: 切片无缝无重叠覆盖源位图
- test_oversized_section_spans_n_pages: 超长章节恰好占 N 页
- test_fitting_block_advances_cursor: 放得下时游标下移
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader

from ..models import PageCursor, PlacedBlock

if TYPE_CHECKING:
    from PIL import Image
    from reportlab.pdfgen.canvas import Canvas

    from ..config import PageLayoutConfig
    from ..models import CapturedSection
    from .chrome import PageChrome

ERROR_BLOCK_HEIGHT = 20.0
_EPSILON = 1e-6


def plan_slices(source_height: int, scaled_height: float, max_height: float) -> list[tuple[int, int]]:
    """
    计算切片的源像素区间

    Args:
        source_height: 源位图像素高度
        scaled_height: 缩放到内容宽度后的高度(mm)
        max_height: 单页最大内容高度(mm)

    Returns:
        [(起始行, 结束行)]，首尾相接，覆盖 [0, source_height)
    """
    if source_height <= 0:
        return []
    count = max(1, math.ceil(scaled_height / max_height - _EPSILON))
    count = min(count, source_height)
    # 极窄位图单行就很高：每条最多 ceil(行数/条数) 行，仍超高则继续加条数
    row_height = scaled_height / source_height
    while count < source_height and -(-source_height // count) * row_height > max_height + _EPSILON:
        count += 1
    # 向下取整的边界：第一条切片不超过平均高度
    bounds = [i * source_height // count for i in range(count + 1)]
    return [(bounds[i], bounds[i + 1]) for i in range(count)]


class PageCompositor:
    """页面排版器（单次导出内使用）"""

    def __init__(self, canvas: Canvas, chrome: PageChrome, layout: PageLayoutConfig):
        self.canvas = canvas
        self.chrome = chrome
        self.layout = layout
        self.cursor = PageCursor(layout.content_top, layout.max_content_height)
        self.placements: list[PlacedBlock] = []
        self._page_open = False
        self._section: tuple[int, str] | None = None

    @property
    def page_number(self) -> int:
        return self.cursor.page_number

    def start_page(self, running_header: bool = True) -> None:
        """开新页（上一页交给画布保存）"""
        if self._page_open:
            self.canvas.showPage()
        self.cursor.new_page()
        self._page_open = True
        if running_header:
            self.chrome.draw_running_header(self.canvas)

    def begin_section(self, ordinal: int, title: str) -> None:
        """每个章节从新页开始，标题画在页眉带内"""
        self.start_page()
        self.chrome.draw_section_header(self.canvas, ordinal, title)
        self._section = (ordinal, title)

    def place(self, captured: CapturedSection) -> list[PlacedBlock]:
        """落版一个章节位图，必要时切片跨页"""
        if captured.width <= 0 or captured.height <= 0:
            raise ValueError(f"空位图无法落版: {captured.key} ({captured.width}x{captured.height})")
        target_width = self.layout.content_width
        ratio = target_width / captured.width
        target_height = captured.height * ratio

        if target_height <= self.cursor.remaining + _EPSILON:
            block = self._draw(captured.key, captured.image, target_height, 0, captured.height)
            self.cursor.advance(target_height + self.layout.block_gap)
            return [block]

        blocks: list[PlacedBlock] = []
        slices = plan_slices(captured.height, target_height, self.layout.max_content_height)
        for index, (top, bottom) in enumerate(slices):
            band_height = (bottom - top) * ratio
            if index > 0 or band_height > self.cursor.remaining + _EPSILON:
                self._continue_page()
            band = captured.image.crop((0, top, captured.width, bottom))
            blocks.append(self._draw(captured.key, band, band_height, top, bottom))
            self.cursor.advance(band_height)
        self.cursor.advance(self.layout.block_gap)
        return blocks

    def place_error_block(self, section_key: str, title: str) -> PlacedBlock:
        """截图失败占位"""
        if ERROR_BLOCK_HEIGHT > self.cursor.remaining + _EPSILON:
            self._continue_page()
        top = self.cursor.y
        self.chrome.draw_error_block(self.canvas, top, ERROR_BLOCK_HEIGHT, title)
        block = PlacedBlock(
            section_key=section_key,
            page_number=self.page_number,
            top=top,
            height=ERROR_BLOCK_HEIGHT,
            source_top=0,
            source_bottom=0,
            placeholder=True,
        )
        self.placements.append(block)
        self.cursor.advance(ERROR_BLOCK_HEIGHT + self.layout.block_gap)
        return block

    def draw_divider(self) -> None:
        """章节分隔线（画在块间距中线）"""
        top = self.cursor.y - self.layout.block_gap / 2
        if self.cursor.content_top < top < self.cursor.content_bottom:
            self.chrome.draw_divider(self.canvas, top)

    def finish(self) -> None:
        if self._page_open:
            self.canvas.showPage()
            self._page_open = False

    def _continue_page(self) -> None:
        self.start_page()
        if self._section is not None:
            self.chrome.draw_continuation_header(self.canvas, *self._section)

    def _draw(
        self,
        section_key: str,
        image: Image.Image,
        height: float,
        source_top: int,
        source_bottom: int,
    ) -> PlacedBlock:
        top = self.cursor.y
        width = self.layout.content_width
        if image.mode != "RGB":
            image = image.convert("RGB")
        self.canvas.drawImage(
            ImageReader(image),
            self.layout.margin_x * mm,
            self.chrome.y(top + height),
            width=width * mm,
            height=height * mm,
        )
        block = PlacedBlock(
            section_key=section_key,
            page_number=self.page_number,
            top=top,
            height=height,
            source_top=source_top,
            source_bottom=source_bottom,
        )
        self.placements.append(block)
        return block
