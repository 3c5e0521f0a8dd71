"""
页面装饰 - 页眉/章节标题/标题页目录/页脚页码

职责：
1. 运行页眉（每个内容页）与续页标题
2. 标题页：标题、生成日期、接收人、目录（仅列出页面上存在的章节）
3. 延迟落页画布：全部排版结束后统一补页脚与“Page X of Y”，并回填目录页码

依赖：
- reportlab: PDF画布（坐标原点在左下，这里统一按“距页顶mm”换算）
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

from reportlab.lib.colors import Color
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas as rl_canvas

if TYPE_CHECKING:
    from ..config import BrandingConfig, PageLayoutConfig

GRAY = Color(100 / 255, 100 / 255, 100 / 255)
LIGHT_GRAY = Color(0.8, 0.8, 0.8)
ERROR_RED = Color(185 / 255, 28 / 255, 28 / 255)
ERROR_FILL = Color(254 / 255, 242 / 255, 242 / 255)

TITLE_Y = 40.0
TOC_TOP = 95.0
TOC_ROW_HEIGHT = 9.0


def _rgb(values: tuple[int, int, int]) -> Color:
    r, g, b = values
    return Color(r / 255, g / 255, b / 255)


class PageChrome:
    """页面装饰绘制"""

    def __init__(self, layout: PageLayoutConfig, branding: BrandingConfig, user_name: str):
        self.layout = layout
        self.branding = branding
        self.user_name = user_name
        self.accent = _rgb(branding.accent_rgb)

    def y(self, top: float) -> float:
        """距页顶mm -> reportlab纵坐标"""
        return (self.layout.page_height - top) * mm

    @property
    def left(self) -> float:
        return self.layout.margin_x * mm

    @property
    def right(self) -> float:
        return (self.layout.page_width - self.layout.margin_x) * mm

    def draw_running_header(self, c: rl_canvas.Canvas) -> None:
        """运行页眉"""
        c.saveState()
        c.setFont("Helvetica-Bold", 9)
        c.setFillColor(self.accent)
        c.drawString(self.left, self.y(self.layout.header_text_y), self.branding.product_name)
        c.setFont("Helvetica", 9)
        c.setFillColor(GRAY)
        c.drawRightString(
            self.right,
            self.y(self.layout.header_text_y),
            f"{self.branding.subject} · {self.user_name}",
        )
        c.setStrokeColor(LIGHT_GRAY)
        c.setLineWidth(0.5)
        c.line(self.left, self.y(self.layout.header_rule_y), self.right, self.y(self.layout.header_rule_y))
        c.restoreState()

    def draw_section_header(self, c: rl_canvas.Canvas, ordinal: int, title: str) -> None:
        c.saveState()
        c.setFont("Helvetica-Bold", 14)
        c.setFillColor(self.accent)
        c.drawString(self.left, self.y(self.layout.section_title_y), f"{ordinal}. {title}")
        c.restoreState()

    def draw_continuation_header(self, c: rl_canvas.Canvas, ordinal: int, title: str) -> None:
        c.saveState()
        c.setFont("Helvetica-Oblique", 10)
        c.setFillColor(GRAY)
        c.drawString(self.left, self.y(self.layout.section_title_y), f"{ordinal}. {title} (continued)")
        c.restoreState()

    def draw_title_page(
        self,
        c: rl_canvas.Canvas,
        generated_on: date,
        entries: list[tuple[int, str, str]],
    ) -> list[tuple[float, str]]:
        """
        标题页 + 目录

        Args:
            entries: (序号, 标题, 章节key)，只包含页面上存在的章节

        Returns:
            目录行 (距页顶mm, 章节key)，供页码回填
        """
        center = self.layout.page_width / 2 * mm
        c.saveState()
        c.setFont("Helvetica-Bold", 22)
        c.setFillColor(self.accent)
        c.drawCentredString(center, self.y(TITLE_Y), self.branding.document_title)
        c.setFont("Helvetica", 12)
        c.setFillColor(GRAY)
        c.drawCentredString(center, self.y(TITLE_Y + 10), self.branding.subject)

        c.setFont("Helvetica", 10)
        c.drawString(self.left, self.y(TITLE_Y + 25), f"Generated on: {generated_on.strftime('%B %d, %Y')}")
        c.drawString(self.left, self.y(TITLE_Y + 31), f"Prepared for: {self.user_name}")

        c.setFont("Helvetica-Bold", 14)
        c.setFillColor(self.accent)
        c.drawString(self.left, self.y(TOC_TOP - 12), "Table of Contents")

        rows: list[tuple[float, str]] = []
        available = self.layout.footer_rule_y - 10 - TOC_TOP
        row_height = min(TOC_ROW_HEIGHT, available / max(1, len(entries)))
        c.setFont("Helvetica", 11)
        c.setFillColor(Color(0, 0, 0))
        for i, (ordinal, title, key) in enumerate(entries):
            top = TOC_TOP + i * row_height
            c.drawString(self.left + 4 * mm, self.y(top), f"{ordinal}. {title}")
            rows.append((top, key))
        c.restoreState()
        return rows

    def draw_toc_page_numbers(self, c: rl_canvas.Canvas, rows: list[tuple[float, int]]) -> None:
        c.saveState()
        c.setFont("Helvetica", 11)
        c.setFillColor(GRAY)
        for top, page_number in rows:
            c.drawRightString(self.right, self.y(top), str(page_number))
        c.restoreState()

    def draw_error_block(self, c: rl_canvas.Canvas, top: float, height: float, title: str) -> None:
        """截图失败占位块"""
        c.saveState()
        c.setFillColor(ERROR_FILL)
        c.setStrokeColor(ERROR_RED)
        c.setLineWidth(0.8)
        c.rect(self.left, self.y(top + height), self.right - self.left, height * mm, stroke=1, fill=1)
        c.setFillColor(ERROR_RED)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(
            self.left + 5 * mm,
            self.y(top + height / 2 + 1.5),
            f"Unable to capture content for section: {title}",
        )
        c.restoreState()

    def draw_divider(self, c: rl_canvas.Canvas, top: float) -> None:
        c.saveState()
        c.setStrokeColor(LIGHT_GRAY)
        c.setLineWidth(0.3)
        c.line(self.left, self.y(top), self.right, self.y(top))
        c.restoreState()

    def draw_footer(self, c: rl_canvas.Canvas, page_number: int, total: int) -> None:
        """页脚带 + 页码"""
        center = self.layout.page_width / 2 * mm
        c.saveState()
        c.setStrokeColor(LIGHT_GRAY)
        c.setLineWidth(0.5)
        c.line(self.left, self.y(self.layout.footer_rule_y), self.right, self.y(self.layout.footer_rule_y))
        c.setFont("Helvetica", 8)
        c.setFillColor(GRAY)
        c.drawCentredString(center, self.y(self.layout.footer_page_y), f"Page {page_number} of {total}")
        c.drawCentredString(center, self.y(self.layout.footer_note_y), self.branding.footer_note)
        c.restoreState()


class NumberedCanvas(rl_canvas.Canvas):
    """
    延迟落页画布

    showPage() 只保存页面状态；save() 时总页数已知，逐页补页脚、页码与目录页码后再真正落页。
    """

    def __init__(self, *args: Any, chrome: PageChrome, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.chrome = chrome
        # 目录行（标题页）与章节起始页，save() 时回填
        self.toc_rows: list[tuple[float, str]] = []
        self.section_pages: dict[str, int] = {}
        self._saved_page_states: list[dict[str, Any]] = []

    @property
    def page_count(self) -> int:
        return len(self._saved_page_states)

    def showPage(self) -> None:
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._saved_page_states)
        for page_number, state in enumerate(self._saved_page_states, start=1):
            self.__dict__.update(state)
            if page_number == 1 and self.toc_rows:
                rows = [
                    (top, self.section_pages[key])
                    for top, key in self.toc_rows
                    if key in self.section_pages
                ]
                self.chrome.draw_toc_page_numbers(self, rows)
            self.chrome.draw_footer(self, page_number, total)
            super().showPage()
        super().save()
