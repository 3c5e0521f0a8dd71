"""
导出模型 - 章节/截图结果/页面游标/排版记录

所有实体仅在单次导出内创建与丢弃，不跨导出持久化
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from lxml.html import HtmlElement
    from PIL import Image

    from ..view.live_page import LivePage


class ReportSection(BaseModel):
    """报告章节（稳定key + 可读标题）"""
    key: str
    title: str


@dataclass
class ResolvedSection:
    """在页面上找到元素的章节"""
    section: ReportSection
    ordinal: int  # 1起始，仅对已找到的章节编号
    element: HtmlElement


class ReportDocument(BaseModel):
    """导出文档：有序章节序列"""
    sections: list[ReportSection] = Field(default_factory=list)

    def resolve(self, page: LivePage) -> tuple[list[ResolvedSection], list[str]]:
        """
        按顺序在页面上查找章节元素

        Returns:
            (已找到的章节, 缺失章节key列表)；缺失章节不是错误
        """
        resolved: list[ResolvedSection] = []
        missing: list[str] = []
        for section in self.sections:
            element = page.find_section(section.key)
            if element is None:
                missing.append(section.key)
                continue
            resolved.append(ResolvedSection(section, len(resolved) + 1, element))
        return resolved, missing


@dataclass(frozen=True)
class CapturedSection:
    """单个章节的截图位图（生成后不再修改）"""
    key: str
    image: Image.Image
    width: int
    height: int


@dataclass
class PageCursor:
    """排版游标（坐标单位mm，自页面顶部向下）"""
    content_top: float
    max_content_height: float
    page_number: int = 0
    y: float = 0.0

    @property
    def content_bottom(self) -> float:
        return self.content_top + self.max_content_height

    @property
    def remaining(self) -> float:
        return max(0.0, self.content_bottom - self.y)

    def new_page(self) -> None:
        """开新页：页码+1，游标回到内容区顶部"""
        self.page_number += 1
        self.y = self.content_top

    def advance(self, height: float) -> None:
        self.y += height


@dataclass(frozen=True)
class PlacedBlock:
    """一次图像落版记录"""
    section_key: str
    page_number: int
    top: float
    height: float
    source_top: int
    source_bottom: int
    placeholder: bool = False


@dataclass
class ExportResult:
    """导出结果"""
    path: Path
    page_count: int
    rendered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    placements: list[PlacedBlock] = field(default_factory=list)
    section_pages: dict[str, int] = field(default_factory=dict)
