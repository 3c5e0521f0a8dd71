"""
PDF检查引擎 - 读取已导出PDF的页数/文本/元数据

职责：
1. PDF页数计算
2. 逐页文本提取（页脚页码、目录核对）
3. 文档元数据读取

依赖：
- PyPDF2: PDF解析

测试要点：
- test_count_pdf_pages: PDF页数计算
- test_footer_stamps: 每页“Page i of N”
"""

from __future__ import annotations

import re
from pathlib import Path

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from ..interfaces import ExportError

_PAGE_STAMP_RE = re.compile(r"Page (\d+) of (\d+)")


class PDFInspector:
    """PDF检查器"""

    def __init__(self, pdf_path: Path):
        if not pdf_path.exists():
            raise ExportError(f"PDF文件不存在: {pdf_path}")
        try:
            self.reader = PdfReader(str(pdf_path))
        except PdfReadError as e:
            raise ExportError(f"PDF无法解析: {pdf_path}: {e}") from e
        self.pdf_path = pdf_path

    def count_pages(self) -> int:
        """计算PDF页数"""
        return len(self.reader.pages)

    def page_texts(self) -> list[str]:
        return [page.extract_text() or "" for page in self.reader.pages]

    def page_stamps(self) -> list[tuple[int, int] | None]:
        """逐页页脚页码 (i, N)，缺失时为None"""
        stamps: list[tuple[int, int] | None] = []
        for text in self.page_texts():
            m = _PAGE_STAMP_RE.search(text)
            stamps.append((int(m.group(1)), int(m.group(2))) if m else None)
        return stamps

    def metadata(self) -> dict[str, str]:
        """文档元数据（键去掉前导斜杠）"""
        info = self.reader.metadata or {}
        return {str(k).lstrip("/"): str(v) for k, v in info.items()}


def count_pdf_pages(pdf_path: Path) -> int:
    """计算PDF页数"""
    return PDFInspector(pdf_path).count_pages()
