"""
文档生成模块 - 报告规整/页面排版/PDF组装与检查

子模块：
- normalizer: AI报告JSON规整
- compositor: 章节位图落版与分页切片
- chrome: 页眉页脚/标题页目录/延迟落页画布
- assembler: 完整导出流程
- pdf_engine: 导出结果检查（页数/页码/元数据）
"""

from .assembler import ReportExporter, build_export_filename
from .chrome import NumberedCanvas, PageChrome
from .compositor import PageCompositor, plan_slices
from .normalizer import ReportNormalizer
from .pdf_engine import PDFInspector, count_pdf_pages

__all__ = [
    "ReportNormalizer",
    "PageCompositor",
    "plan_slices",
    "PageChrome",
    "NumberedCanvas",
    "ReportExporter",
    "build_export_filename",
    "PDFInspector",
    "count_pdf_pages",
]
