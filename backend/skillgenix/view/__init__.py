"""
报告视图模块 - 截图目标页面

子模块：
- svg_charts: 内嵌SVG图表
- html_view: 报告视图HTML渲染
- live_page: 在线页面（章节查找/离屏暂存容器）
"""

from .html_view import ReportViewRenderer
from .live_page import CAPTURE_ROOT_ID, SCRATCH_ID, LivePage

__all__ = [
    "ReportViewRenderer",
    "LivePage",
    "SCRATCH_ID",
    "CAPTURE_ROOT_ID",
]
