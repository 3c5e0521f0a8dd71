"""
报告视图渲染器 - 生成截图目标页面（HTML+内嵌SVG）

职责：
1. 用Jinja2模板渲染规整后的报告
2. 每个章节输出为 <div class="section" id="<key>">
3. 无内容的章节不输出（导出时自然跳过）

依赖：
- jinja2: 模板渲染
- svg_charts: 雷达图/差距柱状图/路径图

测试要点：
- test_render_section_ids: 章节id与目录key一致
- test_empty_section_absent: 空章节不出现在页面
- test_charts_embedded: 图表以内联SVG嵌入
"""

from __future__ import annotations

from jinja2 import Environment, PackageLoader, select_autoescape

from ..config import get_config
from ..models import CareerAnalysisReport, ReportMetadata
from .svg_charts import build_report_charts


class ReportViewRenderer:
    """报告视图渲染器"""

    TEMPLATE_NAME = "report_view.html.j2"

    def __init__(self, width: int | None = None):
        config = get_config()
        self.width = width or config.capture.default_width_px
        self.product_name = config.branding.product_name
        self.env = Environment(
            loader=PackageLoader("skillgenix", "view/templates"),
            autoescape=select_autoescape(enabled_extensions=("html", "j2")),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, report: CareerAnalysisReport, metadata: ReportMetadata | None = None) -> str:
        """渲染完整报告页面"""
        metadata = metadata or ReportMetadata()
        target_role = metadata.target_role or report.skill_gap_analysis.target_role
        title = f"{self.product_name} Career Analysis"
        if target_role:
            title = f"{title} - {target_role}"

        template = self.env.get_template(self.TEMPLATE_NAME)
        return template.render(
            title=title,
            width=self.width,
            metadata=metadata,
            report=report,
            present=set(report.present_sections()),
            charts=build_report_charts(report),
        )
