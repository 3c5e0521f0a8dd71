"""
文档组装器 - 标题页/目录/逐章节截图排版/页码/元数据/落盘

职责：
1. 按固定顺序在页面上解析章节，缺失章节静默跳过
2. 标题页：标题、生成日期、接收人、目录（只含已解析章节）
3. 逐章节：新页 -> 章节标题 -> 截图 -> 排版（失败写占位块）-> 进度事件
4. 落页阶段统一补页脚与“Page i of N”、回填目录页码
5. 写入PDF元数据并保存为 <产品>_Career_Analysis_<用户名>_<日期>.pdf

依赖：
- ISectionCapturer: 章节截图
- PageCompositor/NumberedCanvas: 排版与落页

测试要点：
- test_skipped_sections_absent: 缺失章节不出现在正文与目录
- test_failed_section_placeholder: 单章节失败不影响其余章节
- test_degenerate_bitmap_contained: 落版异常同样只影响本章节
- test_divider_between_sections_only: 最后一个章节后不画分隔线
- test_two_sections_end_to_end: 标题页 + 2个内容页，页脚页码正确
"""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from reportlab.lib.units import mm

from ..config import get_config, load_catalog
from ..interfaces import CaptureError
from ..models import ExportResult, Notification, NotificationLevel
from .chrome import NumberedCanvas, PageChrome
from .compositor import PageCompositor

if TYPE_CHECKING:
    from ..config import RuntimeConfig
    from ..interfaces import ISectionCapturer
    from ..models import ReportDocument
    from ..view.live_page import LivePage

logger = logging.getLogger(__name__)

EventCallback = Callable[[Notification], None]

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|]')


def build_export_filename(product_name: str, user_name: str, day: date) -> str:
    """<产品>_Career_Analysis_<用户名(空白换成_)>_<ISO日期>.pdf"""
    name = _UNSAFE_CHARS.sub("", user_name.strip())
    name = re.sub(r"\s+", "_", name) or "User"
    return f"{product_name}_Career_Analysis_{name}_{day.isoformat()}.pdf"


class ReportExporter:
    """报告导出器（单次调用 = 单个PDF）"""

    def __init__(
        self,
        capturer: ISectionCapturer,
        document: ReportDocument | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.config = config or get_config()
        self.capturer = capturer
        self.document = document or load_catalog().to_document()

    async def export(
        self,
        page: LivePage,
        user_name: str,
        on_event: EventCallback | None = None,
        output_dir: Path | None = None,
        today: date | None = None,
    ) -> ExportResult:
        """执行导出，返回导出结果"""
        layout = self.config.layout
        branding = self.config.branding
        today = today or date.today()
        emit = on_event or (lambda _: None)

        resolved, missing = self.document.resolve(page)
        for key in missing:
            logger.debug(f"页面上不存在章节，跳过: {key}")
        logger.info(f"开始导出: {len(resolved)} 个章节，跳过 {len(missing)} 个")

        output_dir = Path(output_dir or self.config.output.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / build_export_filename(branding.product_name, user_name, today)

        chrome = PageChrome(layout, branding, user_name)
        pdf = NumberedCanvas(
            str(path),
            pagesize=(layout.page_width * mm, layout.page_height * mm),
            chrome=chrome,
        )
        self._set_metadata(pdf, user_name)
        compositor = PageCompositor(pdf, chrome, layout)

        # 标题页（无运行页眉）
        compositor.start_page(running_header=False)
        entries = [(item.ordinal, item.section.title, item.section.key) for item in resolved]
        pdf.toc_rows.extend(chrome.draw_title_page(pdf, today, entries))

        result = ExportResult(path=path, page_count=0, skipped=list(missing))
        total = len(resolved)
        for index, item in enumerate(resolved):
            key, title = item.section.key, item.section.title
            emit(Notification(
                level=NotificationLevel.PROGRESS,
                title=f"Capturing section {index + 1} of {total}",
                description=title,
                section_key=key,
                section_index=index + 1,
                section_total=total,
            ))

            compositor.begin_section(item.ordinal, title)
            pdf.section_pages[key] = compositor.page_number
            try:
                captured = await self.capturer.capture(page, item.element)
                compositor.place(captured)
            except Exception as e:
                # 章节内任何失败（截图或落版）只影响本章节
                if isinstance(e, CaptureError):
                    logger.warning(f"章节截图失败 {key}: {e}")
                else:
                    logger.warning(f"章节处理失败 {key}: {type(e).__name__}: {e}", exc_info=True)
                compositor.place_error_block(key, title)
                result.failed.append(key)
                emit(Notification(
                    level=NotificationLevel.WARNING,
                    title=f"Could not capture {title}",
                    description=str(e) or type(e).__name__,
                    section_key=key,
                    section_index=index + 1,
                    section_total=total,
                ))
            else:
                result.rendered.append(key)

            if index < total - 1:
                compositor.draw_divider()

        compositor.finish()
        # 落页：页脚 + 页码 + 目录页码
        pdf.save()

        result.page_count = pdf.page_count
        result.placements = list(compositor.placements)
        result.section_pages = dict(pdf.section_pages)
        logger.info(f"导出完成: {path.name}，共 {result.page_count} 页")
        return result

    def _set_metadata(self, pdf: NumberedCanvas, user_name: str) -> None:
        branding = self.config.branding
        pdf.setTitle(f"{branding.document_title} - {user_name}")
        pdf.setSubject(branding.subject)
        pdf.setAuthor(branding.product_name)
        pdf.setKeywords(", ".join(branding.keywords))
        pdf.setCreator(branding.product_name)
