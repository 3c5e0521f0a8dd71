"""
导出执行器 - 编排一次导出任务

职责：
1. 忙碌标记：同一时间只允许一个导出任务
2. 更新任务阶段与进度（章节级插值）
3. 发送通知：开始/章节进度/章节失败/最终结果
4. 任务级失败：标记失败、通知、清除忙碌标记后以ExportError抛出

测试要点：
- test_run_success_notifications: 成功时通知序列完整
- test_run_rejects_reentrant_export: 运行中再次导出被拒绝
- test_run_failure_clears_busy: 失败后忙碌标记被清除
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import get_config
from ..doc_gen import ReportExporter
from ..interfaces import ExportBusyError, ExportError
from ..models import Notification, NotificationLevel
from .job_manager import JobManager
from .notifier import LoggingNotifier
from .stages import EXPORT_STAGES, StageEnum

if TYPE_CHECKING:
    from ..config import RuntimeConfig
    from ..interfaces import INotifier, ISectionCapturer
    from ..models import ExportJob, ReportDocument
    from ..view.live_page import LivePage

logger = logging.getLogger(__name__)


class ExportExecutor:
    """导出执行器"""

    def __init__(
        self,
        capturer: ISectionCapturer,
        notifier: INotifier | None = None,
        job_manager: JobManager | None = None,
        document: ReportDocument | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.config = config or get_config()
        self.exporter = ReportExporter(capturer, document, self.config)
        self.notifier = notifier or LoggingNotifier()
        self.jobs = job_manager or JobManager()

    async def run(self, page: LivePage, user_name: str, output_dir: Path | None = None) -> ExportJob:
        """执行一次导出，返回完成的任务"""
        try:
            job = self.jobs.begin(user_name)
        except ExportBusyError as e:
            self._notify(NotificationLevel.WARNING, "Export in progress", str(e))
            raise

        try:
            job.mark_running(StageEnum.PREPARE.value)
            logger.info(f"[{job.job_id}] 导出开始: {user_name}")
            self._notify(NotificationLevel.INFO, "Generating PDF", "Capturing report sections...")

            self._enter_stage(job, StageEnum.TITLE_PAGE)
            result = await self.exporter.export(
                page,
                user_name,
                on_event=lambda n: self._on_event(job, n),
                output_dir=output_dir,
            )

            self._enter_stage(job, StageEnum.SAVE)
            job.artifacts.pdf_path = result.path
            job.artifacts.page_count = result.page_count
            job.rendered_sections = list(result.rendered)
            job.failed_sections = list(result.failed)
            job.skipped_sections = list(result.skipped)
            for key in result.failed:
                job.add_flag(f"SECTION_CAPTURE_FAILED:{key}")
            job.mark_succeeded()

            logger.info(f"[{job.job_id}] 导出成功: {result.path}")
            self._notify(
                NotificationLevel.SUCCESS,
                "PDF exported",
                f"{result.path.name} ({result.page_count} pages)",
            )
            return job

        except Exception as e:
            logger.exception(f"[{job.job_id}] 导出失败")
            job.mark_failed(str(e))
            self._notify(NotificationLevel.ERROR, "Export failed", str(e) or type(e).__name__)
            if isinstance(e, ExportError):
                raise
            raise ExportError(f"导出失败: {e}") from e

        finally:
            self.jobs.end(job)

    def _on_event(self, job: ExportJob, notification: Notification) -> None:
        """导出器事件 -> 任务进度 + 通知转发"""
        if notification.level == NotificationLevel.PROGRESS and notification.section_total:
            stage = EXPORT_STAGES[StageEnum.CAPTURE_SECTIONS]
            index = notification.section_index or 0
            job.progress.stage = stage.name
            job.progress.percent = stage.interpolate(index - 1, notification.section_total)
            job.progress.current_section = notification.section_key
            job.progress.section_index = index
            job.progress.section_total = notification.section_total
            job.progress.message = notification.title
        self.notifier.notify(notification)

    def _enter_stage(self, job: ExportJob, stage: StageEnum) -> None:
        job.progress.stage = stage.value
        job.progress.percent = EXPORT_STAGES[stage].progress_start
        logger.debug(f"[{job.job_id}] 进入阶段: {stage.value}")

    def _notify(self, level: NotificationLevel, title: str, description: str = "") -> None:
        self.notifier.notify(Notification(level=level, title=title, description=description))
