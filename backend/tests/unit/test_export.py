"""
导出流程单元测试（文档组装 + 执行器）

PDF结果用PyPDF2检查：页数、页脚页码、目录、元数据
"""

import asyncio
from datetime import date

import pytest
from PIL import Image

from skillgenix.capture import SectionCapturer
from skillgenix.config import load_catalog
from skillgenix.doc_gen import (
    PageChrome,
    PageCompositor,
    PDFInspector,
    ReportExporter,
    build_export_filename,
    count_pdf_pages,
)
from skillgenix.interfaces import ExportBusyError, ExportError, ISectionCapturer
from skillgenix.models import CapturedSection, JobStatus, NotificationLevel
from skillgenix.pipeline import EXPORT_STAGES, ExportExecutor, JobManager, RecordingNotifier, StageEnum
from skillgenix.view import LivePage

TODAY = date(2024, 5, 1)


def _exporter(runtime_config, rasterizer, svg_renderer) -> ReportExporter:
    capturer = SectionCapturer(rasterizer, svg_renderer, runtime_config)
    return ReportExporter(capturer, load_catalog().to_document(), runtime_config)


class TestReportExporter:
    """文档组装测试"""

    def test_two_sections_end_to_end(self, runtime_config, live_page, fake_rasterizer, fake_svg_renderer):
        """测试标题页 + 2个内容页，目录顺序与页脚页码"""
        exporter = _exporter(runtime_config, fake_rasterizer, fake_svg_renderer)
        result = asyncio.run(exporter.export(live_page, "Jane Doe", today=TODAY))

        assert result.path.name == "Skillgenix_Career_Analysis_Jane_Doe_2024-05-01.pdf"
        assert result.path.exists()
        assert result.page_count == 3
        assert result.rendered == ["executive-summary", "skill-gap-analysis"]
        assert result.failed == []
        assert result.section_pages == {"executive-summary": 2, "skill-gap-analysis": 3}

        inspector = PDFInspector(result.path)
        assert inspector.count_pages() == 3
        assert inspector.page_stamps() == [(1, 3), (2, 3), (3, 3)]

        title_page = inspector.page_texts()[0]
        assert "Table of Contents" in title_page
        assert "Jane Doe" in title_page
        assert title_page.index("1. Executive Summary") < title_page.index("2. Skill Gap Analysis")

    def test_skipped_sections_absent(self, runtime_config, live_page, fake_rasterizer, fake_svg_renderer):
        """测试页面上不存在的章节不出现在正文与目录"""
        exporter = _exporter(runtime_config, fake_rasterizer, fake_svg_renderer)
        result = asyncio.run(exporter.export(live_page, "Jane Doe", today=TODAY))

        assert "skill-mapping" in result.skipped
        assert len(result.skipped) == 9
        assert {b.section_key for b in result.placements} == {"executive-summary", "skill-gap-analysis"}
        texts = PDFInspector(result.path).page_texts()
        assert not any("Skill Mapping" in text for text in texts)
        assert not any("Quick Tips" in text for text in texts)

    def test_oversized_section_pages(self, runtime_config, live_page, make_rasterizer, fake_svg_renderer):
        """测试超长章节占 ceil(h/max) 页，后续章节顺延"""
        rasterizer = make_rasterizer(sizes={"executive-summary": (1800, 5000)})
        exporter = _exporter(runtime_config, rasterizer, fake_svg_renderer)
        result = asyncio.run(exporter.export(live_page, "Jane Doe", today=TODAY))

        summary_pages = [b.page_number for b in result.placements if b.section_key == "executive-summary"]
        assert summary_pages == [2, 3, 4]
        assert result.section_pages["skill-gap-analysis"] == 5
        assert result.page_count == 5
        assert PDFInspector(result.path).page_stamps()[-1] == (5, 5)

    def test_failed_section_placeholder(self, runtime_config, live_page, make_rasterizer, fake_svg_renderer):
        """测试单章节失败写占位块，其余章节照常按序输出"""
        rasterizer = make_rasterizer(fail_keys={"executive-summary"})
        exporter = _exporter(runtime_config, rasterizer, fake_svg_renderer)
        events = []
        result = asyncio.run(exporter.export(live_page, "Jane Doe", on_event=events.append, today=TODAY))

        assert result.failed == ["executive-summary"]
        assert result.rendered == ["skill-gap-analysis"]
        assert result.page_count == 3
        placeholder = [b for b in result.placements if b.placeholder]
        assert [b.section_key for b in placeholder] == ["executive-summary"]
        assert placeholder[0].page_number == 2

        text = PDFInspector(result.path).page_texts()[1]
        assert "Unable to capture content for section: Executive Summary" in text

        warnings = [e for e in events if e.level == NotificationLevel.WARNING]
        assert [w.section_key for w in warnings] == ["executive-summary"]

    def test_degenerate_bitmap_contained(self, runtime_config, live_page):
        """测试落版失败（0x0位图）写占位块，后续章节照常输出"""
        capturer = _DegenerateCapturer({"executive-summary"})
        exporter = ReportExporter(capturer, load_catalog().to_document(), runtime_config)
        result = asyncio.run(exporter.export(live_page, "Jane Doe", today=TODAY))

        assert result.failed == ["executive-summary"]
        assert result.rendered == ["skill-gap-analysis"]
        assert [(b.section_key, b.placeholder) for b in result.placements] == [
            ("executive-summary", True),
            ("skill-gap-analysis", False),
        ]
        assert count_pdf_pages(result.path) == 3

    def test_divider_between_sections_only(self, runtime_config, fake_rasterizer, fake_svg_renderer, monkeypatch):
        """测试分隔线只画在章节之间，最后一个章节后不画"""
        page = LivePage.from_html(
            "<html><body><main>"
            '<div class="section" id="executive-summary"><p>a</p></div>'
            '<div class="section" id="skill-mapping"><p>b</p></div>'
            '<div class="section" id="skill-gap-analysis"><p>c</p></div>'
            "</main></body></html>"
        )
        after_sections = []
        drawn = []
        original = PageCompositor.draw_divider

        def record_divider(self):
            after_sections.append(self.placements[-1].section_key)
            original(self)

        monkeypatch.setattr(PageCompositor, "draw_divider", record_divider)
        monkeypatch.setattr(PageChrome, "draw_divider", lambda self, canvas, top: drawn.append(top))

        exporter = _exporter(runtime_config, fake_rasterizer, fake_svg_renderer)
        result = asyncio.run(exporter.export(page, "Jane Doe", today=TODAY))

        assert result.rendered == ["executive-summary", "skill-mapping", "skill-gap-analysis"]
        assert after_sections == ["executive-summary", "skill-mapping"]
        assert len(drawn) == 2

    def test_progress_events(self, runtime_config, live_page, fake_rasterizer, fake_svg_renderer):
        """测试逐章节进度事件"""
        exporter = _exporter(runtime_config, fake_rasterizer, fake_svg_renderer)
        events = []
        asyncio.run(exporter.export(live_page, "Jane Doe", on_event=events.append, today=TODAY))

        assert [e.title for e in events] == ["Capturing section 1 of 2", "Capturing section 2 of 2"]
        assert [e.section_key for e in events] == ["executive-summary", "skill-gap-analysis"]

    def test_metadata(self, runtime_config, live_page, fake_rasterizer, fake_svg_renderer):
        """测试PDF元数据"""
        exporter = _exporter(runtime_config, fake_rasterizer, fake_svg_renderer)
        result = asyncio.run(exporter.export(live_page, "Jane Doe", today=TODAY))

        metadata = PDFInspector(result.path).metadata()
        assert metadata["Title"] == "Skillgenix Career Analysis - Jane Doe"
        assert metadata["Subject"] == "Career Analysis Report"
        assert metadata["Author"] == "Skillgenix"
        assert "career" in metadata["Keywords"]

    def test_empty_page_title_only(self, runtime_config, fake_rasterizer, fake_svg_renderer):
        """测试页面无任何章节时只输出标题页"""
        page = LivePage.from_html("<html><body><main></main></body></html>")
        exporter = _exporter(runtime_config, fake_rasterizer, fake_svg_renderer)
        result = asyncio.run(exporter.export(page, "Jane Doe", today=TODAY))

        assert result.page_count == 1
        assert result.rendered == []
        assert PDFInspector(result.path).page_stamps() == [(1, 1)]


class TestExportFilename:
    """文件名测试"""

    def test_whitespace_replaced(self):
        assert (
            build_export_filename("Skillgenix", "  Jane  Mary Doe ", TODAY)
            == "Skillgenix_Career_Analysis_Jane_Mary_Doe_2024-05-01.pdf"
        )

    def test_unsafe_characters_removed(self):
        assert build_export_filename("Skillgenix", "a/b:c", TODAY) == "Skillgenix_Career_Analysis_abc_2024-05-01.pdf"

    def test_blank_name(self):
        assert build_export_filename("Skillgenix", "   ", TODAY) == "Skillgenix_Career_Analysis_User_2024-05-01.pdf"


class _ExplodingCapturer(ISectionCapturer):
    """截图阶段抛出非CaptureError异常"""

    async def capture(self, page, element):
        raise RuntimeError("canvas creation failed")


class _DegenerateCapturer(ISectionCapturer):
    """指定章节返回0x0位图，其余返回正常位图"""

    def __init__(self, empty_keys: set[str]):
        self.empty_keys = empty_keys

    async def capture(self, page, element):
        key = element.get("id")
        if key in self.empty_keys:
            return CapturedSection(key=key, image=Image.new("RGB", (0, 0)), width=0, height=0)
        image = Image.new("RGB", (1800, 600), (255, 255, 255))
        return CapturedSection(key=key, image=image, width=1800, height=600)


class TestExportExecutor:
    """导出执行器测试"""

    def test_run_success_notifications(self, runtime_config, live_page, fake_rasterizer, fake_svg_renderer):
        """测试成功时的任务状态与通知序列"""
        notifier = RecordingNotifier()
        capturer = SectionCapturer(fake_rasterizer, fake_svg_renderer, runtime_config)
        executor = ExportExecutor(capturer, notifier=notifier, config=runtime_config)

        job = asyncio.run(executor.run(live_page, "Jane Doe"))

        assert job.status == JobStatus.SUCCEEDED
        assert job.artifacts.page_count == 3
        assert job.artifacts.pdf_path.exists()
        assert job.rendered_sections == ["executive-summary", "skill-gap-analysis"]
        assert job.progress.percent == 100
        assert not executor.jobs.busy
        assert notifier.levels() == [
            NotificationLevel.INFO,
            NotificationLevel.PROGRESS,
            NotificationLevel.PROGRESS,
            NotificationLevel.SUCCESS,
        ]

    def test_section_failure_flagged(self, runtime_config, live_page, make_rasterizer, fake_svg_renderer):
        """测试章节失败不影响任务成功，记录告警标记"""
        rasterizer = make_rasterizer(fail_keys={"skill-gap-analysis"})
        capturer = SectionCapturer(rasterizer, fake_svg_renderer, runtime_config)
        executor = ExportExecutor(capturer, notifier=RecordingNotifier(), config=runtime_config)

        job = asyncio.run(executor.run(live_page, "Jane Doe"))

        assert job.status == JobStatus.SUCCEEDED
        assert job.failed_sections == ["skill-gap-analysis"]
        assert job.flags == ["SECTION_CAPTURE_FAILED:skill-gap-analysis"]

    def test_run_rejects_reentrant_export(self, runtime_config, live_page, fake_rasterizer, fake_svg_renderer):
        """测试已有任务运行时拒绝新的导出"""
        notifier = RecordingNotifier()
        capturer = SectionCapturer(fake_rasterizer, fake_svg_renderer, runtime_config)
        executor = ExportExecutor(capturer, notifier=notifier, config=runtime_config)
        executor.jobs.begin("someone else")

        with pytest.raises(ExportBusyError):
            asyncio.run(executor.run(live_page, "Jane Doe"))
        assert notifier.levels() == [NotificationLevel.WARNING]

    def test_capturer_exception_stays_in_section(self, runtime_config, live_page):
        """测试截图器抛出任意异常只影响对应章节，任务仍成功"""
        notifier = RecordingNotifier()
        executor = ExportExecutor(_ExplodingCapturer(), notifier=notifier, config=runtime_config)

        job = asyncio.run(executor.run(live_page, "Jane Doe"))

        assert job.status == JobStatus.SUCCEEDED
        assert job.failed_sections == ["executive-summary", "skill-gap-analysis"]
        assert job.artifacts.page_count == 3
        assert NotificationLevel.ERROR not in notifier.levels()

    def test_run_failure_clears_busy(self, runtime_config, live_page, fake_rasterizer, fake_svg_renderer, temp_dir):
        """测试任务级失败（输出目录不可写）：标记失败、通知、清除忙碌标记后抛出ExportError"""
        blocked = temp_dir / "blocked"
        blocked.write_text("not a directory", encoding="utf-8")
        notifier = RecordingNotifier()
        capturer = SectionCapturer(fake_rasterizer, fake_svg_renderer, runtime_config)
        executor = ExportExecutor(capturer, notifier=notifier, config=runtime_config)

        with pytest.raises(ExportError):
            asyncio.run(executor.run(live_page, "Jane Doe", output_dir=blocked))

        job = executor.jobs.list_jobs()[-1]
        assert job.status == JobStatus.FAILED
        assert len(job.errors) == 1
        assert fake_rasterizer.calls == []
        assert not executor.jobs.busy
        assert notifier.levels()[-1] == NotificationLevel.ERROR

        # 失败后可再次导出
        assert executor.jobs.begin("Jane Doe").is_active


class TestJobManager:
    """任务管理器测试"""

    def test_begin_rejects_when_busy(self):
        jobs = JobManager()
        jobs.begin("Jane Doe")
        with pytest.raises(ExportBusyError):
            jobs.begin("John Roe")

    def test_end_clears_busy(self):
        jobs = JobManager()
        job = jobs.begin("Jane Doe")
        jobs.end(job)
        assert not jobs.busy
        assert jobs.get_job(job.job_id) is job

    def test_history_bounded(self):
        """测试只保留最近 max_history 个任务"""
        jobs = JobManager(max_history=3)
        created = []
        for i in range(5):
            job = jobs.begin(f"user {i}")
            jobs.end(job)
            created.append(job)

        assert jobs.list_jobs() == created[-3:]
        assert jobs.get_job(created[0].job_id) is None
        assert jobs.get_job(created[-1].job_id) is created[-1]


class TestStages:
    """阶段进度测试"""

    def test_stage_ranges_contiguous(self):
        stages = list(EXPORT_STAGES.values())
        assert stages[0].progress_start == 0
        assert stages[-1].progress_end == 100
        for prev, nxt in zip(stages, stages[1:]):
            assert prev.progress_end == nxt.progress_start

    def test_section_progress_interpolation(self):
        stage = EXPORT_STAGES[StageEnum.CAPTURE_SECTIONS]
        assert stage.interpolate(0, 4) == 10
        assert stage.interpolate(2, 4) == 50
        assert stage.interpolate(4, 4) == 90
        assert stage.interpolate(0, 0) == 90
