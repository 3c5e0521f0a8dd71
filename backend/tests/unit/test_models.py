"""
数据模型单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_models.py -v
"""

from typing import Any

import pytest

from skillgenix.doc_gen import ReportNormalizer
from skillgenix.interfaces import SkillgenixError
from skillgenix.models import (
    CareerAnalysisReport,
    ExportJob,
    JobStatus,
    PageCursor,
    ReportDocument,
    ReportSection,
)
from skillgenix.view import LivePage


class TestPageCursor:
    """排版游标测试"""

    def test_new_page_resets_offset(self):
        """测试开新页：页码+1，游标回到内容区顶部"""
        cursor = PageCursor(content_top=32, max_content_height=240)
        cursor.new_page()
        cursor.advance(100)
        assert cursor.remaining == 140
        cursor.new_page()
        assert cursor.page_number == 2
        assert cursor.y == 32
        assert cursor.remaining == 240

    def test_remaining_never_negative(self):
        """测试剩余空间下限为0"""
        cursor = PageCursor(content_top=32, max_content_height=240)
        cursor.new_page()
        cursor.advance(300)
        assert cursor.remaining == 0


class TestReportDocument:
    """导出文档测试"""

    def test_resolve_skips_missing(self, live_page: LivePage):
        """测试缺失章节跳过，序号只对已找到章节连续编号"""
        document = ReportDocument(sections=[
            ReportSection(key="executive-summary", title="Executive Summary"),
            ReportSection(key="skill-mapping", title="Skill Mapping"),
            ReportSection(key="skill-gap-analysis", title="Skill Gap Analysis"),
        ])
        resolved, missing = document.resolve(live_page)
        assert [r.section.key for r in resolved] == ["executive-summary", "skill-gap-analysis"]
        assert [r.ordinal for r in resolved] == [1, 2]
        assert missing == ["skill-mapping"]


class TestExportJob:
    """导出任务测试"""

    def test_job_lifecycle(self):
        """测试任务状态流转"""
        job = ExportJob(job_id="job-1", user_name="Jane Doe")
        assert job.status == JobStatus.QUEUED
        assert job.is_active

        job.mark_running()
        assert job.status == JobStatus.RUNNING
        assert job.progress.stage == "PREPARE"
        assert job.started_at is not None

        job.mark_succeeded()
        assert job.status == JobStatus.SUCCEEDED
        assert job.progress.percent == 100
        assert not job.is_active

    def test_mark_failed(self):
        """测试任务失败记录错误"""
        job = ExportJob(job_id="job-2", user_name="Jane Doe")
        job.mark_failed("disk full")
        assert job.status == JobStatus.FAILED
        assert job.errors == ["disk full"]

    def test_add_flag_dedup(self):
        """测试告警标记去重"""
        job = ExportJob(job_id="job-3", user_name="Jane Doe")
        job.add_flag("SECTION_CAPTURE_FAILED:quick-tips")
        job.add_flag("SECTION_CAPTURE_FAILED:quick-tips")
        assert job.flags == ["SECTION_CAPTURE_FAILED:quick-tips"]


class TestReportNormalizer:
    """报告规整测试"""

    def test_structure_coerces_loose_input(self, raw_report: dict[str, Any]):
        """测试字符串数字/纯字符串列表项/备用键"""
        report = ReportNormalizer().structure(raw_report)

        assert report.executive_summary.summary.startswith("Jane is ready")
        sfia = report.skill_mapping.sfia_skills
        assert [s.skill for s in sfia] == ["Programming", "Data Management"]
        assert [s.proficiency for s in sfia] == [5, 4]
        assert report.skill_mapping.dig_comp_skills[0].skill == "Digital content creation"

        gap = report.skill_gap_analysis.key_gaps[0]
        assert gap.current_level == 2
        assert gap.gap == 3
        assert gap.priority == "High"

        steps = report.career_pathway_options.pathway_steps
        assert [s.step for s in steps] == ["Learn Spark", "Build pipelines"]
        assert steps[1].timeframe == "6 months"

    def test_present_sections(self, raw_report: dict[str, Any]):
        """测试只有有内容的章节视为存在"""
        report = ReportNormalizer().structure(raw_report)
        assert report.present_sections() == [
            "executive-summary",
            "skill-mapping",
            "skill-gap-analysis",
            "career-pathway",
        ]

    def test_structure_accepts_fenced_json(self):
        """测试代码块包裹的JSON"""
        raw = '```json\n{"quickTips": {"tips": ["Update your CV"]}}\n```'
        report = ReportNormalizer().structure(raw)
        assert report.quick_tips.quick_wins[0].tip == "Update your CV"

    def test_invalid_section_falls_back(self):
        """测试非法章节回退默认值，其他章节不受影响"""
        normalizer = ReportNormalizer()
        report = normalizer.structure({
            "executiveSummary": ["not", "an", "object"],
            "similarRoles": {"roles": [{"title": "ML Engineer", "similarity": "85%"}]},
        })
        assert report.executive_summary.is_empty()
        assert report.similar_roles.roles[0].role == "ML Engineer"
        assert report.similar_roles.roles[0].similarity_score == 85
        assert normalizer.fallback_sections == ["executive-summary"]

    def test_invalid_json_raises(self):
        """测试无法解析的文本"""
        with pytest.raises(SkillgenixError):
            ReportNormalizer().structure("not json at all")

    def test_empty_report(self):
        """测试空报告无章节"""
        assert CareerAnalysisReport().present_sections() == []
