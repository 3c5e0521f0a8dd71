"""
职业分析报告模型 - 11个章节的严格结构

AI返回的JSON类型松散（数字写成字符串、列表项写成纯字符串、键名不统一），
模型层负责在校验前把输入规整为统一结构，并为缺失字段提供默认值。
"""

from __future__ import annotations

import re
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def _to_number(value: Any, default: float = 0.0) -> float:
    """'Level 4' / '4/5' / 4 -> 4.0；无法解析时返回default"""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        m = _NUMBER_RE.search(value)
        if m:
            return float(m.group())
    return default


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        for key in ("text", "summary", "description", "name", "title"):
            if isinstance(value.get(key), str):
                return value[key].strip()
    return str(value)


def _to_text_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return [t for t in (_to_text(v) for v in value) if t]


Level = Annotated[int, BeforeValidator(lambda v: int(round(_to_number(v))))]
Score = Annotated[float, BeforeValidator(_to_number)]
Text = Annotated[str, BeforeValidator(_to_text)]
TextList = Annotated[list[str], BeforeValidator(_to_text_list)]


class ReportModel(BaseModel):
    """报告模型基类：驼峰别名 + 输入规整"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    # 备用键 -> 标准键（驼峰）
    ALIASES: ClassVar[dict[str, str]] = {}
    # 输入为纯字符串时落到的字段
    TEXT_FIELD: ClassVar[str | None] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_input(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, str) and cls.TEXT_FIELD:
            return {cls.TEXT_FIELD: data}
        if not isinstance(data, dict):
            return data
        data = {k: v for k, v in data.items() if v is not None}
        for alt, canonical in cls.ALIASES.items():
            if alt in data and canonical not in data:
                data[canonical] = data.pop(alt)
        return data

    def is_empty(self) -> bool:
        """与默认实例相同即视为无内容"""
        return self == self.__class__()


# ============================================================================
# 1. Executive Summary
# ============================================================================

class FitScore(ReportModel):
    score: Score = 0
    out_of: Score = 10
    description: Text = ""


class ExecutiveSummary(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "summary"
    ALIASES: ClassVar[dict[str, str]] = {"overview": "summary", "keyPoints": "keyFindings"}

    summary: Text = ""
    career_goal: Text = ""
    fit_score: FitScore = Field(default_factory=FitScore)
    key_findings: TextList = Field(default_factory=list)


# ============================================================================
# 2. Skill Mapping
# ============================================================================

class SkillRating(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "skill"
    ALIASES: ClassVar[dict[str, str]] = {
        "name": "skill",
        "competence": "skill",
        "level": "proficiency",
        "proficiencyLevel": "proficiency",
    }

    skill: Text = "Skill"
    proficiency: Level = 3
    description: Text = ""
    category: Text = ""


class SkillMapping(ReportModel):
    ALIASES: ClassVar[dict[str, str]] = {"sfia9": "sfiaSkills", "digcomp22": "digCompSkills"}

    skills_analysis: Text = ""
    sfia_skills: list[SkillRating] = Field(default_factory=list)
    dig_comp_skills: list[SkillRating] = Field(default_factory=list)
    other_skills: list[SkillRating] = Field(default_factory=list)

    def all_skills(self) -> list[SkillRating]:
        return [*self.sfia_skills, *self.dig_comp_skills, *self.other_skills]


# ============================================================================
# 3. Skill Gap Analysis
# ============================================================================

class SkillGap(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "skill"
    ALIASES: ClassVar[dict[str, str]] = {"name": "skill", "importance": "priority"}

    skill: Text = "Skill"
    current_level: Level = 3
    required_level: Level = 5
    gap: Level | None = None
    priority: Text = "Medium"
    improvement_suggestion: Text = ""

    @model_validator(mode="after")
    def _fill_gap(self) -> SkillGap:
        if self.gap is None:
            self.gap = max(0, self.required_level - self.current_level)
        return self


class SkillStrength(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "skill"
    ALIASES: ClassVar[dict[str, str]] = {"name": "skill"}

    skill: Text = "Skill"
    current_level: Level = 4
    required_level: Level = 3
    advantage: Level = 1
    leverage_suggestion: Text = ""


class SkillGapAnalysis(ReportModel):
    ALIASES: ClassVar[dict[str, str]] = {"skillGaps": "keyGaps", "skillStrengths": "keyStrengths"}

    target_role: Text = ""
    ai_analysis: Text = ""
    key_gaps: list[SkillGap] = Field(default_factory=list)
    key_strengths: list[SkillStrength] = Field(default_factory=list)


# ============================================================================
# 4. Career Pathway Options
# ============================================================================

class PathwayStep(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "step"
    ALIASES: ClassVar[dict[str, str]] = {
        "title": "step",
        "name": "step",
        "duration": "timeframe",
        "timeline": "timeframe",
    }

    step: Text = "Step"
    timeframe: Text = "3-6 months"
    description: Text = ""


class CareerPathwayOptions(ReportModel):
    pathway_description: Text = ""
    current_role: Text = ""
    target_role: Text = ""
    timeframe: Text = ""
    pathway_steps: list[PathwayStep] = Field(default_factory=list)
    ai_insights: Text = ""


# ============================================================================
# 5. Development Plan
# ============================================================================

class PlannedSkill(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "skill"
    ALIASES: ClassVar[dict[str, str]] = {"name": "skill"}

    skill: Text = "Skill"
    current_level: Level = 0
    target_level: Level = 0
    timeframe: Text = ""
    reason: Text = ""
    resources: TextList = Field(default_factory=list)


class DevelopmentPlan(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "overview"

    overview: Text = ""
    technical_skills: list[PlannedSkill] = Field(default_factory=list)
    soft_skills: list[PlannedSkill] = Field(default_factory=list)
    skills_to_acquire: list[PlannedSkill] = Field(default_factory=list)


# ============================================================================
# 6. Educational Programs
# ============================================================================

class EducationalProgram(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "name"
    ALIASES: ClassVar[dict[str, str]] = {"title": "name"}

    name: Text = "Program"
    provider: Text = ""
    duration: Text = ""
    format: Text = ""
    skills_covered: TextList = Field(default_factory=list)
    description: Text = ""


class ProjectIdea(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "title"

    title: Text = "Project"
    description: Text = ""
    difficulty: Text = ""
    time_estimate: Text = ""


class EducationalPrograms(ReportModel):
    introduction: Text = ""
    recommended_programs: list[EducationalProgram] = Field(default_factory=list)
    project_ideas: list[ProjectIdea] = Field(default_factory=list)


# ============================================================================
# 7. Learning Roadmap
# ============================================================================

class RoadmapPhase(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "phase"
    ALIASES: ClassVar[dict[str, str]] = {"name": "phase", "duration": "timeframe"}

    phase: Text = "Phase"
    timeframe: Text = ""
    focus: Text = ""
    milestones: TextList = Field(default_factory=list)


class LearningRoadmap(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "overview"

    overview: Text = ""
    phases: list[RoadmapPhase] = Field(default_factory=list)


# ============================================================================
# 8. Similar Roles
# ============================================================================

class SimilarRole(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "role"
    ALIASES: ClassVar[dict[str, str]] = {"title": "role", "name": "role", "similarity": "similarityScore"}

    role: Text = "Role"
    similarity_score: Score = 0
    key_skill_overlap: TextList = Field(default_factory=list)
    additional_skills_needed: TextList = Field(default_factory=list)
    summary: Text = ""


class SimilarRoles(ReportModel):
    introduction: Text = ""
    roles: list[SimilarRole] = Field(default_factory=list)


# ============================================================================
# 9. Quick Tips
# ============================================================================

class QuickWin(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "tip"

    tip: Text = ""
    timeframe: Text = ""
    impact: Text = ""


class QuickTips(ReportModel):
    ALIASES: ClassVar[dict[str, str]] = {"tips": "quickWins"}

    introduction: Text = ""
    quick_wins: list[QuickWin] = Field(default_factory=list)
    industry_insights: TextList = Field(default_factory=list)


# ============================================================================
# 10. Growth Trajectory
# ============================================================================

class SalaryRange(ReportModel):
    min: Score = 0
    max: Score = 0
    currency: Text = "USD"


class CareerStage(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "role"

    role: Text = ""
    timeline: Text = ""
    responsibilities: TextList = Field(default_factory=list)
    skills_required: TextList = Field(default_factory=list)
    salary: SalaryRange = Field(default_factory=SalaryRange)


class GrowthTrajectory(ReportModel):
    introduction: Text = ""
    short_term: CareerStage = Field(default_factory=CareerStage)
    medium_term: CareerStage = Field(default_factory=CareerStage)
    long_term: CareerStage = Field(default_factory=CareerStage)

    def stages(self) -> list[tuple[str, CareerStage]]:
        pairs = [
            ("Short Term", self.short_term),
            ("Medium Term", self.medium_term),
            ("Long Term", self.long_term),
        ]
        return [(label, stage) for label, stage in pairs if not stage.is_empty()]


# ============================================================================
# 11. Learning Path Roadmap
# ============================================================================

class TrajectoryStage(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "stage"

    stage: Text = ""
    timeframe: Text = ""
    role: Text = ""
    skills: TextList = Field(default_factory=list)
    milestones: TextList = Field(default_factory=list)


class LearningPathRoadmap(ReportModel):
    TEXT_FIELD: ClassVar[str | None] = "overview"

    overview: Text = ""
    career_trajectory: list[TrajectoryStage] = Field(default_factory=list)


# ============================================================================
# 完整报告
# ============================================================================

# 章节key -> 报告字段名（与 report_sections.yaml 一致）
SECTION_FIELDS: dict[str, str] = {
    "executive-summary": "executive_summary",
    "skill-mapping": "skill_mapping",
    "skill-gap-analysis": "skill_gap_analysis",
    "career-pathway": "career_pathway_options",
    "development-plan": "development_plan",
    "educational-programs": "educational_programs",
    "learning-roadmap": "learning_roadmap",
    "similar-roles": "similar_roles",
    "quick-tips": "quick_tips",
    "growth-trajectory": "growth_trajectory",
    "learning-path-roadmap": "learning_path_roadmap",
}


class CareerAnalysisReport(ReportModel):
    """完整职业分析报告（11个章节）"""

    executive_summary: ExecutiveSummary = Field(default_factory=ExecutiveSummary)
    skill_mapping: SkillMapping = Field(default_factory=SkillMapping)
    skill_gap_analysis: SkillGapAnalysis = Field(default_factory=SkillGapAnalysis)
    career_pathway_options: CareerPathwayOptions = Field(default_factory=CareerPathwayOptions)
    development_plan: DevelopmentPlan = Field(default_factory=DevelopmentPlan)
    educational_programs: EducationalPrograms = Field(default_factory=EducationalPrograms)
    learning_roadmap: LearningRoadmap = Field(default_factory=LearningRoadmap)
    similar_roles: SimilarRoles = Field(default_factory=SimilarRoles)
    quick_tips: QuickTips = Field(default_factory=QuickTips)
    growth_trajectory: GrowthTrajectory = Field(default_factory=GrowthTrajectory)
    learning_path_roadmap: LearningPathRoadmap = Field(default_factory=LearningPathRoadmap)
    timestamp: Text = ""

    def section(self, key: str) -> ReportModel | None:
        """按章节key取章节内容"""
        field_name = SECTION_FIELDS.get(key)
        return getattr(self, field_name) if field_name else None

    def present_sections(self) -> list[str]:
        """有内容的章节key（目录顺序）"""
        return [key for key in SECTION_FIELDS if not self.section(key).is_empty()]


class ReportMetadata(BaseModel):
    """报告视图页眉信息"""
    target_role: str = ""
    professional_level: str = ""
    date_created: str = ""
    current_role: str = ""
    location: str = ""
