"""
报告规整器 - 把AI返回的松散JSON规整为11章节严格结构

职责：
1. 接受dict或JSON文本（容忍 ```json 代码块包裹）
2. 顶层备用键映射（gapAnalysis / pathwayOptions 等）
3. 逐章节校验：单章节无法规整时记录告警并使用默认值，不影响其他章节

测试要点：
- test_structure_accepts_fenced_json: 代码块包裹的JSON可解析
- test_structure_alias_keys: 备用键映射到标准章节
- test_structure_invalid_section_falls_back: 非法章节回退默认值
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from ..interfaces import SkillgenixError
from ..models import SECTION_FIELDS, CareerAnalysisReport

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)

# 顶层备用键 -> 标准键
TOP_LEVEL_ALIASES: dict[str, str] = {
    "gapAnalysis": "skillGapAnalysis",
    "pathwayOptions": "careerPathwayOptions",
    "skillsMapping": "skillMapping",
    "learningPath": "learningPathRoadmap",
}


class ReportNormalizer:
    """报告规整器"""

    def __init__(self):
        # 最近一次规整中回退为默认值的章节key
        self.fallback_sections: list[str] = []

    def structure(self, raw: dict[str, Any] | str) -> CareerAnalysisReport:
        """规整报告"""
        data = self._load(raw)
        for alt, canonical in TOP_LEVEL_ALIASES.items():
            if alt in data and canonical not in data:
                data[canonical] = data.pop(alt)

        self.fallback_sections = []
        sections: dict[str, Any] = {}
        for key, field_name in SECTION_FIELDS.items():
            value = data.get(to_camel(field_name), data.get(field_name))
            if value is None:
                continue
            model_cls = CareerAnalysisReport.model_fields[field_name].annotation
            try:
                sections[field_name] = model_cls.model_validate(value)
            except ValidationError as e:
                logger.warning(f"章节无法规整，使用默认值: {key} ({e.error_count()} 处错误)")
                self.fallback_sections.append(key)

        timestamp = data.get("timestamp")
        if timestamp is not None:
            sections["timestamp"] = timestamp
        return CareerAnalysisReport(**sections)

    @staticmethod
    def _load(raw: dict[str, Any] | str) -> dict[str, Any]:
        if isinstance(raw, dict):
            return dict(raw)
        text = raw.strip()
        m = _FENCE_RE.match(text)
        if m:
            text = m.group(1)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SkillgenixError(f"报告JSON无法解析: {e}") from e
        if not isinstance(data, dict):
            raise SkillgenixError(f"报告JSON顶层必须是对象，实际为: {type(data).__name__}")
        return data
