"""
导出阶段定义

职责：
1. 定义各阶段名称与进度区间
2. 章节截图阶段按章节序号插值进度

测试要点：
- test_stage_ranges_contiguous: 阶段进度首尾相接
- test_section_progress_interpolation: 章节进度插值
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """导出阶段枚举"""
    PREPARE = "PREPARE"
    TITLE_PAGE = "TITLE_PAGE"
    CAPTURE_SECTIONS = "CAPTURE_SECTIONS"
    SAVE = "SAVE"  # 页码落页 + 写文件


@dataclass(frozen=True)
class ExportStage:
    """导出阶段"""
    name: str
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点

    def interpolate(self, done: int, total: int) -> int:
        """阶段内进度：done/total 映射到 [start, end]"""
        if total <= 0:
            return self.progress_end
        span = self.progress_end - self.progress_start
        return self.progress_start + span * min(done, total) // total


EXPORT_STAGES: dict[StageEnum, ExportStage] = {
    StageEnum.PREPARE: ExportStage(StageEnum.PREPARE.value, 0, 5),
    StageEnum.TITLE_PAGE: ExportStage(StageEnum.TITLE_PAGE.value, 5, 10),
    StageEnum.CAPTURE_SECTIONS: ExportStage(StageEnum.CAPTURE_SECTIONS.value, 10, 90),
    StageEnum.SAVE: ExportStage(StageEnum.SAVE.value, 90, 100),
}
