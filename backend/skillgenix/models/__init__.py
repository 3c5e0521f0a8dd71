"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- CareerAnalysisReport: 规整后的11章节职业分析报告
- ReportDocument/ReportSection: 导出章节顺序
- CapturedSection/PageCursor/PlacedBlock: 截图与排版中间态
- ExportJob: 导出任务状态与生命周期
- Notification: 面向用户的进度/结果通知
"""

from .export import (
    CapturedSection,
    ExportResult,
    PageCursor,
    PlacedBlock,
    ReportDocument,
    ReportSection,
    ResolvedSection,
)
from .job import ExportJob, JobArtifacts, JobProgress, JobStatus
from .notification import Notification, NotificationLevel
from .report import SECTION_FIELDS, CareerAnalysisReport, ReportMetadata

__all__ = [
    "CareerAnalysisReport",
    "ReportMetadata",
    "SECTION_FIELDS",
    "ReportDocument",
    "ReportSection",
    "ResolvedSection",
    "CapturedSection",
    "PageCursor",
    "PlacedBlock",
    "ExportResult",
    "ExportJob",
    "JobArtifacts",
    "JobProgress",
    "JobStatus",
    "Notification",
    "NotificationLevel",
]
