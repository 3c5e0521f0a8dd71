"""
流水线模块 - 导出任务编排

子模块：
- executor: 导出执行器
- job_manager: 任务创建与忙碌标记
- stages: 阶段定义与进度区间
- notifier: 通知通道实现
"""

from .executor import ExportExecutor
from .job_manager import JobManager
from .notifier import LoggingNotifier, RecordingNotifier
from .stages import EXPORT_STAGES, ExportStage, StageEnum

__all__ = [
    "ExportExecutor",
    "JobManager",
    "LoggingNotifier",
    "RecordingNotifier",
    "StageEnum",
    "ExportStage",
    "EXPORT_STAGES",
]
