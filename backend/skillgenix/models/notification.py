"""
用户通知模型 - 导出过程中面向用户的提示
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class NotificationLevel(str, Enum):
    INFO = "info"
    PROGRESS = "progress"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """单条通知"""
    level: NotificationLevel
    title: str
    description: str = ""
    section_key: str | None = None
    section_index: int | None = None  # 1起始
    section_total: int | None = None
    created_at: datetime = Field(default_factory=datetime.now)
