"""
任务管理器 - 导出任务创建与忙碌标记

职责：
1. 创建任务并分配ID
2. 忙碌标记：已有任务运行时拒绝新的导出请求
3. 保留最近任务便于查询

测试要点：
- test_begin_rejects_when_busy: 运行中再次导出被拒绝
- test_end_clears_busy: 结束后可再次导出
- test_history_bounded: 只保留最近 max_history 个任务
"""

from __future__ import annotations

import uuid
from collections import OrderedDict

from ..interfaces import ExportBusyError
from ..models import ExportJob

# 只保留最近的任务，运行中的任务总是最新一个
DEFAULT_MAX_HISTORY = 20


class JobManager:
    """导出任务管理器（单进程内存态，不持久化）"""

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        self.max_history = max(1, max_history)
        self._active: ExportJob | None = None
        self._jobs: OrderedDict[str, ExportJob] = OrderedDict()

    @property
    def busy(self) -> bool:
        return self._active is not None

    @property
    def active_job(self) -> ExportJob | None:
        return self._active

    def begin(self, user_name: str) -> ExportJob:
        """创建任务并置忙碌标记"""
        if self._active is not None:
            raise ExportBusyError(f"已有导出任务在运行: {self._active.job_id}")
        job = ExportJob(job_id=str(uuid.uuid4()), user_name=user_name)
        self._jobs[job.job_id] = job
        while len(self._jobs) > self.max_history:
            self._jobs.popitem(last=False)
        self._active = job
        return job

    def end(self, job: ExportJob) -> None:
        """清除忙碌标记（成功或失败都要调用）"""
        if self._active is not None and self._active.job_id == job.job_id:
            self._active = None

    def get_job(self, job_id: str) -> ExportJob | None:
        return self._jobs.get(job_id)

    def list_jobs(self) -> list[ExportJob]:
        """最近任务（按创建顺序）"""
        return list(self._jobs.values())
