"""Dashboard 统计模型"""

from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import BaseModel

from .enums import TaskPriority, TaskStatus
from .task import Task


class DashboardStats(BaseModel):
    """调用方可见任务集合上的计数"""

    total: int = 0
    todo: int = 0
    in_progress: int = 0
    completed: int = 0
    high_priority: int = 0
    overdue: int = 0


def compute_dashboard_stats(
    tasks: Iterable[Task],
    now: datetime | None = None,
) -> DashboardStats:
    """统计任务计数

    Args:
        tasks: 调用方可见的任务（创建者或被分配者）
        now: 判断逾期的基准时间，默认当前 UTC 时间
    """
    now = now or datetime.now(UTC)
    stats = DashboardStats()
    for task in tasks:
        stats.total += 1
        if task.status == TaskStatus.TODO:
            stats.todo += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            stats.in_progress += 1
        elif task.status == TaskStatus.COMPLETED:
            stats.completed += 1
        if task.priority == TaskPriority.HIGH:
            stats.high_priority += 1
        if task.is_overdue(now):
            stats.overdue += 1
    return stats
