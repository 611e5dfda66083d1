"""TaskWise Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    IdentifierKind,
    ProjectAction,
    TaskAction,
    TaskPriority,
    TaskStatus,
)
from .project import (
    MemberIdentifier,
    Project,
    ProjectCreate,
    ProjectSummary,
    ProjectUpdate,
    ProjectView,
)
from .stats import DashboardStats, compute_dashboard_stats
from .task import Task, TaskCreate, TaskFilters, TaskUpdate, TaskView, parse_due_date
from .user import LoginRequest, RegisterRequest, User, UserSummary, normalize_email

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "IdentifierKind",
    "ProjectAction",
    "TaskAction",
    # User
    "User",
    "UserSummary",
    "RegisterRequest",
    "LoginRequest",
    "normalize_email",
    # Project
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectSummary",
    "ProjectView",
    "MemberIdentifier",
    # Task
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "TaskView",
    "parse_due_date",
    # Stats
    "DashboardStats",
    "compute_dashboard_stats",
]
