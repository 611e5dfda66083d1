"""枚举定义

包含 TaskStatus、TaskPriority 两个封闭取值集合，
以及成员标识类型 IdentifierKind、访问动作 ProjectAction / TaskAction。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态

    三个取值之间不设流转约束：有写权限的用户可将状态设置为任意值
    （包括 completed -> todo）。
    """

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IdentifierKind(StrEnum):
    """添加成员时的用户标识类型"""

    EMAIL = "email"
    USER_ID = "user_id"


class ProjectAction(StrEnum):
    """项目访问动作"""

    READ = "read"
    WRITE = "write"


class TaskAction(StrEnum):
    """任务访问动作"""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
