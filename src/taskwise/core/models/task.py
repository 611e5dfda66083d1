"""Task Domain Model

created_by 在创建时取自调用方身份，此后不可修改。
任务可以不属于任何项目（个人任务），也可以未分配。
"""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field, field_validator

from ..config import (
    TASK_DESCRIPTION_MAX_LENGTH,
    TASK_TITLE_MAX_LENGTH,
    TASK_TITLE_MIN_LENGTH,
)
from .enums import TaskPriority, TaskStatus
from .project import ProjectSummary
from .user import UserSummary


class Task(BaseModel):
    """Task 数据模型"""

    task_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    project_id: str | None = Field(default=None, description="所属项目 ID")
    assigned_to: str | None = Field(default=None, description="被分配用户 ID")
    created_by: str = Field(description="创建者用户 ID")
    due_date: datetime | None = Field(default=None, description="截止时间（UTC）")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    def is_overdue(self, now: datetime) -> bool:
        """截止时间已过且未完成"""
        return (
            self.due_date is not None
            and self.due_date < now
            and self.status != TaskStatus.COMPLETED
        )


def parse_due_date(value: object) -> datetime | None:
    """解析 ISO-8601 截止时间，无时区信息时按 UTC 处理

    Raises:
        ValueError: 无法解析为 ISO-8601 日期/时间
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValueError("Invalid date format") from e
    else:
        raise ValueError("Invalid date format")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _check_title(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError("Title must be 3-200 characters")
    value = value.strip()
    if not TASK_TITLE_MIN_LENGTH <= len(value) <= TASK_TITLE_MAX_LENGTH:
        raise ValueError("Title must be 3-200 characters")
    return value


def _check_description(value: object) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("Description must be a string")
    if len(value) > TASK_DESCRIPTION_MAX_LENGTH:
        raise ValueError("Description cannot exceed 1000 characters")
    return value.strip()


def _check_enum(value: object, enum_cls: type, message: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValueError(message) from e


def _check_reference(value: object) -> str | None:
    """空字符串视为清空引用"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Reference must be an id string")
    value = value.strip()
    return value or None


class _TaskInput(BaseModel):
    """任务入参公共校验"""

    @field_validator("title", mode="before", check_fields=False)
    @classmethod
    def _validate_title(cls, value: object) -> str:
        return _check_title(value)

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def _validate_description(cls, value: object) -> str:
        return _check_description(value)

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def _validate_status(cls, value: object) -> TaskStatus:
        return _check_enum(value, TaskStatus, "Invalid status")

    @field_validator("priority", mode="before", check_fields=False)
    @classmethod
    def _validate_priority(cls, value: object) -> TaskPriority:
        return _check_enum(value, TaskPriority, "Invalid priority")

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def _validate_due_date(cls, value: object) -> datetime | None:
        return parse_due_date(value)

    @field_validator("project_id", "assigned_to", mode="before", check_fields=False)
    @classmethod
    def _validate_reference(cls, value: object) -> str | None:
        return _check_reference(value)


class TaskCreate(_TaskInput):
    """创建任务入参"""

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    project_id: str | None = None
    assigned_to: str | None = None


class TaskUpdate(_TaskInput):
    """更新任务入参 -- 所有字段可选

    due_date / project_id / assigned_to 可显式传 null 清空。
    created_by 不在此模型中，不可修改。
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    project_id: str | None = None
    assigned_to: str | None = None

    def changes(self) -> dict:
        """返回调用方显式提供的字段"""
        return self.model_dump(exclude_unset=True)


class TaskFilters(BaseModel):
    """任务列表筛选条件 -- 只会收窄可见集合"""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    project_id: str | None = None
    assigned_to: str | None = None


class TaskView(BaseModel):
    """populate 后的任务视图"""

    task_id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    project_id: str | None
    project: ProjectSummary | None = None
    assigned_to: str | None
    assignee: UserSummary | None = None
    created_by: str
    creator: UserSummary | None = None
    created_at: datetime
    updated_at: datetime
