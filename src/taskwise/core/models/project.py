"""Project Domain Model

项目有且仅有一个 owner，owner 在创建后不可变更；
member_ids 不含重复项，owner 无论是否在 member_ids 中都拥有完整权限。
"""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from ..config import (
    DEFAULT_PROJECT_COLOR,
    PROJECT_DESCRIPTION_MAX_LENGTH,
    PROJECT_NAME_MAX_LENGTH,
    PROJECT_NAME_MIN_LENGTH,
)
from .enums import IdentifierKind
from .user import UserSummary

_COLOR_PATTERN = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)


class Project(BaseModel):
    """Project 数据模型"""

    project_id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="项目名称")
    description: str = Field(default="", description="项目描述")
    owner_id: str = Field(description="owner 用户 ID")
    member_ids: list[str] = Field(default_factory=list, description="成员用户 ID 列表")
    color: str = Field(default=DEFAULT_PROJECT_COLOR, description="显示颜色")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    def is_owner(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def has_member(self, user_id: str) -> bool:
        return user_id in self.member_ids


def _check_name(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError("Name must be 2-100 characters")
    value = value.strip()
    if not PROJECT_NAME_MIN_LENGTH <= len(value) <= PROJECT_NAME_MAX_LENGTH:
        raise ValueError("Name must be 2-100 characters")
    return value


def _check_description(value: object) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("Description must be a string")
    if len(value) > PROJECT_DESCRIPTION_MAX_LENGTH:
        raise ValueError("Description cannot exceed 500 characters")
    return value.strip()


def _check_color(value: object) -> str:
    if not isinstance(value, str) or not _COLOR_PATTERN.match(value):
        raise ValueError("Invalid color format")
    return value


class _ProjectInput(BaseModel):
    """项目入参公共校验"""

    @field_validator("name", mode="before", check_fields=False)
    @classmethod
    def _validate_name(cls, value: object) -> str:
        return _check_name(value)

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def _validate_description(cls, value: object) -> str:
        return _check_description(value)

    @field_validator("color", mode="before", check_fields=False)
    @classmethod
    def _validate_color(cls, value: object) -> str:
        return _check_color(value)


class ProjectCreate(_ProjectInput):
    """创建项目入参"""

    name: str
    description: str = ""
    color: str = DEFAULT_PROJECT_COLOR


class ProjectUpdate(_ProjectInput):
    """更新项目入参 -- 所有字段可选，仅合并显式提供的字段

    owner_id / member_ids 不在此模型中，owner 不可转移，成员只能通过成员接口变更。
    """

    name: str | None = None
    description: str | None = None
    color: str | None = None

    def changes(self) -> dict:
        """返回调用方显式提供的字段"""
        return self.model_dump(exclude_unset=True)


class MemberIdentifier(BaseModel):
    """添加成员时的用户标识：邮箱或用户 ID 二选一"""

    kind: IdentifierKind
    value: str

    @classmethod
    def parse(cls, raw: str) -> "MemberIdentifier":
        """包含 "@" 视为邮箱，否则视为用户 ID"""
        raw = raw.strip()
        if "@" in raw:
            return cls(kind=IdentifierKind.EMAIL, value=raw.lower())
        return cls(kind=IdentifierKind.USER_ID, value=raw)


class ProjectSummary(BaseModel):
    """项目展示信息 -- 任务 populate 时使用"""

    project_id: str
    name: str
    color: str

    @classmethod
    def from_project(cls, project: Project) -> "ProjectSummary":
        return cls(
            project_id=project.project_id,
            name=project.name,
            color=project.color,
        )


class ProjectView(BaseModel):
    """populate 后的项目视图"""

    project_id: str
    name: str
    description: str
    color: str
    owner_id: str
    owner: UserSummary | None = None
    member_ids: list[str]
    members: list[UserSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
