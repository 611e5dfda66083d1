"""User Domain Model

用户记录由身份存储（users 表）持有，本系统核心只读引用。
注册/登录入参在 HTTP 边界完成校验。
"""

from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

from ..config import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LENGTH,
    USER_NAME_MAX_LENGTH,
    USER_NAME_MIN_LENGTH,
)


class User(BaseModel):
    """用户记录（含密码哈希，不直接对外序列化）"""

    user_id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="显示名称")
    email: str = Field(description="邮箱，全局唯一，小写存储")
    password_hash: str = Field(description="bcrypt 密码哈希")
    avatar: str | None = Field(default=None, description="头像 URL")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")


class UserSummary(BaseModel):
    """用户展示信息 -- populate 时替换外键 ID"""

    user_id: str
    name: str
    email: str
    avatar: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
        )


def normalize_email(value: object) -> str:
    """校验邮箱格式并统一为小写

    Raises:
        ValueError: 邮箱格式非法
    """
    if not isinstance(value, str):
        raise ValueError("Invalid email address")
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError("Invalid email address") from e
    return result.normalized.lower()


class RegisterRequest(BaseModel):
    """注册请求体"""

    name: str = Field(description="显示名称，2-50 字符")
    email: str = Field(description="登录邮箱")
    password: str = Field(description="明文密码，至少 6 字符")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: object) -> str:
        if not isinstance(value, str):
            raise ValueError("Name must be 2-50 characters")
        value = value.strip()
        if not USER_NAME_MIN_LENGTH <= len(value) <= USER_NAME_MAX_LENGTH:
            raise ValueError("Name must be 2-50 characters")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: object) -> str:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 6 characters")
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError("Password cannot exceed 72 bytes")
        return value


class LoginRequest(BaseModel):
    """登录请求体"""

    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: object) -> str:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value
