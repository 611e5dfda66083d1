"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、JWT 签发参数、bcrypt 成本因子等可配置项。
取值函数在调用时读取环境变量，便于测试中覆盖。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKWISE_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径（支持 ":memory:"）"""
    return os.environ.get(
        "TASKWISE_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskwise.db"),
    )


def get_jwt_secret() -> str:
    """获取 JWT 签名密钥"""
    return os.environ.get("TASKWISE_JWT_SECRET", "change-me-in-production")


def get_jwt_algorithm() -> str:
    """获取 JWT 签名算法"""
    return os.environ.get("TASKWISE_JWT_ALGORITHM", "HS256")


def get_token_expire_days() -> int:
    """获取访问令牌有效期（天）"""
    return int(os.environ.get("TASKWISE_TOKEN_EXPIRE_DAYS", "7"))


def get_bcrypt_rounds() -> int:
    """获取 bcrypt 成本因子（测试中可调低到 4）"""
    return int(os.environ.get("TASKWISE_BCRYPT_ROUNDS", "12"))


def get_log_format() -> str:
    """获取日志渲染模式（dev 或 json）"""
    return os.environ.get("TASKWISE_LOG_FORMAT", "dev").lower()


def get_log_level() -> str:
    """获取根 logger 级别"""
    return os.environ.get("TASKWISE_LOG_LEVEL", "INFO").upper()


def logfire_enabled() -> bool:
    """是否启用 Logfire APM"""
    return os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() == "true"


# 新建项目默认颜色
DEFAULT_PROJECT_COLOR: str = "#3B82F6"

# 各字段长度约束
PROJECT_NAME_MIN_LENGTH: int = 2
PROJECT_NAME_MAX_LENGTH: int = 100
PROJECT_DESCRIPTION_MAX_LENGTH: int = 500
TASK_TITLE_MIN_LENGTH: int = 3
TASK_TITLE_MAX_LENGTH: int = 200
TASK_DESCRIPTION_MAX_LENGTH: int = 1000
USER_NAME_MIN_LENGTH: int = 2
USER_NAME_MAX_LENGTH: int = 50
PASSWORD_MIN_LENGTH: int = 6
# bcrypt 只处理前 72 字节
PASSWORD_MAX_BYTES: int = 72
