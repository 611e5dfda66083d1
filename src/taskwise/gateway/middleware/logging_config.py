"""TaskWise 日志配置

structlog 事件与第三方库的标准 logging（uvicorn、aiosqlite）共用同一条处理器链，
由 ProcessorFormatter 统一渲染。凭证类字段在渲染前替换为占位符。
"""

import logging

import structlog
from fastapi import FastAPI
from structlog.types import EventDict, Processor, WrappedLogger
from taskwise.core.config import get_log_format, get_log_level, logfire_enabled

REDACTED = "***"

# 事件字段名命中即脱敏
REDACTED_KEYS = frozenset(
    {"password", "password_hash", "token", "access_token", "authorization"}
)

# 请求日志由 RequestContextMiddleware 记录
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "aiosqlite": logging.WARNING,
}


def redact_credentials(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """将密码、令牌等字段替换为占位符"""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def shared_processors() -> list[Processor]:
    """structlog 与标准 logging 共用的前置处理器"""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging() -> None:
    """初始化 structlog 与根 logger

    TASKWISE_LOG_FORMAT 为 "json" 时输出单行 JSON，否则输出可读的 console 格式。
    重复调用会替换根 logger 的 handler，不会叠加输出。
    """
    pre_chain = shared_processors()
    renderer: Processor
    if get_log_format() == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, get_log_level(), logging.INFO))

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def setup_logfire(app: FastAPI) -> bool:
    """按 LOGFIRE_SEND_TO_LOGFIRE 启用 Logfire，对请求与 SQLite 调用打点

    需安装 observability 额外依赖。初始化失败时记录告警并继续使用本地日志。

    Returns:
        是否已启用
    """
    if not logfire_enabled():
        return False
    try:
        import logfire

        logfire.configure(service_name="taskwise")
        logfire.instrument_fastapi(app)
        logfire.instrument_sqlite3()
    except Exception as e:
        structlog.get_logger().warning(
            "logfire_init_failed",
            error_type=type(e).__name__,
        )
        return False
    return True
