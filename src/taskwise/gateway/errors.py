"""异常处理器 -- 将核心类型化异常转换为统一错误响应

响应格式：{"error": {"code": ..., "message": ..., "details"?: [...]}}
"""

import aiosqlite
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse
from taskwise.core.errors import (
    AlreadyMemberError,
    AuthenticationError,
    CannotRemoveOwnerError,
    EmailAlreadyRegisteredError,
    NotFoundError,
    PermissionDeniedError,
    TaskWiseError,
    UpstreamError,
)

log = structlog.get_logger()

# 异常类型 -> HTTP 状态码（按 MRO 匹配，子类优先）
STATUS_CODES: dict[type[TaskWiseError], int] = {
    NotFoundError: 404,
    PermissionDeniedError: 403,
    AlreadyMemberError: 400,
    CannotRemoveOwnerError: 400,
    EmailAlreadyRegisteredError: 400,
    AuthenticationError: 401,
    UpstreamError: 500,
}

_VALUE_ERROR_PREFIX = "Value error, "


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: list[dict] | None = None,
) -> JSONResponse:
    """构造统一错误响应"""
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


def status_code_for(exc: TaskWiseError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 500


def _field_message(err: dict) -> tuple[str, str]:
    """从 pydantic 错误项提取 (字段名, 可读描述)"""
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc) or "body"
    if err.get("type") == "missing":
        return field, f"{field} is required"
    message = str(err.get("msg", "Invalid value"))
    return field, message.removeprefix(_VALUE_ERROR_PREFIX)


async def handle_taskwise_error(request: Request, exc: TaskWiseError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        log.error(
            "request_failed",
            code=exc.code,
            error_type=type(exc).__name__,
        )
        return error_response(status_code, exc.code, "Internal server error")
    if isinstance(exc, PermissionDeniedError):
        log.info("permission_denied", reason=exc.message)
    return error_response(status_code, exc.code, exc.message)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = []
    for err in exc.errors():
        field, message = _field_message(err)
        details.append({"field": field, "message": message})
    message = ", ".join(d["message"] for d in details) or "Invalid request"
    return error_response(400, "VALIDATION_ERROR", message, details)


async def handle_storage_error(request: Request, exc: aiosqlite.Error) -> JSONResponse:
    log.error("storage_error", error_type=type(exc).__name__)
    return error_response(500, UpstreamError.code, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """注册全部异常处理器"""
    app.add_exception_handler(TaskWiseError, handle_taskwise_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(aiosqlite.Error, handle_storage_error)
