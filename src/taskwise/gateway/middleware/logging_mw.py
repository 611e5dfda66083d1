"""RequestContextMiddleware

每个请求绑定到 structlog contextvars 的字段：
- request_id：沿用上游合法的 X-Request-ID，否则生成 ULID，并在响应头中返回
- method / path
- resource / resource_id：从 /api/projects/{id}、/api/tasks/{id} 路径中解析

请求结束时记录状态码、耗时与调用方 user_id（由 get_current_user 写入 request.state）。
"""

import re
import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# ULID 长度
_RESOURCE_ID_LENGTH = 26

_RESOURCE_SEGMENTS = {
    "projects": "project",
    "tasks": "task",
}


def extract_resource(path: str) -> tuple[str, str] | None:
    """从请求路径中提取 (resource, resource_id)，无资源 ID 时返回 None"""
    parts = [p for p in path.split("/") if p]
    for i, part in enumerate(parts):
        resource = _RESOURCE_SEGMENTS.get(part)
        if resource is None or i + 1 >= len(parts):
            continue
        candidate = parts[i + 1]
        # 排除 /api/tasks/stats 等子路由
        if len(candidate) == _RESOURCE_ID_LENGTH:
            return resource, candidate
    return None


def resolve_request_id(incoming: str | None) -> str:
    """上游 request_id 合法则沿用，否则生成新的 ULID"""
    if incoming and _REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return str(ULID())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """请求级日志上下文中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        # 先建立 state，路由内写入的 user_id 与此处共享
        request.state.user_id = None

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        found = extract_resource(request.url.path)
        if found:
            resource, resource_id = found
            structlog.contextvars.bind_contextvars(
                resource=resource,
                resource_id=resource_id,
            )

        log = structlog.get_logger()
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
            user_id=request.state.user_id,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
