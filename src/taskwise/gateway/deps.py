"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 实例与当前用户

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from taskwise.core.errors import AuthenticationError
from taskwise.core.models import User
from taskwise.core.security import decode_access_token
from taskwise.core.store import StoreGroup

_bearer = HTTPBearer(auto_error=False)


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    store_group: StoreGroup = Depends(get_store_group),
) -> User:
    """解析 Bearer 令牌并加载调用方用户

    Raises:
        AuthenticationError: 缺少令牌、令牌无效或用户不存在
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied. No token provided.")

    user_id = decode_access_token(credentials.credentials)
    user = await store_group.user_store.get_user(user_id)
    if user is None:
        raise AuthenticationError("Invalid token. User not found.")

    # 供请求日志与后续业务日志关联调用方
    request.state.user_id = user.user_id
    structlog.contextvars.bind_contextvars(user_id=user.user_id)
    return user
