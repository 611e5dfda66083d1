"""身份路由

POST /api/auth/register: 注册并返回令牌。
POST /api/auth/login: 登录并返回令牌。
GET /api/auth/me: 当前用户信息。
"""

from fastapi import APIRouter, Depends
from taskwise.core.models import LoginRequest, RegisterRequest, User, UserSummary

from ..deps import get_current_user, get_store_group
from ..services.auth_service import AuthService

router = APIRouter(prefix="/api/auth")


@router.post("/register", status_code=201)
async def register(
    request: RegisterRequest,
    store_group=Depends(get_store_group),
):
    service = AuthService(store_group)
    token, user = await service.register(request)
    return {"token": token, "user": user}


@router.post("/login")
async def login(
    request: LoginRequest,
    store_group=Depends(get_store_group),
):
    service = AuthService(store_group)
    token, user = await service.login(request)
    return {"token": token, "user": user}


@router.get("/me")
async def me(caller: User = Depends(get_current_user)):
    return {"user": UserSummary.from_user(caller)}
