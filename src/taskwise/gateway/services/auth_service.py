"""AuthService -- 注册/登录/当前用户

密码以 bcrypt 哈希存储，登录成功后签发 JWT 访问令牌。
登录失败不区分"邮箱不存在"与"密码错误"。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskwise.core.errors import AuthenticationError, EmailAlreadyRegisteredError
from taskwise.core.models import LoginRequest, RegisterRequest, User, UserSummary
from taskwise.core.security import create_access_token, hash_password, verify_password
from taskwise.core.store import StoreGroup
from ulid import ULID

log = structlog.get_logger()


class AuthService:
    """身份业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def register(self, request: RegisterRequest) -> tuple[str, UserSummary]:
        """注册新用户

        Returns:
            (token, user)

        Raises:
            EmailAlreadyRegisteredError: 邮箱已被注册
        """
        existing = await self._stores.user_store.get_user_by_email(request.email)
        if existing is not None:
            raise EmailAlreadyRegisteredError()

        now = datetime.now(UTC)
        user = User(
            user_id=str(ULID()),
            name=request.name,
            email=request.email,
            password_hash=hash_password(request.password),
            created_at=now,
            updated_at=now,
        )
        try:
            async with self._stores.transaction():
                await self._stores.user_store.create_user(user)
        except aiosqlite.IntegrityError as e:
            # 并发注册同一邮箱时由唯一约束兜底
            raise EmailAlreadyRegisteredError() from e

        log.info("user_registered", user_id=user.user_id)
        return create_access_token(user.user_id), UserSummary.from_user(user)

    async def login(self, request: LoginRequest) -> tuple[str, UserSummary]:
        """校验凭证并签发令牌

        Raises:
            AuthenticationError: 邮箱或密码错误
        """
        user = await self._stores.user_store.get_user_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            log.info("login_failed")
            raise AuthenticationError("Invalid email or password")

        log.info("user_logged_in", user_id=user.user_id)
        return create_access_token(user.user_id), UserSummary.from_user(user)
