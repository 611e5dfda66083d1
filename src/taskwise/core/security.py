"""凭证签发与校验

bcrypt 密码哈希 + PyJWT 访问令牌。令牌 sub 为 user_id。
"""

from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from .config import (
    get_bcrypt_rounds,
    get_jwt_algorithm,
    get_jwt_secret,
    get_token_expire_days,
)
from .errors import AuthenticationError


def hash_password(password: str) -> str:
    """生成 bcrypt 哈希"""
    salt = bcrypt.gensalt(rounds=get_bcrypt_rounds())
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """校验明文密码与哈希是否匹配"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # 哈希格式损坏或密码超长
        return False


def create_access_token(user_id: str, expires_days: int | None = None) -> str:
    """签发访问令牌

    Args:
        user_id: 令牌主体
        expires_days: 有效期（天），默认取配置
    """
    now = datetime.now(UTC)
    days = expires_days if expires_days is not None else get_token_expire_days()
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(days=days),
    }
    return jwt.encode(payload, get_jwt_secret(), algorithm=get_jwt_algorithm())


def decode_access_token(token: str) -> str:
    """校验访问令牌并返回 user_id

    Raises:
        AuthenticationError: 令牌过期、签名错误或缺少 sub
    """
    try:
        payload = jwt.decode(token, get_jwt_secret(), algorithms=[get_jwt_algorithm()])
    except jwt.InvalidTokenError as e:
        # 含 ExpiredSignatureError
        raise AuthenticationError("Invalid or expired token.") from e

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise AuthenticationError("Invalid or expired token.")
    return user_id
