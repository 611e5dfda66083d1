"""UserStore SQLite 实现 -- 身份存储

仅提供按 ID / 邮箱查询与注册写入，不包含业务校验。
"""

from datetime import datetime

import aiosqlite

from ..models.user import User


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_user(self, user: User) -> None:
        """创建用户记录（email 唯一约束由数据库保证）"""
        await self._conn.execute(
            """
            INSERT INTO users (user_id, name, email, password_hash, avatar,
                               created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user.user_id,
                user.name,
                user.email,
                user.password_hash,
                user.avatar,
                user.created_at.isoformat(),
                user.updated_at.isoformat(),
            ),
        )

    async def get_user(self, user_id: str) -> User | None:
        """根据 user_id 查询用户"""
        cursor = await self._conn.execute(
            "SELECT * FROM users WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def get_user_by_email(self, email: str) -> User | None:
        """根据邮箱查询用户（邮箱统一小写存储）"""
        cursor = await self._conn.execute(
            "SELECT * FROM users WHERE email = ?",
            (email.lower(),),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def get_users(self, user_ids: list[str]) -> dict[str, User]:
        """批量查询用户，返回 user_id -> User 映射（不存在的 ID 不出现在结果中）"""
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return {}
        placeholders = ", ".join("?" for _ in unique_ids)
        cursor = await self._conn.execute(
            f"SELECT * FROM users WHERE user_id IN ({placeholders})",
            unique_ids,
        )
        rows = await cursor.fetchall()
        return {row["user_id"]: self._row_to_user(row) for row in rows}

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        """将数据库行转换为 User 模型"""
        return User(
            user_id=row["user_id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            avatar=row["avatar"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
