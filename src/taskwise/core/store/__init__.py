"""TaskWise Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from .populate import populate_project, populate_projects, populate_task, populate_tasks
from .project_store import SqliteProjectStore
from .protocols import ProjectStore, TaskStore, UserStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .transaction import delete_project_cascade
from .user_store import SqliteUserStore

MEMORY_DB = ":memory:"


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self._write_lock = asyncio.Lock()
        self.user_store: UserStore = SqliteUserStore(conn)
        self.project_store: ProjectStore = SqliteProjectStore(conn)
        self.task_store: TaskStore = SqliteTaskStore(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """写事务：块内写入成功则提交，异常则回滚

        共享连接上的写事务串行执行，块内不可嵌套调用 transaction()。
        """
        async with self._write_lock:
            try:
                yield
            except BaseException:
                # 含请求取消
                await self.conn.rollback()
                raise
            await self.conn.commit()

    async def close(self) -> None:
        """关闭数据库连接"""
        await self.conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径，":memory:" 表示内存数据库

    Returns:
        StoreGroup 实例
    """
    if db_path != MEMORY_DB:
        # 确保数据库目录存在
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "MEMORY_DB",
    "StoreGroup",
    "create_store_group",
    "SqliteUserStore",
    "SqliteProjectStore",
    "SqliteTaskStore",
    "UserStore",
    "ProjectStore",
    "TaskStore",
    "init_db",
    "delete_project_cascade",
    "populate_project",
    "populate_projects",
    "populate_task",
    "populate_tasks",
]
