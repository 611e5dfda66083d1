"""全局 pytest 配置 -- 测试环境变量 + 临时 SQLite 数据库 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from taskwise.core.store import StoreGroup, create_store_group


@pytest.fixture(autouse=True)
def taskwise_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """测试环境：低 bcrypt 成本、固定 JWT 密钥、关闭 Logfire"""
    monkeypatch.setenv("TASKWISE_BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("TASKWISE_JWT_SECRET", "taskwise-test-secret")
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """提供已初始化的临时 StoreGroup"""
    stores = await create_store_group(str(tmp_db_path))
    yield stores
    await stores.close()
