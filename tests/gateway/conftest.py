"""gateway 测试配置 -- FastAPI app + httpx AsyncClient + 注册用户工厂"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskwise.core.store import create_store_group


@pytest_asyncio.fixture
async def app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """创建测试用 FastAPI app 实例（手动初始化 store，绕过 lifespan）"""
    db_path = tmp_path / "sqlite" / "test.db"
    monkeypatch.setenv("TASKWISE_DB_PATH", str(db_path))

    from taskwise.gateway.main import create_app

    application = create_app()
    store_group = await create_store_group(str(db_path))
    application.state.store_group = store_group

    yield application

    await store_group.close()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def register(client: AsyncClient):
    """注册用户并返回 (headers, user)"""

    async def _register(name: str) -> tuple[dict[str, str], dict]:
        resp = await client.post(
            "/api/auth/register",
            json={
                "name": name,
                "email": f"{name.lower()}@taskwise.dev",
                "password": "secret1",
            },
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _register
