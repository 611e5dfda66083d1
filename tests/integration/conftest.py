"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskwise.core.store import create_store_group


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """集成测试用 FastAPI app"""
    monkeypatch.setenv("TASKWISE_DB_PATH", str(tmp_path / "test.db"))

    from taskwise.gateway.main import create_app

    app = create_app()
    store_group = await create_store_group(str(tmp_path / "test.db"))
    app.state.store_group = store_group

    yield app

    await store_group.close()


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def signup(client: AsyncClient):
    """注册用户，返回 (headers, user_id)"""

    async def _signup(name: str) -> tuple[dict[str, str], str]:
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
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]["user_id"]

    return _signup
