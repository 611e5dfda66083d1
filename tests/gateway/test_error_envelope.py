"""存储故障 -> 统一 500 错误响应"""

import aiosqlite
from httpx import AsyncClient


class TestStorageFailures:
    """存储调用失败时返回通用服务端错误"""

    async def test_raw_storage_error(self, app, client: AsyncClient, register, monkeypatch):
        headers, _ = await register("Alice")

        async def failing_list(query):
            raise aiosqlite.OperationalError("database is locked")

        monkeypatch.setattr(app.state.store_group.task_store, "list_tasks", failing_list)

        resp = await client.get("/api/tasks", headers=headers)
        assert resp.status_code == 500
        assert resp.json() == {
            "error": {"code": "UPSTREAM_FAILURE", "message": "Internal server error"}
        }

    async def test_cascade_failure_keeps_tasks(
        self, app, client: AsyncClient, register, monkeypatch
    ):
        headers, _ = await register("Alice")
        project = (
            await client.post("/api/projects", json={"name": "Launch"}, headers=headers)
        ).json()["project"]
        await client.post(
            "/api/tasks",
            json={"title": "Keep me", "project_id": project["project_id"]},
            headers=headers,
        )

        async def failing_delete(project_id: str) -> int:
            raise aiosqlite.OperationalError("database is locked")

        project_store = app.state.store_group.project_store
        original_delete = project_store.delete_project
        monkeypatch.setattr(project_store, "delete_project", failing_delete)

        resp = await client.delete(f"/api/projects/{project['project_id']}", headers=headers)
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "UPSTREAM_FAILURE"

        monkeypatch.setattr(project_store, "delete_project", original_delete)
        resp = await client.get(f"/api/projects/{project['project_id']}", headers=headers)
        assert resp.status_code == 200
        assert [t["title"] for t in resp.json()["tasks"]] == ["Keep me"]
