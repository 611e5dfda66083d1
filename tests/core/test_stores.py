"""Store 层单元测试

测试内容：
1. 用户存储：邮箱唯一、大小写不敏感查询
2. 项目存储：owner/成员可见性、倒序
3. 任务存储：可见范围 AND 筛选条件
4. populate：悬空引用
"""

from datetime import UTC, datetime, timedelta

import aiosqlite
import pytest
from taskwise.core.access import task_query_for
from taskwise.core.models import Project, TaskFilters, TaskPriority, TaskStatus, User
from taskwise.core.store import (
    ProjectStore,
    SqliteProjectStore,
    SqliteTaskStore,
    SqliteUserStore,
    TaskStore,
    UserStore,
    populate_project,
    populate_task,
)
from taskwise.core.store.sqlite_init import verify_wal_mode


class TestUserStore:
    """用户存储"""

    async def test_get_by_email_is_case_insensitive(self, store_group, users):
        found = await store_group.user_store.get_user_by_email("ALICE@taskwise.dev")
        assert found is not None
        assert found.user_id == users["alice"].user_id

    async def test_email_unique(self, store_group, users):
        now = datetime.now(UTC)
        duplicate = User(
            user_id="01JDUPLICATE00000000000001",
            name="Alice Two",
            email="alice@taskwise.dev",
            password_hash="not-a-real-hash",
            created_at=now,
            updated_at=now,
        )
        with pytest.raises(aiosqlite.IntegrityError):
            await store_group.user_store.create_user(duplicate)

    async def test_get_users_batches_and_skips_missing(self, store_group, users):
        ids = [users["alice"].user_id, "missing", users["bob"].user_id]
        found = await store_group.user_store.get_users(ids)
        assert set(found) == {users["alice"].user_id, users["bob"].user_id}

    async def test_wal_mode(self, store_group):
        assert await verify_wal_mode(store_group.conn)


class TestProjectStore:
    """项目存储"""

    async def test_members_round_trip(self, store_group, users, make_project):
        project = await make_project(users["alice"], [users["bob"]])
        loaded = await store_group.project_store.get_project(project.project_id)
        assert loaded is not None
        assert loaded.member_ids == [users["alice"].user_id, users["bob"].user_id]
        assert loaded.color == "#3B82F6"

    async def test_list_for_user_covers_owner_and_member(self, store_group, users, make_project):
        base = datetime.now(UTC)
        owned = await make_project(users["alice"], name="Owned", created_at=base)
        shared = await make_project(
            users["bob"], [users["alice"]], name="Shared", created_at=base + timedelta(seconds=1)
        )
        await make_project(users["carol"], name="Hidden", created_at=base + timedelta(seconds=2))

        projects = await store_group.project_store.list_projects_for_user(users["alice"].user_id)
        # 按 created_at 倒序
        assert [p.project_id for p in projects] == [shared.project_id, owned.project_id]

    async def test_owner_not_listed_still_sees_project(self, store_group, users):
        project = await self._insert_without_owner(store_group, users)
        projects = await store_group.project_store.list_projects_for_user(users["alice"].user_id)
        assert [p.project_id for p in projects] == [project.project_id]

    async def _insert_without_owner(self, store_group, users):
        now = datetime.now(UTC)
        project = Project(
            project_id="01JNOOWNER0000000000000001",
            name="Unlisted owner",
            owner_id=users["alice"].user_id,
            member_ids=[users["bob"].user_id],
            created_at=now,
            updated_at=now,
        )
        await store_group.project_store.create_project(project)
        await store_group.conn.commit()
        return project

    async def test_delete_missing_returns_zero(self, store_group):
        assert await store_group.project_store.delete_project("missing") == 0


class TestTaskStore:
    """任务存储"""

    async def test_list_scope_is_creator_or_assignee(self, store_group, users, make_task):
        alice, bob, carol = users["alice"], users["bob"], users["carol"]
        own = await make_task(alice, title="Own task")
        assigned = await make_task(bob, title="Assigned to alice", assigned_to=alice.user_id)
        await make_task(bob, title="Bob only")
        await make_task(carol, title="Carol to bob", assigned_to=bob.user_id)

        tasks = await store_group.task_store.list_tasks(task_query_for(alice.user_id))
        assert {t.task_id for t in tasks} == {own.task_id, assigned.task_id}

    async def test_filters_only_narrow(self, store_group, users, make_task):
        alice, bob = users["alice"], users["bob"]
        await make_task(alice, title="Alice done", status=TaskStatus.COMPLETED)
        await make_task(bob, title="Bob done", status=TaskStatus.COMPLETED)
        todo = await make_task(alice, title="Alice todo", priority=TaskPriority.HIGH)

        completed = await store_group.task_store.list_tasks(
            task_query_for(alice.user_id, TaskFilters(status=TaskStatus.COMPLETED))
        )
        assert [t.title for t in completed] == ["Alice done"]

        # 指定他人为 assigned_to 也不会越过可见范围
        foreign = await store_group.task_store.list_tasks(
            task_query_for(alice.user_id, TaskFilters(assigned_to=bob.user_id))
        )
        assert foreign == []

        high = await store_group.task_store.list_tasks(
            task_query_for(alice.user_id, TaskFilters(priority=TaskPriority.HIGH))
        )
        assert [t.task_id for t in high] == [todo.task_id]

    async def test_newest_first(self, store_group, users, make_task):
        base = datetime.now(UTC)
        first = await make_task(users["alice"], title="First", created_at=base)
        second = await make_task(
            users["alice"], title="Second", created_at=base + timedelta(seconds=1)
        )
        tasks = await store_group.task_store.list_tasks(task_query_for(users["alice"].user_id))
        assert [t.task_id for t in tasks] == [second.task_id, first.task_id]

    async def test_due_date_round_trip(self, store_group, users, make_task):
        due = datetime(2026, 2, 1, 9, 0, tzinfo=UTC)
        task = await make_task(users["alice"], due_date=due)
        loaded = await store_group.task_store.get_task(task.task_id)
        assert loaded is not None
        assert loaded.due_date == due


class TestPopulate:
    """读时关联"""

    async def test_project_view(self, store_group, users, make_project):
        project = await make_project(users["alice"], [users["bob"]])
        view = await populate_project(project, store_group.user_store)
        assert view.owner is not None
        assert view.owner.email == "alice@taskwise.dev"
        assert [m.name for m in view.members] == ["Alice", "Bob"]

    async def test_dangling_references(self, store_group, users, make_task):
        task = await make_task(
            users["alice"],
            project_id="01JGONE0000000000000000001",
            assigned_to="01JGONE0000000000000000002",
        )
        view = await populate_task(task, store_group.user_store, store_group.project_store)
        assert view.project is None
        assert view.assignee is None
        assert view.creator is not None
        assert view.project_id == "01JGONE0000000000000000001"

    async def test_user_summary_has_no_password(self, store_group, users, make_project):
        project = await make_project(users["alice"])
        view = await populate_project(project, store_group.user_store)
        assert "password_hash" not in view.model_dump()["owner"]


class TestStoreProtocols:
    """SQLite 实现覆盖 Protocol 声明的全部方法"""

    @pytest.mark.parametrize(
        ("protocol", "implementation"),
        [
            (UserStore, SqliteUserStore),
            (ProjectStore, SqliteProjectStore),
            (TaskStore, SqliteTaskStore),
        ],
    )
    def test_sqlite_store_implements_protocol(self, protocol, implementation):
        declared = {name for name in vars(protocol) if not name.startswith("_")}
        assert declared
        assert declared <= set(dir(implementation))

    def test_store_group_members(self, store_group):
        assert isinstance(store_group.user_store, SqliteUserStore)
        assert isinstance(store_group.project_store, SqliteProjectStore)
        assert isinstance(store_group.task_store, SqliteTaskStore)
