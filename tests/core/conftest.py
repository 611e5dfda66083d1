"""core 测试配置 -- 用户/项目/任务记录工厂"""

from datetime import UTC, datetime, timedelta

import pytest_asyncio
from taskwise.core.models import Project, Task, TaskPriority, TaskStatus, User
from taskwise.core.store import StoreGroup
from ulid import ULID


def build_user(name: str, email: str, created_at: datetime | None = None) -> User:
    now = created_at or datetime.now(UTC)
    return User(
        user_id=str(ULID()),
        name=name,
        email=email,
        password_hash="not-a-real-hash",
        created_at=now,
        updated_at=now,
    )


def build_project(
    owner_id: str,
    member_ids: list[str] | None = None,
    name: str = "Launch",
    created_at: datetime | None = None,
) -> Project:
    now = created_at or datetime.now(UTC)
    return Project(
        project_id=str(ULID()),
        name=name,
        owner_id=owner_id,
        member_ids=member_ids if member_ids is not None else [owner_id],
        created_at=now,
        updated_at=now,
    )


def build_task(
    created_by: str,
    title: str = "Ship v1",
    assigned_to: str | None = None,
    project_id: str | None = None,
    status: TaskStatus = TaskStatus.TODO,
    priority: TaskPriority = TaskPriority.MEDIUM,
    due_date: datetime | None = None,
    created_at: datetime | None = None,
) -> Task:
    now = created_at or datetime.now(UTC)
    return Task(
        task_id=str(ULID()),
        title=title,
        status=status,
        priority=priority,
        project_id=project_id,
        assigned_to=assigned_to,
        created_by=created_by,
        due_date=due_date,
        created_at=now,
        updated_at=now,
    )


@pytest_asyncio.fixture
async def users(store_group: StoreGroup) -> dict[str, User]:
    """预置三个用户：alice / bob / carol"""
    base = datetime.now(UTC)
    created = {}
    for offset, name in enumerate(["alice", "bob", "carol"]):
        user = build_user(
            name.title(),
            f"{name}@taskwise.dev",
            created_at=base + timedelta(seconds=offset),
        )
        created[name] = user
    async with store_group.transaction():
        for user in created.values():
            await store_group.user_store.create_user(user)
    return created


@pytest_asyncio.fixture
async def make_project(store_group: StoreGroup):
    """持久化项目记录的工厂"""

    async def _make(owner: User, members: list[User] | None = None, **kwargs) -> Project:
        member_ids = [owner.user_id] + [m.user_id for m in members or []]
        project = build_project(owner.user_id, member_ids, **kwargs)
        async with store_group.transaction():
            await store_group.project_store.create_project(project)
        return project

    return _make


@pytest_asyncio.fixture
async def make_task(store_group: StoreGroup):
    """持久化任务记录的工厂"""

    async def _make(creator: User, **kwargs) -> Task:
        task = build_task(creator.user_id, **kwargs)
        async with store_group.transaction():
            await store_group.task_store.create_task(task)
        return task

    return _make
