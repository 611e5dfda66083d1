"""ProjectService -- 项目 CRUD 与成员管理业务逻辑

每个操作的判定顺序：
1. 加载项目（不存在 -> NotFoundError）
2. access 规则（不满足 -> PermissionDeniedError）
3. 成员生命周期规则（UserNotFound / AlreadyMember / CannotRemoveOwner）

同一项目的读-改-写序列通过项目级 asyncio.Lock 串行化。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import structlog
from taskwise.core import membership
from taskwise.core.access import authorize_project
from taskwise.core.models import (
    MemberIdentifier,
    Project,
    ProjectAction,
    ProjectCreate,
    ProjectUpdate,
    ProjectView,
    TaskView,
)
from taskwise.core.store import (
    StoreGroup,
    populate_project,
    populate_projects,
    populate_tasks,
)
from ulid import ULID

log = structlog.get_logger()


class ProjectService:
    """项目业务服务"""

    _project_locks: dict[str, asyncio.Lock] = {}
    _project_lock_users: dict[str, int] = {}
    _project_locks_guard = asyncio.Lock()

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def list_projects(self, caller_id: str) -> list[ProjectView]:
        """调用方作为 owner 或成员的项目，按创建时间倒序"""
        projects = await self._stores.project_store.list_projects_for_user(caller_id)
        return await populate_projects(projects, self._stores.user_store)

    async def get_project(
        self, caller_id: str, project_id: str
    ) -> tuple[ProjectView, list[TaskView]]:
        """项目详情及其全部任务

        Raises:
            NotFoundError: 项目不存在
            PermissionDeniedError: 调用方既非 owner 也非成员
        """
        project = await self._load(caller_id, project_id, ProjectAction.READ)
        tasks = await self._stores.task_store.list_tasks_for_project(project_id)
        project_view = await populate_project(project, self._stores.user_store)
        task_views = await populate_tasks(
            tasks, self._stores.user_store, self._stores.project_store
        )
        return project_view, task_views

    async def create_project(self, caller_id: str, request: ProjectCreate) -> ProjectView:
        """创建项目，调用方成为 owner 且为首个成员"""
        now = datetime.now(UTC)
        project = Project(
            project_id=str(ULID()),
            name=request.name,
            description=request.description,
            owner_id=caller_id,
            member_ids=[caller_id],
            color=request.color,
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction():
            await self._stores.project_store.create_project(project)

        log.info("project_created", project_id=project.project_id, owner_id=caller_id)
        return await populate_project(project, self._stores.user_store)

    async def update_project(
        self,
        caller_id: str,
        project_id: str,
        request: ProjectUpdate,
    ) -> ProjectView:
        """合并显式提供的字段（仅 owner）"""
        async with self._project_lock(project_id):
            project = await self._load(
                caller_id,
                project_id,
                ProjectAction.WRITE,
                "Only project owner can update",
            )
            changes = request.changes()
            updated = project.model_copy(
                update={**changes, "updated_at": datetime.now(UTC)}
            )
            async with self._stores.transaction():
                await self._stores.project_store.update_project(updated)

        log.info(
            "project_updated",
            project_id=project_id,
            fields=sorted(changes),
        )
        return await populate_project(updated, self._stores.user_store)

    async def delete_project(self, caller_id: str, project_id: str) -> int:
        """删除项目并级联删除其任务（仅 owner）

        Returns:
            被级联删除的任务数
        """
        async with self._project_lock(project_id):
            project = await self._load(
                caller_id,
                project_id,
                ProjectAction.WRITE,
                "Only project owner can delete",
            )
            deleted_tasks = await membership.delete_project(self._stores, project)
        return deleted_tasks

    async def add_member(
        self,
        caller_id: str,
        project_id: str,
        raw_identifier: str,
    ) -> ProjectView:
        """按邮箱或用户 ID 添加成员（仅 owner）"""
        identifier = MemberIdentifier.parse(raw_identifier)
        async with self._project_lock(project_id):
            project = await self._load(
                caller_id,
                project_id,
                ProjectAction.WRITE,
                "Only project owner can add members",
            )
            updated = await membership.add_member(self._stores, project, identifier)
        return await populate_project(updated, self._stores.user_store)

    async def remove_member(
        self,
        caller_id: str,
        project_id: str,
        member_id: str,
    ) -> ProjectView:
        """移除成员（仅 owner，owner 本身不可移除）"""
        async with self._project_lock(project_id):
            project = await self._load(
                caller_id,
                project_id,
                ProjectAction.WRITE,
                "Only project owner can remove members",
            )
            updated = await membership.remove_member(self._stores, project, member_id)
        return await populate_project(updated, self._stores.user_store)

    async def _load(
        self,
        caller_id: str,
        project_id: str,
        action: ProjectAction,
        denied_message: str = "Access denied",
    ) -> Project:
        project = await self._stores.project_store.get_project(project_id)
        return authorize_project(caller_id, project, project_id, action, denied_message)

    @classmethod
    @asynccontextmanager
    async def _project_lock(cls, project_id: str) -> AsyncIterator[None]:
        """项目级别锁，序列化同一项目的读-改-写。

        持有与等待者都计入引用数，归零时移除锁，避免全局字典无限增长。
        """
        async with cls._project_locks_guard:
            lock = cls._project_locks.get(project_id)
            if lock is None:
                lock = asyncio.Lock()
                cls._project_locks[project_id] = lock
            users = cls._project_lock_users
            users[project_id] = users.get(project_id, 0) + 1

        try:
            async with lock:
                yield
        finally:
            async with cls._project_locks_guard:
                remaining = cls._project_lock_users[project_id] - 1
                if remaining:
                    cls._project_lock_users[project_id] = remaining
                else:
                    cls._project_lock_users.pop(project_id, None)
                    cls._project_locks.pop(project_id, None)
