"""TaskService -- 任务 CRUD 与 Dashboard 统计

任务可见范围：调用方为创建者或被分配者。
项目成员身份不会授予任务访问权。
"""

from datetime import UTC, datetime

import structlog
from taskwise.core import membership
from taskwise.core.access import authorize_task, task_query_for
from taskwise.core.models import (
    DashboardStats,
    Task,
    TaskAction,
    TaskCreate,
    TaskFilters,
    TaskUpdate,
    TaskView,
    compute_dashboard_stats,
)
from taskwise.core.store import StoreGroup, populate_task, populate_tasks
from ulid import ULID

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def list_tasks(
        self,
        caller_id: str,
        filters: TaskFilters | None = None,
    ) -> list[TaskView]:
        """可见任务列表，筛选条件只收窄可见集合，按 created_at 倒序"""
        query = task_query_for(caller_id, filters)
        tasks = await self._stores.task_store.list_tasks(query)
        return await self._populate_many(tasks)

    async def get_task(self, caller_id: str, task_id: str) -> TaskView:
        """任务详情

        Raises:
            NotFoundError: 任务不存在
            PermissionDeniedError: 调用方既非创建者也非被分配者
        """
        task = await self._load(caller_id, task_id, TaskAction.READ)
        return await self._populate(task)

    async def create_task(self, caller_id: str, request: TaskCreate) -> TaskView:
        """创建任务，created_by 取自调用方身份"""
        now = datetime.now(UTC)
        task = Task(
            task_id=str(ULID()),
            title=request.title,
            description=request.description,
            status=request.status,
            priority=request.priority,
            project_id=request.project_id,
            assigned_to=request.assigned_to,
            created_by=caller_id,
            due_date=request.due_date,
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction():
            await self._stores.task_store.create_task(task)

        log.info(
            "task_created",
            task_id=task.task_id,
            project_id=task.project_id,
            assigned_to=task.assigned_to,
        )
        return await self._populate(task)

    async def update_task(
        self,
        caller_id: str,
        task_id: str,
        request: TaskUpdate,
    ) -> TaskView:
        """合并显式提供的字段（创建者或被分配者）"""
        task = await self._load(caller_id, task_id, TaskAction.WRITE)
        changes = request.changes()
        updated = task.model_copy(update={**changes, "updated_at": datetime.now(UTC)})
        async with self._stores.transaction():
            await self._stores.task_store.update_task(updated)

        log.info("task_updated", task_id=task_id, fields=sorted(changes))
        return await self._populate(updated)

    async def delete_task(self, caller_id: str, task_id: str) -> None:
        """删除任务（仅创建者）"""
        task = await self._load(
            caller_id,
            task_id,
            TaskAction.DELETE,
            "Only task creator can delete",
        )
        await membership.delete_task(self._stores, task)

    async def dashboard_stats(self, caller_id: str) -> DashboardStats:
        """调用方可见任务集合上的计数"""
        tasks = await self._stores.task_store.list_tasks(task_query_for(caller_id))
        return compute_dashboard_stats(tasks)

    async def _load(
        self,
        caller_id: str,
        task_id: str,
        action: TaskAction,
        denied_message: str = "Access denied",
    ) -> Task:
        task = await self._stores.task_store.get_task(task_id)
        return authorize_task(caller_id, task, task_id, action, denied_message)

    async def _populate(self, task: Task) -> TaskView:
        return await populate_task(
            task, self._stores.user_store, self._stores.project_store
        )

    async def _populate_many(self, tasks: list[Task]) -> list[TaskView]:
        return await populate_tasks(
            tasks, self._stores.user_store, self._stores.project_store
        )
