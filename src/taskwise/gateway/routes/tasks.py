"""任务路由

GET    /api/tasks              可见任务列表，支持 status/priority/project_id/assigned_to 筛选
GET    /api/tasks/stats        Dashboard 统计
GET    /api/tasks/{task_id}    任务详情
POST   /api/tasks              创建任务
PUT    /api/tasks/{task_id}    更新任务（创建者或被分配者）
DELETE /api/tasks/{task_id}    删除任务（仅创建者）
"""

from fastapi import APIRouter, Depends, Query
from taskwise.core.models import (
    TaskCreate,
    TaskFilters,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    User,
)

from ..deps import get_current_user, get_store_group
from ..services.task_service import TaskService

router = APIRouter(prefix="/api/tasks")


@router.get("")
async def list_tasks(
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    priority: TaskPriority | None = Query(default=None, description="按优先级筛选"),
    project_id: str | None = Query(default=None, description="按项目筛选"),
    assigned_to: str | None = Query(default=None, description="按被分配者筛选"),
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    """筛选条件与可见范围取交集，按 created_at 倒序"""
    filters = TaskFilters(
        status=status,
        priority=priority,
        project_id=project_id or None,
        assigned_to=assigned_to or None,
    )
    service = TaskService(store_group)
    tasks = await service.list_tasks(caller.user_id, filters)
    return {"tasks": tasks, "count": len(tasks)}


# 需在 /{task_id} 之前注册
@router.get("/stats")
async def dashboard_stats(
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = TaskService(store_group)
    stats = await service.dashboard_stats(caller.user_id)
    return {"stats": stats}


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = TaskService(store_group)
    task = await service.get_task(caller.user_id, task_id)
    return {"task": task}


@router.post("", status_code=201)
async def create_task(
    request: TaskCreate,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = TaskService(store_group)
    task = await service.create_task(caller.user_id, request)
    return {"task": task}


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    request: TaskUpdate,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = TaskService(store_group)
    task = await service.update_task(caller.user_id, task_id, request)
    return {"task": task}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = TaskService(store_group)
    await service.delete_task(caller.user_id, task_id)
    return {"message": "Task deleted successfully"}
