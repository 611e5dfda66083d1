"""访问控制核心

给定 (调用方, 资源, 动作) 判定是否放行，并为列表查询构造可见性范围。

规则：
- 项目：owner 或成员可读；仅 owner 可写（更新、删除、成员管理）。
- 任务：创建者或被分配者可读写；仅创建者可删除。

资源不存在时先返回 NotFoundError，不评估任何规则；
资源存在但规则不满足时返回 PermissionDeniedError。
"""

from collections.abc import Callable

from pydantic import BaseModel, Field

from .errors import NotFoundError, PermissionDeniedError
from .models import Project, ProjectAction, Task, TaskAction, TaskFilters


def can_read_project(caller_id: str, project: Project) -> bool:
    return caller_id == project.owner_id or caller_id in project.member_ids


def can_write_project(caller_id: str, project: Project) -> bool:
    return caller_id == project.owner_id


def can_read_task(caller_id: str, task: Task) -> bool:
    return caller_id == task.created_by or (
        task.assigned_to is not None and caller_id == task.assigned_to
    )


def can_write_task(caller_id: str, task: Task) -> bool:
    # 创建者与被分配者读写对称
    return can_read_task(caller_id, task)


def can_delete_task(caller_id: str, task: Task) -> bool:
    return caller_id == task.created_by


PROJECT_RULES: dict[ProjectAction, Callable[[str, Project], bool]] = {
    ProjectAction.READ: can_read_project,
    ProjectAction.WRITE: can_write_project,
}

TASK_RULES: dict[TaskAction, Callable[[str, Task], bool]] = {
    TaskAction.READ: can_read_task,
    TaskAction.WRITE: can_write_task,
    TaskAction.DELETE: can_delete_task,
}


def authorize_project(
    caller_id: str,
    project: Project | None,
    project_id: str,
    action: ProjectAction,
    denied_message: str = "Access denied",
) -> Project:
    """校验项目访问权限

    Args:
        caller_id: 调用方用户 ID
        project: 从存储加载的项目，不存在时为 None
        project_id: 请求的项目 ID
        action: 访问动作
        denied_message: 权限不足时的描述

    Returns:
        通过校验的 Project

    Raises:
        NotFoundError: 项目不存在
        PermissionDeniedError: 调用方不满足动作规则
    """
    if project is None:
        raise NotFoundError("Project", project_id)
    if not PROJECT_RULES[action](caller_id, project):
        raise PermissionDeniedError(denied_message)
    return project


def authorize_task(
    caller_id: str,
    task: Task | None,
    task_id: str,
    action: TaskAction,
    denied_message: str = "Access denied",
) -> Task:
    """校验任务访问权限，语义同 authorize_project"""
    if task is None:
        raise NotFoundError("Task", task_id)
    if not TASK_RULES[action](caller_id, task):
        raise PermissionDeniedError(denied_message)
    return task


class TaskQuery(BaseModel):
    """任务列表查询：可见性范围 AND 调用方筛选条件

    visible_to 限定 created_by == visible_to OR assigned_to == visible_to，
    filters 只能在该范围内进一步收窄。
    """

    visible_to: str
    filters: TaskFilters = Field(default_factory=TaskFilters)


def task_query_for(caller_id: str, filters: TaskFilters | None = None) -> TaskQuery:
    """为调用方构造任务列表查询"""
    return TaskQuery(visible_to=caller_id, filters=filters or TaskFilters())
