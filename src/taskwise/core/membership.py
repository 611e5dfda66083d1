"""成员生命周期核心

管理项目成员集合的变更，以及删除项目时对其任务的级联删除。
调用方需先通过 access.authorize_project 确认为 owner。

不变量：
- member_ids 不含重复项
- owner 永远不能从成员中移除
- 项目删除后，不再有任何任务引用该项目
"""

from datetime import UTC, datetime

import structlog

from .errors import AlreadyMemberError, CannotRemoveOwnerError, UserNotFoundError
from .models import IdentifierKind, MemberIdentifier, Project, Task, User
from .store import StoreGroup, delete_project_cascade
from .store.protocols import UserStore

log = structlog.get_logger()


async def resolve_member(user_store: UserStore, identifier: MemberIdentifier) -> User:
    """将成员标识解析为已注册用户

    Raises:
        UserNotFoundError: 邮箱或 ID 无对应用户
    """
    if identifier.kind == IdentifierKind.EMAIL:
        user = await user_store.get_user_by_email(identifier.value)
        if user is None:
            raise UserNotFoundError(identifier.value, "User not found with that email")
        return user

    user = await user_store.get_user(identifier.value)
    if user is None:
        raise UserNotFoundError(identifier.value)
    return user


async def add_member(
    stores: StoreGroup,
    project: Project,
    identifier: MemberIdentifier,
) -> Project:
    """向项目添加成员

    Args:
        stores: Store 实例组
        project: 已通过 owner 校验的项目
        identifier: 邮箱或用户 ID

    Returns:
        更新后的 Project

    Raises:
        UserNotFoundError: 标识无法解析
        AlreadyMemberError: 用户已在成员列表中（明确拒绝，而非静默忽略）
    """
    user = await resolve_member(stores.user_store, identifier)
    if project.has_member(user.user_id):
        raise AlreadyMemberError(user.user_id)

    updated = project.model_copy(
        update={
            "member_ids": [*project.member_ids, user.user_id],
            "updated_at": datetime.now(UTC),
        }
    )
    async with stores.transaction():
        await stores.project_store.update_members(
            updated.project_id,
            updated.member_ids,
            updated.updated_at.isoformat(),
        )

    log.info(
        "project_member_added",
        project_id=project.project_id,
        member_id=user.user_id,
        via=identifier.kind.value,
    )
    return updated


async def remove_member(
    stores: StoreGroup,
    project: Project,
    member_id: str,
) -> Project:
    """从项目移除成员

    移除不在成员列表中的 ID 为静默空操作（结果集合同样不含该 ID）。

    Raises:
        CannotRemoveOwnerError: member_id 为 owner（在任何变更前检查）
    """
    if member_id == project.owner_id:
        raise CannotRemoveOwnerError()

    updated = project.model_copy(
        update={
            "member_ids": [m for m in project.member_ids if m != member_id],
            "updated_at": datetime.now(UTC),
        }
    )
    async with stores.transaction():
        await stores.project_store.update_members(
            updated.project_id,
            updated.member_ids,
            updated.updated_at.isoformat(),
        )

    log.info(
        "project_member_removed",
        project_id=project.project_id,
        member_id=member_id,
        was_member=project.has_member(member_id),
    )
    return updated


async def delete_project(stores: StoreGroup, project: Project) -> int:
    """删除项目并级联删除其全部任务（单事务）

    Returns:
        被级联删除的任务数

    Raises:
        UpstreamError: 事务失败，已整体回滚
    """
    deleted_tasks = await delete_project_cascade(stores, project.project_id)
    log.info(
        "project_deleted",
        project_id=project.project_id,
        deleted_tasks=deleted_tasks,
    )
    return deleted_tasks


async def delete_task(stores: StoreGroup, task: Task) -> None:
    """删除单个任务，无级联"""
    async with stores.transaction():
        await stores.task_store.delete_task(task.task_id)
    log.info("task_deleted", task_id=task.task_id)
