"""项目级联删除原子事务封装

在同一 SQLite 事务内删除项目下的全部任务与项目本身，
任一步失败则整体回滚，不会留下孤儿任务或缺失任务的已删项目。
"""

from typing import TYPE_CHECKING

import structlog

from ..errors import UpstreamError

if TYPE_CHECKING:
    from . import StoreGroup

log = structlog.get_logger()


async def delete_project_cascade(stores: "StoreGroup", project_id: str) -> int:
    """在同一写事务内删除项目及其全部任务

    Args:
        stores: Store 实例组（写事务持有连接级写锁，期间其他写入无法提交）
        project_id: 待删除项目 ID

    Returns:
        被级联删除的任务数

    Raises:
        UpstreamError: 事务失败（已回滚）
    """
    try:
        async with stores.transaction():
            # 先删任务，再删项目
            deleted_tasks = await stores.task_store.delete_tasks_for_project(project_id)
            await stores.project_store.delete_project(project_id)
    except Exception as e:
        log.error(
            "project_cascade_delete_failed",
            project_id=project_id,
            error_type=type(e).__name__,
        )
        raise UpstreamError("delete_project_cascade", e) from e
    return deleted_tasks
