"""TaskStore SQLite 实现

列表查询始终以可见性条件（创建者或被分配者）为前提，
筛选条件只以 AND 方式追加，不会扩大可见集合。
"""

from datetime import datetime

import aiosqlite

from ..access import TaskQuery
from ..models.task import Task


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        await self._conn.execute(
            """
            INSERT INTO tasks (task_id, title, description, status, priority,
                               project_id, assigned_to, created_by, due_date,
                               created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.task_id,
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                task.project_id,
                task.assigned_to,
                task.created_by,
                task.due_date.isoformat() if task.due_date else None,
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        cursor = await self._conn.execute(
            "SELECT * FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(self, query: TaskQuery) -> list[Task]:
        """按可见性 + 筛选条件查询任务，按 created_at 倒序"""
        clauses = ["(created_by = ? OR assigned_to = ?)"]
        params: list[str] = [query.visible_to, query.visible_to]

        filters = query.filters
        if filters.status is not None:
            clauses.append("status = ?")
            params.append(filters.status.value)
        if filters.priority is not None:
            clauses.append("priority = ?")
            params.append(filters.priority.value)
        if filters.project_id is not None:
            clauses.append("project_id = ?")
            params.append(filters.project_id)
        if filters.assigned_to is not None:
            clauses.append("assigned_to = ?")
            params.append(filters.assigned_to)

        cursor = await self._conn.execute(
            f"SELECT * FROM tasks WHERE {' AND '.join(clauses)} ORDER BY created_at DESC",
            params,
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def list_tasks_for_project(self, project_id: str) -> list[Task]:
        """查询项目下的全部任务，按 created_at 倒序"""
        cursor = await self._conn.execute(
            "SELECT * FROM tasks WHERE project_id = ? ORDER BY created_at DESC",
            (project_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task(self, task: Task) -> None:
        """写回任务可变字段（created_by 不可变，不在更新列中）"""
        await self._conn.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, status = ?, priority = ?,
                project_id = ?, assigned_to = ?, due_date = ?, updated_at = ?
            WHERE task_id = ?
            """,
            (
                task.title,
                task.description,
                task.status.value,
                task.priority.value,
                task.project_id,
                task.assigned_to,
                task.due_date.isoformat() if task.due_date else None,
                task.updated_at.isoformat(),
                task.task_id,
            ),
        )

    async def delete_task(self, task_id: str) -> int:
        """删除单个任务，返回删除行数"""
        cursor = await self._conn.execute(
            "DELETE FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        return cursor.rowcount

    async def delete_tasks_for_project(self, project_id: str) -> int:
        """删除项目下全部任务，返回删除行数"""
        cursor = await self._conn.execute(
            "DELETE FROM tasks WHERE project_id = ?",
            (project_id,),
        )
        return cursor.rowcount

    async def count_tasks_for_project(self, project_id: str) -> int:
        """统计引用指定项目的任务数"""
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM tasks WHERE project_id = ?",
            (project_id,),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        due_date = row["due_date"]
        return Task(
            task_id=row["task_id"],
            title=row["title"],
            description=row["description"],
            status=row["status"],
            priority=row["priority"],
            project_id=row["project_id"],
            assigned_to=row["assigned_to"],
            created_by=row["created_by"],
            due_date=datetime.fromisoformat(due_date) if due_date else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
