"""ProjectStore SQLite 实现

members 列为 JSON 数组，成员可见性通过 json_each 查询。
此处仅提供数据库操作，不做权限判定。
"""

import json
from datetime import datetime

import aiosqlite

from ..models.project import Project


class SqliteProjectStore:
    """ProjectStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_project(self, project: Project) -> None:
        """创建项目记录"""
        await self._conn.execute(
            """
            INSERT INTO projects (project_id, name, description, owner_id, members,
                                  color, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                project.project_id,
                project.name,
                project.description,
                project.owner_id,
                json.dumps(project.member_ids),
                project.color,
                project.created_at.isoformat(),
                project.updated_at.isoformat(),
            ),
        )

    async def get_project(self, project_id: str) -> Project | None:
        """根据 project_id 查询项目"""
        cursor = await self._conn.execute(
            "SELECT * FROM projects WHERE project_id = ?",
            (project_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_project(row)

    async def get_projects(self, project_ids: list[str]) -> dict[str, Project]:
        """批量查询项目，返回 project_id -> Project 映射"""
        unique_ids = list(dict.fromkeys(project_ids))
        if not unique_ids:
            return {}
        placeholders = ", ".join("?" for _ in unique_ids)
        cursor = await self._conn.execute(
            f"SELECT * FROM projects WHERE project_id IN ({placeholders})",
            unique_ids,
        )
        rows = await cursor.fetchall()
        return {row["project_id"]: self._row_to_project(row) for row in rows}

    async def list_projects_for_user(self, user_id: str) -> list[Project]:
        """查询用户作为 owner 或成员的项目，按 created_at 倒序"""
        cursor = await self._conn.execute(
            """
            SELECT * FROM projects
            WHERE owner_id = ?
               OR EXISTS (
                    SELECT 1 FROM json_each(projects.members)
                    WHERE json_each.value = ?
               )
            ORDER BY created_at DESC
            """,
            (user_id, user_id),
        )
        rows = await cursor.fetchall()
        return [self._row_to_project(row) for row in rows]

    async def update_project(self, project: Project) -> None:
        """写回项目可变字段（owner_id 不可变，不在更新列中）"""
        await self._conn.execute(
            """
            UPDATE projects
            SET name = ?, description = ?, color = ?, members = ?, updated_at = ?
            WHERE project_id = ?
            """,
            (
                project.name,
                project.description,
                project.color,
                json.dumps(project.member_ids),
                project.updated_at.isoformat(),
                project.project_id,
            ),
        )

    async def update_members(
        self,
        project_id: str,
        member_ids: list[str],
        updated_at: str,
    ) -> None:
        """仅更新成员列表"""
        await self._conn.execute(
            "UPDATE projects SET members = ?, updated_at = ? WHERE project_id = ?",
            (json.dumps(member_ids), updated_at, project_id),
        )

    async def delete_project(self, project_id: str) -> int:
        """删除项目记录，返回删除行数"""
        cursor = await self._conn.execute(
            "DELETE FROM projects WHERE project_id = ?",
            (project_id,),
        )
        return cursor.rowcount

    @staticmethod
    def _row_to_project(row: aiosqlite.Row) -> Project:
        """将数据库行转换为 Project 模型"""
        return Project(
            project_id=row["project_id"],
            name=row["name"],
            description=row["description"],
            owner_id=row["owner_id"],
            member_ids=json.loads(row["members"]),
            color=row["color"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
