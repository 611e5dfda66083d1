"""Store Protocol 接口定义

定义 UserStore、ProjectStore、TaskStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
核心逻辑只依赖这些接口，存储引擎可替换。
"""

from typing import Protocol

from ..access import TaskQuery
from ..models.project import Project
from ..models.task import Task
from ..models.user import User


class UserStore(Protocol):
    """身份存储接口"""

    async def create_user(self, user: User) -> None:
        """创建用户记录"""
        ...

    async def get_user(self, user_id: str) -> User | None:
        """根据 user_id 查询用户"""
        ...

    async def get_user_by_email(self, email: str) -> User | None:
        """根据邮箱查询用户"""
        ...

    async def get_users(self, user_ids: list[str]) -> dict[str, User]:
        """批量查询用户"""
        ...


class ProjectStore(Protocol):
    """项目存储接口"""

    async def create_project(self, project: Project) -> None:
        """创建项目记录"""
        ...

    async def get_project(self, project_id: str) -> Project | None:
        """根据 project_id 查询项目"""
        ...

    async def get_projects(self, project_ids: list[str]) -> dict[str, Project]:
        """批量查询项目"""
        ...

    async def list_projects_for_user(self, user_id: str) -> list[Project]:
        """查询用户作为 owner 或成员的项目"""
        ...

    async def update_project(self, project: Project) -> None:
        """写回项目可变字段"""
        ...

    async def update_members(
        self,
        project_id: str,
        member_ids: list[str],
        updated_at: str,
    ) -> None:
        """仅更新成员列表"""
        ...

    async def delete_project(self, project_id: str) -> int:
        """删除项目记录"""
        ...


class TaskStore(Protocol):
    """任务存储接口"""

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        ...

    async def list_tasks(self, query: TaskQuery) -> list[Task]:
        """按可见性 + 筛选条件查询任务"""
        ...

    async def list_tasks_for_project(self, project_id: str) -> list[Task]:
        """查询项目下全部任务"""
        ...

    async def update_task(self, task: Task) -> None:
        """写回任务可变字段"""
        ...

    async def delete_task(self, task_id: str) -> int:
        """删除单个任务"""
        ...

    async def delete_tasks_for_project(self, project_id: str) -> int:
        """删除项目下全部任务"""
        ...

    async def count_tasks_for_project(self, project_id: str) -> int:
        """统计项目下任务数"""
        ...
