"""读时关联（populate）

将存储中的外键 ID 解析为展示字段，供响应序列化使用。
只做读取，不参与权限判定；悬空引用解析为 None 或被跳过。
"""

from ..models.project import Project, ProjectSummary, ProjectView
from ..models.task import Task, TaskView
from ..models.user import UserSummary
from .protocols import ProjectStore, UserStore


async def populate_projects(
    projects: list[Project],
    user_store: UserStore,
) -> list[ProjectView]:
    """批量 populate 项目的 owner 与成员"""
    user_ids: list[str] = []
    for project in projects:
        user_ids.append(project.owner_id)
        user_ids.extend(project.member_ids)
    users = await user_store.get_users(user_ids)

    views = []
    for project in projects:
        owner = users.get(project.owner_id)
        views.append(
            ProjectView(
                project_id=project.project_id,
                name=project.name,
                description=project.description,
                color=project.color,
                owner_id=project.owner_id,
                owner=UserSummary.from_user(owner) if owner else None,
                member_ids=list(project.member_ids),
                members=[
                    UserSummary.from_user(users[member_id])
                    for member_id in project.member_ids
                    if member_id in users
                ],
                created_at=project.created_at,
                updated_at=project.updated_at,
            )
        )
    return views


async def populate_project(
    project: Project,
    user_store: UserStore,
) -> ProjectView:
    """populate 单个项目"""
    views = await populate_projects([project], user_store)
    return views[0]


async def populate_tasks(
    tasks: list[Task],
    user_store: UserStore,
    project_store: ProjectStore,
) -> list[TaskView]:
    """批量 populate 任务的创建者、被分配者与所属项目"""
    user_ids: list[str] = []
    project_ids: list[str] = []
    for task in tasks:
        user_ids.append(task.created_by)
        if task.assigned_to:
            user_ids.append(task.assigned_to)
        if task.project_id:
            project_ids.append(task.project_id)
    users = await user_store.get_users(user_ids)
    projects = await project_store.get_projects(project_ids)

    views = []
    for task in tasks:
        creator = users.get(task.created_by)
        assignee = users.get(task.assigned_to) if task.assigned_to else None
        project = projects.get(task.project_id) if task.project_id else None
        views.append(
            TaskView(
                task_id=task.task_id,
                title=task.title,
                description=task.description,
                status=task.status,
                priority=task.priority,
                due_date=task.due_date,
                project_id=task.project_id,
                project=ProjectSummary.from_project(project) if project else None,
                assigned_to=task.assigned_to,
                assignee=UserSummary.from_user(assignee) if assignee else None,
                created_by=task.created_by,
                creator=UserSummary.from_user(creator) if creator else None,
                created_at=task.created_at,
                updated_at=task.updated_at,
            )
        )
    return views


async def populate_task(
    task: Task,
    user_store: UserStore,
    project_store: ProjectStore,
) -> TaskView:
    """populate 单个任务"""
    views = await populate_tasks([task], user_store, project_store)
    return views[0]
