"""项目路由

GET    /api/projects                          调用方参与的项目列表
GET    /api/projects/{project_id}             项目详情 + 全部任务
POST   /api/projects                          创建项目
PUT    /api/projects/{project_id}             更新项目（owner）
DELETE /api/projects/{project_id}             删除项目并级联删除任务（owner）
POST   /api/projects/{project_id}/members     添加成员（owner）
DELETE /api/projects/{project_id}/members/{member_id}  移除成员（owner）
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from taskwise.core.models import ProjectCreate, ProjectUpdate, User

from ..deps import get_current_user, get_store_group
from ..services.project_service import ProjectService

router = APIRouter(prefix="/api/projects")


class MemberAddRequest(BaseModel):
    """添加成员请求体：邮箱或用户 ID"""

    member_id: str = Field(default="", validate_default=True)

    @field_validator("member_id", mode="before")
    @classmethod
    def _check_member_id(cls, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Member email or ID is required")
        return value.strip()


@router.get("")
async def list_projects(
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = ProjectService(store_group)
    projects = await service.list_projects(caller.user_id)
    return {"projects": projects, "count": len(projects)}


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = ProjectService(store_group)
    project, tasks = await service.get_project(caller.user_id, project_id)
    return {"project": project, "tasks": tasks}


@router.post("", status_code=201)
async def create_project(
    request: ProjectCreate,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = ProjectService(store_group)
    project = await service.create_project(caller.user_id, request)
    return {"project": project}


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    request: ProjectUpdate,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = ProjectService(store_group)
    project = await service.update_project(caller.user_id, project_id, request)
    return {"project": project}


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = ProjectService(store_group)
    deleted_tasks = await service.delete_project(caller.user_id, project_id)
    return {
        "message": "Project and associated tasks deleted successfully",
        "deleted_tasks": deleted_tasks,
    }


@router.post("/{project_id}/members")
async def add_member(
    project_id: str,
    request: MemberAddRequest,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = ProjectService(store_group)
    project = await service.add_member(caller.user_id, project_id, request.member_id)
    return {"project": project}


@router.delete("/{project_id}/members/{member_id}")
async def remove_member(
    project_id: str,
    member_id: str,
    caller: User = Depends(get_current_user),
    store_group=Depends(get_store_group),
):
    service = ProjectService(store_group)
    project = await service.remove_member(caller.user_id, project_id, member_id)
    return {"project": project}
