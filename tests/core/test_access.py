"""访问控制规则单元测试

测试内容：
1. 项目读/写规则
2. 任务读/写/删除规则
3. NotFound 优先于规则判定
4. 任务列表可见范围与筛选条件取交集
"""

from datetime import UTC, datetime

import pytest
from taskwise.core.access import (
    authorize_project,
    authorize_task,
    can_delete_task,
    can_read_project,
    can_read_task,
    can_write_project,
    can_write_task,
    task_query_for,
)
from taskwise.core.errors import NotFoundError, PermissionDeniedError
from taskwise.core.models import (
    Project,
    ProjectAction,
    Task,
    TaskAction,
    TaskFilters,
    TaskStatus,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

OWNER = "01JOWNER000000000000000001"
MEMBER = "01JMEMBER00000000000000001"
STRANGER = "01JSTRANGER000000000000001"


def _project(member_ids: list[str] | None = None) -> Project:
    return Project(
        project_id="01JPROJECT0000000000000001",
        name="Launch",
        owner_id=OWNER,
        member_ids=member_ids if member_ids is not None else [OWNER, MEMBER],
        created_at=NOW,
        updated_at=NOW,
    )


def _task(assigned_to: str | None = None) -> Task:
    return Task(
        task_id="01JTASK0000000000000000001",
        title="Ship v1",
        created_by=OWNER,
        assigned_to=assigned_to,
        created_at=NOW,
        updated_at=NOW,
    )


class TestProjectRules:
    """项目访问规则"""

    def test_owner_and_member_can_read(self):
        project = _project()
        assert can_read_project(OWNER, project)
        assert can_read_project(MEMBER, project)

    def test_stranger_cannot_read(self):
        assert not can_read_project(STRANGER, _project())

    def test_owner_reads_even_when_not_listed(self):
        """owner 不在 member_ids 中也拥有完整权限"""
        project = _project(member_ids=[MEMBER])
        assert can_read_project(OWNER, project)
        assert can_write_project(OWNER, project)

    def test_member_cannot_write(self):
        """成员只读，不可写"""
        project = _project()
        assert can_write_project(OWNER, project)
        assert not can_write_project(MEMBER, project)
        assert not can_write_project(STRANGER, project)


class TestTaskRules:
    """任务访问规则"""

    def test_creator_has_all_rights(self):
        task = _task()
        assert can_read_task(OWNER, task)
        assert can_write_task(OWNER, task)
        assert can_delete_task(OWNER, task)

    def test_assignee_can_update_but_not_delete(self):
        task = _task(assigned_to=MEMBER)
        assert can_read_task(MEMBER, task)
        assert can_write_task(MEMBER, task)
        assert not can_delete_task(MEMBER, task)

    def test_unassigned_task_hidden_from_others(self):
        task = _task()
        assert not can_read_task(MEMBER, task)
        assert not can_write_task(STRANGER, task)
        assert not can_delete_task(STRANGER, task)


class TestAuthorize:
    """authorize_* 判定顺序"""

    def test_missing_project_is_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            authorize_project(STRANGER, None, "missing", ProjectAction.READ)
        assert exc_info.value.code == "PROJECT_NOT_FOUND"
        assert exc_info.value.message == "Project not found"

    def test_denied_project_uses_custom_message(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            authorize_project(
                MEMBER,
                _project(),
                "01JPROJECT0000000000000001",
                ProjectAction.WRITE,
                "Only project owner can update",
            )
        assert exc_info.value.message == "Only project owner can update"

    def test_authorized_project_returned(self):
        project = _project()
        assert authorize_project(MEMBER, project, project.project_id, ProjectAction.READ) is project

    def test_missing_task_is_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            authorize_task(OWNER, None, "missing", TaskAction.DELETE)
        assert exc_info.value.code == "TASK_NOT_FOUND"

    def test_assignee_delete_denied(self):
        task = _task(assigned_to=MEMBER)
        with pytest.raises(PermissionDeniedError):
            authorize_task(MEMBER, task, task.task_id, TaskAction.DELETE)


class TestTaskQuery:
    """列表可见范围"""

    def test_default_query_has_no_filters(self):
        query = task_query_for(MEMBER)
        assert query.visible_to == MEMBER
        assert query.filters == TaskFilters()

    def test_filters_are_kept_alongside_scope(self):
        filters = TaskFilters(status=TaskStatus.COMPLETED, assigned_to=STRANGER)
        query = task_query_for(MEMBER, filters)
        assert query.visible_to == MEMBER
        assert query.filters.assigned_to == STRANGER
