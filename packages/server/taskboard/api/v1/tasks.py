"""
Task endpoints (kanban board).

Project members may create, edit and move cards; deleting a card needs
project edit access.
"""

from __future__ import annotations

import uuid
from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import get_current_user_id
from taskboard.core.database import get_session
from taskboard.core.permissions import require_project_access
from taskboard.services import projects as project_service
from taskboard.services import tasks as task_service
from taskboard_shared.schemas.common import AccessLevel
from taskboard_shared.schemas.tasks import TaskCreate, TaskMove, TaskRead, TaskUpdate

# Mounted under /projects/{project_id}/tasks
project_router = APIRouter()

# Mounted under /tasks
router = APIRouter()


@project_router.get("", response_model=List[TaskRead])
async def list_tasks(
    project_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_project_access(session, user_id, project_id, AccessLevel.VIEW)
    return await task_service.list_tasks(session, project_id)


@project_router.get("/board", response_model=Dict[str, List[TaskRead]])
async def get_board(
    project_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Tasks grouped into kanban columns keyed by status."""
    await require_project_access(session, user_id, project_id, AccessLevel.VIEW)
    tasks = await task_service.list_tasks(session, project_id)
    return task_service.group_by_status(tasks)


@project_router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    project_id: uuid.UUID,
    task_in: TaskCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_project_access(session, user_id, project_id, AccessLevel.VIEW)
    project = await project_service.get_project_or_404(session, project_id)
    return await task_service.create_task(session, project, task_in, user_id)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: uuid.UUID,
    task_in: TaskUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    task = await task_service.get_task_or_404(session, task_id)
    await require_project_access(session, user_id, task.project_id, AccessLevel.VIEW)
    return await task_service.update_task(session, task, task_in)


@router.post("/{task_id}/move", response_model=TaskRead)
async def move_task(
    task_id: uuid.UUID,
    body: TaskMove,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Drop a card into a column at a position; both columns are re-packed."""
    task = await task_service.get_task_or_404(session, task_id)
    await require_project_access(session, user_id, task.project_id, AccessLevel.VIEW)
    return await task_service.move_task(session, task, body)


@router.delete("/{task_id}")
async def delete_task(
    task_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    task = await task_service.get_task_or_404(session, task_id)
    await require_project_access(session, user_id, task.project_id, AccessLevel.EDIT)
    await task_service.delete_task(session, task)
    return {"ok": True}
