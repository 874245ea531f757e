"""
Task service - kanban board operations.

Each status is a column; ``position`` orders cards within a column and is
kept contiguous from 0 after every create, move and delete.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from fastapi import HTTPException
from sqlalchemy import case
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.services.membership import resolve_org_role
from taskboard.services.projects import column_values
from taskboard_shared.schemas.common import TASK_STATUS_ORDER, TaskStatus
from taskboard_shared.schemas.tasks import TaskCreate, TaskMove, TaskUpdate

log = structlog.get_logger()

_STATUS_RANK = case(
    {status.value: rank for rank, status in enumerate(TASK_STATUS_ORDER)},
    value=Task.status,
    else_=len(TASK_STATUS_ORDER),
)


async def get_task_or_404(session: AsyncSession, task_id: uuid.UUID) -> Task:
    task = await session.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


async def list_tasks(session: AsyncSession, project_id: uuid.UUID) -> list[Task]:
    """All tasks of a project, column by column, each column in card order."""
    result = await session.execute(
        select(Task)
        .where(Task.project_id == project_id)
        .order_by(_STATUS_RANK, Task.position, Task.created_at)
    )
    return list(result.scalars().all())


async def _column(
    session: AsyncSession,
    project_id: uuid.UUID,
    status: str,
    exclude: Optional[uuid.UUID] = None,
) -> list[Task]:
    stmt = (
        select(Task)
        .where(Task.project_id == project_id, Task.status == status)
        .order_by(Task.position, Task.created_at)
    )
    if exclude is not None:
        stmt = stmt.where(Task.id != exclude)
    result = await session.execute(stmt)
    return list(result.scalars().all())


def _renumber(tasks: list[Task]) -> None:
    for index, task in enumerate(tasks):
        if task.position != index:
            task.position = index


async def _ensure_assignee(
    session: AsyncSession, org_id: uuid.UUID, assignee_id: Optional[uuid.UUID]
) -> None:
    if assignee_id is not None and await resolve_org_role(session, assignee_id, org_id) is None:
        raise HTTPException(status_code=422, detail="Assignee is not a member of this organization")


async def create_task(
    session: AsyncSession,
    project: Project,
    req: TaskCreate,
    creator_id: uuid.UUID,
) -> Task:
    """Create a card at the bottom of its column. Assignee defaults to the creator."""
    assignee_id = req.assignee_id or creator_id
    await _ensure_assignee(session, project.org_id, assignee_id)

    column = await _column(session, project.id, req.status.value)
    data = column_values(req.model_dump(exclude={"assignee_id"}))
    task = Task(
        project_id=project.id,
        org_id=project.org_id,
        assignee_id=assignee_id,
        position=len(column),
        **data,
    )
    session.add(task)
    await session.flush()

    log.info("task.created", task_id=str(task.id), project_id=str(project.id), status=task.status)
    return task


async def update_task(session: AsyncSession, task: Task, req: TaskUpdate) -> Task:
    update_data = column_values(req.model_dump(exclude_unset=True))
    if update_data.get("assignee_id") is not None:
        await _ensure_assignee(session, task.org_id, update_data["assignee_id"])

    for key, value in update_data.items():
        setattr(task, key, value)

    session.add(task)
    await session.flush()
    await session.refresh(task)

    log.info("task.updated", task_id=str(task.id), fields=sorted(update_data))
    return task


async def move_task(session: AsyncSession, task: Task, req: TaskMove) -> Task:
    """Move a card to ``req.status`` at ``req.position``.

    Positions past the end of the target column are clamped to the end.
    """
    source_status = task.status
    target_status = req.status.value

    target = await _column(session, task.project_id, target_status, exclude=task.id)
    position = min(req.position, len(target))
    target.insert(position, task)

    task.status = target_status
    _renumber(target)

    if source_status != target_status:
        source = await _column(session, task.project_id, source_status, exclude=task.id)
        _renumber(source)

    await session.flush()
    await session.refresh(task)

    log.info(
        "task.moved",
        task_id=str(task.id),
        from_status=source_status,
        to_status=target_status,
        position=task.position,
    )
    return task


async def delete_task(session: AsyncSession, task: Task) -> None:
    task_id, project_id, status = task.id, task.project_id, task.status
    await session.delete(task)
    await session.flush()

    _renumber(await _column(session, project_id, status))
    await session.flush()

    log.info("task.deleted", task_id=str(task_id), project_id=str(project_id))


def group_by_status(tasks: list[Task]) -> dict[str, list[Task]]:
    """Board view: one list per column, every column present."""
    board: dict[str, list[Task]] = {status.value: [] for status in TaskStatus}
    for task in tasks:
        board.setdefault(task.status, []).append(task)
    return board
