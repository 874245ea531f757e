"""
Workspace search over project names and task titles.

Results are limited to projects the caller can view.
"""

from __future__ import annotations

import uuid

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.services.projects import accessible_project_ids


def _like_pattern(q: str) -> str:
    escaped = q.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def search_workspace(
    session: AsyncSession,
    user_id: uuid.UUID,
    org_id: uuid.UUID,
    q: str,
    limit: int,
) -> dict:
    """Case-insensitive substring match; most recently updated first."""
    term = q.strip()
    if not term:
        return {"projects": [], "tasks": []}

    project_ids = await accessible_project_ids(session, user_id, org_id)
    if not project_ids:
        return {"projects": [], "tasks": []}

    pattern = _like_pattern(term)

    projects = await session.execute(
        select(Project.id, Project.name)
        .where(
            Project.id.in_(project_ids),
            func.lower(Project.name).like(pattern, escape="\\"),
        )
        .order_by(Project.updated_at.desc())
        .limit(limit)
    )
    tasks = await session.execute(
        select(Task.id, Task.title, Task.project_id)
        .where(
            Task.project_id.in_(project_ids),
            func.lower(Task.title).like(pattern, escape="\\"),
        )
        .order_by(Task.updated_at.desc())
        .limit(limit)
    )

    return {
        "projects": [{"id": row.id, "name": row.name} for row in projects],
        "tasks": [
            {"id": row.id, "title": row.title, "project_id": row.project_id} for row in tasks
        ],
    }
