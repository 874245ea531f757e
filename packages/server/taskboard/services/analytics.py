"""
Dashboard aggregates for a workspace.

Org admins and owners see every project; other members see the projects
they can view.
"""

from __future__ import annotations

import uuid

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.models.base import utcnow
from taskboard.models.task import Task
from taskboard.services.projects import accessible_project_ids
from taskboard_shared.schemas.common import TaskStatus


async def dashboard(
    session: AsyncSession,
    user_id: uuid.UUID,
    org_id: uuid.UUID,
    recent_limit: int,
) -> dict:
    project_ids = await accessible_project_ids(session, user_id, org_id)
    scope = (Task.org_id == org_id, Task.project_id.in_(project_ids))

    status_rows = await session.execute(
        select(Task.status, func.count(Task.id).label("cnt"))
        .where(*scope)
        .group_by(Task.status)
    )
    task_counts = [{"status": row.status, "count": row.cnt} for row in status_rows]

    priority_rows = await session.execute(
        select(Task.priority, func.count(Task.id).label("cnt"))
        .where(*scope)
        .group_by(Task.priority)
    )
    priority_counts = [{"priority": row.priority, "count": row.cnt} for row in priority_rows]

    total = sum(item["count"] for item in task_counts)
    done = sum(item["count"] for item in task_counts if item["status"] == TaskStatus.DONE.value)

    overdue = await session.execute(
        select(func.count(Task.id)).where(
            *scope,
            Task.status != TaskStatus.DONE.value,
            Task.due_date.is_not(None),
            Task.due_date < utcnow(),
        )
    )

    recent = await session.execute(
        select(Task).where(*scope).order_by(Task.created_at.desc()).limit(recent_limit)
    )

    return {
        "task_counts": task_counts,
        "priority_counts": priority_counts,
        "total_tasks": total,
        "completion_rate": round(done / total, 4) if total else 0.0,
        "overdue_tasks": overdue.scalar_one(),
        "recent_tasks": list(recent.scalars().all()),
    }
