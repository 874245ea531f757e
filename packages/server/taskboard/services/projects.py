"""
Project service - project CRUD and explicit project membership.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

import structlog
from fastapi import HTTPException
from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.models.member import Member
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.services.membership import resolve_org_role
from taskboard_shared.schemas.common import OrgRole, ProjectRole, org_role_at_least
from taskboard_shared.schemas.projects import ProjectCreate, ProjectUpdate

log = structlog.get_logger()


def column_values(data: dict) -> dict:
    """Unwrap enum members so rows store their plain values."""
    return {key: value.value if isinstance(value, Enum) else value for key, value in data.items()}


async def get_project_or_404(session: AsyncSession, project_id: uuid.UUID) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


async def _ensure_org_member(
    session: AsyncSession, org_id: uuid.UUID, user_id: Optional[uuid.UUID]
) -> None:
    if user_id is None:
        return
    if await resolve_org_role(session, user_id, org_id) is None:
        raise HTTPException(
            status_code=422, detail=f"User {user_id} is not a member of this organization"
        )


async def list_accessible_projects(
    session: AsyncSession, user_id: uuid.UUID, org_id: uuid.UUID
) -> list[Project]:
    """Projects in the org the user can view, newest first.

    Same answer as filtering with ``can_access_project``, in one role read
    and one query: admins see every project, members see the ones they lead
    or belong to.
    """
    org_role = await resolve_org_role(session, user_id, org_id)
    if org_role is None:
        return []

    stmt = (
        select(Project)
        .where(Project.org_id == org_id)
        .order_by(Project.created_at.desc())
    )
    if not org_role_at_least(org_role, OrgRole.ADMIN):
        assigned = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
        stmt = stmt.where(or_(Project.lead_id == user_id, Project.id.in_(assigned)))

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def accessible_project_ids(
    session: AsyncSession, user_id: uuid.UUID, org_id: uuid.UUID
) -> list[uuid.UUID]:
    return [p.id for p in await list_accessible_projects(session, user_id, org_id)]


async def create_project(
    session: AsyncSession, org_id: uuid.UUID, req: ProjectCreate
) -> Project:
    await _ensure_org_member(session, org_id, req.lead_id)

    project = Project(org_id=org_id, **column_values(req.model_dump()))
    session.add(project)
    await session.flush()

    log.info("project.created", project_id=str(project.id), org_id=str(org_id), name=project.name)
    return project


async def update_project(
    session: AsyncSession, project: Project, req: ProjectUpdate
) -> Project:
    update_data = column_values(req.model_dump(exclude_unset=True))
    if "lead_id" in update_data:
        await _ensure_org_member(session, project.org_id, update_data["lead_id"])

    for key, value in update_data.items():
        setattr(project, key, value)

    session.add(project)
    await session.flush()
    await session.refresh(project)

    log.info("project.updated", project_id=str(project.id), fields=sorted(update_data))
    return project


async def delete_project(session: AsyncSession, project: Project) -> None:
    await session.execute(delete(Task).where(Task.project_id == project.id))
    await session.execute(delete(ProjectMember).where(ProjectMember.project_id == project.id))
    await session.delete(project)
    await session.flush()

    log.info("project.deleted", project_id=str(project.id), org_id=str(project.org_id))


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------

async def list_project_members(session: AsyncSession, project: Project) -> list[dict]:
    """The lead (if any) followed by explicit members."""
    members: list[dict] = []
    if project.lead_id is not None:
        lead = await session.get(User, project.lead_id)
        if lead:
            members.append(
                {"user_id": lead.id, "name": lead.name, "email": lead.email, "role": ProjectRole.LEAD}
            )

    result = await session.execute(
        select(User)
        .join(ProjectMember, ProjectMember.user_id == User.id)
        .where(ProjectMember.project_id == project.id)
        .order_by(ProjectMember.created_at)
    )
    for user in result.scalars().all():
        if user.id == project.lead_id:
            continue
        members.append(
            {"user_id": user.id, "name": user.name, "email": user.email, "role": ProjectRole.MEMBER}
        )
    return members


async def add_project_members(
    session: AsyncSession, project: Project, user_ids: list[uuid.UUID]
) -> list[str]:
    """Add org members to the project; already-assigned users are skipped."""
    result = await session.execute(
        select(Member.user_id).where(
            Member.org_id == project.org_id, Member.user_id.in_(user_ids)
        )
    )
    org_member_ids = set(result.scalars().all())
    outsiders = [str(uid) for uid in user_ids if uid not in org_member_ids]
    if outsiders:
        raise HTTPException(
            status_code=422,
            detail=f"Users are not members of this organization: {', '.join(outsiders)}",
        )

    added = []
    for uid in dict.fromkeys(user_ids):
        if await session.get(ProjectMember, (project.id, uid)):
            continue
        session.add(ProjectMember(project_id=project.id, user_id=uid))
        added.append(str(uid))

    await session.flush()
    log.info("project.members_added", project_id=str(project.id), added=added)
    return added


async def remove_project_member(
    session: AsyncSession, project: Project, user_id: uuid.UUID
) -> None:
    membership = await session.get(ProjectMember, (project.id, user_id))
    if not membership:
        raise HTTPException(status_code=404, detail="User not assigned to project")
    await session.delete(membership)
    await session.flush()
    log.info("project.member_removed", project_id=str(project.id), user_id=str(user_id))
