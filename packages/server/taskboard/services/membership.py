"""
Role resolution - reads membership state to answer "what role does a user hold".

Every lookup is a single point read. Absence is returned as ``None``; nothing
in this module raises for a missing row.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.models.member import Member
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard_shared.schemas.common import OrgRole, ProjectRole


async def resolve_org_role(
    session: AsyncSession, user_id: uuid.UUID, org_id: uuid.UUID
) -> Optional[OrgRole]:
    """Return the user's role in the org, or None for a non-member."""
    result = await session.execute(
        select(Member.role)
        .where(Member.user_id == user_id, Member.org_id == org_id)
        .limit(1)
    )
    role = result.scalar_one_or_none()
    return OrgRole(role) if role else None


async def resolve_project_role(
    session: AsyncSession, user_id: uuid.UUID, project_id: uuid.UUID
) -> Optional[ProjectRole]:
    """Return the user's project role.

    Lead status is checked first and wins outright; the membership table is
    only consulted for non-leads.
    """
    result = await session.execute(
        select(Project.lead_id).where(Project.id == project_id).limit(1)
    )
    row = result.first()
    if row is None:
        return None
    if row.lead_id is not None and row.lead_id == user_id:
        return ProjectRole.LEAD

    result = await session.execute(
        select(ProjectMember.user_id)
        .where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        )
        .limit(1)
    )
    return ProjectRole.MEMBER if result.first() is not None else None


async def resolve_project_org_id(
    session: AsyncSession, project_id: uuid.UUID
) -> Optional[uuid.UUID]:
    """Return the id of the org owning the project, or None if it does not exist."""
    result = await session.execute(
        select(Project.org_id).where(Project.id == project_id).limit(1)
    )
    return result.scalar_one_or_none()
