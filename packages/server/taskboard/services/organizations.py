"""
Organization service - workspace CRUD and membership management.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import HTTPException
from sqlalchemy import delete, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.core.errors import Forbidden
from taskboard.models.member import Member
from taskboard.models.organization import Organization
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard_shared.schemas.common import OrgRole
from taskboard_shared.schemas.organizations import (
    MemberAddRequest,
    OrgCreateRequest,
    OrgStats,
)

log = structlog.get_logger()


async def list_user_orgs(
    user_id: uuid.UUID, session: AsyncSession
) -> list[dict]:
    """List all orgs a user belongs to, with their role."""
    result = await session.execute(
        select(Organization, Member.role)
        .join(Member, Member.org_id == Organization.id)
        .where(Member.user_id == user_id)
        .order_by(Organization.created_at)
    )
    return [
        {
            "id": org.id,
            "name": org.name,
            "slug": org.slug,
            "logo": org.logo,
            "role": role,
            "created_at": org.created_at,
        }
        for org, role in result.all()
    ]


async def create_org(
    req: OrgCreateRequest,
    creator_id: uuid.UUID,
    session: AsyncSession,
) -> Organization:
    """Create an org and make the creator its owner."""
    existing = await session.execute(
        select(Organization).where(Organization.slug == req.slug)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Org slug already taken")

    org = Organization(name=req.name, slug=req.slug, logo=req.logo)
    session.add(org)
    await session.flush()

    session.add(Member(user_id=creator_id, org_id=org.id, role=OrgRole.OWNER.value))
    await session.flush()

    log.info("org.created", org_id=str(org.id), slug=req.slug, creator=str(creator_id))
    return org


async def get_org(org_id: uuid.UUID, session: AsyncSession) -> Organization:
    """Get an org by id; raises 404 if not found."""
    org = await session.get(Organization, org_id)
    if not org:
        raise HTTPException(status_code=404, detail="Organization not found")
    return org


async def _count(session: AsyncSession, stmt) -> int:
    result = await session.execute(stmt)
    return result.scalar_one() or 0


async def get_org_stats(org_id: uuid.UUID, session: AsyncSession) -> OrgStats:
    """Member, project and task totals (shown before deleting a workspace)."""
    return OrgStats(
        members=await _count(
            session, select(func.count()).select_from(Member).where(Member.org_id == org_id)
        ),
        projects=await _count(
            session, select(func.count()).select_from(Project).where(Project.org_id == org_id)
        ),
        tasks=await _count(
            session, select(func.count()).select_from(Task).where(Task.org_id == org_id)
        ),
    )


async def delete_org(org: Organization, user_id: uuid.UUID, session: AsyncSession) -> None:
    """Delete a workspace and everything it owns.

    The caller must keep at least one workspace.
    """
    owned = await _count(
        session, select(func.count()).select_from(Member).where(Member.user_id == user_id)
    )
    if owned <= 1:
        raise HTTPException(status_code=400, detail="Cannot delete your only workspace")

    project_ids = select(Project.id).where(Project.org_id == org.id)
    await session.execute(delete(Task).where(Task.org_id == org.id))
    await session.execute(delete(ProjectMember).where(ProjectMember.project_id.in_(project_ids)))
    await session.execute(delete(Project).where(Project.org_id == org.id))
    await session.execute(delete(Member).where(Member.org_id == org.id))
    await session.delete(org)
    await session.flush()

    log.info("org.deleted", org_id=str(org.id), slug=org.slug, actor=str(user_id))


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------

async def list_members(org_id: uuid.UUID, session: AsyncSession) -> list[dict]:
    result = await session.execute(
        select(Member, User)
        .join(User, User.id == Member.user_id)
        .where(Member.org_id == org_id)
        .order_by(Member.created_at)
    )
    return [
        {
            "user_id": user.id,
            "name": user.name,
            "email": user.email,
            "image": user.image,
            "role": member.role,
            "created_at": member.created_at,
        }
        for member, user in result.all()
    ]


async def _get_member(
    org_id: uuid.UUID, user_id: uuid.UUID, session: AsyncSession
) -> Member:
    member = await session.get(Member, (user_id, org_id))
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


async def _owner_count(org_id: uuid.UUID, session: AsyncSession) -> int:
    return await _count(
        session,
        select(func.count())
        .select_from(Member)
        .where(Member.org_id == org_id, Member.role == OrgRole.OWNER.value),
    )


def _require_owner_actor(actor_role: OrgRole) -> None:
    if actor_role != OrgRole.OWNER:
        raise Forbidden(
            "Only organization owner can grant or revoke ownership",
            required_role=OrgRole.OWNER.value,
        )


async def add_member(
    org_id: uuid.UUID,
    req: MemberAddRequest,
    actor_role: OrgRole,
    session: AsyncSession,
) -> Member:
    if req.role == OrgRole.OWNER:
        _require_owner_actor(actor_role)

    if not await session.get(User, req.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    if await session.get(Member, (req.user_id, org_id)):
        raise HTTPException(status_code=409, detail="User is already a member")

    member = Member(user_id=req.user_id, org_id=org_id, role=req.role.value)
    session.add(member)
    await session.flush()

    log.info("org.member_added", org_id=str(org_id), user_id=str(req.user_id), role=req.role.value)
    return member


async def update_member_role(
    org_id: uuid.UUID,
    user_id: uuid.UUID,
    new_role: OrgRole,
    actor_role: OrgRole,
    session: AsyncSession,
) -> Member:
    member = await _get_member(org_id, user_id, session)
    current = OrgRole(member.role)
    if current == new_role:
        return member

    if OrgRole.OWNER in (current, new_role):
        _require_owner_actor(actor_role)

    if current == OrgRole.OWNER and await _owner_count(org_id, session) <= 1:
        raise HTTPException(
            status_code=409, detail="Organization must keep at least one owner"
        )

    member.role = new_role.value
    session.add(member)
    await session.flush()

    log.info(
        "org.member_role_changed",
        org_id=str(org_id),
        user_id=str(user_id),
        from_role=current.value,
        to_role=new_role.value,
    )
    return member


async def remove_member(
    org_id: uuid.UUID,
    user_id: uuid.UUID,
    actor_id: uuid.UUID,
    actor_role: OrgRole,
    session: AsyncSession,
) -> None:
    """Remove a member, along with their project memberships and lead pointers in the org."""
    member = await _get_member(org_id, user_id, session)
    role = OrgRole(member.role)

    if role == OrgRole.OWNER:
        if actor_id != user_id:
            _require_owner_actor(actor_role)
        if await _owner_count(org_id, session) <= 1:
            raise HTTPException(
                status_code=409, detail="Organization must keep at least one owner"
            )

    project_ids = select(Project.id).where(Project.org_id == org_id)
    await session.execute(
        delete(ProjectMember).where(
            ProjectMember.user_id == user_id,
            ProjectMember.project_id.in_(project_ids),
        )
    )
    await session.execute(
        update(Project)
        .where(Project.org_id == org_id, Project.lead_id == user_id)
        .values(lead_id=None)
    )
    await session.delete(member)
    await session.flush()

    log.info("org.member_removed", org_id=str(org_id), user_id=str(user_id), actor=str(actor_id))


async def search_candidates(
    org_id: uuid.UUID, q: str, limit: int, session: AsyncSession
) -> list[User]:
    """Users matching ``q`` by name or email who are not yet members."""
    term = q.strip()
    if not term:
        return []

    pattern = f"%{term.lower()}%"
    existing = select(Member.user_id).where(Member.org_id == org_id)
    result = await session.execute(
        select(User)
        .where(
            or_(func.lower(User.name).like(pattern), func.lower(User.email).like(pattern)),
            User.id.not_in(existing),
        )
        .order_by(User.name)
        .limit(limit)
    )
    return list(result.scalars().all())
