"""
Organization API endpoints.

GET    /api/v1/orgs                              - List orgs for authenticated user
POST   /api/v1/orgs                              - Create a new org (caller becomes owner)
GET    /api/v1/orgs/{org_id}                     - Get org details
DELETE /api/v1/orgs/{org_id}                     - Delete org (owner only)
GET    /api/v1/orgs/{org_id}/stats               - Member/project/task totals (owner only)
GET    /api/v1/orgs/{org_id}/members             - List members
POST   /api/v1/orgs/{org_id}/members             - Add a member (admin)
PATCH  /api/v1/orgs/{org_id}/members/{user_id}   - Change a member's role (admin)
DELETE /api/v1/orgs/{org_id}/members/{user_id}   - Remove a member (admin, or self)
GET    /api/v1/orgs/{org_id}/candidates          - Find users to invite (admin)
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import get_current_user_id
from taskboard.core.config import get_settings
from taskboard.core.database import get_session
from taskboard.core.permissions import require_org_owner, require_org_role
from taskboard.services import organizations as org_service
from taskboard_shared.schemas.common import OrgRole
from taskboard_shared.schemas.organizations import (
    CandidateRead,
    MemberAddRequest,
    MemberRead,
    MemberRoleUpdate,
    OrgCreateRequest,
    OrgListResponse,
    OrgResponse,
    OrgStatsResponse,
)

router = APIRouter()


def _org_response(org, role=None) -> OrgResponse:
    return OrgResponse(
        id=org.id,
        name=org.name,
        slug=org.slug,
        logo=org.logo,
        role=role,
        created_at=org.created_at,
    )


@router.get("", response_model=OrgListResponse)
async def list_orgs(
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """List orgs the authenticated user belongs to."""
    items = await org_service.list_user_orgs(user_id, session)
    return OrgListResponse(data=items)


@router.post("", response_model=OrgResponse, status_code=201)
async def create_org(
    body: OrgCreateRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Create a new organization. The creator becomes its owner."""
    org = await org_service.create_org(body, user_id, session)
    return _org_response(org, OrgRole.OWNER)


@router.get("/{org_id}", response_model=OrgResponse)
async def get_org(
    org_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    role = await require_org_role(session, user_id, org_id, OrgRole.MEMBER)
    org = await org_service.get_org(org_id, session)
    return _org_response(org, role)


@router.delete("/{org_id}")
async def delete_org(
    org_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Delete the workspace and all of its projects and tasks (owner only)."""
    await require_org_owner(session, user_id, org_id)
    org = await org_service.get_org(org_id, session)
    await org_service.delete_org(org, user_id, session)
    return {"success": True, "message": "Organization deleted successfully"}


@router.get("/{org_id}/stats", response_model=OrgStatsResponse)
async def get_org_stats(
    org_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Totals shown in the delete-workspace confirmation (owner only)."""
    await require_org_owner(session, user_id, org_id)
    org = await org_service.get_org(org_id, session)
    stats = await org_service.get_org_stats(org_id, session)
    return OrgStatsResponse(organization=_org_response(org, OrgRole.OWNER), stats=stats)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

@router.get("/{org_id}/members", response_model=List[MemberRead])
async def list_members(
    org_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_org_role(session, user_id, org_id, OrgRole.MEMBER)
    return await org_service.list_members(org_id, session)


@router.post("/{org_id}/members", response_model=MemberRead, status_code=201)
async def add_member(
    org_id: uuid.UUID,
    body: MemberAddRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    actor_role = await require_org_role(session, user_id, org_id, OrgRole.ADMIN)
    await org_service.add_member(org_id, body, actor_role, session)
    members = await org_service.list_members(org_id, session)
    return next(m for m in members if m["user_id"] == body.user_id)


@router.patch("/{org_id}/members/{member_id}", response_model=MemberRead)
async def update_member_role(
    org_id: uuid.UUID,
    member_id: uuid.UUID,
    body: MemberRoleUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    actor_role = await require_org_role(session, user_id, org_id, OrgRole.ADMIN)
    await org_service.update_member_role(org_id, member_id, body.role, actor_role, session)
    members = await org_service.list_members(org_id, session)
    return next(m for m in members if m["user_id"] == member_id)


@router.delete("/{org_id}/members/{member_id}")
async def remove_member(
    org_id: uuid.UUID,
    member_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Admins remove anyone below owner; any member may leave."""
    if member_id == user_id:
        actor_role = await require_org_role(session, user_id, org_id, OrgRole.MEMBER)
    else:
        actor_role = await require_org_role(session, user_id, org_id, OrgRole.ADMIN)
    await org_service.remove_member(org_id, member_id, user_id, actor_role, session)
    return {"ok": True}


@router.get("/{org_id}/candidates", response_model=List[CandidateRead])
async def search_candidates(
    org_id: uuid.UUID,
    q: str = Query("", max_length=200),
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Users matching name or email who are not yet members (admin only)."""
    await require_org_role(session, user_id, org_id, OrgRole.ADMIN)
    users = await org_service.search_candidates(
        org_id, q, get_settings().candidate_search_limit, session
    )
    return [
        CandidateRead(id=u.id, name=u.name, email=u.email, image=u.image) for u in users
    ]
