"""
Project endpoints: CRUD and membership.

Access levels:
- view  → project member or lead (org admins/owners always pass)
- edit  → project lead
- admin → project lead; changing the lead itself needs org admin
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import get_current_user_id
from taskboard.core.database import get_session
from taskboard.core.permissions import require_org_role, require_project_access
from taskboard.services import projects as project_service
from taskboard_shared.schemas.common import AccessLevel, OrgRole
from taskboard_shared.schemas.projects import (
    ProjectAccessRead,
    ProjectCreate,
    ProjectDetail,
    ProjectMemberAdd,
    ProjectMemberRead,
    ProjectRead,
    ProjectUpdate,
)

# Mounted under /orgs/{org_id}/projects
org_router = APIRouter()

# Mounted under /projects
router = APIRouter()


@org_router.get("", response_model=List[ProjectRead])
async def list_projects(
    org_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Projects in the org the caller can view, newest first."""
    await require_org_role(session, user_id, org_id, OrgRole.MEMBER)
    return await project_service.list_accessible_projects(session, user_id, org_id)


@org_router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    org_id: uuid.UUID,
    project_in: ProjectCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Create a project (org admin or owner)."""
    await require_org_role(session, user_id, org_id, OrgRole.ADMIN)
    return await project_service.create_project(session, org_id, project_in)


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(
    project_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    access = await require_project_access(session, user_id, project_id, AccessLevel.VIEW)
    project = await project_service.get_project_or_404(session, project_id)
    return ProjectDetail(
        **ProjectRead.model_validate(project).model_dump(),
        access=ProjectAccessRead(org_role=access.org_role, project_role=access.project_role),
    )


@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: uuid.UUID,
    project_in: ProjectUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_project_access(session, user_id, project_id, AccessLevel.EDIT)
    project = await project_service.get_project_or_404(session, project_id)
    if "lead_id" in project_in.model_fields_set and project_in.lead_id != project.lead_id:
        await require_org_role(session, user_id, project.org_id, OrgRole.ADMIN)
    return await project_service.update_project(session, project, project_in)


@router.delete("/{project_id}")
async def delete_project(
    project_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_project_access(session, user_id, project_id, AccessLevel.ADMIN)
    project = await project_service.get_project_or_404(session, project_id)
    await project_service.delete_project(session, project)
    return {"ok": True}


# ---------------------------------------------------------------------------
# Project Membership
# ---------------------------------------------------------------------------


@router.get("/{project_id}/members", response_model=List[ProjectMemberRead])
async def list_project_members(
    project_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """The lead and explicit members. Org admins are not listed unless added."""
    await require_project_access(session, user_id, project_id, AccessLevel.VIEW)
    project = await project_service.get_project_or_404(session, project_id)
    return await project_service.list_project_members(session, project)


@router.post("/{project_id}/members", status_code=201)
async def add_project_members(
    project_id: uuid.UUID,
    body: ProjectMemberAdd,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_project_access(session, user_id, project_id, AccessLevel.ADMIN)
    project = await project_service.get_project_or_404(session, project_id)
    added = await project_service.add_project_members(session, project, body.user_ids)
    return {"added": added}


@router.delete("/{project_id}/members/{member_id}")
async def remove_project_member(
    project_id: uuid.UUID,
    member_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_project_access(session, user_id, project_id, AccessLevel.ADMIN)
    project = await project_service.get_project_or_404(session, project_id)
    await project_service.remove_project_member(session, project, member_id)
    return {"ok": True}
