"""
Access policy engine.

Two-level role model:
- Organization roles: member < admin < owner
- Project roles: member < lead (the project's lead_id implies "lead")

Org admins and owners pass through every project-level check in their org,
whether or not they are recorded as project members.

Each call is a fresh evaluation against persisted membership; nothing is
cached across requests.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import AccessError, Forbidden, NotFound
from taskboard.services.membership import (
    resolve_org_role,
    resolve_project_org_id,
    resolve_project_role,
)
from taskboard_shared.schemas.common import (
    ACCESS_LEVEL_MIN_PROJECT_ROLE,
    AccessLevel,
    OrgRole,
    ProjectRole,
    org_role_at_least,
    project_role_at_least,
)

log = structlog.get_logger()


@dataclass(frozen=True)
class ProjectAccess:
    """Roles that satisfied a project access check."""

    org_role: OrgRole
    project_role: Optional[ProjectRole]


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of evaluating (user, project, level). Never persisted."""

    granted: bool
    org_role: Optional[OrgRole] = None
    project_role: Optional[ProjectRole] = None
    error: Optional[AccessError] = None

    @classmethod
    def allow(cls, org_role: OrgRole, project_role: Optional[ProjectRole]) -> "AccessDecision":
        return cls(granted=True, org_role=org_role, project_role=project_role)

    @classmethod
    def deny(
        cls,
        error: AccessError,
        org_role: Optional[OrgRole] = None,
        project_role: Optional[ProjectRole] = None,
    ) -> "AccessDecision":
        return cls(granted=False, org_role=org_role, project_role=project_role, error=error)


# ---------------------------------------------------------------------------
# Organization checks
# ---------------------------------------------------------------------------

async def require_org_role(
    session: AsyncSession,
    user_id: uuid.UUID,
    org_id: uuid.UUID,
    min_role: OrgRole,
) -> OrgRole:
    """Require ``min_role`` or higher in the org. Returns the resolved role."""
    role = await resolve_org_role(session, user_id, org_id)
    if role is None:
        log.info("access.denied", user_id=str(user_id), org_id=str(org_id), reason="not_org_member")
        raise Forbidden("Not a member of this organization")

    if not org_role_at_least(role, min_role):
        log.info(
            "access.denied",
            user_id=str(user_id),
            org_id=str(org_id),
            reason="org_role_too_low",
            role=role.value,
            required=min_role.value,
        )
        raise Forbidden(f"Requires {min_role.value} role or higher", required_role=min_role.value)

    return role


async def is_org_admin(session: AsyncSession, user_id: uuid.UUID, org_id: uuid.UUID) -> bool:
    role = await resolve_org_role(session, user_id, org_id)
    return org_role_at_least(role, OrgRole.ADMIN)


async def require_org_owner(session: AsyncSession, user_id: uuid.UUID, org_id: uuid.UUID) -> None:
    """Require exactly the owner role; admin does not qualify."""
    role = await resolve_org_role(session, user_id, org_id)
    if role is None:
        log.info("access.denied", user_id=str(user_id), org_id=str(org_id), reason="not_org_member")
        raise Forbidden("Not a member of this organization")
    if role != OrgRole.OWNER:
        log.info("access.denied", user_id=str(user_id), org_id=str(org_id), reason="not_owner")
        raise Forbidden(
            "Only organization owner can perform this action",
            required_role=OrgRole.OWNER.value,
        )


# ---------------------------------------------------------------------------
# Project checks
# ---------------------------------------------------------------------------

async def evaluate_project_access(
    session: AsyncSession,
    user_id: uuid.UUID,
    project_id: uuid.UUID,
    level: AccessLevel,
) -> AccessDecision:
    """Decide whether the user may act on the project at ``level``. Never raises."""
    org_id = await resolve_project_org_id(session, project_id)
    if org_id is None:
        return AccessDecision.deny(NotFound("Project not found"))

    org_role = await resolve_org_role(session, user_id, org_id)
    if org_role is None:
        return AccessDecision.deny(Forbidden("Not a member of this organization"))

    if org_role_at_least(org_role, OrgRole.ADMIN):
        return AccessDecision.allow(org_role, None)

    project_role = await resolve_project_role(session, user_id, project_id)
    if project_role is None:
        return AccessDecision.deny(Forbidden("Not a member of this project"), org_role=org_role)

    min_project_role = ACCESS_LEVEL_MIN_PROJECT_ROLE[level]
    if not project_role_at_least(project_role, min_project_role):
        return AccessDecision.deny(
            Forbidden(
                f"Requires project {min_project_role.value} role or higher",
                required_role=min_project_role.value,
            ),
            org_role=org_role,
            project_role=project_role,
        )

    return AccessDecision.allow(org_role, project_role)


async def require_project_access(
    session: AsyncSession,
    user_id: uuid.UUID,
    project_id: uuid.UUID,
    level: AccessLevel,
) -> ProjectAccess:
    """Raise NotFound/Forbidden unless the user has ``level`` access to the project."""
    decision = await evaluate_project_access(session, user_id, project_id, level)
    if not decision.granted:
        log.info(
            "access.denied",
            user_id=str(user_id),
            project_id=str(project_id),
            level=level.value,
            reason=decision.error.message,
        )
        raise decision.error
    return ProjectAccess(org_role=decision.org_role, project_role=decision.project_role)


async def can_access_project(
    session: AsyncSession, user_id: uuid.UUID, project_id: uuid.UUID
) -> bool:
    """View-level check collapsed to a bool, for filtering lists."""
    decision = await evaluate_project_access(session, user_id, project_id, AccessLevel.VIEW)
    return decision.granted
