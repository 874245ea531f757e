"""
Organization (workspace) schemas.

Covers: org create/read, membership management, deletion stats.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import OrgRole


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrgCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(
        min_length=2,
        max_length=48,
        pattern=r"^[a-z0-9][a-z0-9-]*[a-z0-9]$",
        description="URL-safe identifier: lowercase, digits, hyphens",
    )
    logo: Optional[str] = None


class MemberAddRequest(BaseModel):
    user_id: uuid.UUID
    role: OrgRole = OrgRole.MEMBER


class MemberRoleUpdate(BaseModel):
    role: OrgRole


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrgResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    logo: Optional[str] = None
    role: Optional[OrgRole] = None
    created_at: datetime


class OrgListResponse(BaseModel):
    data: list[OrgResponse]


class MemberRead(BaseModel):
    user_id: uuid.UUID
    name: str
    email: str
    image: Optional[str] = None
    role: OrgRole
    created_at: datetime


class CandidateRead(BaseModel):
    """A user who could be invited into the org."""
    id: uuid.UUID
    name: str
    email: str
    image: Optional[str] = None


class OrgStats(BaseModel):
    members: int = 0
    projects: int = 0
    tasks: int = 0


class OrgStatsResponse(BaseModel):
    organization: OrgResponse
    stats: OrgStats
