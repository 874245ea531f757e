"""
Workspace search and dashboard analytics.

GET /api/v1/orgs/{org_id}/search?q=          - Projects and tasks by name/title
GET /api/v1/orgs/{org_id}/analytics/dashboard - Task aggregates for the dashboard
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import get_current_user_id
from taskboard.core.config import get_settings
from taskboard.core.database import get_session
from taskboard.core.permissions import require_org_role
from taskboard.services import analytics as analytics_service
from taskboard.services import search as search_service
from taskboard_shared.schemas.analytics import DashboardResponse, SearchResponse
from taskboard_shared.schemas.common import OrgRole

router = APIRouter()


@router.get("/search", response_model=SearchResponse)
async def search(
    org_id: uuid.UUID,
    q: str = Query("", max_length=200),
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_org_role(session, user_id, org_id, OrgRole.MEMBER)
    return await search_service.search_workspace(
        session, user_id, org_id, q, get_settings().search_result_limit
    )


@router.get("/analytics/dashboard", response_model=DashboardResponse)
async def dashboard(
    org_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    await require_org_role(session, user_id, org_id, OrgRole.MEMBER)
    data = await analytics_service.dashboard(
        session, user_id, org_id, get_settings().dashboard_recent_limit
    )
    return {"data": data}
