"""
Role resolver tests against a real (SQLite) session.
"""

from __future__ import annotations

import uuid

from taskboard.services.membership import (
    resolve_org_role,
    resolve_project_org_id,
    resolve_project_role,
)
from taskboard_shared.schemas.common import OrgRole, ProjectRole


class TestResolveOrgRole:

    async def test_returns_member_role(self, session, world):
        user = await world.user()
        org = await world.org()
        await world.member(user, org, "admin")
        assert await resolve_org_role(session, user.id, org.id) == OrgRole.ADMIN

    async def test_non_member_is_none(self, session, world):
        user = await world.user()
        org = await world.org()
        assert await resolve_org_role(session, user.id, org.id) is None

    async def test_membership_is_per_org(self, session, world):
        user = await world.user()
        org_a = await world.org("Alpha")
        org_b = await world.org("Beta")
        await world.member(user, org_a, "owner")
        assert await resolve_org_role(session, user.id, org_b.id) is None


class TestResolveProjectRole:

    async def test_lead_without_membership_row(self, session, world):
        org = await world.org()
        lead = await world.user()
        project = await world.project(org, lead=lead)
        assert await resolve_project_role(session, lead.id, project.id) == ProjectRole.LEAD

    async def test_lead_wins_over_membership_row(self, session, world):
        org = await world.org()
        lead = await world.user()
        project = await world.project(org, lead=lead)
        await world.project_member(lead, project)
        assert await resolve_project_role(session, lead.id, project.id) == ProjectRole.LEAD

    async def test_explicit_member(self, session, world):
        org = await world.org()
        user = await world.user()
        project = await world.project(org)
        await world.project_member(user, project)
        assert await resolve_project_role(session, user.id, project.id) == ProjectRole.MEMBER

    async def test_outsider_is_none(self, session, world):
        org = await world.org()
        user = await world.user()
        project = await world.project(org)
        assert await resolve_project_role(session, user.id, project.id) is None

    async def test_missing_project_is_none(self, session, world):
        user = await world.user()
        assert await resolve_project_role(session, user.id, uuid.uuid4()) is None


class TestResolveProjectOrgId:

    async def test_existing_project(self, session, world):
        org = await world.org()
        project = await world.project(org)
        assert await resolve_project_org_id(session, project.id) == org.id

    async def test_missing_project(self, session):
        assert await resolve_project_org_id(session, uuid.uuid4()) is None
