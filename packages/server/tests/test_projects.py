"""
Integration tests for Project endpoints.

Tests cover:
- Listing filtered to projects the caller can view
- Create (org admin only), read with resolved access, update, delete
- Lead changes, project membership add/remove
"""

from __future__ import annotations

import uuid

import pytest

from taskboard.core.permissions import can_access_project
from taskboard.services.projects import list_accessible_projects


@pytest.fixture
async def setup(world):
    owner = await world.user("Olivia")
    admin = await world.user("Adam")
    lead = await world.user("Lena")
    member = await world.user("Max")
    outsider = await world.user("Otto")
    org = await world.org("Acme", owner=owner)
    await world.member(admin, org, "admin")
    await world.member(lead, org, "member")
    await world.member(member, org, "member")

    api = await world.project(org, "API Server", lead=lead)
    docs = await world.project(org, "Docs")
    await world.project_member(member, api)
    return {
        "org": org,
        "owner": owner,
        "admin": admin,
        "lead": lead,
        "member": member,
        "outsider": outsider,
        "api": api,
        "docs": docs,
    }


class TestListProjects:

    async def test_admin_sees_everything(self, client, setup, auth_headers):
        response = await client.get(
            f"/api/v1/orgs/{setup['org'].id}/projects", headers=auth_headers(setup["admin"])
        )
        assert response.status_code == 200
        assert sorted(p["name"] for p in response.json()) == ["API Server", "Docs"]

    async def test_member_sees_assigned_only(self, client, setup, auth_headers):
        for who in ("member", "lead"):
            response = await client.get(
                f"/api/v1/orgs/{setup['org'].id}/projects", headers=auth_headers(setup[who])
            )
            assert [p["name"] for p in response.json()] == ["API Server"]

    async def test_outsider_forbidden(self, client, setup, auth_headers):
        response = await client.get(
            f"/api/v1/orgs/{setup['org'].id}/projects", headers=auth_headers(setup["outsider"])
        )
        assert response.status_code == 403


class TestCreateProject:

    async def test_admin_creates(self, client, setup, auth_headers):
        response = await client.post(
            f"/api/v1/orgs/{setup['org'].id}/projects",
            json={"name": "Mobile", "priority": "high", "lead_id": str(setup["lead"].id)},
            headers=auth_headers(setup["admin"]),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "planning"
        assert body["priority"] == "high"
        assert body["progress"] == 0
        assert body["lead_id"] == str(setup["lead"].id)

    async def test_member_forbidden(self, client, setup, auth_headers):
        response = await client.post(
            f"/api/v1/orgs/{setup['org'].id}/projects",
            json={"name": "Sneaky"},
            headers=auth_headers(setup["member"]),
        )
        assert response.status_code == 403
        assert response.json()["error"]["required_role"] == "admin"

    async def test_lead_must_belong_to_org(self, client, setup, auth_headers):
        response = await client.post(
            f"/api/v1/orgs/{setup['org'].id}/projects",
            json={"name": "Mobile", "lead_id": str(setup["outsider"].id)},
            headers=auth_headers(setup["admin"]),
        )
        assert response.status_code == 422


class TestGetProject:

    async def test_access_block(self, client, setup, auth_headers):
        api_id = setup["api"].id
        cases = [
            ("owner", "owner", None),
            ("lead", "member", "lead"),
            ("member", "member", "member"),
        ]
        for who, org_role, project_role in cases:
            response = await client.get(f"/api/v1/projects/{api_id}", headers=auth_headers(setup[who]))
            assert response.status_code == 200
            assert response.json()["access"] == {"org_role": org_role, "project_role": project_role}

    async def test_unassigned_member_forbidden(self, client, setup, auth_headers):
        response = await client.get(
            f"/api/v1/projects/{setup['docs'].id}", headers=auth_headers(setup["member"])
        )
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Not a member of this project"

    async def test_missing_project(self, client, setup, auth_headers):
        response = await client.get(
            f"/api/v1/projects/{uuid.uuid4()}", headers=auth_headers(setup["owner"])
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_requires_auth(self, client, setup):
        response = await client.get(f"/api/v1/projects/{setup['api'].id}")
        assert response.status_code == 401


class TestUpdateProject:

    async def test_lead_edits(self, client, setup, auth_headers):
        response = await client.patch(
            f"/api/v1/projects/{setup['api'].id}",
            json={"status": "active", "progress": 40},
            headers=auth_headers(setup["lead"]),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "active"
        assert response.json()["progress"] == 40

    async def test_member_cannot_edit(self, client, setup, auth_headers):
        response = await client.patch(
            f"/api/v1/projects/{setup['api'].id}",
            json={"name": "Renamed"},
            headers=auth_headers(setup["member"]),
        )
        assert response.status_code == 403
        assert response.json()["error"]["required_role"] == "lead"

    async def test_progress_bounds(self, client, setup, auth_headers):
        response = await client.patch(
            f"/api/v1/projects/{setup['api'].id}",
            json={"progress": 101},
            headers=auth_headers(setup["lead"]),
        )
        assert response.status_code == 422

    async def test_null_for_required_field_rejected(self, client, setup, auth_headers):
        url = f"/api/v1/projects/{setup['api'].id}"
        for field in ("name", "status", "priority", "progress"):
            response = await client.patch(url, json={field: None}, headers=auth_headers(setup["owner"]))
            assert response.status_code == 422, field

    async def test_null_clears_optional_field(self, client, setup, auth_headers):
        response = await client.patch(
            f"/api/v1/projects/{setup['api'].id}",
            json={"description": None, "end_date": None},
            headers=auth_headers(setup["lead"]),
        )
        assert response.status_code == 200
        assert response.json()["description"] is None

    async def test_lead_change_needs_org_admin(self, client, setup, auth_headers):
        url = f"/api/v1/projects/{setup['api'].id}"
        payload = {"lead_id": str(setup["member"].id)}

        response = await client.patch(url, json=payload, headers=auth_headers(setup["lead"]))
        assert response.status_code == 403

        response = await client.patch(url, json=payload, headers=auth_headers(setup["admin"]))
        assert response.status_code == 200
        assert response.json()["lead_id"] == str(setup["member"].id)

        # The previous lead has no membership row and loses access.
        response = await client.get(url, headers=auth_headers(setup["lead"]))
        assert response.status_code == 403


class TestDeleteProject:

    async def test_member_cannot_delete(self, client, setup, auth_headers):
        response = await client.delete(
            f"/api/v1/projects/{setup['api'].id}", headers=auth_headers(setup["member"])
        )
        assert response.status_code == 403

    async def test_lead_deletes_with_tasks(self, client, world, setup, auth_headers):
        await world.task(setup["api"], "One")
        url = f"/api/v1/projects/{setup['api'].id}"
        response = await client.delete(url, headers=auth_headers(setup["lead"]))
        assert response.status_code == 200

        response = await client.get(url, headers=auth_headers(setup["owner"]))
        assert response.status_code == 404


class TestProjectMembers:

    async def test_list_lead_first(self, client, setup, auth_headers):
        response = await client.get(
            f"/api/v1/projects/{setup['api'].id}/members", headers=auth_headers(setup["member"])
        )
        assert response.status_code == 200
        assert [(m["name"], m["role"]) for m in response.json()] == [
            ("Lena", "lead"),
            ("Max", "member"),
        ]

    async def test_add_members(self, client, setup, auth_headers):
        url = f"/api/v1/projects/{setup['docs'].id}/members"
        body = {"user_ids": [str(setup["member"].id), str(setup["lead"].id)]}
        response = await client.post(url, json=body, headers=auth_headers(setup["admin"]))
        assert response.status_code == 201
        assert len(response.json()["added"]) == 2

        again = await client.post(url, json=body, headers=auth_headers(setup["admin"]))
        assert again.json()["added"] == []

        view = await client.get(
            f"/api/v1/projects/{setup['docs'].id}", headers=auth_headers(setup["member"])
        )
        assert view.status_code == 200

    async def test_add_outsider_rejected(self, client, setup, auth_headers):
        response = await client.post(
            f"/api/v1/projects/{setup['docs'].id}/members",
            json={"user_ids": [str(setup["outsider"].id)]},
            headers=auth_headers(setup["admin"]),
        )
        assert response.status_code == 422

    async def test_member_cannot_add(self, client, setup, auth_headers):
        response = await client.post(
            f"/api/v1/projects/{setup['api'].id}/members",
            json={"user_ids": [str(setup["admin"].id)]},
            headers=auth_headers(setup["member"]),
        )
        assert response.status_code == 403

    async def test_remove_member(self, client, setup, auth_headers):
        url = f"/api/v1/projects/{setup['api'].id}/members/{setup['member'].id}"
        response = await client.delete(url, headers=auth_headers(setup["lead"]))
        assert response.status_code == 200

        again = await client.delete(url, headers=auth_headers(setup["lead"]))
        assert again.status_code == 404

        view = await client.get(
            f"/api/v1/projects/{setup['api'].id}", headers=auth_headers(setup["member"])
        )
        assert view.status_code == 403


class TestAccessibleProjects:

    async def test_matches_per_project_check(self, session, world, setup):
        """Listing agrees with can_access_project for every role in the org."""
        org = setup["org"]
        await world.project(org, "Led by Max", lead=setup["member"])
        project_ids = [
            p.id for p in await list_accessible_projects(session, setup["owner"].id, org.id)
        ]
        assert len(project_ids) == 3

        for who in ("owner", "admin", "lead", "member", "outsider"):
            user_id = setup[who].id
            listed = {p.id for p in await list_accessible_projects(session, user_id, org.id)}
            expected = {
                pid for pid in project_ids if await can_access_project(session, user_id, pid)
            }
            assert listed == expected, who

    async def test_lead_pointer_without_org_membership(self, session, world, setup):
        stray = await world.project(setup["org"], "Stray", lead=setup["outsider"])
        listed = await list_accessible_projects(session, setup["outsider"].id, setup["org"].id)
        assert stray.id not in {p.id for p in listed}
