"""
Shared fixtures: in-memory SQLite per test, an ASGI client bound to it, and
a small builder for users, orgs, projects and tasks.
"""

import os

os.environ.setdefault("TB_DATABASE_URL", "sqlite+aiosqlite://")

import uuid
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

import taskboard.models  # noqa: F401
from taskboard.core.database import (
    build_engine,
    build_session_factory,
    create_tables,
    get_session,
)
from taskboard.main import app
from taskboard.models.member import Member
from taskboard.models.organization import Organization
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task
from taskboard.models.user import User


@pytest.fixture
async def engine():
    eng = build_engine("sqlite+aiosqlite://")
    await create_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
async def client(session_factory):
    async def _override_session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer user-id headers, as issued by the identity provider."""
    def _headers(user) -> dict:
        user_id = getattr(user, "id", user)
        return {"Authorization": f"Bearer {user_id}"}
    return _headers


class World:
    """Builds persisted fixtures; every call commits so API requests see it."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._n = 0

    async def _save(self, obj):
        self.session.add(obj)
        await self.session.commit()
        return obj

    async def user(self, name: Optional[str] = None) -> User:
        self._n += 1
        name = name or f"User {self._n}"
        email = f"{name.lower().replace(' ', '.')}.{self._n}@example.com"
        return await self._save(User(name=name, email=email))

    async def org(self, name: str = "Acme", owner: Optional[User] = None) -> Organization:
        self._n += 1
        org = await self._save(Organization(name=name, slug=f"{name.lower()}-{self._n}"))
        if owner is not None:
            await self.member(owner, org, "owner")
        return org

    async def member(self, user: User, org: Organization, role: str = "member") -> Member:
        return await self._save(Member(user_id=user.id, org_id=org.id, role=role))

    async def project(
        self, org: Organization, name: str = "Project", lead: Optional[User] = None
    ) -> Project:
        return await self._save(
            Project(org_id=org.id, name=name, lead_id=lead.id if lead else None)
        )

    async def project_member(self, user: User, project: Project) -> ProjectMember:
        return await self._save(ProjectMember(project_id=project.id, user_id=user.id))

    async def task(
        self,
        project: Project,
        title: str = "Task",
        status: str = "TODO",
        position: int = 0,
        **kwargs,
    ) -> Task:
        return await self._save(
            Task(
                project_id=project.id,
                org_id=project.org_id,
                title=title,
                status=status,
                position=position,
                **kwargs,
            )
        )


@pytest.fixture
def world(session):
    return World(session)
