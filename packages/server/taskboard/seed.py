"""Seed a development database with a workspace that exercises every role.

Usage:
    python -m taskboard.seed

Requires TB_DATABASE_URL (or defaults to localhost). Safe to re-run.
"""

import asyncio
import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import get_settings
from taskboard.core.database import get_session_context, init_db
from taskboard.core.logging_config import configure_logging
from taskboard.models.member import Member
from taskboard.models.organization import Organization
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task
from taskboard.models.user import User

log = structlog.get_logger()

# Deterministic UUIDs for reproducibility
ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OWNER_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000011")
LEAD_ID = uuid.UUID("00000000-0000-0000-0000-000000000012")
MEMBER_ID = uuid.UUID("00000000-0000-0000-0000-000000000013")
PROJECT_IDS = [uuid.UUID(f"00000000-0000-0000-0000-0000000001{i:02d}") for i in range(2)]

USERS = [
    (OWNER_ID, "Olivia Owner", "owner@acme.dev", "owner"),
    (ADMIN_ID, "Adam Admin", "admin@acme.dev", "admin"),
    (LEAD_ID, "Lena Lead", "lead@acme.dev", "member"),
    (MEMBER_ID, "Max Member", "member@acme.dev", "member"),
]

TASKS = [
    ("Set up CI pipeline", "TASK", "high", "TODO"),
    ("Implement auth middleware", "FEATURE", "high", "IN_PROGRESS"),
    ("Fix login redirect bug", "BUG", "medium", "IN_PROGRESS"),
    ("Add health check endpoint", "TASK", "low", "DONE"),
    ("Write contribution guide", "IMPROVEMENT", "low", "TODO"),
]


async def seed(session: AsyncSession) -> None:
    """Insert the demo workspace unless it already exists."""
    if await session.get(Organization, ORG_ID):
        log.info("seed.skipped", org_id=str(ORG_ID))
        return

    session.add(Organization(id=ORG_ID, name="Acme Robotics", slug="acme-robotics"))
    for uid, name, email, _ in USERS:
        session.add(User(id=uid, name=name, email=email))
    await session.flush()

    for uid, _, _, role in USERS:
        session.add(Member(user_id=uid, org_id=ORG_ID, role=role))

    # Lena leads the API project without a membership row; Max is an explicit member.
    session.add(Project(id=PROJECT_IDS[0], org_id=ORG_ID, name="API Server", status="active", lead_id=LEAD_ID))
    session.add(Project(id=PROJECT_IDS[1], org_id=ORG_ID, name="Documentation Site"))
    await session.flush()
    session.add(ProjectMember(project_id=PROJECT_IDS[0], user_id=MEMBER_ID))

    positions: dict[str, int] = {}
    for title, ttype, priority, status in TASKS:
        session.add(
            Task(
                project_id=PROJECT_IDS[0],
                org_id=ORG_ID,
                title=title,
                type=ttype,
                priority=priority,
                status=status,
                position=positions.get(status, 0),
                assignee_id=LEAD_ID,
            )
        )
        positions[status] = positions.get(status, 0) + 1

    await session.flush()
    log.info("seed.done", org_id=str(ORG_ID), users=len(USERS), projects=len(PROJECT_IDS), tasks=len(TASKS))


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, "text")
    await init_db()
    async with get_session_context() as session:
        await seed(session)


if __name__ == "__main__":
    asyncio.run(main())
