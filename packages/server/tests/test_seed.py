"""Development seed data."""

from sqlmodel import select

from taskboard.core.permissions import can_access_project, require_org_owner
from taskboard.models.task import Task
from taskboard.seed import LEAD_ID, MEMBER_ID, ORG_ID, OWNER_ID, PROJECT_IDS, TASKS, seed


async def test_seed_is_idempotent(session):
    await seed(session)
    await session.commit()
    await seed(session)
    await session.commit()

    result = await session.execute(select(Task))
    assert len(result.scalars().all()) == len(TASKS)


async def test_seed_roles(session):
    await seed(session)
    await session.commit()

    await require_org_owner(session, OWNER_ID, ORG_ID)
    assert await can_access_project(session, LEAD_ID, PROJECT_IDS[0])
    assert await can_access_project(session, MEMBER_ID, PROJECT_IDS[0])
    assert not await can_access_project(session, MEMBER_ID, PROJECT_IDS[1])
