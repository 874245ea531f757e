"""
Authentication dependency.

Session issuance lives outside this service. Callers present the user id
issued by the identity provider as a bearer token:

    Authorization: Bearer <user-uuid>
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from fastapi import Depends, HTTPException
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.core.database import get_session
from taskboard.models.user import User

log = structlog.get_logger()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)


def parse_bearer_token(header: str) -> uuid.UUID:
    """Extract the user id from an Authorization header value.

    Raises ValueError if the header is not ``Bearer <uuid>``.
    """
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise ValueError("Expected a Bearer token")
    return uuid.UUID(token.strip())


async def get_current_user_id(
    authorization: Optional[str] = Depends(api_key_header),
    session: AsyncSession = Depends(get_session),
) -> uuid.UUID:
    """Resolve the authenticated user id; 401 if missing or unknown."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        user_id = parse_bearer_token(authorization)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid bearer token")

    result = await session.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        log.info("auth.unknown_user", user_id=str(user_id))
        raise HTTPException(status_code=401, detail="User not found")

    structlog.contextvars.bind_contextvars(user_id=str(user_id))
    return user_id
