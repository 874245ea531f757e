"""User-Organization membership (one row per user and org)."""

from datetime import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import utcnow


class Member(SQLModel, table=True):
    __tablename__ = "members"

    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    org_id: uuid.UUID = Field(
        foreign_key="organizations.id", primary_key=True, index=True, ondelete="CASCADE"
    )
    role: str = Field(nullable=False, default="member")  # owner | admin | member
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
