"""Project model."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Project(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "projects"

    org_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True, ondelete="CASCADE"
    )
    name: str = Field(nullable=False)
    description: Optional[str] = None
    status: str = Field(default="planning", nullable=False)  # planning | active | on_hold | completed
    priority: str = Field(default="medium", nullable=False)  # low | medium | high
    start_date: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    end_date: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    # Weak pointer: the lead holds the project "lead" role without a membership row.
    lead_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
    progress: int = Field(default=0, nullable=False)
