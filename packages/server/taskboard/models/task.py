"""Task model (a card on a project's kanban board)."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Task(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "tasks"

    project_id: uuid.UUID = Field(
        foreign_key="projects.id", nullable=False, index=True, ondelete="CASCADE"
    )
    org_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True, ondelete="CASCADE"
    )
    title: str = Field(nullable=False)
    description: Optional[str] = None
    status: str = Field(nullable=False, default="TODO")  # TODO | IN_PROGRESS | DONE
    type: Optional[str] = None  # TASK | BUG | FEATURE | IMPROVEMENT | OTHER
    priority: str = Field(nullable=False, default="medium")  # low | medium | high
    position: int = Field(nullable=False, default=0)
    assignee_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
    due_date: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
