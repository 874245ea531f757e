"""Task schemas for the kanban board."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .common import Priority, TaskStatus, TaskType


class TaskBase(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    type: Optional[TaskType] = None
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None


class TaskCreate(TaskBase):
    status: TaskStatus = TaskStatus.TODO
    assignee_id: Optional[UUID] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    type: Optional[TaskType] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None
    assignee_id: Optional[UUID] = None

    @field_validator("title", "priority")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class TaskMove(BaseModel):
    """Drop a card into ``status`` at ``position`` (0-based)."""
    status: TaskStatus
    position: int = Field(ge=0)


class TaskRead(TaskBase):
    id: UUID
    project_id: UUID
    org_id: UUID
    status: TaskStatus
    position: int
    assignee_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
