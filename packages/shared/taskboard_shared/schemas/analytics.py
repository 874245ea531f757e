"""Search and dashboard response schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from .tasks import TaskRead


class ProjectHit(BaseModel):
    id: uuid.UUID
    name: str


class TaskHit(BaseModel):
    id: uuid.UUID
    title: str
    project_id: uuid.UUID


class SearchResponse(BaseModel):
    projects: list[ProjectHit] = Field(default_factory=list)
    tasks: list[TaskHit] = Field(default_factory=list)


class StatusCount(BaseModel):
    status: str
    count: int


class PriorityCount(BaseModel):
    priority: str
    count: int


class DashboardData(BaseModel):
    task_counts: list[StatusCount]
    priority_counts: list[PriorityCount]
    total_tasks: int
    completion_rate: float = Field(ge=0.0, le=1.0)
    overdue_tasks: int
    recent_tasks: list[TaskRead]


class DashboardResponse(BaseModel):
    data: DashboardData
