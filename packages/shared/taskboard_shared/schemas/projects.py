from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import datetime
from .common import OrgRole, Priority, ProjectRole, ProjectStatus


class ProjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    lead_id: Optional[UUID] = None


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    lead_id: Optional[UUID] = None

    @field_validator("name", "status", "priority", "progress")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ProjectAccessRead(BaseModel):
    """The caller's resolved roles for a project."""
    org_role: Optional[OrgRole] = None
    project_role: Optional[ProjectRole] = None


class ProjectRead(ProjectBase):
    id: UUID
    org_id: UUID
    progress: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectDetail(ProjectRead):
    access: ProjectAccessRead


class ProjectMemberAdd(BaseModel):
    user_ids: List[UUID] = Field(min_length=1)


class ProjectMemberRead(BaseModel):
    user_id: UUID
    name: str
    email: str
    role: ProjectRole
