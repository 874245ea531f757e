from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel


class OrgRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class ProjectRole(str, Enum):
    LEAD = "lead"
    MEMBER = "member"


class AccessLevel(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    ADMIN = "admin"


# Higher number = more authority
ORG_ROLE_PRIORITY: Mapping[OrgRole, int] = MappingProxyType({
    OrgRole.MEMBER: 1,
    OrgRole.ADMIN: 2,
    OrgRole.OWNER: 3,
})

PROJECT_ROLE_PRIORITY: Mapping[ProjectRole, int] = MappingProxyType({
    ProjectRole.MEMBER: 1,
    ProjectRole.LEAD: 2,
})

# edit and admin currently need the same project role; kept apart at call sites.
ACCESS_LEVEL_MIN_PROJECT_ROLE: Mapping[AccessLevel, ProjectRole] = MappingProxyType({
    AccessLevel.VIEW: ProjectRole.MEMBER,
    AccessLevel.EDIT: ProjectRole.LEAD,
    AccessLevel.ADMIN: ProjectRole.LEAD,
})


def org_role_at_least(role: Optional[OrgRole], minimum: OrgRole) -> bool:
    """True if ``role`` is present and ranks at or above ``minimum``."""
    if role is None:
        return False
    return ORG_ROLE_PRIORITY[role] >= ORG_ROLE_PRIORITY[minimum]


def project_role_at_least(role: Optional[ProjectRole], minimum: ProjectRole) -> bool:
    if role is None:
        return False
    return PROJECT_ROLE_PRIORITY[role] >= PROJECT_ROLE_PRIORITY[minimum]


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


# Kanban column order, left to right
TASK_STATUS_ORDER: list["TaskStatus"] = [
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
]


class TaskType(str, Enum):
    TASK = "TASK"
    BUG = "BUG"
    FEATURE = "FEATURE"
    IMPROVEMENT = "IMPROVEMENT"
    OTHER = "OTHER"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class ErrorBody(BaseModel):
    code: str
    message: str
    status: int
    required_role: Optional[str] = None


class ErrorResponse(BaseModel):
    error: ErrorBody
