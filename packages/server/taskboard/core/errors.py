"""
Authorization failures raised by the access policy engine.

The HTTP mapping lives in ``taskboard.main``; this module stays framework-free.
"""

from __future__ import annotations

from typing import Optional


class AccessError(Exception):
    """Base class for access-control denials."""

    status_code: int = 403
    code: str = "ACCESS_DENIED"

    def __init__(self, message: str, *, required_role: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.required_role = required_role

    def to_dict(self) -> dict:
        body = {"code": self.code, "message": self.message, "status": self.status_code}
        if self.required_role is not None:
            body["required_role"] = self.required_role
        return body


class Forbidden(AccessError):
    """The user lacks the membership or role the operation needs."""

    status_code = 403
    code = "FORBIDDEN"


class NotFound(AccessError):
    """The referenced project does not exist."""

    status_code = 404
    code = "NOT_FOUND"
