from sqlmodel import SQLModel

from cashbook.models.audit import AuditTrailEntry
from cashbook.models.base import TimestampMixin, UUIDBase
from cashbook.models.enums import AuditAction, Capability, RequestCategory, RequestStatus, Role
from cashbook.models.profile import Profile
from cashbook.models.request import PettyCashRequest

__all__ = [
    "AuditAction",
    "AuditTrailEntry",
    "Capability",
    "PettyCashRequest",
    "Profile",
    "RequestCategory",
    "RequestStatus",
    "Role",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
