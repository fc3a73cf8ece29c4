from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Role attached to a profile."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    ACCOUNTANT = "accountant"
    ADMIN = "admin"


class RequestCategory(enum.StrEnum):
    """Fixed expense categories for petty-cash requests."""

    OFFICE = "Office"
    TRAVEL = "Travel"
    FOOD = "Food"
    SUPPLIES = "Supplies"
    UTILITIES = "Utilities"
    MISCELLANEOUS = "Miscellaneous"


class RequestStatus(enum.StrEnum):
    """State machine for petty-cash requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DISBURSED = "disbursed"


class AuditAction(enum.StrEnum):
    """Decision recorded in the audit trail."""

    APPROVED = "approved"
    REJECTED = "rejected"


class Capability(enum.StrEnum):
    """Privileged actions gated by role."""

    SUBMIT_REQUEST = "submit_request"
    VIEW_OWN_REQUESTS = "view_own_requests"
    REVIEW_REQUESTS = "review_requests"
    DISBURSE_REQUESTS = "disburse_requests"
    VIEW_ANALYTICS = "view_analytics"
    EXPORT_DISBURSEMENTS = "export_disbursements"
    MANAGE_USERS = "manage_users"


# Legal status moves: pending -> approved/rejected, approved -> disbursed.
ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset({RequestStatus.DISBURSED}),
    RequestStatus.REJECTED: frozenset(),
    RequestStatus.DISBURSED: frozenset(),
}
