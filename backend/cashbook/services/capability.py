"""Role to capability mapping used to gate privileged operations."""

from __future__ import annotations

from cashbook.models.enums import Capability, Role

_BASE = frozenset({Capability.SUBMIT_REQUEST, Capability.VIEW_OWN_REQUESTS})

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.EMPLOYEE: _BASE,
    Role.MANAGER: _BASE | {Capability.REVIEW_REQUESTS, Capability.VIEW_ANALYTICS},
    Role.ACCOUNTANT: _BASE
    | {Capability.DISBURSE_REQUESTS, Capability.VIEW_ANALYTICS, Capability.EXPORT_DISBURSEMENTS},
    Role.ADMIN: frozenset(Capability),
}


def has_capability(role: Role | str | None, capability: Capability) -> bool:
    """Return True if ``role`` may perform ``capability``.

    Unknown or missing roles have no capabilities.
    """
    if role is None:
        return False
    try:
        resolved = Role(role)
    except ValueError:
        return False
    return capability in ROLE_CAPABILITIES[resolved]
