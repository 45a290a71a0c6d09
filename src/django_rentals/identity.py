"""Authenticated caller passed in by the calling layer.

This package never authenticates. It receives a principal that the web or
admin layer has already resolved.
"""

from dataclasses import dataclass


ROLE_MEMBER = "member"
ROLE_ADMIN = "admin"
# Scheduled jobs such as the completion sweep
ROLE_SYSTEM = "system"


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str = ROLE_MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_system(self) -> bool:
        return self.role == ROLE_SYSTEM


SYSTEM = Principal(user_id="system", role=ROLE_SYSTEM)


def as_principal(actor) -> Principal:
    """Accept a Principal or a bare user id (treated as a member)."""
    if isinstance(actor, Principal):
        return actor
    if actor is None:
        raise ValueError("An actor is required")
    return Principal(user_id=str(actor))
