"""Requester identity and role-based visibility rules."""
from __future__ import annotations
from dataclasses import dataclass
from docqa.domain.exceptions import ForbiddenError
from docqa.domain.statuses import UserRole

# Roles that see every user's documents and jobs.
PRIVILEGED_ROLES = frozenset({UserRole.ADMIN, UserRole.EDITOR})


@dataclass(frozen=True, slots=True)
class Requester:
    id: str
    role: UserRole

    @property
    def sees_all(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    def owner_filter(self) -> str | None:
        """User id to restrict listings to, or None when everything is visible."""
        return None if self.sees_all else self.id

    def can_access(self, owner_id: str) -> bool:
        return self.sees_all or owner_id == self.id


def ensure_access(requester: Requester, owner_id: str) -> None:
    if not requester.can_access(owner_id):
        raise ForbiddenError("Access denied")


def ensure_role(requester: Requester, *roles: UserRole) -> None:
    if requester.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise ForbiddenError(f"Requires one of roles: {allowed}")
