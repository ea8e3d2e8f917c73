"""
Session entity - a runtime principal with its activated roles.

Temporal and activation constraints are applied before a session reaches the
engine; the role sets here are the roles that passed those checks.
"""
from dataclasses import dataclass
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class Session:
    """Activated ordinary and administrative roles for a user."""
    user_id: str
    roles: FrozenSet[str] = frozenset()
    admin_roles: FrozenSet[str] = frozenset()
    context_id: Optional[str] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        """Freeze role collections."""
        if not self.user_id:
            raise ValueError("Session user id is required")
        object.__setattr__(self, 'roles', frozenset(self.roles or ()))
        object.__setattr__(self, 'admin_roles', frozenset(self.admin_roles or ()))

    def activated_roles(self, admin: bool) -> FrozenSet[str]:
        """Role set matching a permission's admin flag."""
        return self.admin_roles if admin else self.roles

    def __repr__(self) -> str:
        return f"Session(user={self.user_id}, roles={len(self.roles)}, admin_roles={len(self.admin_roles)})"
