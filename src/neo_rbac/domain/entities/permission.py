"""
Permission entity - an operation on a protected object and who may perform it.
"""
from dataclasses import dataclass
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class Permission:
    """
    Permission entity keyed by object name, operation name and optional object id.

    ``users`` holds user ids granted directly; ``roles`` holds granted role
    names. ``admin`` selects the administrative hierarchy for role expansion.

    Examples:
        - Permission("Order", "read", roles={"Employee"})
        - Permission("AdminMgrImpl", "addRole", admin=True, roles={"SuperAdmin"})
    """
    obj_name: str
    op_name: str
    obj_id: Optional[str] = None
    admin: bool = False
    users: FrozenSet[str] = frozenset()
    roles: FrozenSet[str] = frozenset()
    context_id: Optional[str] = None
    internal_id: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        """Validate key fields and freeze grant collections."""
        if not self.obj_name or not self.obj_name.strip():
            raise ValueError("Permission object name is required")
        if not self.op_name or not self.op_name.strip():
            raise ValueError("Permission operation name is required")
        object.__setattr__(self, 'users', frozenset(self.users or ()))
        object.__setattr__(self, 'roles', frozenset(self.roles or ()))

    @property
    def abstract_name(self) -> str:
        """Human readable permission name, e.g. ``Order.read``."""
        return f"{self.obj_name}.{self.op_name}"

    @property
    def permission_id(self) -> str:
        """Identifier reported to the audit sink."""
        if self.internal_id:
            return self.internal_id
        if self.obj_id:
            return f"{self.abstract_name}:{self.obj_id}"
        return self.abstract_name

    def with_context(self, context_id: Optional[str]) -> "Permission":
        """Copy of this permission bound to another tenant context."""
        return Permission(
            obj_name=self.obj_name,
            op_name=self.op_name,
            obj_id=self.obj_id,
            admin=self.admin,
            users=self.users,
            roles=self.roles,
            context_id=context_id,
            internal_id=self.internal_id,
            description=self.description,
        )

    def __str__(self) -> str:
        return self.abstract_name

    def __repr__(self) -> str:
        return (
            f"Permission(obj='{self.obj_name}', op='{self.op_name}', admin={self.admin}, "
            f"users={len(self.users)}, roles={len(self.roles)})"
        )
