"""
Hierarchy value objects.

Kinds of hierarchies, tenant-context normalization and the composite cache key.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Context value that denotes the global hierarchy, compared case-insensitively
NO_CONTEXT = "null"
GLOBAL_CONTEXT = ""


class HierarchyKind(str, Enum):
    """Independent hierarchies kept per tenant."""
    ROLE = "role"              # Ordinary RBAC roles
    ADMIN_ROLE = "admin_role"  # Administrative (ARBAC) roles
    USER_OU = "user_ou"        # User organizational units
    PERM_OU = "perm_ou"        # Permission organizational units


def canonical_name(name: str) -> str:
    """Canonical vertex name; all hierarchy lookups are case-insensitive."""
    if name is None:
        raise ValueError("Hierarchy node name must not be None")
    canonical = name.strip().upper()
    if not canonical:
        raise ValueError("Hierarchy node name must not be empty")
    return canonical


def normalize_context_id(context_id: Optional[str], sentinel: str = NO_CONTEXT) -> str:
    """Collapse every spelling of "no tenant" onto the global context."""
    if context_id is None:
        return GLOBAL_CONTEXT
    context_id = context_id.strip()
    if not context_id or context_id.lower() == sentinel.lower():
        return GLOBAL_CONTEXT
    return context_id


@dataclass(frozen=True)
class HierarchyKey:
    """Cache key for one live graph: hierarchy kind plus tenant context."""
    kind: HierarchyKind
    context_id: str = GLOBAL_CONTEXT

    @classmethod
    def of(
        cls,
        kind: HierarchyKind,
        context_id: Optional[str] = None,
        sentinel: str = NO_CONTEXT,
    ) -> "HierarchyKey":
        return cls(kind=HierarchyKind(kind), context_id=normalize_context_id(context_id, sentinel))

    @property
    def is_global(self) -> bool:
        return self.context_id == GLOBAL_CONTEXT

    def __str__(self) -> str:
        if self.is_global:
            return self.kind.value
        return f"{self.kind.value}:{self.context_id}"
