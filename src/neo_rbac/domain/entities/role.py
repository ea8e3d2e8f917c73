"""
Role and organizational unit entities.

Both are graphable: they carry a name, the tenant context they live in and the
names of their direct parents, which is what the Directory Store snapshot holds.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from ..value_objects.hierarchy import canonical_name


@dataclass(frozen=True)
class Role:
    """
    Role entity as seen by the hierarchy engine.

    ``admin`` distinguishes administrative roles, which live in their own
    hierarchy, from ordinary RBAC roles.
    """
    name: str
    context_id: Optional[str] = None
    parents: FrozenSet[str] = frozenset()
    description: Optional[str] = None
    admin: bool = False

    def __post_init__(self):
        """Normalize parent names into a frozenset."""
        object.__setattr__(self, 'parents', frozenset(canonical_name(p) for p in (self.parents or ())))

    @property
    def canonical(self) -> str:
        return canonical_name(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Role(name='{self.name}', admin={self.admin}, parents={len(self.parents)})"


class OrgUnitType(str, Enum):
    """Organizational unit families; each has its own hierarchy."""
    USER = "user"
    PERM = "perm"


@dataclass(frozen=True)
class OrgUnit:
    """Organizational unit grouping users or permission objects."""
    name: str
    type: OrgUnitType = OrgUnitType.USER
    context_id: Optional[str] = None
    parents: FrozenSet[str] = frozenset()
    description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'parents', frozenset(canonical_name(p) for p in (self.parents or ())))

    def __str__(self) -> str:
        return self.name
