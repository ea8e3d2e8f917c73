"""
Relationship entity - a single child to parent edge in a hierarchy.
"""
from dataclasses import dataclass
from enum import Enum

from ..value_objects.hierarchy import canonical_name


class HierarchyOp(str, Enum):
    """Structural change applied to a cached hierarchy."""
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class Relationship:
    """
    Directed edge from child to parent.

    Both names are canonicalized on construction so that two relationships
    differing only by case compare equal.
    """
    child: str
    parent: str

    def __post_init__(self):
        object.__setattr__(self, 'child', canonical_name(self.child))
        object.__setattr__(self, 'parent', canonical_name(self.parent))

    @property
    def is_self_reference(self) -> bool:
        return self.child == self.parent

    def __str__(self) -> str:
        return f"{self.child} -> {self.parent}"
