"""Domain entities for the authorization engine."""

from .relationship import HierarchyOp, Relationship
from .role import OrgUnit, OrgUnitType, Role
from .permission import Permission
from .session import Session

__all__ = [
    "HierarchyOp",
    "Relationship",
    "OrgUnit",
    "OrgUnitType",
    "Role",
    "Permission",
    "Session",
]
