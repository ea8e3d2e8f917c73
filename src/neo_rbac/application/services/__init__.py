"""Application services for hierarchy queries and authorization."""

from .role_hierarchy_service import RoleHierarchyService
from .permission_resolver import PermissionResolver

__all__ = ["RoleHierarchyService", "PermissionResolver"]
