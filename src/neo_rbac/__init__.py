"""Neo-RBAC - hierarchical RBAC/ARBAC authorization engine.

Resolves whether a session is entitled to a permission by combining direct
user and role grants with per-tenant, multi-parent role hierarchies.
"""

from .__version__ import __version__

from .core.exceptions import (
    ErrorKind,
    NeoRbacError,
    HierarchyError,
    HierarchyValidationError,
    HierarchyCycleError,
    DirectoryStoreError,
    NotFoundError,
    PermissionNotFoundError,
    AuditError,
)
from .domain.entities import (
    HierarchyOp,
    Relationship,
    OrgUnit,
    OrgUnitType,
    Role,
    Permission,
    Session,
)
from .domain.value_objects import (
    AuthorizationResult,
    HierarchyKey,
    HierarchyKind,
    RelationshipViolation,
)
from .domain.graph import HierarchyGraph
from .domain.protocols import AuditSinkProtocol, DirectoryStoreProtocol, GraphableProtocol
from .infrastructure.cache import HierarchyCache
from .infrastructure.repositories import InMemoryDirectoryStore
from .infrastructure.audit import LoggingAuditSink
from .application.services import PermissionResolver, RoleHierarchyService
from .config import RbacSettings, get_settings, setup_logging
from .factory import AuthorizationEngine, create_authorization_engine

__all__ = [
    "__version__",
    # Exceptions
    "ErrorKind",
    "NeoRbacError",
    "HierarchyError",
    "HierarchyValidationError",
    "HierarchyCycleError",
    "DirectoryStoreError",
    "NotFoundError",
    "PermissionNotFoundError",
    "AuditError",
    # Domain
    "HierarchyOp",
    "Relationship",
    "OrgUnit",
    "OrgUnitType",
    "Role",
    "Permission",
    "Session",
    "AuthorizationResult",
    "HierarchyKey",
    "HierarchyKind",
    "RelationshipViolation",
    "HierarchyGraph",
    "AuditSinkProtocol",
    "DirectoryStoreProtocol",
    "GraphableProtocol",
    # Infrastructure
    "HierarchyCache",
    "InMemoryDirectoryStore",
    "LoggingAuditSink",
    # Services
    "PermissionResolver",
    "RoleHierarchyService",
    # Configuration
    "RbacSettings",
    "get_settings",
    "setup_logging",
    # Assembly
    "AuthorizationEngine",
    "create_authorization_engine",
]
