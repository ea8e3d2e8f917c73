"""Authorization engine assembly.

Builds the hierarchy cache, one RoleHierarchyService per hierarchy kind and
the PermissionResolver around a Directory Store, and owns their lifetime.

Usage:
    from neo_rbac import create_authorization_engine

    with create_authorization_engine(directory=store) as engine:
        engine.resolver.check_permission(session, permission)
"""

from typing import Dict, Iterable, Optional

from loguru import logger

from .application.services import PermissionResolver, RoleHierarchyService
from .config import RbacSettings, get_settings, setup_logging
from .domain.protocols import AuditSinkProtocol, DirectoryStoreProtocol
from .domain.value_objects.hierarchy import HierarchyKind
from .infrastructure.audit import LoggingAuditSink
from .infrastructure.cache import HierarchyCache
from .infrastructure.repositories import InMemoryDirectoryStore


class AuthorizationEngine:
    """Container owning the hierarchy cache and the services built on it.

    The cache is created here and injected into every service; ``close()``
    is its teardown point.
    """

    def __init__(
        self,
        directory: DirectoryStoreProtocol,
        audit_sink: Optional[AuditSinkProtocol] = None,
        settings: Optional[RbacSettings] = None
    ):
        self.settings = settings or get_settings()
        self.directory = directory
        self.audit_sink = audit_sink
        self.cache = HierarchyCache(directory, self.settings.no_context_sentinel)

        self._hierarchies: Dict[HierarchyKind, RoleHierarchyService] = {
            kind: RoleHierarchyService(kind, self.cache) for kind in HierarchyKind
        }
        self.resolver = PermissionResolver(
            role_hierarchy=self.role_hierarchy,
            admin_role_hierarchy=self.admin_role_hierarchy,
            directory=directory,
            audit_sink=audit_sink,
            audit_enabled=self.settings.audit_enabled,
        )

    @property
    def role_hierarchy(self) -> RoleHierarchyService:
        return self._hierarchies[HierarchyKind.ROLE]

    @property
    def admin_role_hierarchy(self) -> RoleHierarchyService:
        return self._hierarchies[HierarchyKind.ADMIN_ROLE]

    @property
    def user_ou_hierarchy(self) -> RoleHierarchyService:
        return self._hierarchies[HierarchyKind.USER_OU]

    @property
    def perm_ou_hierarchy(self) -> RoleHierarchyService:
        return self._hierarchies[HierarchyKind.PERM_OU]

    def hierarchy(self, kind: HierarchyKind) -> RoleHierarchyService:
        return self._hierarchies[HierarchyKind(kind)]

    def warm_up(self, context_ids: Iterable[Optional[str]]) -> None:
        """Build the role and admin-role hierarchies of the given tenants ahead of traffic."""
        for context_id in context_ids:
            for kind in (HierarchyKind.ROLE, HierarchyKind.ADMIN_ROLE):
                self.cache.get_graph(kind, context_id)
            logger.info(f"Warmed role hierarchies for context [{context_id}]")

    def close(self) -> None:
        self.cache.close()

    def __enter__(self) -> "AuthorizationEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_authorization_engine(
    directory: Optional[DirectoryStoreProtocol] = None,
    audit_sink: Optional[AuditSinkProtocol] = None,
    settings: Optional[RbacSettings] = None
) -> AuthorizationEngine:
    """Create an AuthorizationEngine with defaults for missing collaborators.

    Args:
        directory: Directory Store; an empty InMemoryDirectoryStore if omitted
        audit_sink: Audit Sink; a LoggingAuditSink if omitted
        settings: Engine settings; environment settings if omitted
    """
    settings = settings or get_settings()
    if settings.configure_logging:
        setup_logging(settings)

    if directory is None:
        directory = InMemoryDirectoryStore(settings.no_context_sentinel)
    if audit_sink is None:
        audit_sink = LoggingAuditSink()

    engine = AuthorizationEngine(directory, audit_sink, settings)
    if settings.preload_contexts:
        engine.warm_up(settings.preload_contexts)
    return engine
