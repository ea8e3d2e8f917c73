"""
Collaborator protocol interfaces for the authorization domain.

Defines contracts for the Directory Store and the Audit Sink. Calls are
blocking; callers that need bounded latency wrap them with their own deadline.
"""
from typing import FrozenSet, Iterable, Optional, Protocol, Tuple, Union, runtime_checkable

from ..entities.permission import Permission
from ..value_objects.hierarchy import HierarchyKind


@runtime_checkable
class GraphableProtocol(Protocol):
    """Entity that can be placed in a hierarchy."""

    @property
    def name(self) -> str:
        ...

    @property
    def context_id(self) -> Optional[str]:
        ...

    @property
    def parents(self) -> FrozenSet[str]:
        ...


# One snapshot row: a node name with its direct parent names, or a graphable entity
SnapshotEntry = Union[Tuple[str, Iterable[str]], GraphableProtocol]


@runtime_checkable
class DirectoryStoreProtocol(Protocol):
    """Protocol for the persistent store of hierarchy edges and permissions."""

    def list_all_relationships(
        self,
        kind: HierarchyKind,
        context_id: str
    ) -> Iterable[SnapshotEntry]:
        """Every node that has parents in the given hierarchy, with its parent names."""
        ...

    def read_permission(
        self,
        obj_name: str,
        op_name: str,
        obj_id: Optional[str] = None,
        admin: bool = False,
        context_id: Optional[str] = None
    ) -> Optional[Permission]:
        """Authoritative permission entity, or None when it does not exist."""
        ...


@runtime_checkable
class AuditSinkProtocol(Protocol):
    """Protocol for recording authorization outcomes."""

    def record_authorization_event(
        self,
        permission_id: str,
        user_id: str,
        granted: bool
    ) -> None:
        """Record a single authorization decision."""
        ...
