"""In-memory Directory Store.

Reference implementation of DirectoryStoreProtocol used for embedding the
engine without an external directory and as the store behind the test-suite.
"""

import logging
import threading
from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple, Union

from ...domain.entities.permission import Permission
from ...domain.entities.relationship import Relationship
from ...domain.entities.role import OrgUnit, OrgUnitType, Role
from ...domain.value_objects.hierarchy import (
    NO_CONTEXT,
    HierarchyKey,
    HierarchyKind,
    canonical_name,
    normalize_context_id,
)

logger = logging.getLogger(__name__)

PermissionKey = Tuple[str, bool, str, str, str]


class InMemoryDirectoryStore:
    """Thread-safe Directory Store holding hierarchy edges and permissions.

    Writes here play the role of the directory write that precedes
    ``RoleHierarchyService.update_hierarchy``; the store never notifies the
    cache on its own.
    """

    def __init__(self, no_context_sentinel: str = NO_CONTEXT):
        self._sentinel = no_context_sentinel
        self._lock = threading.RLock()
        # key -> child name -> parent names
        self._edges: Dict[HierarchyKey, Dict[str, Set[str]]] = defaultdict(dict)
        self._permissions: Dict[PermissionKey, Permission] = {}
        self._fetches: Dict[HierarchyKey, int] = defaultdict(int)

    # ------------------------------------------------------------------
    # DirectoryStoreProtocol
    # ------------------------------------------------------------------

    def list_all_relationships(
        self,
        kind: HierarchyKind,
        context_id: str
    ) -> List[Tuple[str, FrozenSet[str]]]:
        """Every node that has at least one parent, with its parent names."""
        key = self._key(kind, context_id)
        with self._lock:
            self._fetches[key] += 1
            return [
                (child, frozenset(parents))
                for child, parents in self._edges.get(key, {}).items()
                if parents
            ]

    def read_permission(
        self,
        obj_name: str,
        op_name: str,
        obj_id: Optional[str] = None,
        admin: bool = False,
        context_id: Optional[str] = None
    ) -> Optional[Permission]:
        with self._lock:
            return self._permissions.get(self._permission_key(obj_name, op_name, obj_id, admin, context_id))

    # ------------------------------------------------------------------
    # Hierarchy writes
    # ------------------------------------------------------------------

    def add_relationship(
        self,
        kind: HierarchyKind,
        relationship: Relationship,
        context_id: Optional[str] = None
    ) -> None:
        key = self._key(kind, context_id)
        with self._lock:
            self._edges[key].setdefault(relationship.child, set()).add(relationship.parent)
        logger.debug(f"Directory store added [{relationship}] to [{key}]")

    def remove_relationship(
        self,
        kind: HierarchyKind,
        relationship: Relationship,
        context_id: Optional[str] = None
    ) -> bool:
        key = self._key(kind, context_id)
        with self._lock:
            parents = self._edges.get(key, {}).get(relationship.child)
            if not parents or relationship.parent not in parents:
                return False
            parents.discard(relationship.parent)
        logger.debug(f"Directory store removed [{relationship}] from [{key}]")
        return True

    def add_entity(self, entity: Union[Role, OrgUnit]) -> None:
        """Store a role or org unit along with its parent edges."""
        kind = _kind_of(entity)
        key = self._key(kind, entity.context_id)
        with self._lock:
            self._edges[key].setdefault(canonical_name(entity.name), set()).update(entity.parents)

    def remove_entity(self, entity: Union[Role, OrgUnit]) -> None:
        """Delete a node and every edge that touches it."""
        kind = _kind_of(entity)
        key = self._key(kind, entity.context_id)
        name = canonical_name(entity.name)
        with self._lock:
            edges = self._edges.get(key, {})
            edges.pop(name, None)
            for parents in edges.values():
                parents.discard(name)

    def load_relationships(
        self,
        kind: HierarchyKind,
        relationships: Iterable[Relationship],
        context_id: Optional[str] = None
    ) -> None:
        for relationship in relationships:
            self.add_relationship(kind, relationship, context_id)

    # ------------------------------------------------------------------
    # Permission writes
    # ------------------------------------------------------------------

    def add_permission(self, permission: Permission) -> None:
        key = self._permission_key(
            permission.obj_name, permission.op_name, permission.obj_id,
            permission.admin, permission.context_id
        )
        with self._lock:
            self._permissions[key] = permission

    def remove_permission(self, permission: Permission) -> bool:
        key = self._permission_key(
            permission.obj_name, permission.op_name, permission.obj_id,
            permission.admin, permission.context_id
        )
        with self._lock:
            return self._permissions.pop(key, None) is not None

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def fetch_count(self, kind: HierarchyKind, context_id: Optional[str] = None) -> int:
        """How many snapshots were served for the key."""
        with self._lock:
            return self._fetches.get(self._key(kind, context_id), 0)

    def _key(self, kind: HierarchyKind, context_id: Optional[str]) -> HierarchyKey:
        return HierarchyKey.of(kind, context_id, self._sentinel)

    def _permission_key(
        self,
        obj_name: str,
        op_name: str,
        obj_id: Optional[str],
        admin: bool,
        context_id: Optional[str]
    ) -> PermissionKey:
        return (
            normalize_context_id(context_id, self._sentinel),
            bool(admin),
            obj_name.strip().upper(),
            op_name.strip().upper(),
            (obj_id or "").strip().upper(),
        )


def _kind_of(entity: Union[Role, OrgUnit]) -> HierarchyKind:
    if isinstance(entity, OrgUnit):
        return HierarchyKind.USER_OU if entity.type == OrgUnitType.USER else HierarchyKind.PERM_OU
    return HierarchyKind.ADMIN_ROLE if entity.admin else HierarchyKind.ROLE
