"""
Role hierarchy service - public facade over one hierarchy kind.

One instance exists per hierarchy kind (ordinary roles, admin roles, and the
two organizational-unit families); all of them share a HierarchyCache.
"""
from typing import FrozenSet, Iterable, Optional, Set

from loguru import logger

from ...core.exceptions import HierarchyCycleError
from ...domain.entities.relationship import HierarchyOp, Relationship
from ...domain.graph import HierarchyGraph
from ...domain.protocols import GraphableProtocol
from ...domain.value_objects.authorization import RelationshipViolation
from ...domain.value_objects.hierarchy import HierarchyKind, canonical_name
from ...infrastructure.cache import HierarchyCache


class RoleHierarchyService:
    """
    Hierarchy queries, relationship validation and cache maintenance.

    Features:
    - Ascendant/descendant closure and one-hop parent/child queries
    - Validation gate for administrative hierarchy edits
    - Cache updates after a successful Directory Store write
    - Inherited-role expansion for authorization decisions

    Role names are compared case-insensitively; results use canonical names.
    """

    def __init__(self, kind: HierarchyKind, cache: HierarchyCache):
        self._kind = HierarchyKind(kind)
        self._cache = cache

    @property
    def kind(self) -> HierarchyKind:
        return self._kind

    def is_parent(self, child: str, parent: str, context_id: Optional[str] = None) -> bool:
        """True when ``parent`` is a direct or inherited parent of ``child``."""
        if not parent or not parent.strip():
            return False
        return canonical_name(parent) in self._graph(context_id).ascendants(child)

    def get_ascendants(self, role_name: str, context_id: Optional[str] = None) -> Set[str]:
        return self._graph(context_id).ascendants(role_name)

    def get_descendants(self, role_name: str, context_id: Optional[str] = None) -> Set[str]:
        return self._graph(context_id).descendants(role_name)

    def get_parents(self, role_name: str, context_id: Optional[str] = None) -> Set[str]:
        return self._graph(context_id).parents(role_name)

    def get_children(self, role_name: str, context_id: Optional[str] = None) -> Set[str]:
        return self._graph(context_id).children(role_name)

    def num_children(self, role_name: str, context_id: Optional[str] = None) -> int:
        return self._graph(context_id).num_children(role_name)

    def check_relationship(
        self,
        child: GraphableProtocol,
        parent: GraphableProtocol,
        must_exist: bool
    ) -> Optional[RelationshipViolation]:
        """Non-raising form of ``validate_relationship``."""
        graph = self._graph(child.context_id)
        return graph.check_relationship(child.name, parent.name, must_exist)

    def validate_relationship(
        self,
        child: GraphableProtocol,
        parent: GraphableProtocol,
        must_exist: bool
    ) -> None:
        """
        Gate an administrative hierarchy edit before it is persisted.

        Evaluates, in order: child equals parent; ``must_exist`` and the
        relationship is absent; not ``must_exist`` and the relationship is
        present. The child entity's context selects the tenant hierarchy.

        Raises:
            HierarchyValidationError: on the first failing rule
        """
        self._graph(child.context_id).validate_relationship(child.name, parent.name, must_exist)

    def update_hierarchy(
        self,
        context_id: Optional[str],
        relationship: Relationship,
        op: HierarchyOp
    ) -> bool:
        """
        Bring the cached graph in step with a Directory Store write.

        Persists nothing; call only after the store write succeeded.

        Raises:
            HierarchyCycleError: the change would break acyclicity
        """
        try:
            changed = self._cache.mutate(self._kind, context_id, relationship, op)
        except HierarchyCycleError as e:
            logger.error(
                f"{self._kind.value} hierarchy update rejected for context [{context_id}]: {e.message}"
            )
            raise
        logger.info(
            f"Updated {self._kind.value} hierarchy context [{context_id}]: "
            f"{HierarchyOp(op).value} {relationship} (changed={changed})"
        )
        return changed

    def get_inherited_roles(
        self,
        activated_roles: Iterable[str],
        context_id: Optional[str] = None
    ) -> FrozenSet[str]:
        """
        Every activated role plus all of its ascendants.

        The caller passes only roles already activated in the session.
        """
        roles = [name for name in activated_roles if name and name.strip()]
        if not roles:
            return frozenset()

        graph = self._graph(context_id)
        inherited: Set[str] = set()
        for role_name in roles:
            inherited.add(canonical_name(role_name))
            inherited.update(graph.ascendants(role_name))
        return frozenset(inherited)

    def refresh(self, context_id: Optional[str] = None) -> bool:
        """Drop the cached graph; the next query rebuilds it from the store."""
        return self._cache.invalidate(self._kind, context_id)

    def _graph(self, context_id: Optional[str]) -> HierarchyGraph:
        return self._cache.get_graph(self._kind, context_id)

    def __repr__(self) -> str:
        return f"RoleHierarchyService(kind='{self._kind.value}')"
