"""Hierarchy graph for role and organizational-unit inheritance.

A multi-parent directed acyclic graph over canonical node names. Vertices are
kept in an arena: each canonical name maps to a small integer index and the
parent/child adjacency sets are indexed by those integers. Edges point from
child to parent, so ascendants are found by following parent sets and
descendants by following child sets.

The graph itself is not synchronized. HierarchyCache publishes graphs as
snapshots and only ever mutates a private copy, so a published instance must
be treated as read-only.
"""

import logging
from collections import deque
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set

from ...core.exceptions import ErrorKind, HierarchyCycleError, HierarchyValidationError
from ..entities.relationship import HierarchyOp, Relationship
from ..protocols.directory_protocols import SnapshotEntry
from ..value_objects.authorization import RelationshipViolation
from ..value_objects.hierarchy import canonical_name

logger = logging.getLogger(__name__)


class HierarchyGraph:
    """Acyclic multi-parent hierarchy with O(V+E) closure queries."""

    def __init__(self):
        self._index: Dict[str, int] = {}
        self._names: List[str] = []
        self._parents: List[Set[int]] = []
        self._children: List[Set[int]] = []
        self._edge_count = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_relationships(cls, relationships: Iterable[Relationship]) -> "HierarchyGraph":
        """Build a graph from edges; raises HierarchyCycleError on a cyclic edge set."""
        graph = cls()
        for relationship in relationships:
            graph.add_edge(relationship.child, relationship.parent)
        return graph

    @classmethod
    def from_snapshot(cls, entries: Iterable[SnapshotEntry]) -> "HierarchyGraph":
        """Build a graph from a Directory Store snapshot.

        Each entry is either a ``(name, parent_names)`` pair or a graphable
        entity exposing ``name`` and ``parents``.
        """
        return cls.from_relationships(_snapshot_relationships(entries))

    def copy(self) -> "HierarchyGraph":
        clone = HierarchyGraph()
        clone._index = dict(self._index)
        clone._names = list(self._names)
        clone._parents = [set(p) for p in self._parents]
        clone._children = [set(c) for c in self._children]
        clone._edge_count = self._edge_count
        return clone

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_vertex(self, name: str) -> str:
        """Add a vertex if missing and return its canonical name."""
        return self._names[self._ensure_vertex(canonical_name(name))]

    def add_edge(self, child: str, parent: str) -> bool:
        """Insert ``child -> parent``.

        Returns False when the edge already exists.

        Raises:
            HierarchyCycleError: child equals parent, or child is already
                reachable from parent so the new edge would close a loop.
        """
        child_name = canonical_name(child)
        parent_name = canonical_name(parent)
        if child_name == parent_name:
            raise HierarchyCycleError(
                f"Cannot add edge [{child_name}] -> [{parent_name}]: self reference",
                kind=ErrorKind.SELF_REFERENCE,
                details={"child": child_name, "parent": parent_name},
            )

        child_idx = self._index.get(child_name)
        parent_idx = self._index.get(parent_name)
        if child_idx is not None and parent_idx is not None:
            if parent_idx in self._parents[child_idx]:
                return False
            if child_idx in self._walk(parent_idx, self._parents):
                raise HierarchyCycleError(
                    f"Cannot add edge [{child_name}] -> [{parent_name}]: "
                    f"[{child_name}] is already an ascendant of [{parent_name}]",
                    kind=ErrorKind.CYCLE,
                    details={"child": child_name, "parent": parent_name},
                )

        child_idx = self._ensure_vertex(child_name)
        parent_idx = self._ensure_vertex(parent_name)
        self._parents[child_idx].add(parent_idx)
        self._children[parent_idx].add(child_idx)
        self._edge_count += 1
        logger.debug(f"Added hierarchy edge {child_name} -> {parent_name}")
        return True

    def remove_edge(self, child: str, parent: str) -> bool:
        """Delete ``child -> parent``; vertices stay even if left isolated."""
        child_idx = self._find(child)
        parent_idx = self._find(parent)
        if child_idx is None or parent_idx is None:
            return False
        if parent_idx not in self._parents[child_idx]:
            return False
        self._parents[child_idx].discard(parent_idx)
        self._children[parent_idx].discard(child_idx)
        self._edge_count -= 1
        logger.debug(f"Removed hierarchy edge {self._names[child_idx]} -> {self._names[parent_idx]}")
        return True

    def apply(self, relationship: Relationship, op: HierarchyOp) -> bool:
        """Apply a structural change; returns whether the edge set changed."""
        op = HierarchyOp(op)
        if op == HierarchyOp.ADD:
            return self.add_edge(relationship.child, relationship.parent)
        return self.remove_edge(relationship.child, relationship.parent)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def ascendants(self, node: str) -> Set[str]:
        """All nodes reachable by following parent edges, excluding ``node``."""
        idx = self._find(node)
        if idx is None:
            return set()
        return self._names_of(self._walk(idx, self._parents))

    def descendants(self, node: str) -> Set[str]:
        """All nodes reachable by following child edges, excluding ``node``."""
        idx = self._find(node)
        if idx is None:
            return set()
        return self._names_of(self._walk(idx, self._children))

    def parents(self, node: str) -> Set[str]:
        idx = self._find(node)
        if idx is None:
            return set()
        return self._names_of(self._parents[idx])

    def children(self, node: str) -> Set[str]:
        idx = self._find(node)
        if idx is None:
            return set()
        return self._names_of(self._children[idx])

    def num_children(self, node: str) -> int:
        idx = self._find(node)
        if idx is None:
            return 0
        return len(self._children[idx])

    def has_vertex(self, node: str) -> bool:
        return self._find(node) is not None

    def has_edge(self, child: str, parent: str) -> bool:
        child_idx = self._find(child)
        parent_idx = self._find(parent)
        if child_idx is None or parent_idx is None:
            return False
        return parent_idx in self._parents[child_idx]

    def vertices(self) -> FrozenSet[str]:
        return frozenset(self._names)

    def edges(self) -> FrozenSet[Relationship]:
        return frozenset(
            Relationship(self._names[child_idx], self._names[parent_idx])
            for child_idx, parent_set in enumerate(self._parents)
            for parent_idx in parent_set
        )

    @property
    def edge_count(self) -> int:
        return self._edge_count

    # ------------------------------------------------------------------
    # Relationship validation
    # ------------------------------------------------------------------

    def check_relationship(
        self,
        child: str,
        parent: str,
        must_exist: bool
    ) -> Optional[RelationshipViolation]:
        """Return the first failing rule, or None when the relationship is valid.

        Rules, in order:
        1. child equals parent
        2. must_exist and the edge is absent
        3. not must_exist and the edge is present
        """
        child_name = canonical_name(child)
        parent_name = canonical_name(parent)
        if child_name == parent_name:
            return RelationshipViolation(ErrorKind.SELF_REFERENCE, child_name, parent_name)
        exists = self.has_edge(child_name, parent_name)
        if must_exist and not exists:
            return RelationshipViolation(ErrorKind.RELATIONSHIP_MISSING, child_name, parent_name)
        if not must_exist and exists:
            return RelationshipViolation(ErrorKind.RELATIONSHIP_EXISTS, child_name, parent_name)
        return None

    def validate_relationship(self, child: str, parent: str, must_exist: bool) -> None:
        """Raise HierarchyValidationError when ``check_relationship`` finds a violation."""
        violation = self.check_relationship(child, parent, must_exist)
        if violation is not None:
            raise HierarchyValidationError(
                f"validateRelationship {violation.message}",
                kind=violation.kind,
                details={"child": violation.child, "parent": violation.parent, "must_exist": must_exist},
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find(self, node: Optional[str]) -> Optional[int]:
        """Index of ``node``; blank or missing names are simply unknown."""
        if node is None or not node.strip():
            return None
        return self._index.get(canonical_name(node))

    def _ensure_vertex(self, name: str) -> int:
        idx = self._index.get(name)
        if idx is None:
            idx = len(self._names)
            self._index[name] = idx
            self._names.append(name)
            self._parents.append(set())
            self._children.append(set())
        return idx

    def _walk(self, start: int, adjacency: List[Set[int]]) -> Set[int]:
        """Breadth-first closure from ``start`` over ``adjacency``, excluding ``start``."""
        visited: Set[int] = set()
        queue = deque(adjacency[start])
        while queue:
            idx = queue.popleft()
            if idx in visited:
                continue
            visited.add(idx)
            queue.extend(n for n in adjacency[idx] if n not in visited)
        visited.discard(start)
        return visited

    def _names_of(self, indices: Iterable[int]) -> Set[str]:
        return {self._names[i] for i in indices}

    def __contains__(self, node: object) -> bool:
        return isinstance(node, str) and self.has_vertex(node)

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __repr__(self) -> str:
        return f"HierarchyGraph(vertices={len(self._names)}, edges={self._edge_count})"


def _snapshot_relationships(entries: Iterable[SnapshotEntry]) -> Iterator[Relationship]:
    for entry in entries:
        if isinstance(entry, tuple):
            name, parent_names = entry
        else:
            name, parent_names = entry.name, entry.parents
        for parent_name in parent_names or ():
            yield Relationship(name, parent_name)
