"""Hierarchy cache for the authorization engine.

Holds one live HierarchyGraph per (hierarchy kind, tenant context) key,
building it lazily from the Directory Store on first access.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ...core.exceptions import DirectoryStoreError, HierarchyCycleError, NeoRbacError
from ...domain.entities.relationship import HierarchyOp, Relationship
from ...domain.graph import HierarchyGraph
from ...domain.protocols import DirectoryStoreProtocol
from ...domain.value_objects.hierarchy import NO_CONTEXT, HierarchyKey, HierarchyKind

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Per-key slot: the published graph plus the lock that guards writers."""
    lock: threading.Lock = field(default_factory=threading.Lock)
    graph: Optional[HierarchyGraph] = None
    version: int = 0
    built_at: Optional[datetime] = None

    @property
    def is_ready(self) -> bool:
        return self.graph is not None


class HierarchyCache:
    """Process-wide store of hierarchy graphs keyed by kind and tenant context.

    Handles ONLY graph lifecycle: lazy build, mutation and invalidation.
    Does not persist anything; the Directory Store is the source of truth.

    Concurrency:
    - Every key owns a lock that serializes its build and its mutations.
      Keys never share a lock, so a slow build for one tenant does not
      block another tenant or the other hierarchy kind.
    - Mutations are copy-on-write: the change is applied to a private copy
      which is published only after it succeeds. Readers take the published
      reference without locking and never observe a graph mid-edit.
    - Racing first-access callers on the same key see a single build; the
      late arrivals find the published graph after acquiring the key lock.
    """

    def __init__(
        self,
        directory: DirectoryStoreProtocol,
        no_context_sentinel: str = NO_CONTEXT
    ):
        """Initialize hierarchy cache.

        Args:
            directory: Directory Store used to build graphs on a miss
            no_context_sentinel: Context id that maps to the global hierarchy
        """
        self._directory = directory
        self._sentinel = no_context_sentinel
        self._entries: Dict[HierarchyKey, CacheEntry] = {}
        # Guards the entry registry only, never held while building
        self._registry_lock = threading.Lock()
        self._closed = False

        # Statistics
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._builds = 0
        self._failed_builds = 0
        self._mutations = 0
        self._invalidations = 0

    def key(self, kind: HierarchyKind, context_id: Optional[str] = None) -> HierarchyKey:
        """Derive the cache key; every global spelling collapses to one key per kind."""
        return HierarchyKey.of(kind, context_id, self._sentinel)

    def get_graph(self, kind: HierarchyKind, context_id: Optional[str] = None) -> HierarchyGraph:
        """Return the published graph for the key, building it on first access.

        The returned graph is a snapshot and must not be mutated by callers.

        Raises:
            DirectoryStoreError: the snapshot could not be fetched
            HierarchyCycleError: the stored edges contain a cycle
        """
        key = self.key(kind, context_id)
        entry = self._entry(key)

        graph = entry.graph
        if graph is not None:
            self._count("_hits")
            return graph

        with entry.lock:
            if entry.graph is not None:
                self._count("_hits")
                return entry.graph
            self._count("_misses")
            return self._build(key, entry)

    def mutate(
        self,
        kind: HierarchyKind,
        context_id: Optional[str],
        relationship: Relationship,
        op: HierarchyOp
    ) -> bool:
        """Apply an edge change to the key's graph.

        Returns whether the edge set changed. A failed change leaves the
        published graph untouched.

        Raises:
            HierarchyCycleError: adding the edge would break acyclicity
        """
        key = self.key(kind, context_id)
        entry = self._entry(key)

        with entry.lock:
            current = entry.graph if entry.graph is not None else self._build(key, entry)
            updated = current.copy()
            try:
                changed = updated.apply(relationship, op)
            except HierarchyCycleError:
                logger.warning(f"Rejected {HierarchyOp(op).value} of [{relationship}] on hierarchy [{key}]")
                raise

            if changed:
                entry.graph = updated
                entry.version += 1
            self._count("_mutations")

        logger.debug(f"Hierarchy [{key}] {HierarchyOp(op).value} [{relationship}] changed={changed}")
        return changed

    def invalidate(self, kind: HierarchyKind, context_id: Optional[str] = None) -> bool:
        """Drop the key's graph so the next access rebuilds it from the store."""
        key = self.key(kind, context_id)
        with self._registry_lock:
            entry = self._entries.get(key)
        if entry is None:
            return False

        with entry.lock:
            was_ready = entry.graph is not None
            entry.graph = None
            entry.built_at = None
        if was_ready:
            self._count("_invalidations")
            logger.info(f"Invalidated hierarchy [{key}]")
        return was_ready

    def clear(self) -> None:
        """Drop every cached graph."""
        with self._registry_lock:
            entries = list(self._entries.items())
        for key, entry in entries:
            with entry.lock:
                if entry.graph is not None:
                    entry.graph = None
                    entry.built_at = None
                    self._count("_invalidations")
        logger.info(f"Cleared {len(entries)} hierarchy cache entries")

    def is_loaded(self, kind: HierarchyKind, context_id: Optional[str] = None) -> bool:
        with self._registry_lock:
            entry = self._entries.get(self.key(kind, context_id))
        return entry is not None and entry.is_ready

    def version(self, kind: HierarchyKind, context_id: Optional[str] = None) -> int:
        """Number of successful mutations applied since the entry was created."""
        with self._registry_lock:
            entry = self._entries.get(self.key(kind, context_id))
        return entry.version if entry else 0

    def get_stats(self) -> Dict[str, Any]:
        """Cache statistics."""
        with self._registry_lock:
            loaded = sum(1 for entry in self._entries.values() if entry.is_ready)
            keys = len(self._entries)
        with self._stats_lock:
            total = self._hits + self._misses
            return {
                "keys": keys,
                "loaded": loaded,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total else 0.0,
                "builds": self._builds,
                "failed_builds": self._failed_builds,
                "mutations": self._mutations,
                "invalidations": self._invalidations,
            }

    def close(self) -> None:
        """Release every graph; the cache refuses further use."""
        self.clear()
        with self._registry_lock:
            self._entries.clear()
            self._closed = True
        logger.info("Hierarchy cache closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def _entry(self, key: HierarchyKey) -> CacheEntry:
        with self._registry_lock:
            if self._closed:
                raise RuntimeError("HierarchyCache is closed")
            entry = self._entries.get(key)
            if entry is None:
                entry = CacheEntry()
                self._entries[key] = entry
            return entry

    def _build(self, key: HierarchyKey, entry: CacheEntry) -> HierarchyGraph:
        """Fetch and publish the key's graph. Caller holds ``entry.lock``."""
        logger.info(f"Building hierarchy [{key}] from directory store")
        try:
            snapshot = list(self._directory.list_all_relationships(key.kind, key.context_id))
        except NeoRbacError:
            self._count("_failed_builds")
            raise
        except Exception as e:
            self._count("_failed_builds")
            raise DirectoryStoreError(
                f"Failed to load hierarchy [{key}]: {e}",
                details={"kind": key.kind.value, "context_id": key.context_id},
            ) from e

        try:
            graph = HierarchyGraph.from_snapshot(snapshot)
        except HierarchyCycleError as e:
            self._count("_failed_builds")
            logger.error(f"Directory store hierarchy [{key}] is cyclic: {e.message}")
            raise
        except NeoRbacError:
            self._count("_failed_builds")
            raise
        except Exception as e:
            # Blank names or rows that are neither pairs nor graphable entities
            self._count("_failed_builds")
            logger.error(f"Directory store hierarchy [{key}] is malformed: {e}")
            raise DirectoryStoreError(
                f"Malformed hierarchy snapshot [{key}]: {e}",
                details={"kind": key.kind.value, "context_id": key.context_id},
            ) from e

        entry.graph = graph
        entry.built_at = datetime.now(timezone.utc)
        self._count("_builds")
        logger.info(f"Built hierarchy [{key}]: {len(graph)} vertices, {graph.edge_count} edges")
        return graph

    def _count(self, counter: str) -> None:
        with self._stats_lock:
            setattr(self, counter, getattr(self, counter) + 1)

    def __repr__(self) -> str:
        return f"HierarchyCache(keys={len(self._entries)}, closed={self._closed})"
