"""Hierarchy caching."""

from .hierarchy_cache import CacheEntry, HierarchyCache

__all__ = ["CacheEntry", "HierarchyCache"]
