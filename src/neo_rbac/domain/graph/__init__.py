"""Hierarchy graph and traversal algorithms."""

from .hierarchy_graph import HierarchyGraph

__all__ = ["HierarchyGraph"]
