"""Immutable value objects for the authorization domain."""

from .hierarchy import (
    NO_CONTEXT,
    GLOBAL_CONTEXT,
    HierarchyKind,
    HierarchyKey,
    canonical_name,
    normalize_context_id,
)
from .authorization import AuthorizationResult, RelationshipViolation

__all__ = [
    "NO_CONTEXT",
    "GLOBAL_CONTEXT",
    "HierarchyKind",
    "HierarchyKey",
    "canonical_name",
    "normalize_context_id",
    "AuthorizationResult",
    "RelationshipViolation",
]
