"""Hierarchy-specific exceptions for neo-rbac."""

from .base import ErrorKind, NeoRbacError


class HierarchyError(NeoRbacError):
    """Base exception for hierarchy errors."""
    default_kind = ErrorKind.CYCLE


class HierarchyValidationError(HierarchyError):
    """Raised when a relationship fails the self-reference or existence checks."""
    default_kind = ErrorKind.SELF_REFERENCE


class HierarchyCycleError(HierarchyError):
    """Raised when inserting an edge would break acyclicity."""
    default_kind = ErrorKind.CYCLE
