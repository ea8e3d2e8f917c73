"""Exceptions module for neo-rbac.

This module provides the complete exception hierarchy for neo-rbac,
organized by hierarchy concerns and Directory Store concerns.
"""

from .base import ErrorKind, NeoRbacError
from .hierarchy import (
    HierarchyError,
    HierarchyValidationError,
    HierarchyCycleError,
)
from .directory import (
    DirectoryStoreError,
    NotFoundError,
    PermissionNotFoundError,
    AuditError,
)

__all__ = [
    "ErrorKind",
    "NeoRbacError",
    "HierarchyError",
    "HierarchyValidationError",
    "HierarchyCycleError",
    "DirectoryStoreError",
    "NotFoundError",
    "PermissionNotFoundError",
    "AuditError",
]
