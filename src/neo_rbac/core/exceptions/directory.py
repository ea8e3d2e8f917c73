"""Directory Store and audit exceptions for neo-rbac."""

from .base import ErrorKind, NeoRbacError


class DirectoryStoreError(NeoRbacError):
    """Raised when a Directory Store call fails (connectivity, protocol)."""
    default_kind = ErrorKind.INFRA_FAILURE


class NotFoundError(NeoRbacError):
    """Base class for entities missing from the Directory Store."""
    default_kind = ErrorKind.NOT_FOUND


class PermissionNotFoundError(NotFoundError):
    """Raised when a permission does not exist in the Directory Store."""
    pass


class AuditError(NeoRbacError):
    """Audit sink failure, reported as a warning on an authorization result."""
    default_kind = ErrorKind.AUDIT_FAILURE
