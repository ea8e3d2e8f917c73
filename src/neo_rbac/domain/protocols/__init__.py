"""Protocol interfaces for authorization collaborators."""

from .directory_protocols import (
    AuditSinkProtocol,
    DirectoryStoreProtocol,
    GraphableProtocol,
    SnapshotEntry,
)

__all__ = [
    "AuditSinkProtocol",
    "DirectoryStoreProtocol",
    "GraphableProtocol",
    "SnapshotEntry",
]
