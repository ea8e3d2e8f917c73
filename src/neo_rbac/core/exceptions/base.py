"""Base exceptions for neo-rbac.

This module defines the base exception hierarchy for the neo-rbac library.
All exceptions inherit from NeoRbacError and include an error kind, an error
code and structured details so callers can branch on ``error.kind`` instead
of on the exception type.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Classification of every failure the engine can report."""
    SELF_REFERENCE = "self_reference"              # child == parent
    CYCLE = "cycle"                                # edge would close a loop
    RELATIONSHIP_MISSING = "relationship_missing"  # must exist, does not
    RELATIONSHIP_EXISTS = "relationship_exists"    # must not exist, does
    NOT_FOUND = "not_found"
    INFRA_FAILURE = "infra_failure"
    AUDIT_FAILURE = "audit_failure"


class NeoRbacError(Exception):
    """Base exception for all neo-rbac errors.

    All exceptions in the neo-rbac library inherit from this base class
    and include structured error information for better debugging.
    """

    default_kind: ErrorKind = ErrorKind.INFRA_FAILURE

    def __init__(
        self,
        message: str,
        kind: Optional[ErrorKind] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation used in logs and audit warnings."""
        return {
            "code": self.error_code,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }
