"""
Authorization value objects.

Immutable results produced by relationship checks and permission checks.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, TYPE_CHECKING

from ...core.exceptions import AuditError, ErrorKind

if TYPE_CHECKING:
    from ..entities.permission import Permission


@dataclass(frozen=True)
class RelationshipViolation:
    """First failing rule of a relationship check."""
    kind: ErrorKind
    child: str
    parent: str

    @property
    def message(self) -> str:
        if self.kind == ErrorKind.SELF_REFERENCE:
            return f"child [{self.child}] must not equal parent [{self.parent}]"
        if self.kind == ErrorKind.RELATIONSHIP_MISSING:
            return f"relationship child [{self.child}] parent [{self.parent}] does not exist"
        return f"relationship child [{self.child}] parent [{self.parent}] already exists"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class AuthorizationResult:
    """
    Outcome of a permission check.

    The decision in ``granted`` is authoritative; an audit failure is carried
    alongside it in ``audit_error`` and never changes the decision.
    """
    granted: bool
    user_id: str
    permission: "Permission"
    decision_reason: str = ""
    matched_roles: FrozenSet[str] = frozenset()
    audit_error: Optional[AuditError] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def denied(self) -> bool:
        return not self.granted

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def __bool__(self) -> bool:
        return self.granted

    def __str__(self) -> str:
        status = "GRANTED" if self.granted else "DENIED"
        return f"{status}: {self.permission.abstract_name} for user {self.user_id}"
