"""
Permission resolver - core authorization decision logic.

Combines direct user grants with role grants expanded through the matching
role hierarchy, and audits every checked decision.
"""
from typing import FrozenSet, Optional, Tuple

from loguru import logger

from ...core.exceptions import AuditError, DirectoryStoreError, NeoRbacError, PermissionNotFoundError
from ...domain.entities.permission import Permission
from ...domain.entities.session import Session
from ...domain.protocols import AuditSinkProtocol, DirectoryStoreProtocol
from ...domain.value_objects.authorization import AuthorizationResult
from ...domain.value_objects.hierarchy import canonical_name
from .role_hierarchy_service import RoleHierarchyService

Decision = Tuple[bool, str, FrozenSet[str]]


class PermissionResolver:
    """
    Decides whether a session may perform a permission.

    Algorithm:
    1. A user id in the permission's granted users wins immediately.
    2. Otherwise the session's activated roles (admin roles for an admin
       permission) are expanded with their ascendants and intersected with
       the permission's granted roles.
    3. A permission with neither grant denies.
    """

    def __init__(
        self,
        role_hierarchy: RoleHierarchyService,
        admin_role_hierarchy: RoleHierarchyService,
        directory: DirectoryStoreProtocol,
        audit_sink: Optional[AuditSinkProtocol] = None,
        audit_enabled: bool = True
    ):
        self.role_hierarchy = role_hierarchy
        self.admin_role_hierarchy = admin_role_hierarchy
        self.directory = directory
        self.audit_sink = audit_sink
        self.audit_enabled = audit_enabled

    def is_authorized(self, session: Session, permission: Permission) -> bool:
        """Evaluate ``permission`` as given, without a Directory Store read or audit."""
        granted, _, _ = self._decide(session, permission)
        return granted

    def check_permission(self, session: Session, permission: Permission) -> AuthorizationResult:
        """
        Authorize against the stored permission and audit the outcome.

        Only the key fields of ``permission`` are used (object, operation,
        object id, admin flag, context); grants come from the Directory Store.

        Raises:
            PermissionNotFoundError: the permission does not exist
            DirectoryStoreError: the Directory Store read failed
        """
        context_id = self._context_of(session, permission)
        try:
            stored = self.directory.read_permission(
                permission.obj_name,
                permission.op_name,
                permission.obj_id,
                permission.admin,
                context_id
            )
        except NeoRbacError:
            raise
        except Exception as e:
            raise DirectoryStoreError(
                f"checkPermission failed to read [{permission.abstract_name}]: {e}",
                details={"obj_name": permission.obj_name, "op_name": permission.op_name},
            ) from e

        if stored is None:
            raise PermissionNotFoundError(
                f"checkPermission DOES NOT EXIST: obj name [{permission.obj_name}], "
                f"obj id [{permission.obj_id}], op name [{permission.op_name}], admin [{permission.admin}]",
                details={
                    "obj_name": permission.obj_name,
                    "op_name": permission.op_name,
                    "obj_id": permission.obj_id,
                    "admin": permission.admin,
                    "context_id": context_id,
                },
            )

        stored = stored.with_context(context_id)
        granted, reason, matched_roles = self._decide(session, stored)

        audit_error = self._audit(stored, session, granted)
        warnings = [audit_error.message] if audit_error else []

        logger.debug(f"checkPermission {stored.abstract_name} user={session.user_id} granted={granted}")
        return AuthorizationResult(
            granted=granted,
            user_id=session.user_id,
            permission=stored,
            decision_reason=reason,
            matched_roles=matched_roles,
            audit_error=audit_error,
            warnings=warnings,
        )

    def _decide(self, session: Session, permission: Permission) -> Decision:
        if session.user_id in permission.users:
            return True, "User assigned directly to permission", frozenset()

        if not permission.roles:
            return False, "Permission has no granted users or roles", frozenset()

        hierarchy = self.admin_role_hierarchy if permission.admin else self.role_hierarchy
        inherited = hierarchy.get_inherited_roles(
            session.activated_roles(permission.admin),
            self._context_of(session, permission)
        )
        granted_roles = frozenset(canonical_name(role) for role in permission.roles if role and role.strip())
        matched = inherited & granted_roles
        if matched:
            return True, f"Inherited roles match: {', '.join(sorted(matched))}", matched
        return False, "No activated or inherited role is granted", frozenset()

    def _audit(self, permission: Permission, session: Session, granted: bool) -> Optional[AuditError]:
        """Emit the audit event; a failure is returned, never raised."""
        if not self.audit_enabled or self.audit_sink is None:
            return None
        try:
            self.audit_sink.record_authorization_event(permission.permission_id, session.user_id, granted)
        except Exception as e:
            error = AuditError(
                f"Audit of [{permission.permission_id}] for user [{session.user_id}] failed: {e}",
                details={"permission_id": permission.permission_id, "user_id": session.user_id, "granted": granted},
            )
            error.__cause__ = e
            logger.warning(error.message)
            return error
        return None

    @staticmethod
    def _context_of(session: Session, permission: Permission) -> Optional[str]:
        return permission.context_id if permission.context_id is not None else session.context_id
