"""Tests for domain entities and value objects."""

import pytest

from neo_rbac.core.exceptions import AuditError, ErrorKind, HierarchyCycleError, PermissionNotFoundError
from neo_rbac.domain.entities import OrgUnit, Permission, Relationship, Role, Session
from neo_rbac.domain.value_objects import (
    AuthorizationResult,
    HierarchyKey,
    HierarchyKind,
    RelationshipViolation,
    canonical_name,
    normalize_context_id,
)


class TestContextNormalization:

    @pytest.mark.parametrize("context_id", [None, "", "   ", "null", "NULL", "Null"])
    def test_global_spellings(self, context_id):
        assert normalize_context_id(context_id) == ""

    def test_tenant_context_is_kept(self):
        assert normalize_context_id(" acme ") == "acme"

    def test_custom_sentinel(self):
        assert normalize_context_id("none", sentinel="NONE") == ""
        assert normalize_context_id("null", sentinel="NONE") == "null"

    def test_global_keys_collapse(self):
        keys = {HierarchyKey.of(HierarchyKind.ROLE, ctx) for ctx in (None, "", "null")}
        assert keys == {HierarchyKey(HierarchyKind.ROLE)}

    def test_keys_differ_by_kind(self):
        assert HierarchyKey.of(HierarchyKind.ROLE) != HierarchyKey.of(HierarchyKind.ADMIN_ROLE)

    def test_key_string(self):
        assert str(HierarchyKey.of("role")) == "role"
        assert str(HierarchyKey.of("admin_role", "acme")) == "admin_role:acme"
        assert HierarchyKey.of("role", "null").is_global


class TestCanonicalName:

    def test_upper_and_strip(self):
        assert canonical_name("  Manager ") == "MANAGER"

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_blank_names_rejected(self, name):
        with pytest.raises(ValueError):
            canonical_name(name)


class TestRelationship:

    def test_case_insensitive_equality(self):
        assert Relationship("manager", "Employee") == Relationship("MANAGER", "employee")
        assert str(Relationship("Manager", "Employee")) == "MANAGER -> EMPLOYEE"

    def test_self_reference(self):
        assert Relationship("Role", "ROLE").is_self_reference
        assert not Relationship("A", "B").is_self_reference


class TestRoleAndOrgUnit:

    def test_role_parents_are_canonical(self):
        role = Role(name="Director", parents=["manager", "Board "])
        assert role.parents == frozenset({"MANAGER", "BOARD"})
        assert role.canonical == "DIRECTOR"
        assert str(role) == "Director"

    def test_org_unit_defaults(self):
        unit = OrgUnit(name="Sales", parents={"corp"})
        assert unit.parents == frozenset({"CORP"})
        assert unit.context_id is None


class TestPermission:

    def test_names_required(self):
        with pytest.raises(ValueError):
            Permission("", "read")
        with pytest.raises(ValueError):
            Permission("Order", " ")

    def test_grants_are_frozen(self):
        permission = Permission("Order", "read", users=["u1"], roles=["Employee"])
        assert permission.users == frozenset({"u1"})
        assert permission.roles == frozenset({"Employee"})

    def test_permission_id(self):
        assert Permission("Order", "read").permission_id == "Order.read"
        assert Permission("Order", "read", obj_id="42").permission_id == "Order.read:42"
        assert Permission("Order", "read", internal_id="p-1").permission_id == "p-1"

    def test_with_context_copies_grants(self):
        permission = Permission("Order", "read", roles={"Employee"}, internal_id="p-1")
        bound = permission.with_context("acme")

        assert bound.context_id == "acme"
        assert bound.roles == permission.roles
        assert bound.internal_id == "p-1"
        assert permission.context_id is None


class TestSession:

    def test_user_required(self):
        with pytest.raises(ValueError):
            Session(user_id="")

    def test_activated_roles_by_admin_flag(self):
        session = Session(user_id="u1", roles=["Employee"], admin_roles=["RoleAdmin"])
        assert session.activated_roles(False) == frozenset({"Employee"})
        assert session.activated_roles(True) == frozenset({"RoleAdmin"})


class TestResults:

    def test_violation_messages(self):
        violation = RelationshipViolation(ErrorKind.RELATIONSHIP_EXISTS, "A", "B")
        assert "already exists" in violation.message

    def test_authorization_result_truthiness(self):
        permission = Permission("Order", "read")
        granted = AuthorizationResult(granted=True, user_id="u1", permission=permission)
        denied = AuthorizationResult(granted=False, user_id="u1", permission=permission)

        assert granted and not granted.denied
        assert not denied and denied.denied
        assert str(granted) == "GRANTED: Order.read for user u1"
        assert not granted.has_warnings

    def test_result_carries_audit_error(self):
        error = AuditError("sink down")
        result = AuthorizationResult(
            granted=True, user_id="u1", permission=Permission("Order", "read"),
            audit_error=error, warnings=[error.message],
        )
        assert result.granted
        assert result.has_warnings
        assert result.audit_error.kind == ErrorKind.AUDIT_FAILURE


class TestErrors:

    def test_default_kinds(self):
        assert PermissionNotFoundError("missing").kind == ErrorKind.NOT_FOUND
        assert HierarchyCycleError("loop").kind == ErrorKind.CYCLE

    def test_to_dict(self):
        error = HierarchyCycleError("loop", kind=ErrorKind.SELF_REFERENCE, details={"child": "A"})
        assert error.to_dict() == {
            "code": "HierarchyCycleError",
            "kind": "self_reference",
            "message": "loop",
            "details": {"child": "A"},
            "type": "HierarchyCycleError",
        }
