"""Pytest configuration and fixtures for neo-rbac tests."""

import pytest
from unittest.mock import MagicMock

from neo_rbac.application.services import PermissionResolver, RoleHierarchyService
from neo_rbac.config import RbacSettings
from neo_rbac.domain.entities import Relationship
from neo_rbac.domain.value_objects import HierarchyKind
from neo_rbac.infrastructure.audit import LoggingAuditSink
from neo_rbac.infrastructure.cache import HierarchyCache
from neo_rbac.infrastructure.repositories import InMemoryDirectoryStore


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return RbacSettings(_env_file=None)


@pytest.fixture
def directory():
    """Directory store seeded with a small corporate role hierarchy.

    Director -> Manager -> Employee in the global ROLE hierarchy.
    """
    store = InMemoryDirectoryStore()
    store.load_relationships(
        HierarchyKind.ROLE,
        [
            Relationship("Manager", "Employee"),
            Relationship("Director", "Manager"),
        ],
    )
    return store


@pytest.fixture
def cache(directory):
    """Hierarchy cache over the seeded directory."""
    hierarchy_cache = HierarchyCache(directory)
    yield hierarchy_cache
    hierarchy_cache.close()


@pytest.fixture
def role_service(cache):
    """Ordinary role hierarchy service."""
    return RoleHierarchyService(HierarchyKind.ROLE, cache)


@pytest.fixture
def admin_role_service(cache):
    """Administrative role hierarchy service."""
    return RoleHierarchyService(HierarchyKind.ADMIN_ROLE, cache)


@pytest.fixture
def audit_sink():
    """Recording audit sink."""
    return LoggingAuditSink(history_size=100)


@pytest.fixture
def mock_audit_sink():
    """Audit sink mock for asserting calls."""
    sink = MagicMock()
    sink.record_authorization_event = MagicMock(return_value=None)
    return sink


@pytest.fixture
def resolver(role_service, admin_role_service, directory, audit_sink):
    """Permission resolver wired to the seeded directory."""
    return PermissionResolver(
        role_hierarchy=role_service,
        admin_role_hierarchy=admin_role_service,
        directory=directory,
        audit_sink=audit_sink,
    )
