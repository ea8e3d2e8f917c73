"""Tests for the hierarchy graph."""

import pytest

from neo_rbac.core.exceptions import ErrorKind, HierarchyCycleError, HierarchyValidationError
from neo_rbac.domain.entities import HierarchyOp, Relationship, Role
from neo_rbac.domain.graph import HierarchyGraph


def build(*edges):
    return HierarchyGraph.from_relationships(Relationship(child, parent) for child, parent in edges)


@pytest.fixture
def corporate():
    """Director -> Manager -> Employee."""
    return build(("Manager", "Employee"), ("Director", "Manager"))


@pytest.fixture
def diamond():
    """A lattice: D has two parents that share a common ancestor.

        A
       / \\
      B   C
       \\ /
        D -> E
    """
    return build(("B", "A"), ("C", "A"), ("D", "B"), ("D", "C"), ("D", "E"))


class TestTraversal:
    """Closure and one-hop queries."""

    def test_corporate_scenario(self, corporate):
        assert corporate.ascendants("Manager") == {"EMPLOYEE"}
        assert corporate.ascendants("Director") == {"MANAGER", "EMPLOYEE"}
        assert corporate.children("Employee") == {"MANAGER"}
        assert corporate.descendants("Employee") == {"MANAGER", "DIRECTOR"}

    def test_closure_excludes_node_itself(self, diamond):
        assert "D" not in diamond.ascendants("D")
        assert "A" not in diamond.descendants("A")

    def test_multi_parent_lattice(self, diamond):
        assert diamond.parents("D") == {"B", "C", "E"}
        assert diamond.ascendants("D") == {"A", "B", "C", "E"}
        assert diamond.descendants("A") == {"B", "C", "D"}
        assert diamond.num_children("A") == 2

    def test_ascendants_equal_parent_fixpoint(self, diamond):
        for node in diamond.vertices():
            expected = set()
            frontier = set(diamond.parents(node))
            while frontier:
                expected |= frontier
                frontier = set().union(*(diamond.parents(p) for p in frontier)) - expected
            assert diamond.ascendants(node) == expected

    def test_unknown_node_is_empty(self, corporate):
        assert corporate.ascendants("Intern") == set()
        assert corporate.descendants("Intern") == set()
        assert corporate.parents("Intern") == set()
        assert corporate.children("Intern") == set()
        assert corporate.num_children("Intern") == 0

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_node_is_unknown(self, corporate, name):
        assert corporate.ascendants(name) == set()
        assert corporate.descendants(name) == set()
        assert corporate.parents(name) == set()
        assert corporate.children(name) == set()
        assert corporate.num_children(name) == 0
        assert not corporate.has_vertex(name)
        assert not corporate.has_edge(name, "Employee")
        assert corporate.remove_edge("Manager", name) is False

    def test_blank_node_cannot_be_added(self, corporate):
        with pytest.raises(ValueError):
            corporate.add_edge("Manager", " ")

    def test_root_has_no_ascendants(self, corporate):
        assert corporate.ascendants("Employee") == set()


class TestCaseHandling:
    """Names are canonicalized at the graph boundary."""

    def test_case_variants_do_not_alias(self):
        graph = HierarchyGraph()
        graph.add_edge("manager", "EMPLOYEE")
        graph.add_edge("Director", "Manager")

        assert len(graph) == 3
        assert graph.ascendants("DiReCtOr") == {"MANAGER", "EMPLOYEE"}
        assert graph.has_edge("MANAGER", "employee")

    def test_duplicate_edge_in_other_case_is_noop(self, corporate):
        assert corporate.add_edge("MANAGER", "employee") is False
        assert corporate.edge_count == 2


class TestAddEdge:
    """Edge insertion keeps the graph acyclic."""

    @pytest.mark.parametrize("edges", [(), (("Manager", "Employee"),), (("A", "B"), ("B", "C"))])
    def test_self_loop_always_fails(self, edges):
        graph = build(*edges)
        with pytest.raises(HierarchyCycleError) as exc_info:
            graph.add_edge("A", "a")
        assert exc_info.value.kind == ErrorKind.SELF_REFERENCE

    def test_closing_a_path_fails(self):
        graph = build(("A", "B"), ("B", "C"))

        with pytest.raises(HierarchyCycleError) as exc_info:
            graph.add_edge("C", "A")

        assert exc_info.value.kind == ErrorKind.CYCLE
        assert not graph.has_edge("C", "A")
        assert graph.edge_count == 2

    def test_closing_a_direct_edge_fails(self, corporate):
        with pytest.raises(HierarchyCycleError):
            corporate.add_edge("Employee", "Manager")

    def test_unrelated_edge_succeeds(self):
        graph = build(("A", "B"), ("B", "C"))

        assert graph.add_edge("C", "D") is True
        assert graph.ascendants("A") == {"B", "C", "D"}

    def test_new_endpoints_become_vertices(self):
        graph = HierarchyGraph()
        graph.add_edge("Child", "Parent")
        assert graph.vertices() == frozenset({"CHILD", "PARENT"})

    def test_edge_between_siblings_is_allowed(self, diamond):
        assert diamond.add_edge("B", "C") is True
        assert diamond.ascendants("B") == {"A", "C"}


class TestRemoveEdge:
    """Edge removal."""

    def test_remove_absent_edge_is_noop(self, corporate):
        assert corporate.remove_edge("Director", "Employee") is False
        assert corporate.remove_edge("Nobody", "Employee") is False
        assert corporate.edge_count == 2

    def test_remove_keeps_isolated_vertices(self, corporate):
        assert corporate.remove_edge("Manager", "Employee") is True

        assert corporate.has_vertex("Employee")
        assert corporate.ascendants("Director") == {"MANAGER"}
        assert corporate.children("Employee") == set()

    def test_removed_edge_can_be_reversed(self, corporate):
        corporate.remove_edge("Manager", "Employee")
        assert corporate.add_edge("Employee", "Manager") is True

    def test_apply_dispatches_on_op(self, corporate):
        relationship = Relationship("Intern", "Employee")

        assert corporate.apply(relationship, HierarchyOp.ADD) is True
        assert corporate.has_edge("Intern", "Employee")
        assert corporate.apply(relationship, "remove") is True
        assert not corporate.has_edge("Intern", "Employee")


class TestRelationshipValidation:
    """Three-rule relationship check; first failing rule wins."""

    def test_self_reference_wins_over_existence(self, corporate):
        violation = corporate.check_relationship("Manager", "manager", must_exist=True)
        assert violation.kind == ErrorKind.SELF_REFERENCE

    def test_must_exist_but_absent(self, corporate):
        violation = corporate.check_relationship("Director", "Employee", must_exist=True)
        assert violation.kind == ErrorKind.RELATIONSHIP_MISSING

    def test_must_not_exist_but_present(self, corporate):
        violation = corporate.check_relationship("Director", "Manager", must_exist=False)
        assert violation.kind == ErrorKind.RELATIONSHIP_EXISTS

    def test_valid_relationships(self, corporate):
        assert corporate.check_relationship("Director", "Manager", must_exist=True) is None
        assert corporate.check_relationship("Director", "Employee", must_exist=False) is None

    def test_validate_raises_with_kind(self, corporate):
        with pytest.raises(HierarchyValidationError) as exc_info:
            corporate.validate_relationship("Director", "Employee", must_exist=True)

        error = exc_info.value
        assert error.kind == ErrorKind.RELATIONSHIP_MISSING
        assert error.details["child"] == "DIRECTOR"
        assert error.details["parent"] == "EMPLOYEE"


class TestConstruction:
    """Building graphs from snapshots."""

    def test_from_snapshot_tuples(self):
        graph = HierarchyGraph.from_snapshot([
            ("Manager", ["Employee"]),
            ("Director", ["Manager", "Board"]),
        ])
        assert graph.ascendants("Director") == {"MANAGER", "EMPLOYEE", "BOARD"}

    def test_from_snapshot_entities(self):
        graph = HierarchyGraph.from_snapshot([
            Role(name="Manager", parents={"Employee"}),
            Role(name="Employee"),
        ])
        assert graph.edges() == frozenset({Relationship("Manager", "Employee")})

    def test_cyclic_snapshot_is_rejected(self):
        with pytest.raises(HierarchyCycleError):
            HierarchyGraph.from_snapshot([("A", ["B"]), ("B", ["A"])])

    def test_copy_is_independent(self, corporate):
        clone = corporate.copy()
        clone.add_edge("Intern", "Employee")
        clone.remove_edge("Director", "Manager")

        assert corporate.edges() == frozenset({
            Relationship("Manager", "Employee"),
            Relationship("Director", "Manager"),
        })
        assert clone.ascendants("Intern") == {"EMPLOYEE"}
        assert not corporate.has_vertex("Intern")

    def test_membership(self, corporate):
        assert "manager" in corporate
        assert "Intern" not in corporate
        assert "" not in corporate
