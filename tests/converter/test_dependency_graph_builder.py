"""
Tests for the dependency graph builder.
"""

import pytest

from sqldoc.converter.dependency_graph import DependencyGraphBuilder
from sqldoc.models.project import ModelReflection


def make_models(**sources):
    """Build models named ``s.<key>`` reading the given sources."""
    models = {}
    for table, refs in sources.items():
        name = f"s.{table}"
        models[name] = ModelReflection(name=name, table=table, schema="s", sources=list(refs))
    return models


class TestDependencyGraphBuilder:
    """Test dependency resolution, ordering and cycle detection."""

    @pytest.fixture
    def builder(self):
        return DependencyGraphBuilder()

    def test_execution_order_respects_dependencies(self, builder):
        models = make_models(a=[], b=["s.a"], c=["s.a", "s.b"])

        graph = builder.build_graph(models)

        order = graph["execution_order"]
        assert sorted(order) == ["s.a", "s.b", "s.c"]
        assert order.index("s.a") < order.index("s.b") < order.index("s.c")
        assert graph["cycles"] == []

    def test_dependents_are_inverted_internal_edges(self, builder):
        models = make_models(a=["raw.x"], b=["s.a"], c=["s.a"])

        graph = builder.build_graph(models)

        assert graph["dependents"] == {"s.a": ["s.b", "s.c"], "s.b": [], "s.c": []}

    def test_external_sources_are_kept_but_not_ordered(self, builder):
        models = make_models(a=["raw.x", "raw.y"])

        graph = builder.build_graph(models)

        assert graph["dependencies"] == {"s.a": ["raw.x", "raw.y"]}
        assert graph["execution_order"] == ["s.a"]

    def test_unqualified_reference_resolves_to_unique_table(self, builder):
        models = make_models(a=[], b=["a"])

        graph = builder.build_graph(models)

        assert graph["dependencies"]["s.b"] == ["s.a"]

    def test_ambiguous_unqualified_reference_stays_external(self, builder):
        models = {
            "x.t": ModelReflection(name="x.t", table="t", schema="x"),
            "y.t": ModelReflection(name="y.t", table="t", schema="y"),
            "s.q": ModelReflection(name="s.q", table="q", schema="s", sources=["t"]),
        }

        graph = builder.build_graph(models)

        assert graph["dependencies"]["s.q"] == ["t"]

    def test_self_reference_is_ignored(self, builder):
        models = make_models(a=["s.a", "raw.x"])

        graph = builder.build_graph(models)

        assert graph["dependencies"]["s.a"] == ["raw.x"]
        assert graph["cycles"] == []

    def test_cycle_is_reported(self, builder):
        models = make_models(a=["s.b"], b=["s.a"])

        graph = builder.build_graph(models)

        assert graph["cycles"] == [["s.a", "s.b", "s.a"]]
        assert graph["execution_order"] == []

    def test_cycle_follows_dependency_direction(self, builder):
        models = make_models(c=["s.a"], a=["s.b"], b=["s.c"])

        graph = builder.build_graph(models)

        assert graph["cycles"] == [["s.a", "s.b", "s.c", "s.a"]]

    def test_every_independent_cycle_is_reported(self, builder):
        models = make_models(a=["s.b"], b=["s.a"], x=["s.y"], y=["s.x"], z=["s.a"])

        graph = builder.build_graph(models)

        assert sorted(graph["cycles"]) == [["s.a", "s.b", "s.a"], ["s.x", "s.y", "s.x"]]
        assert graph["execution_order"] == []

    def test_cycles_sharing_a_model(self, builder):
        models = make_models(a=["s.b", "s.c"], b=["s.a"], c=["s.a"])

        cycles = builder.find_cycles(
            {name: list(model.sources) for name, model in models.items()}
        )

        assert sorted(cycles) == [["s.a", "s.b", "s.a"], ["s.a", "s.c", "s.a"]]

    def test_find_cycles_leaves_input_untouched(self, builder):
        dependencies = {"s.a": ["s.b"], "s.b": ["s.a"]}

        builder.find_cycles(dependencies)

        assert dependencies == {"s.a": ["s.b"], "s.b": ["s.a"]}

    def test_empty_project(self, builder):
        graph = builder.build_graph({})

        assert graph == {
            "dependencies": {},
            "dependents": {},
            "execution_order": [],
            "cycles": [],
        }
