"""
Dependency graph building and analysis functionality.
"""

import logging
from graphlib import CycleError, TopologicalSorter
from typing import Any

from sqldoc.models.project import ModelReflection

logger = logging.getLogger(__name__)

DependencyInfo = dict[str, list[str]]
GraphCycles = list[list[str]]


class DependencyGraphBuilder:
    """Handles dependency graph construction and analysis."""

    def build_graph(self, models: dict[str, ModelReflection]) -> dict[str, Any]:
        """
        Build a dependency graph from the parsed models.

        Args:
            models: Models keyed by qualified name

        Returns:
            Dict with ``dependencies``, ``dependents``, ``execution_order``
            and ``cycles``. The execution order is empty when there are cycles.
        """
        dependencies: DependencyInfo = {}
        for name in sorted(models):
            resolved = (self.resolve_reference(ref, models) for ref in models[name].sources)
            dependencies[name] = list(dict.fromkeys(dep for dep in resolved if dep != name))

        # Only edges between project models take part in ordering
        internal = {
            name: [dep for dep in deps if dep in models] for name, deps in dependencies.items()
        }

        dependents: DependencyInfo = {name: [] for name in internal}
        for name, deps in internal.items():
            for dep in deps:
                dependents[dep].append(name)

        cycles = self.find_cycles(internal)
        execution_order = [] if cycles else list(self._sorter(internal).static_order())

        logger.debug(f"Built dependency graph with {len(internal)} nodes and {len(cycles)} cycles")
        return {
            "dependencies": dependencies,
            "dependents": dependents,
            "execution_order": execution_order,
            "cycles": cycles,
        }

    def resolve_reference(self, reference: str, models: dict[str, ModelReflection]) -> str:
        """
        Resolve a table reference to a model name.

        An exact name match wins; an unqualified reference matches a model
        whose table name is unique in the project. Anything else is an
        external table and is returned unchanged.
        """
        if reference in models:
            return reference
        if "." not in reference:
            candidates = [name for name, model in models.items() if model.table == reference]
            if len(candidates) == 1:
                return candidates[0]
        return reference

    def find_cycles(self, dependencies: DependencyInfo) -> GraphCycles:
        """
        Find circular dependencies.

        graphlib reports one cycle at a time, so each reported cycle has one
        of its edges removed before sorting again.

        Args:
            dependencies: Dict mapping model -> list of dependencies

        Returns:
            Cycles as ``[a, b, ..., a]`` where each model depends on the next,
            starting at the smallest name (empty if there are no cycles)
        """
        remaining = {node: list(deps) for node, deps in dependencies.items()}
        cycles: GraphCycles = []
        while True:
            try:
                self._sorter(remaining).prepare()
            except CycleError as e:
                # graphlib lists the cycle from dependency to dependent
                cycle = self._rotate(list(reversed(e.args[1])))
                cycles.append(cycle)
                remaining[cycle[0]].remove(cycle[1])
            else:
                return cycles

    @staticmethod
    def _rotate(cycle: list[str]) -> list[str]:
        nodes = cycle[:-1]
        start = nodes.index(min(nodes))
        nodes = nodes[start:] + nodes[:start]
        return nodes + [nodes[0]]

    @staticmethod
    def _sorter(dependencies: DependencyInfo) -> TopologicalSorter:
        ts = TopologicalSorter()
        for node, deps in dependencies.items():
            ts.add(node, *deps)
        return ts
