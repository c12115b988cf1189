"""
Dependency graph construction using NetworkX.

This module handles:
- Validation of the task set (unique ids, positive durations, references)
- Cycle detection, reporting the tasks on the offending cycle
- A deterministic topological order for the scheduling passes
"""

import math
from dataclasses import dataclass
from typing import Iterable

import networkx as nx

from ganttline.exceptions import (
    CycleDetectedError,
    DanglingDependencyError,
    DuplicateTaskError,
    InvalidDurationError,
    SelfDependencyError,
)
from ganttline.logging_config import get_logger
from ganttline.models import Task

logger = get_logger(__name__)


@dataclass(frozen=True)
class DependencyGraph:
    """
    A validated task DAG.

    Edges go from dependency -> dependent, so graph.successors(task_id)
    are the tasks waiting on task_id. Each node carries its Task under
    the "task" attribute.
    """
    graph: nx.DiGraph
    order: list[str]

    def task(self, task_id: str) -> Task:
        return self.graph.nodes[task_id]["task"]

    def dependencies(self, task_id: str) -> list[str]:
        """Direct prerequisites of task_id."""
        return sorted(self.graph.predecessors(task_id))

    def dependents(self, task_id: str) -> list[str]:
        """Tasks that directly wait on task_id."""
        return sorted(self.graph.successors(task_id))

    def roots(self) -> list[str]:
        return [n for n in self.order if self.graph.in_degree(n) == 0]

    def sinks(self) -> list[str]:
        return [n for n in self.order if self.graph.out_degree(n) == 0]

    def __len__(self) -> int:
        return self.graph.number_of_nodes()


def build_dependency_graph(tasks: Iterable[Task]) -> DependencyGraph:
    """
    Validate tasks and build the dependency DAG.

    Checks run before any scheduling math, in this order:
    1. Every id is unique
    2. Every estimate is a positive number
    3. No task depends on itself
    4. Every dependency id names a task in the set
    5. The dependency relation has no cycle

    Raises the matching GanttlineException on the first failure.
    """
    graph = nx.DiGraph()

    task_list = list(tasks)
    for task in task_list:
        if task.id in graph:
            raise DuplicateTaskError(task.id)
        if not math.isfinite(task.estimated_hours) or task.estimated_hours <= 0:
            raise InvalidDurationError(task.id, task.estimated_hours)
        graph.add_node(task.id, task=task)

    for task in task_list:
        for dep_id in task.dependency_ids:
            if dep_id == task.id:
                raise SelfDependencyError(task.id)
            if dep_id not in graph:
                raise DanglingDependencyError(dep_id, task.id)
            graph.add_edge(dep_id, task.id)

    try:
        order = list(nx.lexicographical_topological_sort(graph))
    except nx.NetworkXUnfeasible:
        cycle = [u for u, _ in nx.find_cycle(graph)]
        logger.error(f"Cycle detected in task graph: {cycle}")
        raise CycleDetectedError(cycle)

    logger.debug(
        f"Built dependency graph: {graph.number_of_nodes()} tasks, "
        f"{graph.number_of_edges()} dependencies"
    )
    return DependencyGraph(graph=graph, order=order)
