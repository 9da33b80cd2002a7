"""
Dependency graph construction and traversal order.

Tasks are stored in an arena addressed by their integer position in the
input list. Both scheduling passes walk the graph through an explicit
ready-queue (in-degree counters plus a FIFO) rather than recursion, so a
long chain cannot exhaust the call stack and a cycle shows up as tasks that
never become ready.
"""

import logging
import math
import numbers
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import networkx as nx

from planning_engine.domain.errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    InvalidDurationError,
    UnknownDependencyError,
)
from planning_engine.domain.task import CPMTask

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DependencyGraph:
    """
    Validated, acyclic task-dependency structure ready for traversal.

    Attributes:
        tasks: Task snapshot, indexed by arena position
        predecessors: For each index, the indices it depends on
        successors: For each index, the indices that depend on it
        order: A topological order of all indices
        nx_graph: The networkx DiGraph assembled by the builder
    """

    tasks: Tuple[CPMTask, ...]
    predecessors: Tuple[Tuple[int, ...], ...]
    successors: Tuple[Tuple[int, ...], ...]
    order: Tuple[int, ...]
    nx_graph: nx.DiGraph
    _index: Dict[Any, int]

    def __len__(self):
        return len(self.tasks)

    def index_of(self, task_id) -> int:
        try:
            return self._index[task_id]
        except KeyError:
            raise UnknownDependencyError(task_id) from None

    def task_id(self, index) -> Any:
        return self.tasks[index].id

    @property
    def sources(self) -> List[int]:
        return [i for i, preds in enumerate(self.predecessors) if not preds]

    @property
    def sinks(self) -> List[int]:
        return [i for i, succs in enumerate(self.successors) if not succs]

    def is_ready(self, index, resolved, reverse=False) -> bool:
        """
        True when every task ``index`` waits on is in ``resolved``.

        Forward traversal waits on predecessors, reverse traversal on
        successors.
        """
        blockers = self.successors[index] if reverse else self.predecessors[index]
        return all(blocker in resolved for blocker in blockers)

    def walk(self, reverse=False) -> Iterator[int]:
        """
        Yield task indices in dependency order.

        Forward order yields a task only once all its predecessors have been
        yielded; reverse order does the same with successors. Ties are broken
        by input position.
        """
        blockers = self.successors if reverse else self.predecessors
        releases = self.predecessors if reverse else self.successors
        return _ready_queue_order(blockers, releases)

    def edges(self) -> Iterator[Tuple[int, int]]:
        for v, preds in enumerate(self.predecessors):
            for u in preds:
                yield u, v

    def to_networkx(self) -> nx.DiGraph:
        """Copy of the graph keyed by task id instead of arena index."""
        return nx.relabel_nodes(
            self.nx_graph, {i: task.id for i, task in enumerate(self.tasks)}, copy=True
        )


def _ready_queue_order(blockers, releases) -> Iterator[int]:
    remaining = [len(b) for b in blockers]
    ready = deque(i for i, count in enumerate(remaining) if count == 0)
    while ready:
        current = ready.popleft()
        yield current
        for released in releases[current]:
            remaining[released] -= 1
            if remaining[released] == 0:
                ready.append(released)


def _coerce_task(raw) -> CPMTask:
    if isinstance(raw, CPMTask):
        return raw
    return CPMTask.from_dict(raw)


def validate_duration(task: CPMTask) -> None:
    """Raise InvalidDurationError unless the duration is a finite number >= 0."""
    duration = task.duration
    if isinstance(duration, bool) or not isinstance(duration, numbers.Real):
        raise InvalidDurationError(duration, task.id)
    if not math.isfinite(duration) or duration < 0:
        raise InvalidDurationError(duration, task.id)


def build_dependency_graph(tasks: Sequence) -> DependencyGraph:
    """
    Validate a flat task list and build its dependency graph.

    Args:
        tasks: CPMTask instances or mappings accepted by CPMTask.from_dict

    Returns:
        DependencyGraph with predecessor/successor adjacency and a topological order

    Raises:
        DuplicateTaskError: If two tasks share an id
        InvalidDurationError: If a duration is negative or unusable
        UnknownDependencyError: If a dependency names a task that is not supplied
        CyclicDependencyError: If the dependencies contain a cycle
    """
    snapshot = tuple(_coerce_task(raw) for raw in tasks)

    index: Dict[Any, int] = {}
    for i, task in enumerate(snapshot):
        if task.id in index:
            raise DuplicateTaskError(task.id)
        index[task.id] = i

    for task in snapshot:
        validate_duration(task)

    G = nx.DiGraph()
    for i, task in enumerate(snapshot):
        G.add_node(i, task_id=task.id, duration=task.duration)

    predecessors: List[Tuple[int, ...]] = []
    successors: List[List[int]] = [[] for _ in snapshot]
    for i, task in enumerate(snapshot):
        preds = []
        for dep_id in task.dependencies:
            if dep_id not in index:
                raise UnknownDependencyError(dep_id, task.id)
            p = index[dep_id]
            preds.append(p)
            successors[p].append(i)
            G.add_edge(p, i)
        predecessors.append(tuple(preds))

    frozen_successors = tuple(tuple(s) for s in successors)
    order = tuple(_ready_queue_order(predecessors, frozen_successors))

    if len(order) != len(snapshot):
        _raise_cycle(G, snapshot, set(order))

    logger.debug(
        "Built dependency graph: %d tasks, %d edges", len(snapshot), G.number_of_edges()
    )

    return DependencyGraph(
        tasks=snapshot,
        predecessors=tuple(predecessors),
        successors=frozen_successors,
        order=order,
        nx_graph=G,
        _index=index,
    )


def _raise_cycle(G, snapshot, emitted):
    """Name a cycle among the tasks the ready-queue could never release."""
    stuck = G.subgraph(n for n in G.nodes if n not in emitted)
    try:
        cycle_edges = nx.find_cycle(stuck)
        cycle = [snapshot[u].id for u, _ in cycle_edges]
    except nx.NetworkXNoCycle:
        # Unreachable for a consistent graph; still report a stuck task
        cycle = [snapshot[min(stuck.nodes)].id]
    logger.debug("Dependency cycle: %s", cycle)
    raise CyclicDependencyError(cycle[0], cycle)
