import logging
from typing import List, Tuple

from planning_engine.domain.errors import SchedulingError
from planning_engine.utils.calendar import offset_working_days

logger = logging.getLogger(__name__)


def forward_pass(graph, project_start) -> Tuple[List, List]:
    """
    Calculate earliest start and finish dates.

    A task without predecessors starts on ``project_start``; any other task
    starts on the latest earliest-finish of its predecessors. Tasks are taken
    from the graph's ready-queue, so each is handled only after all of its
    predecessors.

    Args:
        graph: A validated DependencyGraph
        project_start: Date the project starts on

    Returns:
        (earliest_start, earliest_finish) lists indexed like ``graph.tasks``
    """
    count = len(graph)
    earliest_start = [None] * count
    earliest_finish = [None] * count
    resolved = set()

    for i in graph.walk():
        if i in resolved or not graph.is_ready(i, resolved):
            raise SchedulingError(
                f"Task '{graph.task_id(i)}' reached out of dependency order"
            )

        preds = graph.predecessors[i]
        if preds:
            start = max(earliest_finish[p] for p in preds)
        else:
            start = project_start

        earliest_start[i] = start
        earliest_finish[i] = offset_working_days(start, graph.tasks[i].duration)
        resolved.add(i)

        logger.debug(
            "Forward: %s ES=%s EF=%s",
            graph.task_id(i),
            earliest_start[i],
            earliest_finish[i],
        )

    if len(resolved) != count:
        raise SchedulingError(
            f"Forward pass visited {len(resolved)} of {count} tasks"
        )

    return earliest_start, earliest_finish


def project_end_date(earliest_finish, project_start):
    """Latest earliest-finish, or the start date for an empty project."""
    return max(earliest_finish, default=project_start)
