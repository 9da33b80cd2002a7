import logging
from typing import List, Tuple

from planning_engine.domain.errors import SchedulingError
from planning_engine.utils.calendar import offset_working_days

logger = logging.getLogger(__name__)


def backward_pass(graph, earliest_finish, project_end) -> Tuple[List, List]:
    """
    Calculate latest start and finish dates.

    Must run after the forward pass: ``project_end`` is the latest earliest
    finish it produced. A task without successors finishes on
    ``project_end``; any other task finishes by the earliest latest-start of
    its successors.

    Returns:
        (latest_start, latest_finish) lists indexed like ``graph.tasks``
    """
    count = len(graph)
    if len(earliest_finish) != count or any(ef is None for ef in earliest_finish):
        raise SchedulingError("Backward pass needs a complete forward pass")

    latest_start = [None] * count
    latest_finish = [None] * count
    resolved = set()

    for i in graph.walk(reverse=True):
        if i in resolved or not graph.is_ready(i, resolved, reverse=True):
            raise SchedulingError(
                f"Task '{graph.task_id(i)}' reached out of reverse dependency order"
            )

        succs = graph.successors[i]
        if succs:
            finish = min(latest_start[s] for s in succs)
        else:
            finish = project_end

        latest_finish[i] = finish
        latest_start[i] = offset_working_days(finish, -graph.tasks[i].duration)
        resolved.add(i)

        logger.debug(
            "Backward: %s LS=%s LF=%s",
            graph.task_id(i),
            latest_start[i],
            latest_finish[i],
        )

    if len(resolved) != count:
        raise SchedulingError(
            f"Backward pass visited {len(resolved)} of {count} tasks"
        )

    return latest_start, latest_finish
