import logging
from typing import Any, List

from planning_engine.config import CRITICAL_SLACK_TOLERANCE
from planning_engine.domain.errors import SchedulingError
from planning_engine.domain.result import ScheduleResult
from planning_engine.utils.calendar import whole_working_days, working_days_between

logger = logging.getLogger(__name__)


def is_critical(slack, tolerance=CRITICAL_SLACK_TOLERANCE) -> bool:
    """A task is critical when its slack is zero within ``tolerance`` days."""
    return abs(slack) < tolerance


def calculate_slack(earliest_start, latest_start, tolerance=CRITICAL_SLACK_TOLERANCE):
    """
    Total float of each task in working days.

    Raises:
        SchedulingError: If any slack is negative beyond ``tolerance``
    """
    slacks = []
    for es, ls in zip(earliest_start, latest_start):
        slack = working_days_between(es, ls)
        if slack < 0 and not is_critical(slack, tolerance):
            raise SchedulingError(
                f"Negative slack {slack} (ES={es}, LS={ls}); the passes are inconsistent"
            )
        slacks.append(slack)
    return slacks


def classify(graph, earliest_start, earliest_finish, latest_start, latest_finish,
             tolerance=CRITICAL_SLACK_TOLERANCE) -> List[ScheduleResult]:
    """Combine both passes into per-task results, in input order."""
    slacks = calculate_slack(earliest_start, latest_start, tolerance)
    return [
        ScheduleResult(
            task_id=task.id,
            earliest_start=earliest_start[i],
            earliest_finish=earliest_finish[i],
            latest_start=latest_start[i],
            latest_finish=latest_finish[i],
            slack=slacks[i],
            is_critical=is_critical(slacks[i], tolerance),
        )
        for i, task in enumerate(graph.tasks)
    ]


def order_critical_path(graph, results) -> List[Any]:
    """Ids of the critical tasks ordered by earliest start, then topologically."""
    position = {index: pos for pos, index in enumerate(graph.order)}
    critical = [i for i, result in enumerate(results) if result.is_critical]
    critical.sort(key=lambda i: (results[i].earliest_start, position[i]))
    return [graph.task_id(i) for i in critical]


def trace_critical_chain(graph, results) -> List[Any]:
    """
    Find one connected chain of critical tasks from project start to end.

    Consecutive tasks in the chain are linked by a driving dependency: the
    successor starts exactly when the predecessor finishes. When several
    chains exist, the one with the largest summed duration is returned,
    preferring one that ends on a task without successors.
    """
    if not results:
        return []

    start = min(result.earliest_start for result in results)
    end = max(result.earliest_finish for result in results)

    length = [None] * len(results)
    parent = [None] * len(results)

    for i in graph.order:
        result = results[i]
        if not result.is_critical:
            continue
        days = whole_working_days(graph.tasks[i].duration)

        best = None
        for p in graph.predecessors[i]:
            if length[p] is None or results[p].earliest_finish != result.earliest_start:
                continue
            if best is None or length[p] > length[best]:
                best = p

        if best is not None:
            length[i] = length[best] + days
            parent[i] = best
        elif result.earliest_start == start:
            length[i] = days

    ends = [
        i for i, result in enumerate(results)
        if length[i] is not None and result.earliest_finish == end
    ]
    if not ends:
        logger.warning("No critical chain reaches the project end date %s", end)
        return []

    last = max(ends, key=lambda i: (length[i], not graph.successors[i]))

    chain = []
    current = last
    while current is not None:
        chain.append(graph.task_id(current))
        current = parent[current]
    chain.reverse()
    return chain


def total_duration(results) -> int:
    """Working days from the earliest start to the latest finish."""
    if not results:
        return 0
    start = min(result.earliest_start for result in results)
    end = max(result.earliest_finish for result in results)
    return working_days_between(start, end)
