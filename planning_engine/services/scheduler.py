import logging
import time
from datetime import date

from planning_engine.config import CRITICAL_SLACK_TOLERANCE
from planning_engine.domain.errors import InvalidStartDateError, PlanningError
from planning_engine.domain.result import CPMReport
from planning_engine.domain.session import PlanningSession
from planning_engine.domain.task import CPMTask
from planning_engine.services.backward_pass import backward_pass
from planning_engine.services.critical_path import (
    classify,
    order_critical_path,
    total_duration,
    trace_critical_chain,
)
from planning_engine.services.forward_pass import forward_pass, project_end_date
from planning_engine.services.pert import calculate_pert
from planning_engine.utils.calendar import is_working_day, next_working_day
from planning_engine.utils.graph import build_dependency_graph

logger = logging.getLogger(__name__)


class CPMScheduler:
    """
    Critical Path Method scheduler for one snapshot of tasks.

    Collect tasks, set a start date and call ``schedule()``. The scheduler
    holds no state between snapshots beyond what was added to it; a new
    instance (or ``calculate_cpm``) should be used per project.
    """

    def __init__(self, tolerance=CRITICAL_SLACK_TOLERANCE, roll_weekend_start=True):
        self.tolerance = tolerance
        # A weekend start date moves to the following Monday
        self.roll_weekend_start = roll_weekend_start
        self.tasks = []  # CPMTask snapshot, in input order
        self.start_date = date.today()
        self.task_graph = None
        self.report = None

    def add_task(self, task):
        """Add a CPMTask (or a mapping accepted by CPMTask.from_dict)"""
        if not isinstance(task, CPMTask):
            task = CPMTask.from_dict(task)
        self.tasks.append(task)
        self.task_graph = None
        return self

    def add_tasks(self, tasks):
        for task in tasks:
            self.add_task(task)
        return self

    def set_start_date(self, start_date):
        """Set the project start date (a date or datetime)"""
        if not isinstance(start_date, date):
            raise InvalidStartDateError(start_date)
        self.start_date = start_date
        return self

    def build_dependency_graph(self):
        """Validate the tasks and build the dependency graph."""
        self.task_graph = build_dependency_graph(self.tasks)
        return self.task_graph

    def effective_start_date(self):
        if self.roll_weekend_start and not is_working_day(self.start_date):
            rolled = next_working_day(self.start_date)
            logger.warning(
                "Project start %s is not a working day; using %s", self.start_date, rolled
            )
            return rolled
        return self.start_date

    def schedule(self) -> CPMReport:
        """
        Run graph validation, both passes and the slack classification.

        Returns:
            CPMReport for the current tasks

        Raises:
            PlanningError: If the task set is invalid; nothing is computed then
        """
        graph = self.build_dependency_graph()
        start = self.effective_start_date()

        if not graph.tasks:
            logger.warning("No tasks to schedule")
            self.report = CPMReport(project_start=start, project_end=start)
            return self.report

        earliest_start, earliest_finish = forward_pass(graph, start)
        project_end = project_end_date(earliest_finish, start)
        latest_start, latest_finish = backward_pass(graph, earliest_finish, project_end)

        results = classify(
            graph,
            earliest_start,
            earliest_finish,
            latest_start,
            latest_finish,
            tolerance=self.tolerance,
        )

        self.report = CPMReport(
            project_start=start,
            project_end=project_end,
            results=results,
            critical_path=order_critical_path(graph, results),
            critical_chain=trace_critical_chain(graph, results),
            total_duration=total_duration(results),
        )

        logger.info(
            "Calculated CPM: %d tasks, %d working days, critical path %s",
            len(results),
            self.report.total_duration,
            self.report.critical_path,
        )
        return self.report


def calculate_cpm(tasks, start_date, tolerance=CRITICAL_SLACK_TOLERANCE,
                  roll_weekend_start=True) -> CPMReport:
    """Schedule ``tasks`` from ``start_date`` in one call."""
    scheduler = CPMScheduler(tolerance=tolerance, roll_weekend_start=roll_weekend_start)
    scheduler.set_start_date(start_date)
    scheduler.add_tasks(tasks)
    return scheduler.schedule()


def auto_schedule(report: CPMReport):
    """
    Planned dates for every task: each starts as early as its dependencies allow.

    Returns:
        dict mapping task id to (start, end)
    """
    return {
        result.task_id: (result.earliest_start, result.earliest_finish)
        for result in report.results
    }


def run_planning_session(algorithm, **params):
    """
    Run one engine algorithm and record it as a PlanningSession.

    Args:
        algorithm: "cpm" (params: tasks, start_date and calculate_cpm options)
            or "pert" (params: optimistic, most_likely, pessimistic)

    Returns:
        (result, PlanningSession)
    """
    started = time.perf_counter()
    if algorithm == "cpm":
        tasks = [t if isinstance(t, CPMTask) else CPMTask.from_dict(t) for t in params.pop("tasks")]
        start_date = params.pop("start_date")
        result = calculate_cpm(tasks, start_date, **params)
        # startDate is the date actually scheduled from, after any weekend roll
        input_parameters = {
            "startDate": result.project_start.isoformat(),
            "requestedStartDate": start_date.isoformat(),
            "tasks": [task.to_dict() for task in tasks],
            **params,
        }
    elif algorithm == "pert":
        result = calculate_pert(
            params["optimistic"], params["most_likely"], params["pessimistic"]
        )
        input_parameters = {
            "optimistic": params["optimistic"],
            "mostLikely": params["most_likely"],
            "pessimistic": params["pessimistic"],
        }
    else:
        raise PlanningError(f"Unknown planning algorithm '{algorithm}'")
    elapsed_ms = (time.perf_counter() - started) * 1000

    session = PlanningSession(
        algorithm_used=algorithm,
        input_parameters=input_parameters,
        output_results=result.to_dict(),
        execution_time_ms=elapsed_ms,
    )
    logger.info("Planning session %s finished in %.2f ms", algorithm, elapsed_ms)
    return result, session
