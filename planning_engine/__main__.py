"""
Planning Engine
===============

Command line front end: schedule a task file with CPM, or compute a PERT
estimate, and print the result as JSON.
"""

import argparse
import json
import logging
import sys
from datetime import date

from planning_engine.config import (
    CRITICAL_SLACK_TOLERANCE,
    DEFAULT_LOG_LEVEL,
    configure_logging,
)
from planning_engine.domain.errors import (
    InvalidStartDateError,
    InvalidTaskError,
    PlanningError,
)
from planning_engine.domain.task import CPMTask
from planning_engine.examples.simple_project import create_sample_project, print_report
from planning_engine.services.pert import calculate_pert
from planning_engine.services.scheduler import CPMScheduler

logger = logging.getLogger("planning_engine")


def load_task_file(path, start=None):
    """
    Read tasks from a JSON file.

    The file holds either a list of task objects or an object with ``tasks``
    and an optional ``startDate``. ``start`` overrides the file's date.

    Returns:
        (tasks, start_date)
    """
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)

    if isinstance(data, list):
        raw_tasks, file_start = data, None
    elif isinstance(data, dict):
        raw_tasks, file_start = data.get("tasks", []), data.get("startDate")
    else:
        raise InvalidTaskError(data, f"{path} holds neither a task list nor a project object")
    if not isinstance(raw_tasks, list):
        raise InvalidTaskError(raw_tasks, f"'tasks' in {path} must be a list")

    start_value = start or file_start
    return [CPMTask.from_dict(item) for item in raw_tasks], _parse_start(start_value)


def _parse_start(value):
    if value is None:
        return date.today()
    if not isinstance(value, str):
        raise InvalidStartDateError(value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidStartDateError(value) from None


def build_parser():
    parser = argparse.ArgumentParser(
        prog="planning_engine", description="Critical Path Method and PERT planning"
    )
    parser.add_argument(
        "--example", action="store_true", help="Schedule the bundled example project"
    )
    parser.add_argument("--input", type=str, help="JSON file with the tasks to schedule")
    parser.add_argument("--start", type=str, help="Project start date (YYYY-MM-DD)")
    parser.add_argument(
        "--pert",
        type=float,
        nargs=3,
        metavar=("OPTIMISTIC", "MOST_LIKELY", "PESSIMISTIC"),
        help="Print a PERT estimate for three duration estimates",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=CRITICAL_SLACK_TOLERANCE,
        help="Slack (days) below which a task is critical",
    )
    parser.add_argument(
        "--keep-weekend-start",
        action="store_true",
        help="Do not move a weekend start date to the next working day",
    )
    parser.add_argument("--diagram", type=str, help="Also save a network diagram PNG")
    parser.add_argument("--log-level", type=str, default=DEFAULT_LOG_LEVEL)
    return parser


def _save_diagram(report, graph, filename):
    # matplotlib is only needed when a diagram is requested
    from planning_engine.visualization.network import create_network_diagram

    create_network_diagram(report, graph, filename=filename, show=False)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.pert:
            estimate = calculate_pert(*args.pert)
            print(json.dumps(estimate.to_dict(), indent=2))
            return 0

        if args.example:
            scheduler = create_sample_project()
            report = scheduler.schedule()
            print_report(report, scheduler.tasks)
        elif args.input:
            tasks, start_date = load_task_file(args.input, args.start)
            scheduler = CPMScheduler(
                tolerance=args.tolerance,
                roll_weekend_start=not args.keep_weekend_start,
            )
            scheduler.set_start_date(start_date).add_tasks(tasks)
            report = scheduler.schedule()
            print(json.dumps(report.to_dict(), indent=2, default=str))
        else:
            parser.print_help()
            return 1
    except PlanningError as e:
        logger.error("Planning failed: %s", e)
        return 1
    except (OSError, ValueError) as e:
        logger.error("Could not read input: %s", e)
        return 1

    if args.diagram:
        _save_diagram(report, scheduler.task_graph, args.diagram)
    return 0


if __name__ == "__main__":
    sys.exit(main())
