"""
Planning Engine
===============

Critical Path Method scheduling and PERT estimation over an in-memory
task-dependency graph.

Available modules:
- services.scheduler: CPM orchestration (graph, forward and backward pass, slack)
- services.pert: three-point estimation
- utils.calendar: working-day date arithmetic
- utils.graph: dependency graph builder
- visualization.network: network diagram of a computed schedule
"""

from planning_engine.domain.errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    InvalidDurationError,
    InvalidPERTInputError,
    InvalidStartDateError,
    InvalidTaskError,
    PlanningError,
    SchedulingError,
    UnknownDependencyError,
)
from planning_engine.domain.result import CPMReport, ScheduleResult
from planning_engine.domain.task import CPMTask
from planning_engine.services.pert import calculate_pert
from planning_engine.services.scheduler import CPMScheduler, calculate_cpm
from planning_engine.utils.calendar import offset_working_days

__all__ = [
    "CPMTask",
    "CPMReport",
    "ScheduleResult",
    "CPMScheduler",
    "calculate_cpm",
    "calculate_pert",
    "offset_working_days",
    "PlanningError",
    "UnknownDependencyError",
    "CyclicDependencyError",
    "InvalidDurationError",
    "InvalidPERTInputError",
    "InvalidTaskError",
    "InvalidStartDateError",
    "DuplicateTaskError",
    "SchedulingError",
]
