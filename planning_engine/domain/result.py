from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


def _iso(value):
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class ScheduleResult:
    """CPM dates and float for a single task."""

    task_id: Any
    earliest_start: date
    earliest_finish: date
    latest_start: date
    latest_finish: date
    slack: float
    is_critical: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "earliestStart": _iso(self.earliest_start),
            "earliestFinish": _iso(self.earliest_finish),
            "latestStart": _iso(self.latest_start),
            "latestFinish": _iso(self.latest_finish),
            "slack": self.slack,
            "isCritical": self.is_critical,
        }


@dataclass(frozen=True)
class CPMReport:
    """
    Result set of one CPM calculation.

    Attributes:
        project_start: Date the first tasks start on
        project_end: Latest earliest-finish over all tasks
        results: Per-task results, in the order the tasks were supplied
        critical_path: Ids of all critical tasks, ordered by earliest start
        critical_chain: One connected source-to-sink chain of critical tasks
        total_duration: Project length in working days
    """

    project_start: date
    project_end: date
    results: List[ScheduleResult] = field(default_factory=list)
    critical_path: List[Any] = field(default_factory=list)
    critical_chain: List[Any] = field(default_factory=list)
    total_duration: int = 0

    def result_for(self, task_id) -> Optional[ScheduleResult]:
        for result in self.results:
            if result.task_id == task_id:
                return result
        return None

    def by_task(self) -> Dict[Any, ScheduleResult]:
        return {result.task_id: result for result in self.results}

    @property
    def critical_results(self) -> List[ScheduleResult]:
        lookup = self.by_task()
        return [lookup[task_id] for task_id in self.critical_path]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectStart": _iso(self.project_start),
            "projectEnd": _iso(self.project_end),
            "totalDuration": self.total_duration,
            "criticalPath": list(self.critical_path),
            "criticalChain": list(self.critical_chain),
            "results": [result.to_dict() for result in self.results],
        }
