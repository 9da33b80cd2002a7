from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass
class PlanningSession:
    """
    Audit record of one engine invocation.

    The engine never stores these itself; callers that keep a history of
    planning runs persist them alongside the results.
    """

    algorithm_used: str
    input_parameters: Dict[str, Any]
    output_results: Dict[str, Any]
    execution_time_ms: float
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithmUsed": self.algorithm_used,
            "inputParameters": self.input_parameters,
            "outputResults": self.output_results,
            "executionTimeMs": self.execution_time_ms,
            "createdAt": self.created_at.isoformat(),
        }
