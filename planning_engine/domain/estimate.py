from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ConfidenceInterval:
    min: float
    max: float

    def contains(self, value) -> bool:
        return self.min <= value <= self.max

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class PERTEstimate:
    """
    Three-point estimate of a single task's duration.

    ``expected`` is the beta-distribution mean (o + 4m + p) / 6 and the
    intervals are expected +/- one and two standard deviations.
    """

    optimistic: float
    most_likely: float
    pessimistic: float
    expected: float
    variance: float
    std_dev: float
    confidence_68: ConfidenceInterval
    confidence_95: ConfidenceInterval

    def to_dict(self) -> Dict[str, Any]:
        return {
            "optimistic": self.optimistic,
            "mostLikely": self.most_likely,
            "pessimistic": self.pessimistic,
            "expected": self.expected,
            "variance": self.variance,
            "stdDev": self.std_dev,
            "confidence68": self.confidence_68.to_dict(),
            "confidence95": self.confidence_95.to_dict(),
        }


@dataclass(frozen=True)
class PathEstimate:
    """Combined estimate for a sequence of tasks performed one after another."""

    task_count: int
    expected: float
    variance: float
    std_dev: float
    confidence_68: ConfidenceInterval
    confidence_95: ConfidenceInterval

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskCount": self.task_count,
            "expected": self.expected,
            "variance": self.variance,
            "stdDev": self.std_dev,
            "confidence68": self.confidence_68.to_dict(),
            "confidence95": self.confidence_95.to_dict(),
        }
