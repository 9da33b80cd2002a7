"""
PERT three-point estimation.

expected = (o + 4m + p) / 6, variance = ((p - o) / 6)^2. Confidence bounds
are expected +/- one standard deviation (about 68%) and +/- two (about 95%).
"""

import logging
import math
import numbers
from statistics import NormalDist
from typing import Iterable, Optional, Sequence

from planning_engine.domain.errors import InvalidPERTInputError
from planning_engine.domain.estimate import (
    ConfidenceInterval,
    PathEstimate,
    PERTEstimate,
)
from planning_engine.domain.task import CPMTask

logger = logging.getLogger(__name__)


def _check_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidPERTInputError(
            f"{name} must be a number, got {value!r}", field=name, value=value
        )
    if not math.isfinite(value) or value <= 0:
        raise InvalidPERTInputError(
            f"{name} must be a positive finite number, got {value!r}",
            field=name,
            value=value,
        )


def validate_pert_input(optimistic, most_likely, pessimistic) -> None:
    """
    Raise InvalidPERTInputError unless all three values are positive and
    optimistic <= most_likely <= pessimistic.
    """
    _check_positive("optimistic", optimistic)
    _check_positive("mostLikely", most_likely)
    _check_positive("pessimistic", pessimistic)

    if optimistic > most_likely:
        raise InvalidPERTInputError(
            f"optimistic ({optimistic}) exceeds mostLikely ({most_likely})",
            field="optimistic",
            value=optimistic,
        )
    if most_likely > pessimistic:
        raise InvalidPERTInputError(
            f"mostLikely ({most_likely}) exceeds pessimistic ({pessimistic})",
            field="pessimistic",
            value=pessimistic,
        )


def _intervals(expected, std_dev):
    return (
        ConfidenceInterval(expected - std_dev, expected + std_dev),
        ConfidenceInterval(expected - 2 * std_dev, expected + 2 * std_dev),
    )


def calculate_pert(optimistic, most_likely, pessimistic) -> PERTEstimate:
    """
    Estimate a task duration from three points in the same unit.

    Raises:
        InvalidPERTInputError: If a value is not positive or the values are out of order
    """
    validate_pert_input(optimistic, most_likely, pessimistic)

    expected = (optimistic + 4 * most_likely + pessimistic) / 6
    variance = ((pessimistic - optimistic) / 6) ** 2
    std_dev = math.sqrt(variance)
    confidence_68, confidence_95 = _intervals(expected, std_dev)

    return PERTEstimate(
        optimistic=optimistic,
        most_likely=most_likely,
        pessimistic=pessimistic,
        expected=expected,
        variance=variance,
        std_dev=std_dev,
        confidence_68=confidence_68,
        confidence_95=confidence_95,
    )


def combine_estimates(estimates: Iterable[PERTEstimate]) -> PathEstimate:
    """
    Estimate a sequence of tasks done one after another.

    Expected values and variances add up, assuming the tasks are independent.
    """
    estimates = list(estimates)
    expected = sum(e.expected for e in estimates)
    variance = sum(e.variance for e in estimates)
    std_dev = math.sqrt(variance)
    confidence_68, confidence_95 = _intervals(expected, std_dev)
    return PathEstimate(
        task_count=len(estimates),
        expected=expected,
        variance=variance,
        std_dev=std_dev,
        confidence_68=confidence_68,
        confidence_95=confidence_95,
    )


def completion_probability(estimate, target) -> float:
    """
    Probability of finishing within ``target`` under the normal approximation.

    Works for a single PERTEstimate or a PathEstimate.
    """
    if estimate.std_dev == 0:
        return 1.0 if target >= estimate.expected else 0.0
    return NormalDist(estimate.expected, estimate.std_dev).cdf(target)


def estimate_to_task(task_id, estimate: PERTEstimate,
                     dependencies: Optional[Sequence] = None,
                     name: Optional[str] = None) -> CPMTask:
    """Build a CPM task whose duration is the PERT expected value."""
    logger.debug("Task %s uses PERT expected duration %.3f", task_id, estimate.expected)
    return CPMTask(
        id=task_id,
        duration=estimate.expected,
        dependencies=tuple(dependencies or ()),
        name=name,
    )
