"""Summary statistics over submitted estimates."""

from collections.abc import Sequence
from dataclasses import dataclass

Number = int | float


@dataclass(frozen=True)
class EstimateStatistics:
    """Aggregated view of a revealed session's estimates."""

    average: float
    median: float
    minimum: float
    maximum: float
    count: int


def average(values: Sequence[Number]) -> float:
    """Return the arithmetic mean, or 0 for no values."""
    if not values:
        return 0
    return sum(values) / len(values)


def median(values: Sequence[Number]) -> float:
    """Return the median, averaging the two centre values for even lengths."""
    if not values:
        return 0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def minimum(values: Sequence[Number]) -> float:
    """Return the smallest value, or 0 for no values."""
    return min(values) if values else 0


def maximum(values: Sequence[Number]) -> float:
    """Return the largest value, or 0 for no values."""
    return max(values) if values else 0


def summarize(values: Sequence[Number]) -> EstimateStatistics:
    """Compute all statistics in one pass over the caller's values."""
    return EstimateStatistics(
        average=average(values),
        median=median(values),
        minimum=minimum(values),
        maximum=maximum(values),
        count=len(values),
    )
