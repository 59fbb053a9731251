"""Descriptive statistics over node confidences for filter panels."""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


@dataclass
class Quartiles:
    """Lower quartile, median and upper quartile."""

    q1: float
    q2: float
    q3: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1


@dataclass
class ConfidenceStats:
    """Summary of a set of confidence values."""

    count: int
    mean: float
    median: float
    mode: float
    variance: float
    std_dev: float
    quartiles: Quartiles
    min: float
    max: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "mode": self.mode,
            "variance": self.variance,
            "std_dev": self.std_dev,
            "quartiles": {"q1": self.quartiles.q1, "q2": self.quartiles.q2, "q3": self.quartiles.q3},
            "iqr": self.quartiles.iqr,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class FlaggedValue:
    """A value with a boolean classification attached."""

    value: float
    flagged: bool


def mode(values: Sequence[float]) -> float:
    """Most frequent value; ties go to the value seen first."""
    counts = Counter(values)
    best = values[0]
    best_count = 0
    for value in values:
        if counts[value] > best_count:
            best, best_count = value, counts[value]
    return float(best)


def quartiles(values: Sequence[float]) -> Quartiles:
    """Quartiles by index into the sorted values (no interpolation for Q1/Q3)."""
    ordered = np.sort(np.asarray(values, dtype=float))
    n = len(ordered)
    return Quartiles(
        q1=float(ordered[int(n * 0.25)]),
        q2=float(np.median(ordered)),
        q3=float(ordered[min(int(n * 0.75), n - 1)]),
    )


def summarize(values: Sequence[float]) -> ConfidenceStats | None:
    """
    Compute the full statistics summary.

    Returns:
        ConfidenceStats, or None when there are no values
    """
    if len(values) == 0:
        return None

    arr = np.asarray(values, dtype=float)
    variance = float(np.var(arr))  # Population variance

    return ConfidenceStats(
        count=len(arr),
        mean=float(np.mean(arr)),
        median=float(np.median(arr)),
        mode=mode(list(values)),
        variance=variance,
        std_dev=variance ** 0.5,
        quartiles=quartiles(values),
        min=float(np.min(arr)),
        max=float(np.max(arr)),
    )


def percentile(value: float, values: Sequence[float]) -> float:
    """
    Percentile rank of ``value`` within ``values``.

    Position of the first sorted value >= ``value``, scaled to 0-100.
    Values above the maximum rank at 100.
    """
    ordered = sorted(values)
    if len(ordered) < 2:
        return 100.0 if ordered else 0.0
    index = next((i for i, v in enumerate(ordered) if v >= value), len(ordered) - 1)
    return index / (len(ordered) - 1) * 100


def detect_outliers(values: Sequence[float]) -> list[FlaggedValue]:
    """Flag values outside the 1.5 IQR fences."""
    if len(values) == 0:
        return []
    q = quartiles(values)
    lower = q.q1 - 1.5 * q.iqr
    upper = q.q3 + 1.5 * q.iqr
    return [FlaggedValue(value=v, flagged=v < lower or v > upper) for v in values]


def significant_changes(values: Sequence[float], threshold: float = 2.0) -> list[FlaggedValue]:
    """Flag values more than ``threshold`` standard deviations from the mean."""
    if len(values) == 0:
        return []
    arr = np.asarray(values, dtype=float)
    mean = float(np.mean(arr))
    std = float(np.std(arr))
    return [FlaggedValue(value=v, flagged=abs(v - mean) > threshold * std) for v in values]
