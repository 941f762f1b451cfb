"""
Trend Classifier & Consistency / Velocity / Stability Analyzer

Pure functions over a category's recent score series (most recent last).

Insufficient data is never an error:
- trend:       < 3 points -> stable
- consistency: < 2 points -> 1.0 (no evidence of variability)
- velocity:    < 2 points -> 0.0
- stability:   < 3 points -> 0.5 (neutral)

Non-numeric and non-finite entries are dropped before any computation.
"""

import math
from typing import Any, List, Sequence

from .pattern_model import TrendDirection, VELOCITY_LIMIT, to_finite_float

# Slope (points per session) beyond which a series is improving/declining
TREND_SLOPE_THRESHOLD = 0.5

# Standard deviation at which consistency reaches zero
CONSISTENCY_STDEV_SCALE = 30.0

# Average session-to-session swing at which stability reaches zero
STABILITY_FLUCTUATION_SCALE = 20.0

DEFAULT_VELOCITY_WINDOW = 5
DEFAULT_STABILITY_WINDOW = 10


def _clean(series: Any) -> List[float]:
    if not isinstance(series, Sequence) or isinstance(series, (str, bytes)):
        return []
    cleaned = []
    for value in series:
        number = to_finite_float(value)
        if number is not None:
            cleaned.append(number)
    return cleaned


def least_squares_slope(series: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of the series against positions 0..n-1.

    Returns 0.0 for fewer than 2 points.
    """
    y = _clean(series)
    n = len(y)
    if n < 2:
        return 0.0

    sum_x = n * (n - 1) / 2
    sum_xx = (n - 1) * n * (2 * n - 1) / 6
    sum_y = sum(y)
    sum_xy = sum(i * value for i, value in enumerate(y))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def classify_trend(series: Sequence[float]) -> str:
    """Classify a series as improving, stable or declining (TrendDirection value)."""
    y = _clean(series)
    if len(y) < 3:
        return TrendDirection.STABLE.value

    slope = least_squares_slope(y)
    if slope > TREND_SLOPE_THRESHOLD:
        return TrendDirection.IMPROVING.value
    if slope < -TREND_SLOPE_THRESHOLD:
        return TrendDirection.DECLINING.value
    return TrendDirection.STABLE.value


def consistency_index(series: Sequence[float]) -> float:
    """max(0, 1 - population stdev / 30) over the whole series."""
    y = _clean(series)
    if len(y) < 2:
        return 1.0
    mean = sum(y) / len(y)
    variance = sum((value - mean) * (value - mean) for value in y) / len(y)
    deviation = math.sqrt(variance)
    return max(0.0, 1.0 - deviation / CONSISTENCY_STDEV_SCALE)


def velocity_score(series: Sequence[float], window: int = DEFAULT_VELOCITY_WINDOW) -> float:
    """Average successive difference over the last `window` points, clamped to +/-10."""
    y = _clean(series)
    if len(y) < 2:
        return 0.0

    recent = y[-max(window, 2):]
    differences = [b - a for a, b in zip(recent, recent[1:])]
    average = sum(differences) / len(differences)
    return max(-VELOCITY_LIMIT, min(VELOCITY_LIMIT, average))


def stability_index(series: Sequence[float], window: int = DEFAULT_STABILITY_WINDOW) -> float:
    """1 - average absolute successive difference / 20 over the last `window` points."""
    y = _clean(series)
    if len(y) < 3:
        return 0.5

    recent = y[-max(window, 2):]
    fluctuations = [abs(b - a) for a, b in zip(recent, recent[1:])]
    average = sum(fluctuations) / len(fluctuations)
    return max(0.0, 1.0 - average / STABILITY_FLUCTUATION_SCALE)
