"""Outlier-robust purchase interval estimation."""

import math
from collections.abc import Sequence

from .history import BUFFER_SECONDS, deduplicate_events
from .models import PurchaseEvent

MIN_EVENTS = 3
IQR_MULTIPLIER = 1.5
SECONDS_PER_DAY = 24 * 60 * 60


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linear-interpolated percentile.

    Args:
        sorted_values: Non-empty values in ascending order
        p: Fraction between 0 and 1

    Returns:
        Value at rank (n - 1) * p, interpolated between neighbours
    """
    rank = (len(sorted_values) - 1) * p
    lower = math.floor(rank)
    upper = math.ceil(rank)
    if lower == upper:
        return float(sorted_values[lower])
    weight = rank - lower
    return sorted_values[lower] + (sorted_values[upper] - sorted_values[lower]) * weight


def median(values: Sequence[float]) -> float:
    """Median of a non-empty sequence."""
    return percentile(sorted(values), 0.5)


def filter_outliers(gaps: Sequence[float]) -> list[float]:
    """Drop gaps outside the Tukey fences.

    Fewer than three gaps are returned unchanged. If fewer than two gaps
    survive the fences the unfiltered list is returned.
    """
    if len(gaps) < 3:
        return list(gaps)

    ordered = sorted(gaps)
    q1 = percentile(ordered, 0.25)
    q3 = percentile(ordered, 0.75)
    iqr = q3 - q1
    low = q1 - IQR_MULTIPLIER * iqr
    high = q3 + IQR_MULTIPLIER * iqr

    inliers = [gap for gap in gaps if low <= gap <= high]
    if len(inliers) < 2:
        return list(gaps)
    return inliers


def purchase_gaps(events: Sequence[PurchaseEvent]) -> list[float]:
    """Days between consecutive events, oldest first."""
    ordered = sorted(e.purchased_at for e in events)
    return [
        (ordered[i] - ordered[i - 1]).total_seconds() / SECONDS_PER_DAY
        for i in range(1, len(ordered))
    ]


def estimate_frequency(
    events: Sequence[PurchaseEvent],
    buffer_seconds: float = BUFFER_SECONDS,
    min_events: int = MIN_EVENTS,
) -> float | None:
    """Estimate the typical number of days between purchases.

    Args:
        events: All purchase events for one product, any order
        buffer_seconds: Dedup window applied before measuring gaps
        min_events: Raw events required before estimating

    Returns:
        Median of the outlier-filtered gaps in days, or None when the
        history is too short to say anything
    """
    if len(events) < min_events:
        return None

    kept = deduplicate_events(events, buffer_seconds)
    if len(kept) < 2:
        return None

    gaps = filter_outliers(purchase_gaps(kept))
    return median(gaps)
