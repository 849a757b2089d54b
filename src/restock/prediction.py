"""Next-purchase prediction and restock suggestion timing."""

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from typing import TypeVar

from .estimator import MIN_EVENTS, estimate_frequency
from .history import BUFFER_SECONDS, last_purchase_date
from .models import (
    CadenceEstimate,
    ExpectedProduct,
    ProductId,
    PurchaseEvent,
    as_aware,
    utcnow,
)

SUB_HOURLY_DAYS = 1 / 24

# (upper bound in days, lead time in days), checked in order
LEAD_TIME_STEPS: tuple[tuple[float, float], ...] = (
    (SUB_HOURLY_DAYS, 0.0),
    (1.0, 0.1),
    (7.0, 1.0),
    (14.0, 2.0),
)
MAX_LEAD_TIME_DAYS = 3.0

Due = TypeVar("Due", bound=ExpectedProduct)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def estimate_cadence(
    product_id: ProductId,
    events: Sequence[PurchaseEvent],
    buffer_seconds: float = BUFFER_SECONDS,
    min_events: int = MIN_EVENTS,
) -> CadenceEstimate:
    """Run the interval estimator and last-purchase lookup for one product."""
    return CadenceEstimate(
        product_id=product_id,
        frequency_days=estimate_frequency(events, buffer_seconds, min_events),
        last_purchase_at=last_purchase_date(events, buffer_seconds),
    )


def predict_next_purchase(last: datetime, frequency_days: float) -> datetime:
    """Project the next purchase from the last one.

    Whole calendar days are added; the frequency is rounded first.
    """
    return last + timedelta(days=round_half_up(frequency_days))


def lead_time_days(frequency_days: float) -> float:
    """Days before the predicted date that a suggestion should appear."""
    for upper, lead in LEAD_TIME_STEPS:
        if frequency_days < upper:
            return lead
    return MAX_LEAD_TIME_DAYS


def should_suggest(
    next_purchase: datetime,
    frequency_days: float,
    now: datetime | None = None,
) -> bool:
    """Decide whether a restock suggestion is due.

    Sub-hourly cadences compare full timestamps so items can resurface within
    a day. Everything else compares calendar dates only. Naive datetimes
    are read as UTC.

    Args:
        next_purchase: Predicted next purchase time
        frequency_days: Estimated cadence in days
        now: Reference time, defaults to the current UTC time

    Returns:
        True once now has reached the suggestion date
    """
    now = as_aware(now or utcnow())
    next_purchase = as_aware(next_purchase).astimezone(now.tzinfo)

    suggestion_at = next_purchase - timedelta(days=lead_time_days(frequency_days))
    if frequency_days < SUB_HOURLY_DAYS:
        return now >= suggestion_at
    return now.date() >= suggestion_at.date()


def days_until(next_purchase: datetime, now: datetime) -> int:
    """Whole days until the predicted date, never negative."""
    remaining = (as_aware(next_purchase) - as_aware(now)).total_seconds() / (24 * 60 * 60)
    return max(0, math.ceil(remaining))


def rank_due(entries: Iterable[Due]) -> list[Due]:
    """Order due products with the most overdue first.

    Ties on the predicted date fall back to product id order.
    """
    return sorted(entries, key=lambda e: (e.next_purchase_at, str(e.product_id)))


def format_purchase_frequency(frequency_days: float | None) -> str | None:
    """Describe a cadence in Dutch, e.g. "elke ~2 dagen" or "elke ~3 weken"."""
    if frequency_days is None or frequency_days <= 0:
        return None

    rounded = round_half_up(frequency_days)
    if rounded < 7:
        return f"elke ~{rounded} {'dag' if rounded == 1 else 'dagen'}"

    weeks = round_half_up(rounded / 7)
    return f"elke ~{weeks} {'week' if weeks == 1 else 'weken'}"
