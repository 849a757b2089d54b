"""Purchase history helpers: grouping and double-check deduplication."""

from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import datetime

from .models import ProductId, PurchaseEvent, as_aware, utcnow

# Repeated check-ins of the same product within this window count as one purchase
BUFFER_SECONDS = 30


def group_by(
    events: Iterable[PurchaseEvent],
    key: Callable[[PurchaseEvent], ProductId] = lambda event: event.product_id,
) -> dict[ProductId, list[PurchaseEvent]]:
    """Group purchase events by product.

    Args:
        events: Events for any number of products
        key: Function returning the grouping key, product_id by default

    Returns:
        Dict mapping key -> events in input order
    """
    grouped: dict[ProductId, list[PurchaseEvent]] = defaultdict(list)
    for event in events:
        grouped[key(event)].append(event)
    return dict(grouped)


def deduplicate_events(
    events: Iterable[PurchaseEvent],
    buffer_seconds: float = BUFFER_SECONDS,
) -> list[PurchaseEvent]:
    """Collapse rapid re-checks into single purchases.

    The newest event is always kept. Walking back in time, an older event is
    kept only if it lies at least ``buffer_seconds`` before the last kept one.

    Args:
        events: Purchase events for one product, any order
        buffer_seconds: Minimum spacing between kept events

    Returns:
        Kept events, newest first
    """
    ordered = sorted(events, key=lambda e: e.purchased_at, reverse=True)
    if not ordered:
        return []

    kept = [ordered[0]]
    for event in ordered[1:]:
        spacing = (kept[-1].purchased_at - event.purchased_at).total_seconds()
        if spacing >= buffer_seconds:
            kept.append(event)
    return kept


def last_purchase_date(
    events: Iterable[PurchaseEvent],
    buffer_seconds: float = BUFFER_SECONDS,
) -> datetime | None:
    """Get the most recent purchase time after deduplication."""
    kept = deduplicate_events(events, buffer_seconds)
    if not kept:
        return None
    return kept[0].purchased_at


def has_recent_purchase(
    events: Iterable[PurchaseEvent],
    buffer_seconds: float = BUFFER_SECONDS,
    now: datetime | None = None,
) -> bool:
    """Check whether the newest event is younger than ``buffer_seconds``.

    Args:
        events: Purchase events for one product
        buffer_seconds: Age limit in seconds (exclusive)
        now: Reference time, defaults to the current UTC time

    Returns:
        True if the most recent purchase happened less than buffer_seconds ago
    """
    latest = max((as_aware(e.purchased_at) for e in events), default=None)
    if latest is None:
        return False
    now = as_aware(now or utcnow())
    return (now - latest).total_seconds() < buffer_seconds
