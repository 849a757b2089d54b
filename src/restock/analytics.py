"""Restock analytics: expected purchases, suggestion chips and statistics."""

import logging
from datetime import datetime, timedelta

from .config import PredictionConfig, SuggestionsConfig
from .data_store import DataStore
from .history import deduplicate_events
from .models import (
    CadenceEstimate,
    ExpectedProduct,
    Product,
    ProductId,
    ProductStatistics,
    PurchaseEvent,
    Snooze,
    Suggestion,
    SuggestionType,
    utcnow,
)
from .prediction import (
    days_until,
    estimate_cadence,
    format_purchase_frequency,
    predict_next_purchase,
    rank_due,
    should_suggest,
)

logger = logging.getLogger(__name__)


class ProductNotFoundError(Exception):
    """Raised when a product is not in the catalog."""

    def __init__(self, product_id: ProductId | str):
        self.product_id = product_id
        super().__init__(f"Product with ID '{product_id}' not found")


class RestockAnalytics:
    """Turns purchase history into restock predictions for one household."""

    def __init__(
        self,
        data_store: DataStore | None = None,
        prediction: PredictionConfig | None = None,
        suggestions: SuggestionsConfig | None = None,
    ):
        self.data_store = data_store or DataStore()
        self.prediction = prediction or PredictionConfig()
        self.suggestions_config = suggestions or SuggestionsConfig()

    def _cadence(self, product_id: ProductId, events: list[PurchaseEvent]) -> CadenceEstimate:
        return estimate_cadence(
            product_id,
            events,
            buffer_seconds=self.prediction.buffer_seconds,
            min_events=self.prediction.min_events,
        )

    def _hidden_product_ids(self, now: datetime) -> set[ProductId]:
        """Products on the list or snoozed right now."""
        hidden = self.data_store.load_list().unchecked_product_ids()
        for product_id, snooze in self.data_store.load_snoozes().items():
            if snooze.snoozed_until > now:
                hidden.add(product_id)
        return hidden

    def expected_products(
        self,
        limit: int | None = None,
        now: datetime | None = None,
    ) -> list[ExpectedProduct]:
        """Products most due for a restock.

        Args:
            limit: Maximum number of products, config expected_limit by default
            now: Reference time

        Returns:
            ExpectedProduct list, most overdue first
        """
        now = now or utcnow()
        limit = self.prediction.expected_limit if limit is None else limit
        products = {p.id: p for p in self.data_store.load_products()}

        due: list[ExpectedProduct] = []
        for product_id, events in self.data_store.events_by_product().items():
            product = products.get(product_id)
            if product is None:
                continue

            cadence = self._cadence(product_id, events)
            if not cadence.has_estimate or cadence.frequency_days <= 0:
                continue

            next_purchase = predict_next_purchase(
                cadence.last_purchase_at, cadence.frequency_days
            )
            due.append(
                ExpectedProduct(
                    product_id=product_id,
                    name=product.name,
                    category=product.category,
                    next_purchase_at=next_purchase,
                    frequency_days=cadence.frequency_days,
                    days_until_expected=days_until(next_purchase, now),
                )
            )

        hidden = self._hidden_product_ids(now)
        ranked = [entry for entry in rank_due(due) if entry.product_id not in hidden]
        logger.debug("%d of %d products expected soon", min(len(ranked), limit), len(due))
        return ranked[:limit]

    def suggestions(self, now: datetime | None = None) -> list[Suggestion]:
        """Build the suggestion chip list.

        Basic products fill the list until predicted products are due; predicted
        suggestions always come first.
        """
        now = now or utcnow()
        max_suggestions = self.suggestions_config.max_suggestions
        hidden = self._hidden_product_ids(now)
        products = self.data_store.load_products()
        history = self.data_store.events_by_product()

        suggestions: list[Suggestion] = []
        basic_ids: set[ProductId] = set()
        for product in products:
            if len(suggestions) >= max_suggestions:
                break
            if not product.is_basic or product.id in hidden:
                continue
            basic_ids.add(product.id)
            suggestions.append(
                Suggestion(
                    product_id=product.id,
                    name=product.name,
                    suggestion_type=SuggestionType.BASIC,
                )
            )

        for product in products:
            if product.id in hidden or product.id in basic_ids:
                continue
            if self._is_due(product, history.get(product.id, []), now):
                suggestions.append(
                    Suggestion(
                        product_id=product.id,
                        name=product.name,
                        suggestion_type=SuggestionType.PREDICTED,
                    )
                )

        suggestions.sort(key=lambda s: s.suggestion_type != SuggestionType.PREDICTED)
        return suggestions[:max_suggestions]

    def _is_due(self, product: Product, events: list[PurchaseEvent], now: datetime) -> bool:
        cadence = self._cadence(product.id, events)
        if not cadence.has_estimate or not cadence.frequency_days:
            return False

        effective = cadence.frequency_days * product.frequency_correction_factor
        next_purchase = predict_next_purchase(cadence.last_purchase_at, effective)
        return should_suggest(next_purchase, effective, now)

    def snooze(self, product_id: ProductId, now: datetime | None = None) -> Snooze:
        """Hide a product for a while and stretch its cadence.

        Raises:
            ProductNotFoundError: If the product is not in the catalog
        """
        product = self.data_store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        now = now or utcnow()
        snooze = Snooze(
            product_id=product_id,
            snoozed_until=now + timedelta(hours=self.prediction.snooze_hours),
        )
        self.data_store.save_snooze(snooze)

        product.frequency_correction_factor = min(
            self.prediction.max_correction_factor,
            product.frequency_correction_factor * self.prediction.snooze_factor,
        )
        self.data_store.save_product(product)
        logger.info(
            "Snoozed %s until %s (correction %.3f)",
            product.name,
            snooze.snoozed_until.isoformat(),
            product.frequency_correction_factor,
        )
        return snooze

    def product_statistics(self, product_id: ProductId) -> ProductStatistics:
        """Purchase statistics for the product detail page.

        Raises:
            ProductNotFoundError: If the product is not in the catalog
        """
        product = self.data_store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        events = self.data_store.events_for_product(product_id)
        cadence = self._cadence(product_id, events)

        next_purchase = None
        if cadence.has_estimate and cadence.frequency_days > 0:
            next_purchase = predict_next_purchase(
                cadence.last_purchase_at, cadence.frequency_days
            )

        return ProductStatistics(
            product_id=product_id,
            name=product.name,
            purchase_count=len(deduplicate_events(events, self.prediction.buffer_seconds)),
            frequency_days=cadence.frequency_days,
            frequency_label=format_purchase_frequency(cadence.frequency_days),
            last_purchase_at=cadence.last_purchase_at,
            next_purchase_at=next_purchase,
        )
