"""Shopping list workflow: adding typed items and logging purchases on check."""

import logging
from datetime import datetime
from uuid import UUID

from .config import MatchingConfig, PredictionConfig
from .data_store import DataStore
from .history import has_recent_purchase
from .matcher import decide_match
from .models import (
    MatchDecision,
    Product,
    PurchaseEvent,
    ShoppingList,
    ShoppingListItem,
    utcnow,
)
from .search import ProductSearchIndex, clean_query

logger = logging.getLogger(__name__)


class DuplicateItemError(Exception):
    """Raised when a product is already waiting on the list."""

    def __init__(self, existing_item: ShoppingListItem):
        self.existing_item = existing_item
        super().__init__(f"Item '{existing_item.name}' is already on the list")


class ItemNotFoundError(Exception):
    """Raised when an item is not found."""

    def __init__(self, item_id: UUID | str):
        self.item_id = item_id
        super().__init__(f"Item with ID '{item_id}' not found")


class ListManager:
    """Manages shopping list operations for one household."""

    def __init__(
        self,
        data_store: DataStore | None = None,
        matching: MatchingConfig | None = None,
        prediction: PredictionConfig | None = None,
    ):
        """Initialize list manager.

        Args:
            data_store: DataStore instance. Creates new one if not provided.
            matching: Search and match thresholds
            prediction: Timing configuration for purchase logging
        """
        self.data_store = data_store or DataStore()
        self.matching = matching or MatchingConfig()
        self.prediction = prediction or PredictionConfig()
        self.rules = self.matching.rules()

    # --- Catalog ---

    def add_product(
        self,
        name: str,
        category: str | None = None,
        is_basic: bool = False,
    ) -> dict:
        """Add a product to the catalog.

        Args:
            name: Product name
            category: Optional category name
            is_basic: Whether it is a staple shown as a fallback suggestion

        Returns:
            Dict with success status and product data
        """
        product = Product(name=name.strip(), category=category, is_basic=is_basic)
        self.data_store.save_product(product)
        return {
            "success": True,
            "message": f"Added {product.name} to the catalog",
            "data": {"product": product.model_dump(mode="json")},
        }

    def list_products(self) -> dict:
        """List catalog products alphabetically."""
        products = sorted(self.data_store.load_products(), key=lambda p: p.name.lower())
        return {
            "success": True,
            "data": {"products": [p.model_dump(mode="json") for p in products]},
        }

    def search(self, query: str, limit: int | None = None) -> dict:
        """Search the catalog with fuzzy matching."""
        index = ProductSearchIndex(
            self.data_store.load_products(), threshold=self.matching.search_threshold
        )
        candidates = index.search(query, limit=limit)
        return {
            "success": True,
            "data": {
                "search": {
                    "query": query,
                    "results": [c.model_dump(mode="json") for c in candidates],
                }
            },
        }

    def match(self, query: str) -> MatchDecision:
        """Decide whether typed text refers to a catalog product."""
        index = ProductSearchIndex(
            self.data_store.load_products(), threshold=self.matching.search_threshold
        )
        return decide_match(clean_query(query), index.search(query), self.rules)

    # --- Shopping List ---

    def add_item(
        self,
        text: str,
        description: str | None = None,
        added_by: str | None = None,
        allow_duplicate: bool = False,
    ) -> dict:
        """Add typed text to the list, reusing a catalog product when it matches.

        Args:
            text: Product name as typed
            description: Optional note such as a quantity
            added_by: User who added the item
            allow_duplicate: Whether to allow the same product twice

        Returns:
            Dict with success status, item data and the match decision

        Raises:
            DuplicateItemError: If the product is already unchecked on the list
        """
        decision = self.match(text)

        created = False
        product = None
        if decision.accepted and decision.candidate and decision.candidate.product_id:
            product = self.data_store.get_product(decision.candidate.product_id)
        if product is None:
            product = Product(name=clean_query(text))
            self.data_store.save_product(product)
            created = True
            logger.info("Created product %s (match level %d)", product.name, decision.level)

        shopping_list = self.data_store.load_list()
        if not allow_duplicate:
            for existing in shopping_list.items:
                if existing.product_id == product.id and not existing.is_checked:
                    raise DuplicateItemError(existing)

        item = ShoppingListItem(
            product_id=product.id,
            name=product.name,
            description=description,
            added_by=added_by,
        )
        shopping_list.items.append(item)
        self.data_store.save_list(shopping_list)

        return {
            "success": True,
            "message": f"Added {product.name} to the shopping list",
            "data": {
                "item": item.model_dump(mode="json"),
                "match": decision.model_dump(mode="json"),
                "created_product": created,
            },
        }

    def _find_item(self, item_id: UUID | str) -> tuple[ShoppingList, ShoppingListItem]:
        if isinstance(item_id, str):
            item_id = UUID(item_id)

        shopping_list = self.data_store.load_list()
        for item in shopping_list.items:
            if item.id == item_id:
                return shopping_list, item
        raise ItemNotFoundError(item_id)

    def check_item(
        self,
        item_id: UUID | str,
        added_by: str | None = None,
        now: datetime | None = None,
    ) -> dict:
        """Check off an item and log the purchase.

        A purchase of the same product logged within the recheck window is
        amended instead of adding a second event.

        Raises:
            ItemNotFoundError: If item not found
        """
        shopping_list, item = self._find_item(item_id)
        now = now or utcnow()

        item.is_checked = True
        item.checked_at = now
        self.data_store.save_list(shopping_list)

        events = self.data_store.events_for_product(item.product_id)
        if has_recent_purchase(events, self.prediction.recheck_window_seconds, now=now):
            latest = max(events, key=lambda e: e.purchased_at)
            amended = latest.model_copy(
                update={
                    "purchased_at": now,
                    "shopping_list_item_id": item.id,
                    "added_by": added_by,
                }
            )
            self.data_store.update_purchase_event(amended)
            event = amended
        else:
            event = PurchaseEvent(
                product_id=item.product_id,
                purchased_at=now,
                shopping_list_item_id=item.id,
                added_by=added_by,
            )
            self.data_store.add_purchase_event(event)

        return {
            "success": True,
            "message": f"Checked off {item.name}",
            "data": {"purchase": event.model_dump(mode="json")},
        }

    def uncheck_item(self, item_id: UUID | str) -> dict:
        """Uncheck an item and cancel the purchase it logged.

        Raises:
            ItemNotFoundError: If item not found
        """
        shopping_list, item = self._find_item(item_id)

        item.is_checked = False
        item.checked_at = None
        self.data_store.save_list(shopping_list)

        cancelled = self.data_store.delete_purchase_events_for_item(item.id)
        return {
            "success": True,
            "message": f"Unchecked {item.name}",
            "data": {
                "item": item.model_dump(mode="json"),
                "cancelled_purchases": cancelled,
            },
        }

    def get_list(self) -> dict:
        """Get the shopping list, unchecked items first."""
        shopping_list = self.data_store.load_list()
        items = sorted(shopping_list.items, key=lambda i: (i.is_checked, i.added_at))
        return {
            "success": True,
            "data": {
                "list": {
                    "items": [item.model_dump(mode="json") for item in items],
                    "total_items": len(items),
                    "checked_items": sum(1 for item in items if item.is_checked),
                }
            },
        }

    def clear_checked(self) -> dict:
        """Remove checked items from the list; their purchases stay logged."""
        shopping_list = self.data_store.load_list()
        remaining = [item for item in shopping_list.items if not item.is_checked]
        removed = len(shopping_list.items) - len(remaining)
        shopping_list.items = remaining
        self.data_store.save_list(shopping_list)
        return {
            "success": True,
            "message": f"Cleared {removed} checked item(s)",
            "data": {"cleared": removed},
        }
