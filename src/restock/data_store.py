"""Data persistence for Restock.

One data directory holds one household: its product catalog, append-only
purchase history, shopping list and snoozes, each as a JSON file. The
prediction and matching functions never touch this module; the list workflow
and analytics read from it and hand plain models to the core.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import UUID

from .history import group_by
from .models import (
    Product,
    ProductId,
    PurchaseEvent,
    ShoppingList,
    Snooze,
    utcnow,
)

logger = logging.getLogger(__name__)


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for our data types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class DataStore:
    """Manages JSON file persistence for household data."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize data store.

        Args:
            data_dir: Directory for data files. Defaults to ./data
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create the data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _products_path(self) -> Path:
        """Path to product catalog file."""
        return self.data_dir / "products.json"

    def _history_path(self) -> Path:
        """Path to purchase history file."""
        return self.data_dir / "purchase_history.json"

    def _list_path(self) -> Path:
        """Path to shopping list file."""
        return self.data_dir / "shopping_list.json"

    def _snoozes_path(self) -> Path:
        """Path to snoozes file."""
        return self.data_dir / "snoozes.json"

    def _read(self, path: Path) -> Any:
        with open(path) as f:
            return json.load(f)

    def _write(self, path: Path, data: Any) -> None:
        with open(path, "w") as f:
            json.dump(data, f, cls=JSONEncoder, indent=2)

    # --- Product Catalog ---

    def load_products(self) -> list[Product]:
        """Load all catalog products.

        Returns:
            List of Product, empty if file doesn't exist
        """
        path = self._products_path()
        if not path.exists():
            return []
        return [Product.model_validate(p) for p in self._read(path)]

    def get_product(self, product_id: ProductId) -> Product | None:
        """Get a product by ID.

        Args:
            product_id: UUID of the product

        Returns:
            Product if found, None otherwise
        """
        for product in self.load_products():
            if product.id == product_id:
                return product
        return None

    def save_product(self, product: Product) -> ProductId:
        """Insert or replace a product.

        Args:
            product: Product to save

        Returns:
            Product ID
        """
        products = self.load_products()
        for i, existing in enumerate(products):
            if existing.id == product.id:
                products[i] = product
                break
        else:
            products.append(product)
        self._write(self._products_path(), [p.model_dump() for p in products])
        return product.id

    # --- Purchase History ---

    def load_purchase_events(self) -> list[PurchaseEvent]:
        """Load the full purchase history for the household."""
        path = self._history_path()
        if not path.exists():
            return []
        return [PurchaseEvent.model_validate(e) for e in self._read(path)]

    def save_purchase_events(self, events: list[PurchaseEvent]) -> None:
        """Save the full purchase history.

        Args:
            events: All purchase events
        """
        self._write(self._history_path(), [e.model_dump() for e in events])

    def events_for_product(self, product_id: ProductId) -> list[PurchaseEvent]:
        """Get every purchase event for one product."""
        return [e for e in self.load_purchase_events() if e.product_id == product_id]

    def events_by_product(self) -> dict[ProductId, list[PurchaseEvent]]:
        """Get the purchase history grouped by product."""
        return group_by(self.load_purchase_events())

    def add_purchase_event(self, event: PurchaseEvent) -> UUID:
        """Append a purchase event.

        Args:
            event: Event to add

        Returns:
            Event ID
        """
        events = self.load_purchase_events()
        events.append(event)
        self.save_purchase_events(events)
        logger.debug("Recorded purchase %s of product %s", event.id, event.product_id)
        return event.id

    def update_purchase_event(self, event: PurchaseEvent) -> bool:
        """Replace a stored event with an amended copy.

        Returns:
            True if an event with that ID existed
        """
        events = self.load_purchase_events()
        for i, existing in enumerate(events):
            if existing.id == event.id:
                events[i] = event
                self.save_purchase_events(events)
                logger.debug("Amended purchase %s of product %s", event.id, event.product_id)
                return True
        return False

    def delete_purchase_events_for_item(self, item_id: UUID) -> int:
        """Delete purchase events linked to a shopping list item.

        Returns:
            Number of events removed
        """
        events = self.load_purchase_events()
        remaining = [e for e in events if e.shopping_list_item_id != item_id]
        removed = len(events) - len(remaining)
        if removed:
            self.save_purchase_events(remaining)
            logger.debug("Cancelled %d purchase(s) for list item %s", removed, item_id)
        return removed

    # --- Shopping List ---

    def load_list(self) -> ShoppingList:
        """Load the shopping list.

        Returns:
            ShoppingList object, empty if file doesn't exist
        """
        path = self._list_path()
        if not path.exists():
            return ShoppingList()
        return ShoppingList.model_validate(self._read(path))

    def save_list(self, shopping_list: ShoppingList) -> None:
        """Save the shopping list.

        Args:
            shopping_list: ShoppingList to save
        """
        shopping_list.last_updated = utcnow()
        self._write(self._list_path(), shopping_list.model_dump())

    # --- Snoozes ---

    def load_snoozes(self) -> dict[ProductId, Snooze]:
        """Load snoozes keyed by product."""
        path = self._snoozes_path()
        if not path.exists():
            return {}
        snoozes = [Snooze.model_validate(s) for s in self._read(path)]
        return {s.product_id: s for s in snoozes}

    def save_snooze(self, snooze: Snooze) -> None:
        """Insert or replace the snooze for a product."""
        snoozes = self.load_snoozes()
        snoozes[snooze.product_id] = snooze
        self._write(self._snoozes_path(), [s.model_dump() for s in snoozes.values()])
