"""Tests for the shopping list workflow."""

from datetime import timedelta
from uuid import uuid4

import pytest

from restock.config import PredictionConfig
from restock.list_manager import DuplicateItemError, ItemNotFoundError, ListManager
from restock.models import MatchLevel

from conftest import NOW


class TestCatalog:
    """Tests for catalog operations."""

    def test_add_product(self, list_manager, data_store):
        """Products are saved with their flags."""
        result = list_manager.add_product("  Melk ", category="Zuivel", is_basic=True)

        assert result["success"] is True
        assert result["data"]["product"]["name"] == "Melk"
        assert data_store.load_products()[0].is_basic is True

    def test_list_products_sorted(self, list_manager):
        """Catalog is listed alphabetically."""
        list_manager.add_product("kaas")
        list_manager.add_product("Brood")
        list_manager.add_product("Appels")

        names = [p["name"] for p in list_manager.list_products()["data"]["products"]]
        assert names == ["Appels", "Brood", "kaas"]

    def test_search(self, list_manager):
        """Search wraps the fuzzy index results."""
        list_manager.add_product("Melk")
        list_manager.add_product("Wasmiddel")

        result = list_manager.search("melk")
        assert result["data"]["search"]["query"] == "melk"
        assert [r["name"] for r in result["data"]["search"]["results"]] == ["Melk"]


class TestMatch:
    """Tests for the attach-vs-create decision against the catalog."""

    def test_empty_catalog(self, list_manager):
        """Nothing to match against."""
        decision = list_manager.match("melk")
        assert decision.accepted is False
        assert decision.level == MatchLevel.NONE

    def test_plural_attaches(self, list_manager):
        """A singular form finds the plural product."""
        list_manager.add_product("Bananen")

        decision = list_manager.match("banaan")
        assert decision.accepted is True
        assert decision.candidate.name == "Bananen"

    def test_quantity_is_ignored(self, list_manager):
        """A typed quantity does not block the match."""
        list_manager.add_product("Bananen")
        assert list_manager.match("Bananen 12x").accepted is True


class TestAddItem:
    """Tests for adding typed text to the list."""

    def test_creates_product(self, list_manager, data_store):
        """Unknown text creates a catalog product."""
        result = list_manager.add_item("Melk", description="2 pakken", added_by="anna")

        assert result["success"] is True
        assert result["data"]["created_product"] is True
        item = result["data"]["item"]
        assert item["name"] == "Melk"
        assert item["description"] == "2 pakken"
        assert item["added_by"] == "anna"
        assert len(data_store.load_products()) == 1

    def test_attaches_to_existing(self, list_manager, data_store):
        """Text matching a product reuses it."""
        product = list_manager.add_product("Melk")["data"]["product"]

        result = list_manager.add_item("melk")

        assert result["data"]["created_product"] is False
        assert result["data"]["item"]["product_id"] == product["id"]
        assert result["data"]["item"]["name"] == "Melk"
        assert len(data_store.load_products()) == 1

    def test_prefix_creates_new(self, list_manager, data_store):
        """A longer name sharing a prefix is a different product."""
        list_manager.add_product("Melk")

        result = list_manager.add_item("Melkchocolade")

        assert result["data"]["created_product"] is True
        assert len(data_store.load_products()) == 2

    def test_created_name_is_cleaned(self, list_manager):
        """New products drop a typed quantity from their name."""
        result = list_manager.add_item("Eieren 10")
        assert result["data"]["item"]["name"] == "Eieren"

    def test_duplicate_rejected(self, list_manager):
        """The same product cannot wait on the list twice."""
        list_manager.add_item("Melk")

        with pytest.raises(DuplicateItemError) as exc_info:
            list_manager.add_item("melk")
        assert exc_info.value.existing_item.name == "Melk"

    def test_duplicate_allowed(self, list_manager):
        """Duplicates can be forced."""
        list_manager.add_item("Melk")
        list_manager.add_item("melk", allow_duplicate=True)

        assert list_manager.get_list()["data"]["list"]["total_items"] == 2

    def test_checked_item_not_duplicate(self, list_manager):
        """A bought item does not block adding it again."""
        item = list_manager.add_item("Melk")["data"]["item"]
        list_manager.check_item(item["id"], now=NOW)

        result = list_manager.add_item("Melk")
        assert result["success"] is True


class TestCheckItem:
    """Tests for logging purchases on check."""

    def test_logs_purchase(self, list_manager, data_store):
        """Checking an item records a purchase event."""
        item = list_manager.add_item("Melk", added_by="anna")["data"]["item"]

        result = list_manager.check_item(item["id"], added_by="bram", now=NOW)

        events = data_store.load_purchase_events()
        assert len(events) == 1
        assert events[0].purchased_at == NOW
        assert str(events[0].shopping_list_item_id) == item["id"]
        assert events[0].added_by == "bram"
        assert result["data"]["purchase"]["id"] == str(events[0].id)

    def test_marks_item_checked(self, list_manager):
        """The list item is marked as bought."""
        item = list_manager.add_item("Melk")["data"]["item"]
        list_manager.check_item(item["id"], now=NOW)

        listed = list_manager.get_list()["data"]["list"]
        assert listed["checked_items"] == 1
        assert listed["items"][0]["is_checked"] is True

    def test_recheck_amends(self, list_manager, data_store):
        """A second check within the window amends the earlier purchase."""
        first = list_manager.add_item("Melk")["data"]["item"]
        list_manager.check_item(first["id"], now=NOW)
        second = list_manager.add_item("Melk")["data"]["item"]

        list_manager.check_item(second["id"], now=NOW + timedelta(minutes=10))

        events = data_store.load_purchase_events()
        assert len(events) == 1
        assert events[0].purchased_at == NOW + timedelta(minutes=10)
        assert str(events[0].shopping_list_item_id) == second["id"]

    def test_later_check_adds_event(self, list_manager, data_store):
        """Checks outside the window are separate purchases."""
        first = list_manager.add_item("Melk")["data"]["item"]
        list_manager.check_item(first["id"], now=NOW)
        second = list_manager.add_item("Melk")["data"]["item"]

        list_manager.check_item(second["id"], now=NOW + timedelta(hours=2))

        assert len(data_store.load_purchase_events()) == 2

    def test_window_is_configurable(self, data_store):
        """The recheck window comes from the prediction config."""
        manager = ListManager(data_store, prediction=PredictionConfig(recheck_window_seconds=30))
        first = manager.add_item("Melk")["data"]["item"]
        manager.check_item(first["id"], now=NOW)
        second = manager.add_item("Melk")["data"]["item"]

        manager.check_item(second["id"], now=NOW + timedelta(minutes=10))

        assert len(data_store.load_purchase_events()) == 2

    def test_unknown_item(self, list_manager):
        """Unknown IDs raise ItemNotFoundError."""
        with pytest.raises(ItemNotFoundError):
            list_manager.check_item(uuid4())

    def test_invalid_id(self, list_manager):
        """Malformed IDs raise ValueError."""
        with pytest.raises(ValueError):
            list_manager.check_item("not-a-uuid")


class TestUncheckItem:
    """Tests for cancelling purchases."""

    def test_cancels_purchase(self, list_manager, data_store):
        """Unchecking removes the purchase logged by the check."""
        item = list_manager.add_item("Melk")["data"]["item"]
        list_manager.check_item(item["id"], now=NOW)

        result = list_manager.uncheck_item(item["id"])

        assert result["data"]["cancelled_purchases"] == 1
        assert result["data"]["item"]["is_checked"] is False
        assert result["data"]["item"]["checked_at"] is None
        assert data_store.load_purchase_events() == []

    def test_keeps_other_purchases(self, list_manager, data_store, make_events):
        """Older history of the product is untouched."""
        item = list_manager.add_item("Melk")["data"]["item"]
        product_id = data_store.load_products()[0].id
        for event in make_events([timedelta(days=-7)], product_id=product_id):
            data_store.add_purchase_event(event)
        list_manager.check_item(item["id"], now=NOW)

        list_manager.uncheck_item(item["id"])

        events = data_store.load_purchase_events()
        assert len(events) == 1
        assert events[0].purchased_at == NOW - timedelta(days=7)

    def test_unknown_item(self, list_manager):
        """Unknown IDs raise ItemNotFoundError."""
        with pytest.raises(ItemNotFoundError):
            list_manager.uncheck_item(uuid4())


class TestListAndClear:
    """Tests for viewing and clearing the list."""

    def test_empty_list(self, list_manager):
        """An empty list has no items."""
        listed = list_manager.get_list()["data"]["list"]
        assert listed["items"] == []
        assert listed["total_items"] == 0

    def test_unchecked_first(self, list_manager):
        """Items still to buy come before bought ones."""
        melk = list_manager.add_item("Melk")["data"]["item"]
        list_manager.add_item("Brood")
        list_manager.check_item(melk["id"], now=NOW)

        names = [i["name"] for i in list_manager.get_list()["data"]["list"]["items"]]
        assert names == ["Brood", "Melk"]

    def test_clear_checked(self, list_manager, data_store):
        """Clearing removes bought items but keeps their purchases."""
        melk = list_manager.add_item("Melk")["data"]["item"]
        list_manager.add_item("Brood")
        list_manager.check_item(melk["id"], now=NOW)

        result = list_manager.clear_checked()

        assert result["data"]["cleared"] == 1
        names = [i["name"] for i in list_manager.get_list()["data"]["list"]["items"]]
        assert names == ["Brood"]
        assert len(data_store.load_purchase_events()) == 1
