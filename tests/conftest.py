"""Shared test fixtures for Restock."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from restock.analytics import RestockAnalytics
from restock.data_store import DataStore
from restock.list_manager import ListManager
from restock.models import Product, PurchaseEvent

NOW = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time."""
    return NOW


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def data_store(temp_data_dir):
    """Create a DataStore with temporary directory."""
    return DataStore(data_dir=temp_data_dir)


@pytest.fixture
def list_manager(data_store):
    """Create a ListManager with temporary storage."""
    return ListManager(data_store=data_store)


@pytest.fixture
def analytics(data_store):
    """Create a RestockAnalytics instance with test data store."""
    return RestockAnalytics(data_store=data_store)


@pytest.fixture
def make_events():
    """Build purchase events for one product from offsets relative to a start time."""

    def _make(offsets, product_id=None, start=NOW):
        product_id = product_id or uuid4()
        return [
            PurchaseEvent(product_id=product_id, purchased_at=start + offset)
            for offset in offsets
        ]

    return _make


@pytest.fixture
def stocked_product(data_store):
    """Save a product with an evenly spaced purchase history."""

    def _stock(name, days_between=7, purchases=4, last_days_ago=5, **kwargs):
        product = Product(name=name, **kwargs)
        data_store.save_product(product)
        last = NOW - timedelta(days=last_days_ago)
        for i in range(purchases):
            data_store.add_purchase_event(
                PurchaseEvent(
                    product_id=product.id,
                    purchased_at=last - timedelta(days=days_between * i),
                )
            )
        return product

    return _stock
