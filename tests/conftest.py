"""
Test configuration and fixtures for the shop cart
"""

import os
from decimal import Decimal
from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shop_cart.domain.entities.cart_entity import CartLineItem
from shop_cart.domain.entities.product_entity import Product
from shop_cart.domain.repositories.catalog_repository import CatalogRepository
from shop_cart.infrastructure.configuration.config import reset_config
from shop_cart.infrastructure.database.operations import DatabaseManager
from shop_cart.infrastructure.storage.blob_storage import InMemoryBlobStorage


# Mock environment variables for testing
@pytest.fixture(autouse=True)
def mock_env():
    """Mock environment variables for testing"""
    test_env = {
        'ENVIRONMENT': 'test',
        'LOG_LEVEL': 'DEBUG',
        'DATABASE_URL': 'sqlite://',
        'SYNC_DEBOUNCE_SECONDS': '0.05',
    }

    reset_config()
    with patch.dict(os.environ, test_env, clear=True):
        yield test_env
    reset_config()


class FakeCatalog(CatalogRepository):
    """Catalog backed by a dict; tests mutate `products` directly"""

    def __init__(self, products: Dict[str, Product]):
        self.products = products
        self.lookups = 0

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        self.lookups += 1
        return self.products.get(product_id)


@pytest.fixture
def sample_products() -> Dict[str, Product]:
    """Small catalog: two stocked products, one out of stock, one retired"""
    return {
        "whey": Product(id="whey", name="Whey Protein", price=Decimal("1000"), images=["whey.jpg"], inventory=5),
        "creatine": Product(id="creatine", name="Creatine", price=Decimal("300"), inventory=20),
        "shaker": Product(id="shaker", name="Shaker", price=Decimal("150"), inventory=0),
        "bar": Product(id="bar", name="Protein Bar", price=Decimal("80"), inventory=50, is_active=False),
    }


@pytest.fixture
def catalog(sample_products):
    return FakeCatalog(sample_products)


@pytest.fixture
def blob_storage():
    return InMemoryBlobStorage()


@pytest.fixture
def mock_remote_store():
    """Remote cart store mock with an empty document"""
    store = MagicMock()
    store.get_cart = AsyncMock(return_value=None)
    store.update_cart = AsyncMock(return_value=True)
    store.clear_cart = AsyncMock(return_value=True)
    return store


@pytest.fixture
def db_manager():
    """In-memory SQLite database with tables created"""
    manager = DatabaseManager("sqlite://")
    manager.create_tables()
    yield manager
    manager.drop_tables()
    manager.dispose()


@pytest.fixture
def make_item():
    """Factory for cart line items"""

    def _make(product_id="whey", quantity=1, price="1000", max_quantity=10, **kwargs):
        return CartLineItem(
            product_id=product_id,
            name=kwargs.pop("name", product_id.title()),
            price=Decimal(price),
            quantity=quantity,
            max_quantity=max_quantity,
            **kwargs,
        )

    return _make
