"""
Tests for SQLAlchemy Repositories - Catalog and Cart Store
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from shop_cart.domain.entities.product_entity import Product
from shop_cart.infrastructure.database.operations import DatabaseManager
from shop_cart.infrastructure.persistence.remote_cart_adapter import RemoteCartAdapter
from shop_cart.infrastructure.repositories.sqlalchemy_cart_store import SQLAlchemyCartStore
from shop_cart.infrastructure.repositories.sqlalchemy_catalog_repository import (
    SQLAlchemyCatalogRepository,
)
from shop_cart.infrastructure.utilities.exceptions import CartPersistenceError


def _failing_db_manager() -> MagicMock:
    db_manager = MagicMock(spec=DatabaseManager)
    db_manager.managed_session.side_effect = SQLAlchemyError("database is locked")
    return db_manager


class TestSQLAlchemyCatalogRepository:
    """Test SQLAlchemy catalog repository"""

    @pytest.mark.asyncio
    async def test_find_by_id(self, db_manager, sample_products):
        assert db_manager.seed_products(sample_products.values()) == 4
        repo = SQLAlchemyCatalogRepository(db_manager)

        product = await repo.find_by_id("whey")

        assert product == sample_products["whey"]
        assert product.price == Decimal("1000.00")
        assert product.images == ["whey.jpg"]

    @pytest.mark.asyncio
    async def test_find_inactive_product(self, db_manager, sample_products):
        db_manager.seed_products(sample_products.values())
        product = await SQLAlchemyCatalogRepository(db_manager).find_by_id("bar")
        assert product.is_active is False

    @pytest.mark.asyncio
    async def test_find_missing_product(self, db_manager):
        assert await SQLAlchemyCatalogRepository(db_manager).find_by_id("nope") is None

    @pytest.mark.asyncio
    async def test_seed_updates_existing_product(self, db_manager):
        db_manager.seed_products([Product(id="p1", name="Oats", price="100", inventory=1)])
        db_manager.seed_products([Product(id="p1", name="Oats", price="120", inventory=9)])

        product = await SQLAlchemyCatalogRepository(db_manager).find_by_id("p1")

        assert product.price == Decimal("120")
        assert product.inventory == 9

    @pytest.mark.asyncio
    async def test_database_error_propagates(self):
        repo = SQLAlchemyCatalogRepository(_failing_db_manager())
        with pytest.raises(SQLAlchemyError):
            await repo.find_by_id("whey")


class TestSQLAlchemyCartStore:
    """Test SQLAlchemy cart store"""

    @pytest.mark.asyncio
    async def test_get_missing_cart(self, db_manager):
        assert await SQLAlchemyCartStore(db_manager).get_cart("user-1") is None

    @pytest.mark.asyncio
    async def test_update_replaces_document(self, db_manager):
        store = SQLAlchemyCartStore(db_manager)

        assert await store.update_cart("user-1", {"whey": {"quantity": 2, "addedAt": 1}})
        assert await store.update_cart("user-1", {"creatine": {"quantity": 1, "addedAt": 2}})

        assert await store.get_cart("user-1") == {"creatine": {"quantity": 1, "addedAt": 2}}

    @pytest.mark.asyncio
    async def test_carts_are_per_user(self, db_manager):
        store = SQLAlchemyCartStore(db_manager)
        await store.update_cart("user-1", {"whey": {"quantity": 1, "addedAt": 1}})
        await store.update_cart("user-2", {})

        assert await store.get_cart("user-2") == {}
        assert "whey" in await store.get_cart("user-1")

    @pytest.mark.asyncio
    async def test_clear_cart(self, db_manager):
        store = SQLAlchemyCartStore(db_manager)
        await store.update_cart("user-1", {"whey": {"quantity": 1, "addedAt": 1}})

        assert await store.clear_cart("user-1") is True
        assert await store.get_cart("user-1") is None
        assert await store.clear_cart("user-1") is True

    @pytest.mark.asyncio
    async def test_write_errors_return_false(self):
        store = SQLAlchemyCartStore(_failing_db_manager())
        assert await store.update_cart("user-1", {}) is False
        assert await store.clear_cart("user-1") is False

    @pytest.mark.asyncio
    async def test_read_error_propagates(self):
        store = SQLAlchemyCartStore(_failing_db_manager())
        with pytest.raises(SQLAlchemyError):
            await store.get_cart("user-1")


class TestRemoteAdapterOverDatabase:
    """Remote adapter wired to the SQLAlchemy implementations"""

    @pytest.mark.asyncio
    async def test_save_then_load(self, db_manager, sample_products, make_item):
        db_manager.seed_products(sample_products.values())
        adapter = RemoteCartAdapter(
            SQLAlchemyCartStore(db_manager), SQLAlchemyCatalogRepository(db_manager), "user-1"
        )

        await adapter.save([make_item("whey", 2, added_at=10), make_item("creatine", 3, added_at=20)])
        items = await adapter.load()

        assert [(i.product_id, i.quantity, i.added_at) for i in items] == [
            ("whey", 2, 10),
            ("creatine", 3, 20),
        ]
        assert items[1].name == "Creatine"

    @pytest.mark.asyncio
    async def test_failed_write_surfaces_as_persistence_error(self, make_item):
        db_manager = _failing_db_manager()
        adapter = RemoteCartAdapter(
            SQLAlchemyCartStore(db_manager), SQLAlchemyCatalogRepository(db_manager), "user-1"
        )
        with pytest.raises(CartPersistenceError):
            await adapter.save([make_item()])
