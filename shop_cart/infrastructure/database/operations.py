"""
Database connection management

One DatabaseManager per application root; repositories receive it through the
dependency container.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shop_cart.domain.entities.product_entity import Product
from shop_cart.infrastructure.database.models import Base, ProductModel

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Engine and session factory for a single database URL"""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_engine(self) -> Engine:
        """Get database engine, creating it on first use"""
        if self._engine is None:
            self._engine = self._create_engine()
            self._session_factory = sessionmaker(
                autocommit=False, autoflush=False, bind=self._engine
            )
        return self._engine

    def _create_engine(self) -> Engine:
        """Create database engine with SQLite-specific settings where needed"""
        engine_kwargs = {"echo": self._echo}

        if self.database_url.startswith("sqlite"):
            self._ensure_sqlite_directory()
            engine_kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.logger.info("Creating database engine for %s", self.database_url.split("://")[0])
        return create_engine(self.database_url, **engine_kwargs)

    def _ensure_sqlite_directory(self) -> None:
        if ":///" not in self.database_url:
            return  # sqlite:// is in-memory
        path = self.database_url.split(":///", 1)[1]
        if path and path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)

    def get_session(self) -> Session:
        """New session bound to the engine"""
        self.get_engine()
        return self._session_factory()

    @contextmanager
    def managed_session(self) -> Generator[Session, None, None]:
        """
        Context manager for handling database sessions, including commits, rollbacks,
        and exception logging.

        Raises:
            SQLAlchemyError: If a database-related error occurs.
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            self.logger.error("💥 DATABASE ERROR: %s", e)
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        """Create all tables"""
        Base.metadata.create_all(self.get_engine())
        self.logger.info("Database tables created")

    def drop_tables(self) -> None:
        """Drop all tables"""
        Base.metadata.drop_all(self.get_engine())

    def seed_products(self, products: Iterable[Product]) -> int:
        """Insert or update catalog products, returns the number written"""
        count = 0
        with self.managed_session() as session:
            for product in products:
                session.merge(
                    ProductModel(
                        id=product.id,
                        name=product.name,
                        price=product.price,
                        images=list(product.images),
                        inventory=product.inventory,
                        is_active=product.is_active,
                    )
                )
                count += 1
        self.logger.info("Seeded %d products", count)
        return count

    def dispose(self) -> None:
        """Release pooled connections"""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
