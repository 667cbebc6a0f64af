"""
Dependency Injection Container

Builds the cart object graph once at the application root.
"""

import logging
from typing import Any, Dict, Optional

from ...application.services.cart_orchestrator import CartOrchestrator
from ...application.use_cases.cart_management_use_case import CartManagementUseCase
from ...domain.repositories.blob_storage import BlobStorage
from ...domain.repositories.catalog_repository import CatalogRepository
from ...domain.repositories.remote_cart_store import RemoteCartStore
from ...domain.services.totals_calculator import PricingRules
from ..configuration.config import Settings, get_config
from ..database.operations import DatabaseManager
from ..logging.error_handler import ErrorReporter
from ..notifications.cart_notifier import CartNotifier, LoggingCartNotifier
from ..persistence.local_cart_adapter import LocalCartAdapter
from ..persistence.remote_cart_adapter import RemoteCartAdapter
from ..repositories.sqlalchemy_cart_store import SQLAlchemyCartStore
from ..repositories.sqlalchemy_catalog_repository import SQLAlchemyCatalogRepository
from ..storage.blob_storage import FileBlobStorage

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container

    Manages the instantiation and lifecycle of:
    - Database manager and repositories (Infrastructure layer)
    - Storage, persistence adapters and notifier
    - Cart orchestrator and use case (Application layer)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        notifier: Optional[CartNotifier] = None,
        storage: Optional[BlobStorage] = None,
    ):
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self._settings = settings or get_config()
        self._notifier = notifier
        self._storage = storage
        self._setup_dependencies()

    def _setup_dependencies(self):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")

        # Infrastructure Layer - Database and repositories
        self._register_repositories()

        # Infrastructure Layer - Services
        self._register_services()

        # Application Layer - Orchestrator and use case
        self._register_use_cases()

        self._logger.info("Dependency injection container setup complete")

    def _register_repositories(self):
        """Register repository implementations"""
        db_manager = DatabaseManager(self._settings.database_url)
        self._instances["database_manager"] = db_manager
        self._instances["catalog_repository"] = SQLAlchemyCatalogRepository(db_manager)
        self._instances["remote_cart_store"] = SQLAlchemyCartStore(db_manager)

        self._logger.debug("Repositories registered successfully")

    def _register_services(self):
        """Register service implementations"""
        self._instances["pricing_rules"] = PricingRules.from_settings(self._settings)
        self._instances["blob_storage"] = self._storage or FileBlobStorage(
            self._settings.storage_dir
        )
        self._instances["local_cart_adapter"] = LocalCartAdapter(
            storage=self.get_blob_storage(),
            key=self._settings.guest_cart_storage_key,
            rules=self.get_pricing_rules(),
        )
        self._instances["cart_notifier"] = self._notifier or LoggingCartNotifier()
        self._instances["error_reporter"] = ErrorReporter()

        self._logger.debug("Services registered successfully")

    def _register_use_cases(self):
        """Register the orchestrator and use case with their dependencies"""
        self._instances["cart_orchestrator"] = CartOrchestrator(
            local_adapter=self._instances["local_cart_adapter"],
            remote_adapter_factory=self.create_remote_cart_adapter,
            catalog=self.get_catalog_repository(),
            notifier=self.get_cart_notifier(),
            rules=self.get_pricing_rules(),
            debounce_seconds=self._settings.sync_debounce_seconds,
            max_quantity_per_item=self._settings.max_quantity_per_item,
            merge_guest_cart_on_login=self._settings.merge_guest_cart_on_login,
            error_reporter=self.get_error_reporter(),
        )

        self._instances["cart_management_use_case"] = CartManagementUseCase(
            orchestrator=self.get_cart_orchestrator(),
            error_reporter=self.get_error_reporter(),
        )

        self._logger.debug("Use cases registered successfully")

    def create_remote_cart_adapter(self, user_id: str) -> RemoteCartAdapter:
        """Remote adapter bound to user_id"""
        return RemoteCartAdapter(
            store=self.get_remote_cart_store(),
            catalog=self.get_catalog_repository(),
            user_id=user_id,
        )

    # Repository getters
    def get_database_manager(self) -> DatabaseManager:
        """Get database manager instance"""
        return self._instances["database_manager"]

    def get_catalog_repository(self) -> CatalogRepository:
        """Get catalog repository instance"""
        return self._instances["catalog_repository"]

    def get_remote_cart_store(self) -> RemoteCartStore:
        """Get remote cart store instance"""
        return self._instances["remote_cart_store"]

    # Service getters
    def get_pricing_rules(self) -> PricingRules:
        return self._instances["pricing_rules"]

    def get_blob_storage(self) -> BlobStorage:
        return self._instances["blob_storage"]

    def get_cart_notifier(self) -> CartNotifier:
        return self._instances["cart_notifier"]

    def get_error_reporter(self) -> ErrorReporter:
        return self._instances["error_reporter"]

    # Application getters
    def get_cart_orchestrator(self) -> CartOrchestrator:
        """Get cart orchestrator instance"""
        return self._instances["cart_orchestrator"]

    def get_cart_management_use_case(self) -> CartManagementUseCase:
        """Get cart management use case instance"""
        return self._instances["cart_management_use_case"]

    async def cleanup(self):
        """Cleanup resources when shutting down"""
        self._logger.info("Cleaning up dependency container...")
        orchestrator = self._instances.get("cart_orchestrator")
        if orchestrator is not None:
            await orchestrator.close()
        db_manager = self._instances.get("database_manager")
        if db_manager is not None:
            db_manager.dispose()
        self._instances.clear()
