"""
Cart management use case

Public cart API for the storefront UI. Every call returns a response object;
unexpected exceptions are logged, reported and turned into failure responses
plus a transient error on the cart state.
"""

import logging
from typing import Optional

from shop_cart.application.dtos.cart_dtos import (
    CartOperationResponse,
    CartSummary,
    CartValidationResult,
    MergeResult,
)
from shop_cart.application.services.cart_orchestrator import CartOrchestrator
from shop_cart.domain.entities.cart_entity import CartState
from shop_cart.domain.entities.product_entity import Product
from shop_cart.infrastructure.logging.error_handler import (
    ErrorReport,
    ErrorReporter,
    cart_operation,
)
from shop_cart.infrastructure.utilities.constants import ErrorMessages


class CartManagementUseCase:
    """
    Use case for cart management operations

    Handles:
    1. Adding, updating and removing items
    2. Loading and clearing the cart
    3. Pre-checkout validation
    4. Merging the guest cart after login
    5. Cart queries and summary
    """

    def __init__(
        self,
        orchestrator: CartOrchestrator,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        self._orchestrator = orchestrator
        self._error_reporter = error_reporter or ErrorReporter()
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def state(self) -> CartState:
        return self._orchestrator.state

    @cart_operation(ErrorMessages.ADD_FAILED)
    async def add_to_cart(self, product: Product, quantity: int = 1) -> CartOperationResponse:
        """Add item to the cart"""
        self._logger.info(
            "🛒 CART USE CASE: Adding to cart - User: %s, Product: %s, Qty: %s",
            self._orchestrator.user_id or "guest",
            product.id,
            quantity,
        )
        return await self._orchestrator.add_to_cart(product, quantity)

    @cart_operation(ErrorMessages.UPDATE_FAILED)
    async def update_quantity(self, product_id: str, quantity: int) -> CartOperationResponse:
        """Set the quantity of a cart line"""
        self._logger.info(
            "🔢 CART USE CASE: Updating quantity - Product: %s, Qty: %s",
            product_id,
            quantity,
        )
        return await self._orchestrator.update_quantity(product_id, quantity)

    @cart_operation(ErrorMessages.REMOVE_FAILED)
    async def remove_from_cart(self, product_id: str) -> CartOperationResponse:
        """Remove a cart line"""
        self._logger.info("🗑️ CART USE CASE: Removing product %s", product_id)
        return await self._orchestrator.remove_from_cart(product_id)

    @cart_operation(ErrorMessages.CLEAR_FAILED)
    async def clear_cart(self) -> CartOperationResponse:
        """Empty the cart"""
        self._logger.info(
            "🧹 CART USE CASE: Clearing cart - User: %s",
            self._orchestrator.user_id or "guest",
        )
        return await self._orchestrator.clear_cart()

    @cart_operation(ErrorMessages.LOAD_FAILED)
    async def start(self) -> CartOperationResponse:
        """Load the cart for the current session once"""
        return self._state_response(await self._orchestrator.start())

    @cart_operation(ErrorMessages.LOAD_FAILED)
    async def set_user(self, user_id: Optional[str]) -> CartOperationResponse:
        """Sign in (user_id) or out (None)"""
        self._logger.info("👤 CART USE CASE: Auth changed - User: %s", user_id or "guest")
        return self._state_response(await self._orchestrator.set_user(user_id))

    @cart_operation(ErrorMessages.LOAD_FAILED)
    async def load_cart(self) -> CartOperationResponse:
        """Reload the cart from the active store"""
        return self._state_response(await self._orchestrator.load_cart())

    @cart_operation(ErrorMessages.VALIDATE_FAILED, result_factory=CartValidationResult.failed)
    async def validate_cart(self) -> CartValidationResult:
        """Check every line against the catalog before checkout"""
        result = await self._orchestrator.validate_cart()
        self._logger.info(
            "✅ CART VALIDATION: valid=%s, removed=%d, price changes=%d",
            result.is_valid,
            len(result.removed_items),
            len(result.price_changes),
        )
        return result

    @cart_operation(ErrorMessages.MERGE_FAILED, result_factory=MergeResult.failed)
    async def merge_guest_cart(self) -> MergeResult:
        """Fold the guest cart into the signed-in cart"""
        return await self._orchestrator.merge_guest_cart()

    def get_item_quantity(self, product_id: str) -> int:
        return self._orchestrator.get_item_quantity(product_id)

    def is_in_cart(self, product_id: str) -> bool:
        return self._orchestrator.is_in_cart(product_id)

    def get_cart_summary(self) -> CartSummary:
        return self._orchestrator.get_cart_summary()

    def clear_error(self) -> None:
        self._orchestrator.clear_error()

    def _state_response(self, state: CartState) -> CartOperationResponse:
        return CartOperationResponse(
            success=state.error is None,
            cart_summary=self._orchestrator.get_cart_summary(),
            error_message=state.error,
        )

    # Error boundary hooks used by @cart_operation

    def _report_failure(self, operation: str, error: Exception, failure_message: str) -> None:
        self._logger.error(
            "💥 UNEXPECTED ERROR in %s: %s", operation, error, exc_info=error
        )
        self._error_reporter.report_error(
            ErrorReport(
                error=error,
                context={"operation": operation},
                user_id=self._orchestrator.user_id,
            )
        )
        self._orchestrator.set_error(failure_message)

    def _failure_response(self, failure_message: str) -> CartOperationResponse:
        return CartOperationResponse(
            success=False,
            cart_summary=self._orchestrator.get_cart_summary(),
            error_message=failure_message,
        )
