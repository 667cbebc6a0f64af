"""
Application Use Cases Tests
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from shop_cart.application.dtos.cart_dtos import (
    CartOperationResponse,
    CartSummary,
    CartValidationResult,
    MergeResult,
)
from shop_cart.application.services.cart_orchestrator import CartOrchestrator
from shop_cart.application.use_cases.cart_management_use_case import CartManagementUseCase
from shop_cart.domain.entities.cart_entity import CartState
from shop_cart.infrastructure.logging.error_handler import ErrorReporter
from shop_cart.infrastructure.notifications.cart_notifier import CartNotifier
from shop_cart.infrastructure.persistence.local_cart_adapter import LocalCartAdapter
from shop_cart.infrastructure.persistence.remote_cart_adapter import RemoteCartAdapter
from shop_cart.infrastructure.utilities.constants import ErrorMessages


@pytest.fixture
def mock_orchestrator():
    orchestrator = MagicMock(spec=CartOrchestrator)
    orchestrator.user_id = "user-1"
    orchestrator.state = CartState.empty()
    orchestrator.get_cart_summary.return_value = CartSummary.from_state(CartState.empty())
    return orchestrator


@pytest.fixture
def cart_use_case(catalog, mock_remote_store, blob_storage):
    orchestrator = CartOrchestrator(
        local_adapter=LocalCartAdapter(blob_storage, "nutrition_shop_cart"),
        remote_adapter_factory=lambda user_id: RemoteCartAdapter(mock_remote_store, catalog, user_id),
        catalog=catalog,
        notifier=MagicMock(spec=CartNotifier),
        debounce_seconds=0.05,
    )
    return CartManagementUseCase(orchestrator, ErrorReporter())


class TestCartManagementUseCase:
    """Test the cart API facade"""

    @pytest.mark.asyncio
    async def test_add_to_cart_success(self, cart_use_case, sample_products):
        """Test successful add to cart"""
        await cart_use_case.start()
        response = await cart_use_case.add_to_cart(sample_products["whey"], 2)

        assert response.success is True
        assert response.cart_summary.total_amount == Decimal("2360.00")
        assert cart_use_case.get_item_quantity("whey") == 2
        assert cart_use_case.is_in_cart("whey") is True
        assert cart_use_case.state.totals.total_items == 2

    @pytest.mark.asyncio
    async def test_add_to_cart_rejected(self, cart_use_case, sample_products):
        """Test add to cart above stock"""
        await cart_use_case.start()
        response = await cart_use_case.add_to_cart(sample_products["whey"], 6)

        assert response.success is False
        assert response.error_message == "Only 5 items available in stock"
        # Rejections are not errors on the cart state
        assert cart_use_case.state.error is None

    @pytest.mark.asyncio
    async def test_update_remove_clear(self, cart_use_case, sample_products):
        await cart_use_case.start()
        await cart_use_case.add_to_cart(sample_products["whey"], 1)
        await cart_use_case.add_to_cart(sample_products["creatine"], 1)

        assert (await cart_use_case.update_quantity("whey", 3)).success is True
        assert (await cart_use_case.remove_from_cart("creatine")).success is True
        assert cart_use_case.get_cart_summary().total_items == 3

        response = await cart_use_case.clear_cart()
        assert response.success is True
        assert response.cart_summary.is_empty

    @pytest.mark.asyncio
    async def test_load_cart(self, cart_use_case):
        response = await cart_use_case.load_cart()
        assert response.success is True
        assert response.cart_summary.is_empty

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_failure_response(self, mock_orchestrator):
        """Test that the facade never raises"""
        mock_orchestrator.add_to_cart = AsyncMock(side_effect=RuntimeError("boom"))
        reporter = ErrorReporter()
        use_case = CartManagementUseCase(mock_orchestrator, reporter)

        response = await use_case.add_to_cart(MagicMock(id="whey"), 1)

        assert isinstance(response, CartOperationResponse)
        assert response.success is False
        assert response.error_message == ErrorMessages.ADD_FAILED
        mock_orchestrator.set_error.assert_called_once_with(ErrorMessages.ADD_FAILED)
        assert reporter.get_error_statistics()["errors_by_category"] == {"system": 1}

    @pytest.mark.asyncio
    async def test_validate_failure_returns_validation_result(self, mock_orchestrator):
        mock_orchestrator.validate_cart = AsyncMock(side_effect=ConnectionError("catalog down"))
        use_case = CartManagementUseCase(mock_orchestrator)

        result = await use_case.validate_cart()

        assert isinstance(result, CartValidationResult)
        assert result.success is False
        assert result.error_message == ErrorMessages.VALIDATE_FAILED

    @pytest.mark.asyncio
    async def test_merge_failure_returns_merge_result(self, mock_orchestrator):
        mock_orchestrator.merge_guest_cart = AsyncMock(side_effect=ValueError("bad snapshot"))
        use_case = CartManagementUseCase(mock_orchestrator)

        result = await use_case.merge_guest_cart()

        assert isinstance(result, MergeResult)
        assert result.success is False
        assert result.error_message == ErrorMessages.MERGE_FAILED

    @pytest.mark.asyncio
    async def test_catalog_failure_leaves_cart_untouched(self, cart_use_case, sample_products, catalog):
        await cart_use_case.start()
        await cart_use_case.add_to_cart(sample_products["whey"], 1)
        catalog.find_by_id = AsyncMock(side_effect=ConnectionError("catalog down"))

        result = await cart_use_case.validate_cart()

        assert result.success is False
        assert cart_use_case.get_item_quantity("whey") == 1
        assert cart_use_case.state.error == ErrorMessages.VALIDATE_FAILED

        cart_use_case.clear_error()
        assert cart_use_case.state.error is None

    @pytest.mark.asyncio
    async def test_merge_via_facade(self, cart_use_case):
        result = await cart_use_case.merge_guest_cart()
        assert result.success is False
        assert result.error_message == ErrorMessages.MERGE_REQUIRES_LOGIN

    @pytest.mark.asyncio
    async def test_sign_in_and_out(self, cart_use_case, sample_products, mock_remote_store):
        await cart_use_case.start()
        await cart_use_case.add_to_cart(sample_products["creatine"], 2)

        signed_in = await cart_use_case.set_user("user-1")
        assert signed_in.success is True
        assert signed_in.cart_summary.total_items == 2
        mock_remote_store.get_cart.assert_awaited_once_with("user-1")

        signed_out = await cart_use_case.set_user(None)
        assert signed_out.cart_summary.is_empty

    @pytest.mark.asyncio
    async def test_blank_user_id_is_a_failure_response(self, cart_use_case):
        response = await cart_use_case.set_user("   ")
        assert response.success is False
        assert response.error_message == ErrorMessages.LOAD_FAILED
