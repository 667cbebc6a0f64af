"""
Cart orchestrator

Owns the in-memory cart state and drives it through the reducer. Reacts to
three events:

- auth changed (`set_user`): cancel any pending remote write, switch to the
  adapter for the new identity and load from it once.
- items changed (every item action): guests write to local storage right away,
  signed-in users get a trailing-edge debounced write to the remote store.
- sync complete: compare the current items with what was written and
  reschedule if they diverged while the write was in flight.

The in-memory cart is authoritative: persistence failures set `error` on the
state and never roll items back.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from shop_cart.application.dtos.cart_dtos import (
    CartOperationResponse,
    CartSummary,
    CartValidationResult,
    InvalidCartItem,
    MergeResult,
    PriceChange,
)
from shop_cart.domain.entities.cart_entity import CartLineItem, CartState
from shop_cart.domain.entities.product_entity import Product
from shop_cart.domain.repositories.cart_persistence import CartPersistenceAdapter
from shop_cart.domain.repositories.catalog_repository import CatalogRepository
from shop_cart.domain.services.cart_actions import (
    ITEM_ACTIONS,
    AddItem,
    CartAction,
    ClearCart,
    ClearError,
    RemoveItem,
    SetCart,
    SetError,
    SetLoading,
    SetSyncing,
    UpdateItem,
)
from shop_cart.domain.services.cart_reducer import cart_reducer
from shop_cart.domain.services.totals_calculator import (
    DEFAULT_PRICING_RULES,
    PricingRules,
)
from shop_cart.domain.value_objects.user_id import UserId
from shop_cart.infrastructure.logging.error_handler import ErrorReport, ErrorReporter
from shop_cart.infrastructure.logging.logger_config import get_structured_logger
from shop_cart.infrastructure.notifications.cart_notifier import CartNotifier
from shop_cart.infrastructure.scheduling.debouncer import Debouncer
from shop_cart.infrastructure.utilities.constants import (
    ErrorMessages,
    SuccessMessages,
    SyncSettings,
    ValidationSettings,
)
from shop_cart.infrastructure.utilities.exceptions import (
    CartPersistenceError,
    CartValidationError,
    StockLimitError,
)

RemoteAdapterFactory = Callable[[str], CartPersistenceAdapter]
ItemsSnapshot = Dict[str, Tuple[int, int]]

_NOT_LOADED = object()


class SyncPhase(Enum):
    """Where the orchestrator is in its load/sync cycle"""

    UNINITIALIZED = "uninitialized"  # nothing loaded for the current identity
    LOADED = "loaded"  # loaded, no remote write since
    IDLE = "idle"  # last remote write finished
    SYNCING = "syncing"  # remote write in flight


def items_snapshot(items: Sequence[CartLineItem]) -> ItemsSnapshot:
    """What the remote store holds for items: product_id -> (quantity, added_at)"""
    return {item.product_id: (item.quantity, item.added_at) for item in items}


class CartOrchestrator:
    """Stateful cart session for one storefront client"""

    def __init__(
        self,
        local_adapter: CartPersistenceAdapter,
        remote_adapter_factory: RemoteAdapterFactory,
        catalog: CatalogRepository,
        notifier: CartNotifier,
        rules: PricingRules = DEFAULT_PRICING_RULES,
        debounce_seconds: float = SyncSettings.SYNC_DEBOUNCE_SECONDS,
        max_quantity_per_item: int = ValidationSettings.MAX_QUANTITY_PER_ITEM,
        merge_guest_cart_on_login: bool = True,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        self._local = local_adapter
        self._remote_factory = remote_adapter_factory
        self._remote: Optional[CartPersistenceAdapter] = None
        self._catalog = catalog
        self._notifier = notifier
        self._rules = rules
        self._max_quantity_per_item = max_quantity_per_item
        self._merge_on_login = merge_guest_cart_on_login
        self._error_reporter = error_reporter

        self._state = CartState.empty()
        self._user_id: Optional[str] = None
        self._phase = SyncPhase.UNINITIALIZED
        self._loaded_identity = _NOT_LOADED
        self._generation = 0
        self._last_synced: Optional[ItemsSnapshot] = None
        self._load_failed = False
        self._load_task: Optional[asyncio.Task] = None
        self._queued: List[CartAction] = []
        self._debouncer = Debouncer(debounce_seconds, name="cart-sync")

        self._logger = logging.getLogger(self.__class__.__name__)
        self._events = get_structured_logger(__name__)

    # Queries

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    @property
    def phase(self) -> SyncPhase:
        return self._phase

    @property
    def sync_pending(self) -> bool:
        """A debounced remote write is waiting to run"""
        return self._debouncer.pending

    def get_item_quantity(self, product_id: str) -> int:
        item = self._state.find_item(product_id)
        return item.quantity if item else 0

    def is_in_cart(self, product_id: str) -> bool:
        return self._state.find_item(product_id) is not None

    def get_cart_summary(self) -> CartSummary:
        return CartSummary.from_state(self._state)

    def clear_error(self) -> None:
        self._apply(ClearError())

    def set_error(self, message: str) -> None:
        self._apply(SetError(message))

    # Lifecycle

    async def start(self) -> CartState:
        """Load once for the current auth context"""
        if self._loaded_identity is _NOT_LOADED:
            await self.load_cart()
        return self._state

    async def set_user(self, user_id: Optional[str]) -> CartState:
        """
        Auth changed. A different identity cancels the pending remote write,
        switches adapters and loads from the new one; the same identity is a
        no-op beyond the initial load.
        """
        if user_id is not None:
            user_id = str(UserId(user_id))
        if user_id == self._user_id:
            return await self.start()

        previous = self._user_id
        if self._debouncer.cancel():
            self._logger.info("🚫 PENDING SYNC CANCELLED: auth changed from %s", previous)
        if self._queued:
            self._logger.warning(
                "⚠️ DROPPING %d queued cart actions on auth change", len(self._queued)
            )
            self._queued = []

        self._generation += 1
        self._user_id = user_id
        self._remote = self._remote_factory(user_id) if user_id is not None else None
        self._phase = SyncPhase.UNINITIALIZED
        self._loaded_identity = _NOT_LOADED
        self._last_synced = None
        self._load_failed = False
        self._load_task = None
        if self._state.syncing:
            self._apply(SetSyncing(False))

        self._events.info("cart_auth_changed", previous_user=previous, user_id=user_id)
        await self.load_cart()

        if user_id is not None and self._merge_on_login:
            if self._load_failed:
                # Full-replace writes would clobber the unread remote cart
                self._logger.warning("⚠️ GUEST CART MERGE SKIPPED: remote cart failed to load")
            else:
                await self.merge_guest_cart()
        return self._state

    async def load_cart(self) -> CartState:
        """Load from the active adapter; concurrent callers share one load"""
        task = self._load_task or self._begin_load()
        await asyncio.shield(task)
        return self._state

    async def flush(self) -> bool:
        """Run a pending remote write now; returns whether one ran"""
        ran = await self._debouncer.flush()
        await self._debouncer.drain()
        return ran

    async def close(self) -> None:
        """Drop pending work when the session goes away"""
        if self._debouncer.cancel():
            self._logger.info("🚫 PENDING SYNC CANCELLED: cart session closed")
        if self._load_task is not None:
            self._load_task.cancel()
            self._load_task = None
        self._queued = []

    # Mutations

    async def dispatch(self, action: CartAction) -> CartState:
        """
        Apply action. Item actions arriving before the current identity's
        load has finished are queued and replayed on top of the loaded items.
        """
        if isinstance(action, ITEM_ACTIONS):
            if self._load_task is None and self._phase is SyncPhase.UNINITIALIZED:
                self._begin_load()
            if self._load_task is not None:
                self._queued.append(action)
                return self._state

        self._apply(action)
        if isinstance(action, ITEM_ACTIONS):
            await self._on_items_changed()
        return self._state

    async def add_to_cart(self, product: Product, quantity: int = 1) -> CartOperationResponse:
        """Add quantity of product, enforcing the per-item cap and stock ceiling"""
        try:
            await self._add_item(product, quantity)
        except CartValidationError as e:
            self._logger.info("🚫 ADD REJECTED: product %s - %s", product.id, e)
            self._notifier.error(e.user_message)
            return self._rejected(e)

        self._notifier.success(SuccessMessages.ITEM_ADDED.format(name=product.name))
        return self._succeeded()

    async def update_quantity(self, product_id: str, quantity: int) -> CartOperationResponse:
        """Set the quantity of an existing line; zero or less removes it"""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return self._reject(CartValidationError(ErrorMessages.INVALID_QUANTITY, "quantity"))
        if quantity <= 0:
            return await self.remove_from_cart(product_id)

        await self._wait_for_load()
        item = self._state.find_item(product_id)
        if item is None:
            return self._reject(CartValidationError(ErrorMessages.ITEM_NOT_FOUND, "product_id"))
        if quantity > item.max_quantity:
            return self._reject(StockLimitError(product_id, item.max_quantity))
        if quantity > self._max_quantity_per_item:
            return self._reject(
                CartValidationError(
                    ErrorMessages.MAX_QUANTITY_PER_ITEM.format(limit=self._max_quantity_per_item),
                    "quantity",
                )
            )

        await self.dispatch(UpdateItem(product_id, {"quantity": quantity}))
        return self._succeeded()

    async def remove_from_cart(self, product_id: str) -> CartOperationResponse:
        await self.dispatch(RemoveItem(product_id))
        self._notifier.success(SuccessMessages.ITEM_REMOVED)
        return self._succeeded()

    async def clear_cart(self) -> CartOperationResponse:
        """Empty the cart and the active adapter's stored copy"""
        if self._load_task is not None:
            await self.dispatch(ClearCart())
            return self._succeeded()

        self._debouncer.cancel()
        self._apply(ClearCart())
        generation = self._generation

        try:
            await self._active_adapter().clear()
        except CartPersistenceError as e:
            if generation != self._generation:
                return self._succeeded()
            self._report(e, "clear")
            self._apply(SetError(ErrorMessages.CLEAR_FAILED))
            # Retry through the regular sync path
            await self._on_items_changed()
            return CartOperationResponse(
                success=False,
                cart_summary=self.get_cart_summary(),
                error_message=ErrorMessages.CLEAR_FAILED,
            )

        if generation == self._generation and self.is_authenticated:
            self._last_synced = {}
        self._logger.info("🗑️ CART CLEARED for %s", self._user_id or "guest")
        return self._succeeded(SuccessMessages.CART_CLEARED)

    async def merge_guest_cart(self) -> MergeResult:
        """
        Replay the guest cart from local storage into the signed-in cart
        through the stock rules, then remove the guest copy.
        """
        if not self.is_authenticated:
            return MergeResult.failed(ErrorMessages.MERGE_REQUIRES_LOGIN)

        guest_items = await self._local.load()
        if not guest_items:
            return MergeResult(success=True, cart_summary=self.get_cart_summary())

        merged = 0
        skipped: List[InvalidCartItem] = []
        for line in guest_items:
            product = Product(
                id=line.product_id,
                name=line.name,
                price=line.price,
                images=[line.image] if line.image else [],
                inventory=line.max_quantity,
            )
            try:
                await self._add_item(product, line.quantity)
            except CartValidationError as e:
                skipped.append(InvalidCartItem(line.product_id, line.name, e.user_message))
                continue
            merged += 1

        await self._local.clear()

        self._events.info(
            "guest_cart_merged",
            user_id=self._user_id,
            merged=merged,
            skipped=len(skipped),
        )
        if merged:
            self._notifier.success(SuccessMessages.GUEST_CART_MERGED.format(count=merged))
        return MergeResult(
            success=True,
            merged_count=merged,
            skipped_items=skipped,
            cart_summary=self.get_cart_summary(),
        )

    async def validate_cart(self) -> CartValidationResult:
        """
        Re-check every line against the catalog before checkout. Unavailable
        lines are removed, surviving lines take the current price and stock.
        Catalog errors propagate before anything is changed.
        """
        items = self._state.items
        products = await asyncio.gather(
            *(self._catalog.find_by_id(item.product_id) for item in items)
        )

        removed: List[InvalidCartItem] = []
        price_changes: List[PriceChange] = []
        actions: List[CartAction] = []

        for item, product in zip(items, products):
            reason = self._invalid_reason(item, product)
            if reason is not None:
                removed.append(InvalidCartItem(item.product_id, item.name, reason))
                actions.append(RemoveItem(item.product_id))
                continue

            changes = {}
            if product.price != item.price:
                price_changes.append(
                    PriceChange(item.product_id, item.name, item.price, product.price)
                )
                changes["price"] = product.price
            if product.inventory != item.max_quantity:
                changes["max_quantity"] = product.inventory
            if changes:
                actions.append(UpdateItem(item.product_id, changes))

        for action in actions:
            if self._state.find_item(action.product_id) is not None:
                await self.dispatch(action)

        if removed:
            self._logger.warning(
                "⚠️ CART VALIDATION: removed %d unavailable items", len(removed)
            )
        return CartValidationResult(
            success=True,
            is_valid=not removed,
            removed_items=removed,
            price_changes=price_changes,
            message=ErrorMessages.CART_INVALID if removed else ErrorMessages.CART_VALID,
        )

    @staticmethod
    def _invalid_reason(item: CartLineItem, product: Optional[Product]) -> Optional[str]:
        if product is None:
            return ErrorMessages.PRODUCT_NOT_FOUND
        if not product.is_active:
            return ErrorMessages.PRODUCT_UNAVAILABLE
        if not product.in_stock:
            return ErrorMessages.OUT_OF_STOCK
        if item.quantity > product.inventory:
            return ErrorMessages.STOCK_BELOW_QUANTITY.format(stock=product.inventory)
        return None

    # Internals

    async def _add_item(self, product: Product, quantity: int) -> None:
        """Validate and dispatch AddItem; raises CartValidationError on rejection"""
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, int)
            or quantity < ValidationSettings.MIN_CART_ITEM_QUANTITY
        ):
            raise CartValidationError(ErrorMessages.INVALID_QUANTITY, "quantity")
        if quantity > self._max_quantity_per_item:
            raise CartValidationError(
                ErrorMessages.MAX_QUANTITY_PER_ITEM.format(limit=self._max_quantity_per_item),
                "quantity",
            )
        if not product.is_active:
            raise CartValidationError(ErrorMessages.PRODUCT_UNAVAILABLE, "product")
        if not product.in_stock:
            raise CartValidationError(ErrorMessages.OUT_OF_STOCK, "product")

        # Stock is checked against the loaded items, never a half-loaded cart
        await self._wait_for_load()
        if self.get_item_quantity(product.id) + quantity > product.inventory:
            raise StockLimitError(product.id, product.inventory)

        item = CartLineItem(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=quantity,
            max_quantity=product.inventory,
            image=product.primary_image,
        )
        await self.dispatch(AddItem(item))

    async def _wait_for_load(self) -> None:
        """Block until the current identity's items are in memory"""
        while self._load_task is not None or self._phase is SyncPhase.UNINITIALIZED:
            await self.load_cart()

    def _apply(self, action: CartAction) -> None:
        self._state = cart_reducer(self._state, action, self._rules)

    def _active_adapter(self) -> CartPersistenceAdapter:
        return self._remote if self._remote is not None else self._local

    def _begin_load(self) -> asyncio.Task:
        self._load_task = asyncio.get_running_loop().create_task(
            self._load(self._generation), name="cart-load"
        )
        return self._load_task

    async def _load(self, generation: int) -> None:
        try:
            current = await self._read_active_adapter(generation)
        finally:
            if self._load_task is asyncio.current_task():
                self._load_task = None
        if not current:
            return

        # No await between releasing the load slot and draining the queue
        queued, self._queued = self._queued, []
        for action in queued:
            self._apply(action)
        if queued:
            self._logger.debug("Replayed %d cart actions queued during load", len(queued))
            await self._on_items_changed()

    async def _read_active_adapter(self, generation: int) -> bool:
        """Rehydrate from the active adapter; False if the identity changed meanwhile"""
        adapter = self._active_adapter()
        self._apply(SetLoading(True))
        try:
            items = await adapter.load()
        except CartPersistenceError as e:
            if generation != self._generation:
                return False
            self._report(e, "load")
            if self._loaded_identity is _NOT_LOADED:
                # Items in memory belong to the previous identity
                self._apply(SetCart(()))
            self._apply(SetError(ErrorMessages.LOAD_FAILED))
            self._load_failed = True
            # Remote contents unknown, so any later change is written through
            self._last_synced = None
        else:
            if generation != self._generation:
                return False
            self._apply(SetCart(tuple(items or ())))
            self._load_failed = False
            self._last_synced = items_snapshot(self._state.items)
            self._logger.info(
                "📦 CART LOADED for %s: %d items",
                self._user_id or "guest",
                len(self._state.items),
            )

        self._loaded_identity = self._user_id
        self._phase = SyncPhase.LOADED
        return True

    async def _on_items_changed(self) -> None:
        if not self.is_authenticated:
            await self._local.save(self._state.items)
            return
        if self._phase is SyncPhase.SYNCING:
            return  # reconciled when the in-flight write completes
        if self._diverged():
            self._debouncer.schedule(self._sync)
        else:
            self._debouncer.cancel()

    def _diverged(self) -> bool:
        return items_snapshot(self._state.items) != self._last_synced

    async def _sync(self) -> None:
        if not self.is_authenticated or self._phase is SyncPhase.SYNCING:
            return

        adapter = self._remote
        generation = self._generation
        items = self._state.items
        written = items_snapshot(items)

        self._phase = SyncPhase.SYNCING
        self._apply(SetSyncing(True))
        try:
            await adapter.save(items)
        except CartPersistenceError as e:
            if generation != self._generation:
                return
            self._report(e, "sync")
            self._apply(SetError(ErrorMessages.SYNC_FAILED))
            self._phase = SyncPhase.IDLE
            return

        if generation != self._generation:
            return
        self._last_synced = written
        self._apply(SetSyncing(False))
        self._phase = SyncPhase.IDLE
        self._events.info("cart_synced", user_id=self._user_id, items=len(items))

        if self._diverged():
            self._debouncer.schedule(self._sync)

    def _report(self, error: Exception, operation: str) -> None:
        if self._error_reporter is not None:
            self._error_reporter.report_error(
                ErrorReport(error=error, context={"operation": operation}, user_id=self._user_id)
            )
        else:
            self._logger.error("💥 CART %s FAILED: %s", operation.upper(), error)

    def _reject(self, error: CartValidationError) -> CartOperationResponse:
        self._notifier.error(error.user_message)
        return self._rejected(error)

    def _rejected(self, error: CartValidationError) -> CartOperationResponse:
        return CartOperationResponse(
            success=False,
            cart_summary=self.get_cart_summary(),
            error_message=error.user_message,
        )

    def _succeeded(self, message: Optional[str] = None) -> CartOperationResponse:
        return CartOperationResponse(
            success=True, cart_summary=self.get_cart_summary(), message=message
        )
