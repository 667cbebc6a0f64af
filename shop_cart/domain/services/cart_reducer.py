"""
Cart reducer

Pure state transition: (state, action) -> new state. Every item transition
recomputes totals through the totals calculator and touches last_updated.
The reducer trusts its inputs; stock ceilings are checked before dispatch.
"""

from dataclasses import replace
from typing import Iterable, Optional, Tuple, assert_never

from shop_cart.domain.entities.cart_entity import CartLineItem, CartState, now_ms
from shop_cart.domain.services.cart_actions import (
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
from shop_cart.domain.services.totals_calculator import (
    DEFAULT_PRICING_RULES,
    PricingRules,
    compute_totals,
)


def _next_timestamp(previous: Optional[int], now: Optional[int]) -> int:
    """Strictly increasing millisecond stamp"""
    stamp = now if now is not None else now_ms()
    if previous is not None and stamp <= previous:
        stamp = previous + 1
    return stamp


def _accumulate(
    items: Tuple[CartLineItem, ...], incoming: CartLineItem
) -> Tuple[CartLineItem, ...]:
    """Add incoming onto items, merging by product_id (first snapshot wins)"""
    for index, item in enumerate(items):
        if item.product_id == incoming.product_id:
            merged = item.with_changes(quantity=item.quantity + incoming.quantity)
            return items[:index] + (merged,) + items[index + 1:]
    return items + (incoming,)


def _fold(items: Iterable[CartLineItem]) -> Tuple[CartLineItem, ...]:
    folded: Tuple[CartLineItem, ...] = ()
    for item in items:
        folded = _accumulate(folded, item)
    return tuple(item for item in folded if item.quantity > 0)


def _with_items(
    state: CartState,
    items: Tuple[CartLineItem, ...],
    rules: PricingRules,
    now: Optional[int],
) -> CartState:
    return replace(
        state,
        items=items,
        totals=compute_totals(items, rules),
        last_updated=_next_timestamp(state.last_updated, now),
    )


def cart_reducer(
    state: CartState,
    action: CartAction,
    rules: PricingRules = DEFAULT_PRICING_RULES,
    now: Optional[int] = None,
) -> CartState:
    """Apply action to state and return the next state"""
    if isinstance(action, AddItem):
        return _with_items(state, _accumulate(state.items, action.item), rules, now)

    if isinstance(action, UpdateItem):
        if state.find_item(action.product_id) is None:
            return state
        updated = []
        for item in state.items:
            if item.product_id == action.product_id:
                item = item.with_changes(**dict(action.changes))
                if item.quantity <= 0:
                    continue
            updated.append(item)
        return _with_items(state, tuple(updated), rules, now)

    if isinstance(action, RemoveItem):
        remaining = tuple(
            item for item in state.items if item.product_id != action.product_id
        )
        return _with_items(state, remaining, rules, now)

    if isinstance(action, ClearCart):
        return replace(
            CartState.empty(),
            last_updated=_next_timestamp(state.last_updated, now),
        )

    if isinstance(action, SetCart):
        loaded = _with_items(state, _fold(action.items), rules, now)
        return replace(loaded, loading=False)

    if isinstance(action, SetLoading):
        return replace(state, loading=action.value)

    if isinstance(action, SetSyncing):
        return replace(state, syncing=action.value)

    if isinstance(action, SetError):
        return replace(state, error=action.message, loading=False, syncing=False)

    if isinstance(action, ClearError):
        return replace(state, error=None)

    assert_never(action)
