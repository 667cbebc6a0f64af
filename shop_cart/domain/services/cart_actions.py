"""
Cart actions

Closed set of commands understood by the cart reducer.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from shop_cart.domain.entities.cart_entity import CartLineItem

UPDATABLE_FIELDS = frozenset({"quantity", "max_quantity", "price", "name", "image"})


@dataclass(frozen=True)
class SetCart:
    """Replace all items (rehydration from a persistence adapter)"""

    items: Tuple[CartLineItem, ...] = ()


@dataclass(frozen=True)
class AddItem:
    """Add a line or accumulate onto an existing one"""

    item: CartLineItem


@dataclass(frozen=True)
class UpdateItem:
    """Merge field changes into an existing line"""

    product_id: str
    changes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        unknown = set(self.changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update cart item fields: {sorted(unknown)}")


@dataclass(frozen=True)
class RemoveItem:
    """Drop the line for product_id"""

    product_id: str


@dataclass(frozen=True)
class ClearCart:
    """Reset to the empty baseline"""


@dataclass(frozen=True)
class SetLoading:
    value: bool


@dataclass(frozen=True)
class SetSyncing:
    value: bool


@dataclass(frozen=True)
class SetError:
    message: Optional[str]


@dataclass(frozen=True)
class ClearError:
    pass


CartAction = Union[
    SetCart,
    AddItem,
    UpdateItem,
    RemoveItem,
    ClearCart,
    SetLoading,
    SetSyncing,
    SetError,
    ClearError,
]

# Actions that change items and therefore feed persistence
ITEM_ACTIONS = (AddItem, UpdateItem, RemoveItem, ClearCart)
