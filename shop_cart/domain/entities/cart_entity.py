"""
Cart Entities - line items, derived totals and the cart state snapshot

All three are immutable; the reducer produces a new CartState for every action.
"""

import time
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from shop_cart.domain.value_objects.money import ZERO, to_decimal


def now_ms() -> int:
    """Current epoch time in milliseconds"""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CartLineItem:
    """One product entry in the cart, keyed by product_id"""

    product_id: str
    name: str
    price: Decimal
    quantity: int
    max_quantity: int
    image: str = ""
    added_at: int = field(default_factory=now_ms)

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("Cart item product_id cannot be empty")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("Cart item quantity must be an integer")
        object.__setattr__(self, "price", to_decimal(self.price))

    @property
    def line_total(self) -> Decimal:
        """price x quantity"""
        return self.price * self.quantity

    def with_changes(self, **changes: Any) -> "CartLineItem":
        """Copy with the given fields replaced"""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.quantity,
            "max_quantity": self.max_quantity,
            "image": self.image,
            "added_at": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLineItem":
        """Build from a dictionary produced by to_dict"""
        return cls(
            product_id=str(data["product_id"]),
            name=data.get("name", ""),
            price=to_decimal(data.get("price", "0")),
            quantity=int(data["quantity"]),
            max_quantity=int(data.get("max_quantity") or 0),
            image=data.get("image") or "",
            added_at=int(data.get("added_at") or now_ms()),
        )


@dataclass(frozen=True)
class CartTotals:
    """Derived cart totals"""

    total_items: int
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    discount: Decimal
    total_amount: Decimal

    @classmethod
    def empty(cls) -> "CartTotals":
        """Totals of an empty cart"""
        return cls(
            total_items=0,
            subtotal=ZERO,
            tax=ZERO,
            shipping=ZERO,
            discount=ZERO,
            total_amount=ZERO,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            "total_items": self.total_items,
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "shipping": str(self.shipping),
            "discount": str(self.discount),
            "total_amount": str(self.total_amount),
        }


@dataclass(frozen=True)
class CartState:
    """Cart state snapshot"""

    items: Tuple[CartLineItem, ...] = ()
    totals: CartTotals = field(default_factory=CartTotals.empty)
    loading: bool = False
    syncing: bool = False
    error: Optional[str] = None
    last_updated: Optional[int] = None

    @classmethod
    def empty(cls) -> "CartState":
        """Baseline state at session start"""
        return cls()

    def find_item(self, product_id: str) -> Optional[CartLineItem]:
        """Line for product_id, if present"""
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def item_map(self) -> Dict[str, CartLineItem]:
        """product_id -> line item"""
        return {item.product_id: item for item in self.items}

    @property
    def is_empty(self) -> bool:
        return not self.items
