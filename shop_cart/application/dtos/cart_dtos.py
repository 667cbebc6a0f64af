"""
Cart DTOs

Data Transfer Objects returned by the cart API.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from shop_cart.domain.entities.cart_entity import CartLineItem, CartState


@dataclass
class CartItemInfo:
    """Cart item information"""
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    image: str = ""

    @classmethod
    def from_item(cls, item: CartLineItem) -> "CartItemInfo":
        return cls(
            product_id=item.product_id,
            product_name=item.name,
            quantity=item.quantity,
            unit_price=item.price,
            total_price=item.line_total,
            image=item.image,
        )


@dataclass
class CartSummary:
    """Cart summary information"""
    items: List[CartItemInfo]
    total_items: int
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    discount: Decimal
    total_amount: Decimal
    last_updated: Optional[int] = None

    @classmethod
    def from_state(cls, state: CartState) -> "CartSummary":
        """Build a summary from a cart state snapshot"""
        totals = state.totals
        return cls(
            items=[CartItemInfo.from_item(item) for item in state.items],
            total_items=totals.total_items,
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            discount=totals.discount,
            total_amount=totals.total_amount,
            last_updated=state.last_updated,
        )

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass
class CartOperationResponse:
    """Response for cart operations"""
    success: bool
    cart_summary: Optional[CartSummary] = None
    error_message: Optional[str] = None
    message: Optional[str] = None


@dataclass
class InvalidCartItem:
    """Cart line removed by validation or skipped during a merge"""
    product_id: str
    name: str
    reason: str


@dataclass
class PriceChange:
    """Catalog price differs from the price captured in the cart"""
    product_id: str
    name: str
    old_price: Decimal
    new_price: Decimal


@dataclass
class CartValidationResult:
    """Outcome of the pre-checkout validation pass"""
    success: bool
    is_valid: bool = False
    removed_items: List[InvalidCartItem] = field(default_factory=list)
    price_changes: List[PriceChange] = field(default_factory=list)
    message: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def failed(cls, error_message: str) -> "CartValidationResult":
        return cls(success=False, error_message=error_message)


@dataclass
class MergeResult:
    """Outcome of merging the guest cart into a signed-in cart"""
    success: bool
    merged_count: int = 0
    skipped_items: List[InvalidCartItem] = field(default_factory=list)
    cart_summary: Optional[CartSummary] = None
    error_message: Optional[str] = None

    @classmethod
    def failed(cls, error_message: str) -> "MergeResult":
        return cls(success=False, error_message=error_message)
