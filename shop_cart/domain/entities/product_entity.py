"""
Product Entity - catalog snapshot as seen by the cart
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from shop_cart.domain.value_objects.money import to_decimal


@dataclass
class Product:
    """Product domain entity returned by the catalog lookup"""

    id: str
    name: str
    price: Decimal
    images: List[str] = field(default_factory=list)
    inventory: Optional[int] = None
    is_active: bool = True

    def __post_init__(self):
        """Validate the product after initialization"""
        if not self.id:
            raise ValueError("Product id cannot be empty")

        self.price = to_decimal(self.price)
        if self.price < 0:
            raise ValueError("Product price cannot be negative")

    @property
    def primary_image(self) -> str:
        """First image reference, or an empty string"""
        return self.images[0] if self.images else ""

    @property
    def in_stock(self) -> bool:
        """Whether any stock is available"""
        return bool(self.inventory) and self.inventory > 0

    def to_dict(self) -> dict:
        """Convert to dictionary representation"""
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "images": list(self.images),
            "inventory": self.inventory,
            "is_active": self.is_active,
        }
