"""
Totals calculator

Pure function from cart line items to derived totals. No I/O, no hidden state:
the same items always produce an identical CartTotals.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from shop_cart.domain.entities.cart_entity import CartLineItem, CartTotals
from shop_cart.domain.value_objects.money import ZERO, Amount, round_currency, to_decimal
from shop_cart.infrastructure.utilities.constants import BusinessSettings


@dataclass(frozen=True)
class PricingRules:
    """Tax rate and shipping thresholds"""

    gst_rate: Decimal = BusinessSettings.GST_RATE
    min_order_for_free_shipping: Decimal = BusinessSettings.MIN_ORDER_FOR_FREE_SHIPPING
    flat_shipping_fee: Decimal = BusinessSettings.FLAT_SHIPPING_FEE

    @classmethod
    def from_settings(cls, settings) -> "PricingRules":
        """Build rules from application Settings"""
        return cls(
            gst_rate=to_decimal(settings.gst_rate),
            min_order_for_free_shipping=to_decimal(settings.min_order_for_free_shipping),
            flat_shipping_fee=to_decimal(settings.flat_shipping_fee),
        )


DEFAULT_PRICING_RULES = PricingRules()


def calculate_shipping(subtotal: Decimal, rules: PricingRules = DEFAULT_PRICING_RULES) -> Decimal:
    """Flat fee for a non-empty order below the free-shipping threshold, else zero"""
    if ZERO < subtotal < rules.min_order_for_free_shipping:
        return rules.flat_shipping_fee
    return ZERO


def compute_totals(
    items: Iterable[CartLineItem],
    rules: PricingRules = DEFAULT_PRICING_RULES,
    discount: Amount = ZERO,
) -> CartTotals:
    """Compute item count, subtotal, tax, shipping, discount and grand total"""
    subtotal = ZERO
    total_items = 0
    for item in items:
        subtotal += item.price * item.quantity
        total_items += item.quantity

    tax = round_currency(subtotal * rules.gst_rate)
    shipping = calculate_shipping(subtotal, rules)
    discount = to_decimal(discount)

    return CartTotals(
        total_items=total_items,
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        total_amount=subtotal + tax + shipping - discount,
    )
