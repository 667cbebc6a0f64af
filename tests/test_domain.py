"""
Domain Layer Tests - Value Objects, Entities, Totals and Reducer
"""

from decimal import Decimal

import pytest

from shop_cart.domain.entities.cart_entity import CartLineItem, CartState, CartTotals
from shop_cart.domain.entities.product_entity import Product
from shop_cart.domain.services.cart_actions import (
    AddItem,
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
    PricingRules,
    calculate_shipping,
    compute_totals,
)
from shop_cart.domain.value_objects.money import round_currency, to_decimal
from shop_cart.domain.value_objects.product_id import ProductId
from shop_cart.domain.value_objects.user_id import UserId


class TestValueObjects:
    """Test domain value objects validation and behavior"""

    def test_product_id_valid(self):
        """Test valid ProductId creation"""
        pid = ProductId("  whey  ")
        assert pid.value == "whey"
        assert str(pid) == "whey"
        assert pid == ProductId("whey")

    def test_product_id_invalid(self):
        """Test invalid ProductId values"""
        for value in ["", "   ", None, 42]:
            with pytest.raises(ValueError):
                ProductId(value)

    def test_user_id_invalid(self):
        with pytest.raises(ValueError):
            UserId("")

    def test_to_decimal_avoids_float_artefacts(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal("149.50") == Decimal("149.50")

    def test_to_decimal_rejects_bad_input(self):
        with pytest.raises(ValueError):
            to_decimal(True)
        with pytest.raises(ValueError):
            to_decimal("abc")

    def test_round_currency_half_up(self):
        """Test half-up rounding to 2 places"""
        assert round_currency("2.345") == Decimal("2.35")
        assert round_currency(Decimal("0.005")) == Decimal("0.01")
        assert round_currency(Decimal("0.004")) == Decimal("0.00")


class TestEntities:
    """Test product and cart entities"""

    def test_product_price_normalised(self):
        product = Product(id="p1", name="Oats", price="99.90", images=["a.jpg", "b.jpg"], inventory=3)
        assert product.price == Decimal("99.90")
        assert product.primary_image == "a.jpg"
        assert product.in_stock is True

    def test_product_without_inventory_is_not_in_stock(self):
        assert Product(id="p1", name="Oats", price="1").in_stock is False
        assert Product(id="p1", name="Oats", price="1", inventory=0).in_stock is False

    def test_product_negative_price(self):
        with pytest.raises(ValueError):
            Product(id="p1", name="Oats", price="-1")

    def test_line_item_requires_integer_quantity(self, make_item):
        with pytest.raises(ValueError):
            make_item(quantity=1.5)
        with pytest.raises(ValueError):
            make_item(quantity=True)

    def test_line_item_dict_conversion(self, make_item):
        item = make_item(quantity=3, price="12.50", image="x.jpg", added_at=1700000000000)
        data = item.to_dict()
        assert data["price"] == "12.50"
        assert CartLineItem.from_dict(data) == item
        assert item.line_total == Decimal("37.50")

    def test_state_helpers(self, make_item):
        state = CartState(items=(make_item("a"), make_item("b", quantity=2)))
        assert state.find_item("b").quantity == 2
        assert state.find_item("c") is None
        assert set(state.item_map()) == {"a", "b"}
        assert not state.is_empty
        assert CartState.empty().is_empty


class TestTotalsCalculator:
    """Test totals computation"""

    def test_free_shipping_scenario(self, make_item):
        """1000 x 2 is above the free-shipping threshold"""
        totals = compute_totals([make_item(quantity=2, price="1000")])
        assert totals.total_items == 2
        assert totals.subtotal == Decimal("2000")
        assert totals.tax == Decimal("360.00")
        assert totals.shipping == Decimal("0")
        assert totals.total_amount == Decimal("2360.00")

    def test_flat_shipping_scenario(self, make_item):
        """300 x 1 pays the flat fee"""
        totals = compute_totals([make_item(quantity=1, price="300")])
        assert totals.subtotal == Decimal("300")
        assert totals.tax == Decimal("54.00")
        assert totals.shipping == Decimal("50")
        assert totals.total_amount == Decimal("404.00")

    def test_empty_cart_is_all_zero(self):
        assert compute_totals([]) == CartTotals.empty()

    def test_shipping_dual_zero(self):
        assert calculate_shipping(Decimal("0")) == Decimal("0")
        assert calculate_shipping(Decimal("999")) == Decimal("0")
        assert calculate_shipping(Decimal("998.99")) == Decimal("50")

    def test_tax_rounding(self, make_item):
        totals = compute_totals([make_item(quantity=1, price="0.25")])
        # 0.25 * 0.18 = 0.045 -> 0.05
        assert totals.tax == Decimal("0.05")

    def test_discount_is_subtracted(self, make_item):
        totals = compute_totals([make_item(quantity=1, price="300")], discount="20")
        assert totals.discount == Decimal("20")
        assert totals.total_amount == Decimal("384.00")

    def test_custom_rules(self, make_item):
        rules = PricingRules(
            gst_rate=Decimal("0.05"),
            min_order_for_free_shipping=Decimal("100"),
            flat_shipping_fee=Decimal("10"),
        )
        totals = compute_totals([make_item(quantity=1, price="50")], rules)
        assert totals.tax == Decimal("2.50")
        assert totals.shipping == Decimal("10")

    def test_pure_and_deterministic(self, make_item):
        items = [make_item("a", 2, "10.10"), make_item("b", 1, "7.77")]
        assert compute_totals(items) == compute_totals(list(items))

    def test_total_not_below_subtotal(self, make_item):
        totals = compute_totals([make_item(quantity=1, price="1")])
        assert totals.total_amount >= totals.subtotal


class TestCartReducer:
    """Test state transitions"""

    def test_add_new_item(self, make_item):
        state = cart_reducer(CartState.empty(), AddItem(make_item(quantity=2)), now=1000)
        assert len(state.items) == 1
        assert state.totals.subtotal == Decimal("2000")
        assert state.last_updated == 1000

    def test_add_existing_item_accumulates(self, make_item):
        """2 + 3 of the same product gives one line of 5"""
        state = cart_reducer(CartState.empty(), AddItem(make_item(quantity=2)))
        state = cart_reducer(state, AddItem(make_item(quantity=3, name="Renamed", price="1")))
        assert len(state.items) == 1
        line = state.items[0]
        assert line.quantity == 5
        # First-seen snapshot is kept
        assert line.name == "Whey"
        assert line.price == Decimal("1000")

    def test_product_ids_stay_unique(self, make_item):
        state = CartState.empty()
        for product_id in ["a", "b", "a", "c", "b"]:
            state = cart_reducer(state, AddItem(make_item(product_id)))
        assert [item.product_id for item in state.items] == ["a", "b", "c"]
        assert state.totals.total_items == 5

    def test_update_absent_item_is_noop(self, make_item):
        state = cart_reducer(CartState.empty(), AddItem(make_item()))
        assert cart_reducer(state, UpdateItem("missing", {"quantity": 3})) is state

    def test_update_merges_changes(self, make_item):
        state = cart_reducer(CartState.empty(), AddItem(make_item(quantity=1)))
        state = cart_reducer(state, UpdateItem("whey", {"quantity": 4, "price": Decimal("900")}))
        assert state.items[0].quantity == 4
        assert state.totals.subtotal == Decimal("3600")

    def test_update_to_zero_removes_line(self, make_item):
        state = cart_reducer(CartState.empty(), AddItem(make_item()))
        state = cart_reducer(state, UpdateItem("whey", {"quantity": 0}))
        assert state.items == ()
        assert state.totals == CartTotals.empty()

    def test_update_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            UpdateItem("whey", {"product_id": "other"})

    def test_remove_item(self, make_item):
        state = cart_reducer(CartState.empty(), AddItem(make_item("a")))
        state = cart_reducer(state, AddItem(make_item("b")))
        state = cart_reducer(state, RemoveItem("a"))
        assert [item.product_id for item in state.items] == ["b"]

    def test_clear_touches_last_updated(self, make_item):
        state = cart_reducer(CartState.empty(), AddItem(make_item()), now=5000)
        cleared = cart_reducer(state, ClearCart(), now=5000)
        assert cleared.items == ()
        assert cleared.totals == CartTotals.empty()
        assert cleared.last_updated == 5001

    def test_last_updated_strictly_increases(self, make_item):
        state = CartState.empty()
        stamps = []
        for _ in range(3):
            state = cart_reducer(state, AddItem(make_item()), now=42)
            stamps.append(state.last_updated)
        assert stamps == [42, 43, 44]

    def test_set_cart_replaces_and_keeps_error(self, make_item):
        state = cart_reducer(CartState.empty(), SetError("Failed to sync cart"))
        state = cart_reducer(state, SetLoading(True))
        state = cart_reducer(state, SetCart((make_item("a", 1), make_item("a", 2), make_item("b"))))
        assert state.loading is False
        assert state.error == "Failed to sync cart"
        assert [(i.product_id, i.quantity) for i in state.items] == [("a", 3), ("b", 1)]

    def test_flags_and_errors(self):
        state = cart_reducer(CartState.empty(), SetLoading(True))
        state = cart_reducer(state, SetSyncing(True))
        assert state.loading and state.syncing
        state = cart_reducer(state, SetError("boom"))
        assert state.error == "boom"
        assert not state.loading and not state.syncing
        state = cart_reducer(state, ClearError())
        assert state.error is None

    def test_subtotal_grows_with_added_items(self, make_item):
        state = CartState.empty()
        previous = state.totals.subtotal
        for product_id, price in [("a", "10"), ("b", "0"), ("a", "10"), ("c", "3.5")]:
            state = cart_reducer(state, AddItem(make_item(product_id, price=price)))
            assert state.totals.subtotal >= previous
            previous = state.totals.subtotal

    def test_input_state_is_not_mutated(self, make_item):
        original = CartState.empty()
        cart_reducer(original, AddItem(make_item()))
        assert original.items == ()
        assert original.last_updated is None
