"""
Tests for the cart engine.
"""
import pytest

from paradise_pos.models.cart import DiscountType
from paradise_pos.services import cart_engine as engine


class TestAddLine:
    """Adding products to the cart."""

    def test_new_line_prices_quantity(self, cart_of_two):
        line = cart_of_two.items[0]
        assert line.quantity == 2
        assert line.discount == 0
        assert line.subtotal == pytest.approx(200.0)
        assert line.total == pytest.approx(200.0)
        assert cart_of_two.subtotal == pytest.approx(200.0)
        assert cart_of_two.total == pytest.approx(200.0)

    def test_repeated_add_increments_existing_line(self, cart_of_two, make_product):
        state = engine.add_line(cart_of_two, make_product("P1", 100.0), 3)
        assert len(state.items) == 1
        assert state.items[0].quantity == 5
        assert state.subtotal == pytest.approx(500.0)

    def test_default_quantity_is_one(self, empty_cart, make_product):
        state = engine.add_line(empty_cart, make_product("P2", 12.5))
        assert state.items[0].quantity == 1

    def test_lines_keep_insertion_order(self, empty_cart, make_product):
        state = engine.add_line(empty_cart, make_product("B", 1.0))
        state = engine.add_line(state, make_product("A", 1.0))
        state = engine.add_line(state, make_product("B", 1.0))
        assert [line.product.id for line in state.items] == ["B", "A"]

    def test_input_state_is_not_mutated(self, cart_of_two, make_product):
        before = cart_of_two.model_dump()
        engine.add_line(cart_of_two, make_product("P1", 100.0), 1)
        engine.add_line(cart_of_two, make_product("P9", 5.0), 1)
        engine.set_line_discount(cart_of_two, "P1", 50)
        assert cart_of_two.model_dump() == before


class TestQuantity:
    """Quantity updates and removal."""

    def test_update_sets_quantity(self, cart_of_two):
        state = engine.update_line_quantity(cart_of_two, "P1", 7)
        assert state.items[0].quantity == 7
        assert state.subtotal == pytest.approx(700.0)

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_zero_or_negative_removes_line(self, cart_of_two, quantity):
        state = engine.update_line_quantity(cart_of_two, "P1", quantity)
        assert state.items == []
        assert state.subtotal == 0
        assert state.total == 0

    def test_unknown_product_is_noop(self, cart_of_two):
        state = engine.update_line_quantity(cart_of_two, "missing", 3)
        assert state.model_dump() == cart_of_two.model_dump()

    def test_remove_line(self, cart_of_two, make_product):
        state = engine.add_line(cart_of_two, make_product("P2", 10.0), 1)
        state = engine.remove_line(state, "P1")
        assert [line.product.id for line in state.items] == ["P2"]
        assert state.subtotal == pytest.approx(10.0)

    def test_remove_unknown_line_is_noop(self, cart_of_two):
        state = engine.remove_line(cart_of_two, "missing")
        assert state.model_dump() == cart_of_two.model_dump()

    def test_subtotal_matches_surviving_lines(self, empty_cart, make_product):
        state = engine.add_line(empty_cart, make_product("A", 19.99), 3)
        state = engine.add_line(state, make_product("B", 5.25), 2)
        state = engine.add_line(state, make_product("C", 100.0), 1)
        state = engine.set_line_discount(state, "B", 20)
        state = engine.update_line_quantity(state, "A", 1)
        state = engine.remove_line(state, "C")
        state = engine.add_line(state, make_product("A", 19.99), 4)

        expected = sum(
            line.product.price * line.quantity * (1 - line.discount / 100)
            for line in state.items
        )
        assert state.subtotal == pytest.approx(expected)


class TestLineDiscount:
    """Per-line percentage discounts."""

    def test_half_off_line(self, cart_of_two):
        state = engine.set_line_discount(cart_of_two, "P1", 50)
        line = state.items[0]
        assert line.discount_amount == pytest.approx(100.0)
        assert line.total == pytest.approx(100.0)
        assert state.subtotal == pytest.approx(100.0)

    @pytest.mark.parametrize("given, stored", [(150, 100), (-10, 0), (33.3, 33.3)])
    def test_discount_is_clamped(self, cart_of_two, given, stored):
        state = engine.set_line_discount(cart_of_two, "P1", given)
        assert state.items[0].discount == pytest.approx(stored)

    @pytest.mark.parametrize("discount", [0, 12.5, 100, 250, -3])
    def test_remove_discount_always_resets_to_zero(self, cart_of_two, discount):
        state = engine.set_line_discount(cart_of_two, "P1", discount)
        state = engine.remove_line_discount(state, "P1")
        assert state.items[0].discount == 0
        assert state.subtotal == pytest.approx(200.0)


class TestCartDiscountAndTax:
    """Cart-level discount, tax and the grand total."""

    def test_tax_is_charged_on_discounted_amount(self, empty_cart, make_product):
        state = engine.add_line(empty_cart, make_product("P1", 1000.0), 1)
        state = engine.set_cart_discount(state, DiscountType.PERCENTAGE, 10)
        state = engine.set_tax_rate(state, 10)
        assert state.subtotal == pytest.approx(1000.0)
        assert state.discount_amount == pytest.approx(100.0)
        assert state.tax_amount == pytest.approx(90.0)
        assert state.total == pytest.approx(990.0)

    def test_percentage_discount_then_tax(self, cart_of_two):
        state = engine.set_line_discount(cart_of_two, "P1", 50)
        state = engine.set_cart_discount(state, DiscountType.PERCENTAGE, 10)
        assert state.discount_amount == pytest.approx(10.0)
        assert state.subtotal - state.discount_amount == pytest.approx(90.0)

        state = engine.set_tax_rate(state, 8)
        assert state.tax_amount == pytest.approx(7.2)
        assert state.total == pytest.approx(97.2)

    def test_fixed_discount_taken_verbatim(self, cart_of_two):
        state = engine.set_cart_discount(cart_of_two, "fixed", 25)
        assert state.discount_type == DiscountType.FIXED
        assert state.discount_amount == pytest.approx(25.0)
        assert state.total == pytest.approx(175.0)

    def test_negative_cart_discount_is_floored(self, cart_of_two):
        state = engine.set_cart_discount(cart_of_two, DiscountType.FIXED, -40)
        assert state.discount_value == 0
        assert state.total == pytest.approx(200.0)

    def test_fixed_discount_above_subtotal_floors_total_only(self, cart_of_two):
        # The net amount and the tax go negative; only the total is floored.
        state = engine.set_tax_rate(cart_of_two, 10)
        state = engine.set_cart_discount(state, DiscountType.FIXED, 1_000_000)
        assert state.discount_amount == pytest.approx(1_000_000)
        assert state.tax_amount == pytest.approx((200 - 1_000_000) * 0.10)
        assert state.total == 0

    def test_remove_cart_discount(self, cart_of_two):
        state = engine.set_cart_discount(cart_of_two, DiscountType.FIXED, 50)
        state = engine.remove_cart_discount(state)
        assert state.discount_type == DiscountType.PERCENTAGE
        assert state.discount_value == 0
        assert state.total == pytest.approx(200.0)

    def test_tax_rate_above_hundred_passes_through(self, cart_of_two):
        state = engine.set_tax_rate(cart_of_two, 150)
        assert state.tax_rate == 150
        assert state.tax_amount == pytest.approx(300.0)
        assert state.total == pytest.approx(500.0)

    def test_recalculate_reproduces_totals(self, cart_of_two):
        state = engine.set_line_discount(cart_of_two, "P1", 15)
        state = engine.set_cart_discount(state, DiscountType.FIXED, 5)
        state = engine.set_tax_rate(state, 12)
        assert engine.recalculate(state).model_dump() == state.model_dump()


class TestMetadata:
    """Operations that do not touch totals."""

    def test_customer_attach_and_detach(self, cart_of_two):
        state = engine.set_customer(cart_of_two, "CU-1", "Amaya")
        assert engine.customer(state) == {"id": "CU-1", "name": "Amaya"}
        assert engine.is_loyalty_pricing_active(state)
        assert state.total == cart_of_two.total

        state = engine.remove_customer(state)
        assert engine.customer(state) is None
        assert not engine.is_loyalty_pricing_active(state)

    def test_notes(self, cart_of_two):
        state = engine.set_notes(cart_of_two, "gift wrap")
        state = engine.set_line_notes(state, "P1", "blue one")
        assert state.notes == "gift wrap"
        assert state.items[0].notes == "blue one"
        assert state.total == cart_of_two.total

    def test_clear_resets_tax_rate(self, cart_of_two):
        state = engine.set_tax_rate(cart_of_two, 8)
        state = engine.set_customer(state, "CU-1", "Amaya")
        state = engine.clear_cart(state)
        assert state.model_dump() == engine.initial_state().model_dump()
        assert state.tax_rate == 0


class TestCheckoutFlags:
    """Processing flag transitions."""

    def test_begin_then_fail_restores_cart(self, cart_of_two):
        state = engine.set_tax_rate(cart_of_two, 8)
        processing = engine.begin_checkout(state)
        assert processing.is_processing
        assert not engine.can_checkout(processing)

        failed = engine.checkout_failed(processing, "declined")
        assert failed.is_processing is False
        assert failed.model_dump() == state.model_dump()

    def test_engine_does_not_block_mutation_while_processing(self, cart_of_two, make_product):
        state = engine.begin_checkout(cart_of_two)
        state = engine.add_line(state, make_product("P2", 1.0), 1)
        assert len(state.items) == 2

    def test_success_returns_empty_cart(self, cart_of_two):
        state = engine.checkout_succeeded(engine.begin_checkout(cart_of_two), "TXN1")
        assert engine.is_empty(state)
        assert state.is_processing is False


class TestHeldRestore:
    """Rebuilding a cart from a held snapshot."""

    def test_restore_reproduces_totals_and_pricing_fields(self, empty_cart, make_product):
        state = engine.add_line(empty_cart, make_product("A", 40.0), 2)
        state = engine.add_line(state, make_product("B", 15.0), 3)
        state = engine.set_line_discount(state, "B", 10)
        state = engine.set_line_notes(state, "A", "no bag")
        state = engine.set_cart_discount(state, DiscountType.FIXED, 7.5)
        state = engine.set_tax_rate(state, 8)
        state = engine.set_customer(state, "CU-9", "Kasun")
        state = engine.set_notes(state, "call back")

        restored = engine.restore_held_cart(state)

        for field in ("subtotal", "discount_amount", "tax_amount", "total"):
            assert getattr(restored, field) == pytest.approx(getattr(state, field))
        assert restored.discount_type == DiscountType.FIXED
        assert restored.tax_rate == 8
        assert restored.customer_id == "CU-9"
        assert restored.notes == "call back"
        assert engine.find_line(restored, "B").discount == 10
        assert engine.find_line(restored, "A").notes == "no bag"

    def test_restored_cart_is_not_processing(self, cart_of_two):
        restored = engine.recall_cart(engine.initial_state(), engine.begin_checkout(cart_of_two))
        assert restored.is_processing is False
        assert restored.total == pytest.approx(200.0)

    def test_recall_merges_into_current_lines(self, cart_of_two, make_product):
        held = engine.add_line(engine.initial_state(), make_product("P1", 100.0), 1)
        held = engine.add_line(held, make_product("P3", 20.0), 2)
        held = engine.set_line_discount(held, "P3", 50)

        current = engine.add_line(cart_of_two, make_product("P2", 5.0), 1)
        merged = engine.recall_cart(current, held)

        assert [(line.product.id, line.quantity) for line in merged.items] == [
            ("P1", 3),
            ("P2", 1),
            ("P3", 2),
        ]
        assert engine.find_line(merged, "P3").discount == 50
        assert merged.subtotal == pytest.approx(300.0 + 5.0 + 20.0)
        assert current.subtotal == pytest.approx(205.0)


class TestAccessors:
    """Read-side helpers."""

    def test_counts_and_summary(self, cart_of_two, make_product):
        state = engine.add_line(cart_of_two, make_product("P2", 3.0), 4)
        assert engine.item_count(state) == 6
        assert engine.line_quantity(state, "P2") == 4
        assert engine.line_quantity(state, "missing") == 0
        assert engine.can_checkout(state)

        summary = engine.cart_summary(state)
        assert summary.item_count == 6
        assert summary.total == pytest.approx(212.0)
        assert summary.is_loyalty_pricing_active is False

    def test_empty_cart_cannot_checkout(self, empty_cart):
        assert engine.is_empty(empty_cart)
        assert not engine.can_checkout(empty_cart)
