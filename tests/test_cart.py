from decimal import Decimal

import pytest

from storefront_checkout.models.product import Product
from storefront_checkout.services.cart import Cart, InvalidQuantityError


def _expected_total(cart: Cart) -> Decimal:
    return sum((line.price * line.cart_quantity for line in cart.lines), Decimal("0"))


class TestAddItem:
    def test_add_new_product_creates_line(self, cart, rice):
        line = cart.add_item(rice, 2)

        assert line.product_id == "p1"
        assert line.name == "Organic Red Rice"
        assert line.cart_quantity == 2
        assert cart.item_count == 1

    def test_add_existing_product_increments_quantity(self, cart, rice):
        cart.add_item(rice, 1)
        cart.add_item(rice, 3)

        assert cart.item_count == 1
        assert cart.get("p1").cart_quantity == 4

    def test_default_quantity_is_one(self, cart, rice):
        cart.add_item(rice)
        assert cart.get("p1").cart_quantity == 1

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
    def test_rejects_invalid_quantity(self, cart, rice, quantity):
        with pytest.raises(InvalidQuantityError):
            cart.add_item(rice, quantity)
        assert cart.is_empty

    def test_rejected_add_leaves_existing_line_untouched(self, cart, rice):
        cart.add_item(rice, 2)
        with pytest.raises(InvalidQuantityError):
            cart.add_item(rice, 0)
        assert cart.get("p1").cart_quantity == 2

    def test_lines_keep_insertion_order(self, cart, rice, treacle):
        cart.add_item(treacle)
        cart.add_item(rice)
        cart.add_item(treacle)

        assert [line.product_id for line in cart.lines] == ["p2", "p1"]


class TestRemoveItem:
    def test_remove_existing_line(self, cart, rice, treacle):
        cart.add_item(rice)
        cart.add_item(treacle)

        cart.remove_item("p1")

        assert "p1" not in cart
        assert cart.item_count == 1

    def test_remove_unknown_id_is_noop(self, cart, rice):
        cart.add_item(rice)
        cart.remove_item("missing")
        assert cart.item_count == 1


class TestUpdateQuantity:
    def test_sets_quantity(self, cart, rice):
        cart.add_item(rice)
        cart.update_quantity("p1", 5)
        assert cart.get("p1").cart_quantity == 5

    @pytest.mark.parametrize("quantity", [0, -1, -20])
    def test_zero_or_negative_removes_line(self, cart, rice, quantity):
        cart.add_item(rice, 3)
        assert cart.update_quantity("p1", quantity) is None
        assert "p1" not in cart

    def test_unknown_id_is_ignored(self, cart, rice):
        cart.add_item(rice)
        assert cart.update_quantity("missing", 4) is None
        assert cart.item_count == 1

    def test_stepper_down_to_zero_removes(self, cart, rice):
        cart.add_item(rice, 2)
        for _ in range(2):
            line = cart.get("p1")
            cart.update_quantity("p1", max(0, line.cart_quantity - 1))
        assert cart.is_empty


class TestTotal:
    def test_empty_cart_total_is_zero(self, cart):
        assert cart.total() == Decimal("0")

    def test_example_total(self, cart, rice):
        cart.add_item(rice, 2)
        assert cart.total() == Decimal("1000")

    def test_decimal_prices_sum_exactly(self, cart, treacle):
        cart.add_item(treacle, 3)
        assert cart.total() == Decimal("2551.50")

    def test_total_tracks_every_mutation(self, cart, rice, treacle):
        steps = [
            lambda: cart.add_item(rice, 2),
            lambda: cart.add_item(treacle, 1),
            lambda: cart.update_quantity("p2", 4),
            lambda: cart.add_item(rice, 1),
            lambda: cart.remove_item("p1"),
            lambda: cart.update_quantity("p2", 0),
            lambda: cart.add_item(Product(id="p3", name="Mat", price=3200), 1),
        ]
        for step in steps:
            step()
            assert cart.total() == _expected_total(cart)
        assert cart.total() == Decimal("3200")


class TestClearAndSnapshot:
    def test_clear_cart(self, cart, rice, treacle):
        cart.add_item(rice)
        cart.add_item(treacle)

        cart.clear_cart()

        assert cart.is_empty
        assert cart.total() == Decimal("0")

    def test_snapshot_is_unaffected_by_later_edits(self, cart, rice, treacle):
        cart.add_item(rice, 2)
        cart.add_item(treacle, 1)

        snapshot = cart.snapshot()
        cart.update_quantity("p1", 7)
        cart.remove_item("p2")

        assert snapshot.total == Decimal("1850.50")
        assert [(l.product_id, l.quantity) for l in snapshot.lines] == [("p1", 2), ("p2", 1)]
        assert snapshot.item_names == "Organic Red Rice, Kithul Treacle"

    def test_view_reports_count_and_total(self, cart, rice):
        cart.add_item(rice, 2)
        view = cart.to_view()

        assert view.item_count == 1
        assert view.total == Decimal("1000")
        assert view.model_dump(mode="json", by_alias=True)["items"][0]["cartQuantity"] == 2

    def test_remove_ordered_keeps_lines_added_after_snapshot(self, cart, rice, treacle):
        cart.add_item(rice, 2)
        snapshot = cart.snapshot()
        cart.add_item(treacle)
        cart.add_item(rice, 1)

        cart.remove_ordered(snapshot)

        assert cart.get("p1").cart_quantity == 1
        assert cart.get("p2").cart_quantity == 1

    def test_remove_ordered_drops_lines_reduced_since_snapshot(self, cart, rice):
        cart.add_item(rice, 3)
        snapshot = cart.snapshot()
        cart.update_quantity("p1", 1)

        cart.remove_ordered(snapshot)

        assert cart.is_empty
