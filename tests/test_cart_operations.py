"""
Tests for the pure cart functions
"""

from decimal import Decimal

from storefront.cart.operations import (
    add_to_cart,
    build_cart_view,
    compute_totals,
    decrement_quantity,
    increment_quantity,
    line_total,
    remove_from_cart,
    remove_ordered,
    set_quantity,
)
from storefront.cart.schemas import CartItem

from .conftest import make_book


class TestAddToCart:
    def test_distinct_books_get_one_item_each(self):
        books = [make_book(str(i), 5.0) for i in range(5)]
        cart = []
        for book in books:
            cart = add_to_cart(cart, book)

        assert [item.id for item in cart] == ["0", "1", "2", "3", "4"]
        assert all(item.quantity == 1 for item in cart)

    def test_adding_same_book_twice_bumps_quantity(self, book_a, book_b):
        cart = add_to_cart([], book_b)
        cart = add_to_cart(add_to_cart(cart, book_a), book_a)

        assert len(cart) == 2
        assert cart[1].id == "a"
        assert cart[1].quantity == 2
        assert cart[0] == CartItem(**book_b.model_dump(), quantity=1)

    def test_does_not_mutate_input(self, book_a):
        original = add_to_cart([], book_a)
        snapshot = [item.model_copy() for item in original]

        add_to_cart(original, book_a)
        add_to_cart(original, make_book("other", 1.0))

        assert original == snapshot

    def test_keeps_price_of_first_add(self, book_a):
        cart = add_to_cart([], book_a)
        repriced = book_a.model_copy(update={"price": 99.0})

        cart = add_to_cart(cart, repriced)

        assert cart[0].price == 10.00
        assert cart[0].quantity == 2

    def test_adding_a_cart_item_starts_at_one(self, book_a):
        item = CartItem(**book_a.model_dump(), quantity=4)

        cart = add_to_cart([], item)

        assert cart[0].quantity == 1


class TestQuantity:
    def test_set_quantity_only_touches_target(self, book_a, book_b):
        cart = add_to_cart(add_to_cart([], book_a), book_b)

        cart = set_quantity(cart, "b", 5)

        assert [(i.id, i.quantity) for i in cart] == [("a", 1), ("b", 5)]

    def test_set_quantity_never_goes_below_one(self, book_a):
        cart = add_to_cart([], book_a)

        assert set_quantity(cart, "a", 0)[0].quantity == 1
        assert set_quantity(cart, "a", -3)[0].quantity == 1

    def test_decrement_stops_at_one(self, book_a):
        cart = add_to_cart(add_to_cart([], book_a), book_a)

        cart = decrement_quantity(cart, "a")
        assert cart[0].quantity == 1
        cart = decrement_quantity(cart, "a")
        assert cart[0].quantity == 1

    def test_increment(self, book_a):
        cart = increment_quantity(add_to_cart([], book_a), "a")
        assert cart[0].quantity == 2

    def test_unknown_id_is_ignored(self, book_a):
        cart = add_to_cart([], book_a)

        assert increment_quantity(cart, "nope") == cart
        assert decrement_quantity(cart, "nope") == cart
        assert set_quantity(cart, "nope", 3) == cart


class TestRemove:
    def test_remove_is_idempotent(self, book_a, book_b):
        cart = add_to_cart(add_to_cart([], book_a), book_b)

        once = remove_from_cart(cart, "a")
        twice = remove_from_cart(once, "a")

        assert [i.id for i in once] == ["b"]
        assert twice == once

    def test_remove_unknown_id(self, book_a):
        cart = add_to_cart([], book_a)
        assert remove_from_cart(cart, "zzz") == cart


    def test_remove_ordered_leaves_later_additions(self, book_a, book_b, dune):
        cart = add_to_cart(add_to_cart(add_to_cart([], book_a), book_a), book_b)
        cart = add_to_cart(add_to_cart(cart, book_a), dune)

        remaining = remove_ordered(cart, {"a": 2, "b": 1})

        assert [(i.id, i.quantity) for i in remaining] == [("a", 1), ("dune", 1)]
        assert remove_ordered(remaining, {}) == remaining


class TestTotals:
    def test_example_totals(self):
        cart = [
            CartItem(**make_book("x", 19.99).model_dump(), quantity=2),
            CartItem(**make_book("y", 5.00).model_dump(), quantity=1),
        ]

        totals = compute_totals(cart)

        assert totals.subtotal == 44.98
        assert totals.tax == 3.15
        assert totals.total == 48.13
        assert totals.item_count == 3

    def test_shopping_scenario(self, book_a, book_b):
        cart = add_to_cart(add_to_cart(add_to_cart([], book_a), book_a), book_b)

        assert [line_total(i) for i in cart] == [20.00, 7.50]
        totals = compute_totals(cart)
        assert (totals.subtotal, totals.tax, totals.total) == (27.50, 1.93, 29.43)

    def test_half_cent_rounds_up(self):
        # 1.50 * 0.07 = 0.105
        cart = [CartItem(**make_book("x", 1.50).model_dump(), quantity=1)]
        totals = compute_totals(cart)
        assert totals.tax == 0.11
        assert totals.total == 1.61

    def test_empty_cart(self):
        totals = compute_totals([])
        assert (totals.subtotal, totals.tax, totals.total, totals.item_count) == (0, 0, 0, 0)

    def test_custom_tax_rate(self, book_a):
        totals = compute_totals(add_to_cart([], book_a), tax_rate=Decimal("0.2"))
        assert totals.tax == 2.00
        assert totals.total == 12.00

    def test_cart_view(self, book_a, book_b):
        cart = add_to_cart(add_to_cart(add_to_cart([], book_a), book_a), book_b)

        view = build_cart_view(cart)

        assert [(line.id, line.quantity, line.line_total) for line in view.items] == [
            ("a", 2, 20.00),
            ("b", 1, 7.50),
        ]
        assert view.total == 29.43
        assert view.item_count == 3
