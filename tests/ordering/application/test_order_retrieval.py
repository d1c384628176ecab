"""Application tests for reading orders: ownership, listing, price snapshots."""

from decimal import Decimal

import pytest
from catalogue.product.management import update_product
from ordering.order.placement import OrderLine, place_order
from ordering.order.retrieval import get_order, list_customer_orders
from shared.errors import Forbidden, OrderNotFound


@pytest.fixture()
def placed(seed, uow):
    customer = seed.customer(email="a@example.com")
    product = seed.product(price="10.00", stock=10)
    order = place_order(uow, customer.id, [OrderLine(product.id, 2)])
    return customer, product, order


class TestGetOrder:
    def test_owner_reads_order_with_items(self, uow, placed):
        customer, product, order = placed
        loaded = get_order(uow, order.id, customer.id)
        assert loaded.id == order.id
        assert [(item.product_id, item.quantity) for item in loaded.items] == [(product.id, 2)]

    def test_other_customer_is_forbidden(self, seed, uow, placed):
        _, _, order = placed
        other = seed.customer(email="b@example.com")
        with pytest.raises(Forbidden):
            get_order(uow, order.id, other.id)

    def test_admin_reads_any_order(self, uow, placed):
        _, _, order = placed
        assert get_order(uow, order.id, None, is_admin=True).id == order.id

    def test_unknown_order(self, uow, placed):
        customer, _, _ = placed
        with pytest.raises(OrderNotFound):
            get_order(uow, "missing", customer.id)


class TestPriceSnapshot:
    def test_repricing_does_not_change_placed_items(self, uow, placed):
        customer, product, order = placed
        update_product(uow, product.id, price=Decimal("99.99"))

        loaded = get_order(uow, order.id, customer.id)
        assert loaded.items[0].unit_price == Decimal("10.00")
        assert loaded.total_amount == Decimal("20.00")


class TestListCustomerOrders:
    def test_newest_first_with_items(self, seed, uow):
        customer = seed.customer()
        product = seed.product(stock=10)
        first = place_order(uow, customer.id, [OrderLine(product.id, 1)])
        second = place_order(uow, customer.id, [OrderLine(product.id, 2)])

        orders = list_customer_orders(uow, customer.id)
        assert [order.id for order in orders] == [second.id, first.id]
        assert [order.items[0].quantity for order in orders] == [2, 1]

    def test_only_own_orders(self, seed, uow, placed):
        other = seed.customer(email="b@example.com")
        assert list_customer_orders(uow, other.id) == []
