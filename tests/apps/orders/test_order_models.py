from decimal import Decimal

import pytest

from apps.orders.models import REPRICEABLE_STATUSES, Order, OrderStatus


class TestOrder:

    @pytest.mark.parametrize("order_status,expected", [
        (OrderStatus.PENDING_PAYMENT, True),
        (OrderStatus.ON_HOLD, True),
        (OrderStatus.PROCESSING, False),
        (OrderStatus.COMPLETED, False),
        (OrderStatus.CANCELLED, False),
        (OrderStatus.REFUNDED, False),
    ])
    def test_is_repriceable(self, order_status, expected):
        order = Order(order_number="T-1", status=order_status, total_amount=Decimal("10"))

        assert order.is_repriceable is expected

    def test_repriceable_statuses(self):
        assert set(REPRICEABLE_STATUSES) == {"pending_payment", "on_hold"}

    def test_str(self):
        order = Order(order_number="T-9", status=OrderStatus.ON_HOLD, total_amount=Decimal("10"))

        assert str(order) == "Order T-9 [On hold]"
