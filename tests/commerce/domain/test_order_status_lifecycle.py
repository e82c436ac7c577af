"""Tests for permissive status changes, the shipped precondition, payment and cancellation."""

import pytest
from commerce.exceptions import TransitionPreconditionError
from commerce.order.estimates import DeliveryEstimator
from commerce.order.events import OrderCancelled, OrderStatusChanged, PaymentStatusChanged
from commerce.order.order import Order, OrderStatus, PaymentStatus
from commerce.shared.pricing import DeliveryTier
from protean.exceptions import ValidationError


def _make_order():
    order = Order.place(
        customer={
            "name": "Arjun Mehta",
            "phone": "9000011111",
            "address": "88 Ring Road",
            "city": "Pune",
            "pincode": "411001",
        },
        items_data=[
            {
                "product_id": "prod-tea",
                "product_name": "Assam Tea",
                "variant_id": "var-tea-1kg",
                "variant_size": "1kg",
                "price": 600.0,
                "quantity": 1,
            }
        ],
        tier=DeliveryTier(),
        estimator=DeliveryEstimator(window=(3, 3)),
    )
    order._events.clear()
    return order


class TestPermissiveTransitions:
    @pytest.mark.parametrize("source", [s for s in OrderStatus if s != OrderStatus.SHIPPED])
    @pytest.mark.parametrize("target", [s for s in OrderStatus if s != OrderStatus.SHIPPED])
    def test_any_status_to_any_status(self, source, target):
        order = _make_order()
        order.update_status(source.value)
        order.update_status(target.value)
        assert order.status == target.value

    def test_delivered_order_can_be_reopened(self):
        order = _make_order()
        order.update_status("delivered")
        order.update_status("processing")
        assert order.status == "processing"

    def test_unknown_status_is_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError) as exc_info:
            order.update_status("lost")
        assert "status" in exc_info.value.messages
        assert order.status == OrderStatus.CONFIRMED.value

    def test_change_raises_event(self):
        order = _make_order()
        order.update_status("processing")

        events = [e for e in order._events if isinstance(e, OrderStatusChanged)]
        assert len(events) == 1
        assert events[0].previous_status == "confirmed"
        assert events[0].new_status == "processing"

    def test_updated_at_moves(self):
        order = _make_order()
        placed_at = order.updated_at
        order.update_status("processing")
        assert order.updated_at >= placed_at


class TestShippedPrecondition:
    def test_shipping_without_tracking_number_fails(self):
        order = _make_order()
        with pytest.raises(TransitionPreconditionError) as exc_info:
            order.update_status("shipped")

        assert "tracking_number" in exc_info.value.messages
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.shipped_at is None

    def test_blank_tracking_number_fails(self):
        order = _make_order()
        with pytest.raises(TransitionPreconditionError):
            order.update_status("shipped", tracking_number="   ")

    def test_shipping_with_tracking_number(self):
        order = _make_order()
        order.update_status("shipped", tracking_number="DTDC-123")

        assert order.status == "shipped"
        assert order.tracking_number == "DTDC-123"
        assert order.shipped_at is not None

    def test_existing_tracking_number_satisfies_precondition(self):
        order = _make_order()
        order.update_status("shipped", tracking_number="DTDC-123")
        order.update_status("processing")
        order.update_status("shipped")
        assert order.status == "shipped"
        assert order.tracking_number == "DTDC-123"

    def test_overlong_tracking_number(self):
        order = _make_order()
        with pytest.raises(ValidationError) as exc_info:
            order.update_status("shipped", tracking_number="X" * 101)
        assert "tracking_number" in exc_info.value.messages

    def test_check_status_change_does_not_mutate(self):
        order = _make_order()
        assert order.check_status_change("shipped", "BD-1") == OrderStatus.SHIPPED
        assert order.status == "confirmed"
        assert order.tracking_number is None

    def test_delivered_records_actual_delivery(self):
        order = _make_order()
        order.update_status("delivered")
        assert order.actual_delivery is not None


class TestPaymentStatus:
    def test_payment_status_is_independent(self):
        order = _make_order()
        order.update_status("delivered")
        order.update_payment_status("paid")

        assert order.status == "delivered"
        assert order.payment_status == PaymentStatus.PAID.value

    def test_cancelled_order_can_be_refunded(self):
        order = _make_order()
        order.update_status("cancelled")
        order.update_payment_status("refunded")
        assert order.payment_status == "refunded"

    def test_unknown_payment_status(self):
        order = _make_order()
        with pytest.raises(ValidationError) as exc_info:
            order.update_payment_status("bounced")
        assert "payment_status" in exc_info.value.messages

    def test_raises_event(self):
        order = _make_order()
        order.update_payment_status("failed")
        events = [e for e in order._events if isinstance(e, PaymentStatusChanged)]
        assert events[0].previous_payment_status == "pending"
        assert events[0].new_payment_status == "failed"


class TestCancel:
    @pytest.mark.parametrize("status", ["pending", "confirmed", "processing"])
    def test_cancel_from_open_status(self, status):
        order = _make_order()
        order.update_status(status)
        order.cancel(reason="Ordered by mistake")

        assert order.status == "cancelled"
        assert order.cancellation_reason == "Ordered by mistake"
        assert any(isinstance(e, OrderCancelled) for e in order._events)

    def test_cancel_shipped_order(self):
        order = _make_order()
        order.update_status("shipped", tracking_number="BD-9")
        order.cancel()
        assert order.status == "cancelled"

    @pytest.mark.parametrize("status", ["delivered", "cancelled"])
    def test_terminal_orders_cannot_be_cancelled(self, status):
        order = _make_order()
        order.update_status(status)
        with pytest.raises(ValidationError) as exc_info:
            order.cancel()
        assert "status" in exc_info.value.messages
        assert order.status == status
