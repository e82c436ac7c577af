"""Application tests for the single-flight administrator status updater."""

import json

import pytest
from commerce.exceptions import BulkOperationError, TransitionPreconditionError
from commerce.order.administration import OrderStatusUpdater
from commerce.order.estimates import DeliveryEstimator
from commerce.order.order import Order
from commerce.order.status import BulkUpdateOrderStatus, UpdateOrderStatus
from commerce.shared.pricing import DeliveryTier
from protean import current_domain
from protean.exceptions import InvalidOperationError


def _create_order():
    order = Order.place(
        customer={
            "name": "Divya Menon",
            "phone": "9446012345",
            "address": "31 Canal Road",
            "city": "Alappuzha",
            "pincode": "688001",
        },
        items_data=[
            {
                "product_id": "prod-cashew",
                "product_name": "Cashew W240",
                "variant_id": "var-cashew-1kg",
                "variant_size": "1kg",
                "price": 1100.0,
                "quantity": 1,
            }
        ],
        tier=DeliveryTier(),
        estimator=DeliveryEstimator(),
    )
    current_domain.repository_for(Order).add(order)
    return str(order.id)


class TestOrderStatusUpdater:
    def test_single_update_through_domain(self):
        order_id = _create_order()
        OrderStatusUpdater().update_status(order_id, "shipped", tracking_number="IP-55")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "shipped"
        assert order.tracking_number == "IP-55"

    def test_bulk_update_through_domain(self):
        order_ids = [_create_order(), _create_order()]
        OrderStatusUpdater().bulk_update(order_ids, "processing")

        repo = current_domain.repository_for(Order)
        assert [repo.get(order_id).status for order_id in order_ids] == ["processing", "processing"]

    def test_shipping_reuses_tracking_number_already_on_order(self):
        order_id = _create_order()
        OrderStatusUpdater().update_status(order_id, "processing", tracking_number="IP-77")

        OrderStatusUpdater().update_status(order_id, "shipped")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "shipped"
        assert order.tracking_number == "IP-77"

    def test_shipping_request_is_sent_without_tracking_number(self):
        sent = []
        OrderStatusUpdater(transport=sent.append).update_status("order-1", "shipped")

        assert sent[0].status == "shipped"
        assert sent[0].tracking_number is None

    def test_shipping_without_any_tracking_is_rejected_by_the_order(self):
        order_id = _create_order()
        updater = OrderStatusUpdater()

        with pytest.raises(TransitionPreconditionError):
            updater.update_status(order_id, "shipped")
        assert not updater.updating
        assert current_domain.repository_for(Order).get(order_id).status == "confirmed"

    def test_bulk_shipping_relies_on_tracking_already_on_orders(self):
        tracked = _create_order()
        OrderStatusUpdater().update_status(tracked, "processing", tracking_number="IP-78")
        untracked = _create_order()

        with pytest.raises(BulkOperationError):
            OrderStatusUpdater().bulk_update([tracked, untracked], "shipped")

        repo = current_domain.repository_for(Order)
        assert [repo.get(tracked).status, repo.get(untracked).status] == ["processing", "confirmed"]

        OrderStatusUpdater().bulk_update([tracked], "shipped")
        assert repo.get(tracked).status == "shipped"

    def test_empty_bulk_selection(self):
        with pytest.raises(BulkOperationError):
            OrderStatusUpdater(transport=lambda command: None).bulk_update([], "processing")

    def test_bulk_sends_one_command(self):
        sent = []
        OrderStatusUpdater(transport=sent.append).bulk_update(["a", "b"], "delivered")

        assert len(sent) == 1
        assert isinstance(sent[0], BulkUpdateOrderStatus)
        assert json.loads(sent[0].order_ids) == ["a", "b"]

    def test_overlapping_update_is_rejected(self):
        seen = []

        def transport(command):
            seen.append(updater.updating)
            with pytest.raises(InvalidOperationError):
                updater.update_status("order-2", "processing")
            return "order-1"

        updater = OrderStatusUpdater(transport=transport)

        assert updater.update_status("order-1", "processing") == "order-1"
        assert seen == [True]
        assert not updater.updating

    def test_flag_cleared_after_failure(self):
        def transport(command):
            raise RuntimeError("backend down")

        updater = OrderStatusUpdater(transport=transport)
        with pytest.raises(RuntimeError):
            updater.update_status("order-1", "processing")
        assert not updater.updating

    def test_single_update_sends_command(self):
        sent = []
        OrderStatusUpdater(transport=sent.append).update_status("order-1", "delivered")
        assert isinstance(sent[0], UpdateOrderStatus)
        assert sent[0].status == "delivered"
