"""Application tests for all-or-nothing bulk status updates."""

import json

import pytest
from commerce.exceptions import BulkOperationError
from commerce.order.estimates import DeliveryEstimator
from commerce.order.order import Order
from commerce.order.status import BulkUpdateOrderStatus, UpdateOrderStatus
from commerce.shared.pricing import DeliveryTier
from protean import current_domain
from protean.exceptions import ValidationError


def _create_order(name="Farah Ali"):
    order = Order.place(
        customer={
            "name": name,
            "phone": "9988776655",
            "address": "5 Hill Road",
            "city": "Mumbai",
            "pincode": "400050",
        },
        items_data=[
            {
                "product_id": "prod-dates",
                "product_name": "Medjool Dates",
                "variant_id": "var-dates-500g",
                "variant_size": "500g",
                "price": 650.0,
                "quantity": 1,
            }
        ],
        tier=DeliveryTier(),
        estimator=DeliveryEstimator(),
    )
    current_domain.repository_for(Order).add(order)
    return str(order.id)


def _bulk(order_ids, status, tracking_number=None):
    command = BulkUpdateOrderStatus(
        order_ids=json.dumps(order_ids),
        status=status,
        tracking_number=tracking_number,
    )
    return current_domain.process(command, asynchronous=False)


def _statuses(order_ids):
    repo = current_domain.repository_for(Order)
    return [repo.get(order_id).status for order_id in order_ids]


class TestBulkUpdate:
    def test_all_orders_move(self):
        order_ids = [_create_order(), _create_order(), _create_order()]

        updated = _bulk(order_ids, "processing")

        assert sorted(updated) == sorted(order_ids)
        assert _statuses(order_ids) == ["processing"] * 3

    def test_shipping_batch_with_tracking_number(self):
        order_ids = [_create_order(), _create_order()]
        _bulk(order_ids, "shipped", tracking_number="BATCH-7")

        repo = current_domain.repository_for(Order)
        assert all(repo.get(order_id).tracking_number == "BATCH-7" for order_id in order_ids)

    def test_missing_order_rejects_whole_batch(self):
        order_ids = [_create_order(), _create_order()]

        with pytest.raises(BulkOperationError) as exc_info:
            _bulk([*order_ids, "missing-order"], "processing")

        assert list(exc_info.value.messages) == ["order_ids"]
        assert _statuses(order_ids) == ["confirmed", "confirmed"]

    def test_failed_precondition_rejects_whole_batch(self):
        tracked = _create_order()
        current_domain.process(
            UpdateOrderStatus(order_id=tracked, status="shipped", tracking_number="T-1"),
            asynchronous=False,
        )
        current_domain.process(UpdateOrderStatus(order_id=tracked, status="processing"), asynchronous=False)
        untracked = _create_order()

        with pytest.raises(BulkOperationError):
            _bulk([tracked, untracked], "shipped")

        assert _statuses([tracked, untracked]) == ["processing", "confirmed"]

    def test_batch_error_carries_no_per_order_detail(self):
        order_id = _create_order()
        with pytest.raises(BulkOperationError) as exc_info:
            _bulk([order_id, "missing-order"], "processing")

        assert "missing-order" not in json.dumps(exc_info.value.messages)

    def test_bulk_error_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            _bulk(["missing-order"], "processing")

    def test_duplicate_ids_updated_once(self):
        order_id = _create_order()
        assert _bulk([order_id, order_id], "processing") == [order_id]

    def test_empty_selection(self):
        with pytest.raises(ValidationError) as exc_info:
            _bulk([], "processing")
        assert "order_ids" in exc_info.value.messages
