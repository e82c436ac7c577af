"""Order status changes — single and bulk commands and their handler.

A bulk update is all-or-nothing: every order is loaded and checked before
any of them changes. One missing order or one failed precondition rejects the
whole batch with a single batch-level error. The unit of work around the
handler keeps the writes atomic.
"""

import json
from datetime import UTC, datetime

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.exceptions import BulkOperationError
from commerce.order.order import Order

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    tracking_number = String(max_length=255)


@commerce.command(part_of="Order")
class BulkUpdateOrderStatus:
    order_ids = Text(required=True)  # JSON: list of order ids
    status = String(required=True, max_length=20)
    tracking_number = String(max_length=255)


@commerce.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status
        order.update_status(command.status, tracking_number=command.tracking_number)
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )
        return str(order.id)

    @handle(BulkUpdateOrderStatus)
    def bulk_update_order_status(self, command):
        order_ids = json.loads(command.order_ids) if isinstance(command.order_ids, str) else command.order_ids
        order_ids = list(dict.fromkeys(str(order_id) for order_id in order_ids or ()))
        if not order_ids:
            raise ValidationError({"order_ids": ["Select at least one order"]})

        repo = current_domain.repository_for(Order)
        orders = []
        try:
            for order_id in order_ids:
                order = repo.get(order_id)
                order.check_status_change(command.status, tracking_number=command.tracking_number)
                orders.append(order)
        except (ObjectNotFoundError, ValidationError) as exc:
            logger.warning(
                "Bulk status update rejected",
                order_count=len(order_ids),
                status=command.status,
                error=str(exc),
            )
            raise BulkOperationError() from exc

        changed_at = datetime.now(UTC)
        for order in orders:
            order.update_status(command.status, tracking_number=command.tracking_number, changed_at=changed_at)
            repo.add(order)

        logger.info("Bulk status update applied", order_count=len(orders), status=command.status)
        return [str(order.id) for order in orders]
