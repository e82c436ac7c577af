"""Administrator-side status updates with a single-flight guard.

Requests go to the order handlers as they are. Whether an order may be
shipped without a new tracking number depends on the tracking number it
already carries, so only the handlers can decide.
"""

import json
from collections.abc import Callable, Iterable

import structlog
from protean.utils.globals import current_domain

from commerce.exceptions import BulkOperationError
from commerce.order.status import BulkUpdateOrderStatus, UpdateOrderStatus
from commerce.shared.single_flight import SingleFlight

logger = structlog.get_logger(__name__)


def process_command(command):
    return current_domain.process(command, asynchronous=False)


class OrderStatusUpdater:
    def __init__(self, transport: Callable | None = None) -> None:
        self._transport = transport or process_command
        self._flight = SingleFlight("Status update")

    @property
    def updating(self) -> bool:
        return self._flight.active

    def update_status(self, order_id: str, status: str, tracking_number: str | None = None):
        with self._flight.claim():
            return self._transport(
                UpdateOrderStatus(order_id=order_id, status=status, tracking_number=tracking_number)
            )

    def bulk_update(self, order_ids: Iterable[str], status: str, tracking_number: str | None = None):
        """Move every selected order to ``status``, or none of them."""
        order_ids = [str(order_id) for order_id in order_ids]
        if not order_ids:
            raise BulkOperationError("Select at least one order")
        with self._flight.claim():
            result = self._transport(
                BulkUpdateOrderStatus(
                    order_ids=json.dumps(order_ids),
                    status=status,
                    tracking_number=tracking_number,
                )
            )
        logger.info("Bulk status update sent", order_count=len(order_ids), status=status)
        return result
