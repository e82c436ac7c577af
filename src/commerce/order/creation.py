"""Order placement — command and handler."""

import json
from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from commerce import settings
from commerce.domain import commerce
from commerce.order.estimates import current_estimator
from commerce.order.order import Order
from commerce.order.queries import next_order_number

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class PlaceOrder:
    customer = Text(required=True)  # JSON: customer info dict
    items = Text(required=True)  # JSON: list of item dicts
    payment_method = String(max_length=20)
    notes = Text()


@commerce.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        customer = json.loads(command.customer) if isinstance(command.customer, str) else command.customer
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        order = Order.place(
            customer=customer,
            items_data=items_data,
            tier=settings.delivery_tier(),
            estimator=current_estimator(),
            payment_method=command.payment_method or settings.default_payment_method(),
            notes=command.notes,
            order_number=next_order_number(datetime.now(UTC)),
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(order.items),
            total=order.total,
            payment_method=order.payment_method,
        )
        return str(order.id)
