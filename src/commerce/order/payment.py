"""Order payment status — command and handler.

Payment status moves independently of the order status; a delivered order
may still be awaiting payment and a cancelled one may be refunded.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.order.order import Order

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@commerce.command_handler(part_of=Order)
class PaymentStatusHandler:
    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_payment_status(command.payment_status)
        repo.add(order)

        logger.info("Payment status updated", order_id=str(order.id), payment_status=order.payment_status)
        return str(order.id)
