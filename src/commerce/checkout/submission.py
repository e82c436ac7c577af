"""Order submission — sends a checkout draft to the order lifecycle.

Validation and pricing happen during assembly, before the submitting flag is
raised. A second submit while one is in flight is rejected and leaves the
first untouched. Backend failures surface as a single generic
:class:`SubmissionError`; the cart is only cleared once an order exists.
"""

from collections.abc import Callable, Mapping

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from commerce.cart.store import CartStore
from commerce.checkout.assembly import CART, CheckoutDraft, OrderLine, assemble_buy_now, assemble_cart, assemble_lines
from commerce.exceptions import SubmissionError
from commerce.order.creation import PlaceOrder
from commerce.shared.catalog import Product, Variant
from commerce.shared.single_flight import SingleFlight

logger = structlog.get_logger(__name__)


def process_command(command: PlaceOrder) -> str:
    return current_domain.process(command, asynchronous=False)


class OrderSubmitter:
    def __init__(self, cart_store: CartStore | None = None, transport: Callable | None = None) -> None:
        self.cart_store = cart_store
        self._transport = transport or process_command
        self._flight = SingleFlight("Order submission")

    @property
    def submitting(self) -> bool:
        return self._flight.active

    def buy_now(self, product: Product, variant: Variant, quantity: int, customer: Mapping, **options) -> str:
        tier = self.cart_store.tier if self.cart_store else None
        return self.submit(assemble_buy_now(product, variant, quantity, customer, tier, **options))

    def checkout_lines(self, lines: list[OrderLine], customer: Mapping, **options) -> str:
        tier = self.cart_store.tier if self.cart_store else None
        return self.submit(assemble_lines(lines, customer, tier, **options))

    def checkout_cart(self, customer: Mapping, **options) -> str:
        if self.cart_store is None:
            raise ValidationError({"items": ["At least one item is required"]})
        return self.submit(assemble_cart(self.cart_store.state, customer, self.cart_store.tier, **options))

    def submit(self, draft: CheckoutDraft) -> str:
        with self._flight.claim():
            command = draft.to_command()
            try:
                order_id = self._transport(command)
            except ValidationError:
                raise
            except Exception as exc:
                logger.error(
                    "Order submission failed",
                    source=draft.source,
                    line_count=len(draft.lines),
                    total=draft.total,
                    error=str(exc),
                )
                raise SubmissionError() from exc

        if draft.source == CART and self.cart_store is not None:
            self.cart_store.clear()

        logger.info("Order submitted", order_id=order_id, source=draft.source, total=draft.total)
        return order_id
