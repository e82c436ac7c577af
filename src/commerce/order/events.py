"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """A checkout was materialized into a confirmed order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String()
    customer_name = String(required=True)
    items = Text(required=True)  # JSON: list of item dicts
    subtotal = Float(required=True)
    delivery_charge = Float(required=True)
    total = Float(required=True)
    payment_method = String(required=True)
    order_date = DateTime(required=True)
    estimated_delivery = DateTime()


@commerce.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    changed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class PaymentStatusChanged:
    """Payment status moved independently of the order status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_payment_status = String(required=True)
    new_payment_status = String(required=True)
    changed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)
