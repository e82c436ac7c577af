"""Order lookups: by status, by order number and by customer phone."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from commerce.checkout.validation import is_valid_phone, phone_digits
from commerce.order.order import Order, format_order_number, order_number_sequence, parse_status


def _orders():
    return current_domain.repository_for(Order)._dao.query


def next_order_number(day) -> str:
    """The next free order number for ``day``; the first of each day is 0001."""
    day_prefix = format_order_number(day, 0).rsplit("-", 1)[0] + "-"
    latest = _orders().filter(order_number__startswith=day_prefix).order_by("-order_number").limit(1).all().items
    last_sequence = order_number_sequence(latest[0].order_number) if latest else 0
    return format_order_number(day, last_sequence + 1)


def list_orders(status=None) -> list:
    query = _orders()
    if status:
        query = query.filter(status=parse_status(status).value)
    return query.order_by("-created_at").all().items


def find_by_number(order_number: str):
    orders = _orders().filter(order_number=order_number.strip()).all().items
    if not orders:
        raise ObjectNotFoundError(f"Order {order_number} does not exist")
    return orders[0]


def orders_for_customer(phone: str) -> list:
    """Orders placed with ``phone``, newest first.

    Phones match on their digits, so ``+91 98765-43210`` finds orders placed
    as ``+919876543210``.
    """
    if not is_valid_phone(phone or ""):
        raise ValidationError({"phone": ["Please enter a valid phone number"]})
    return _orders().filter(contact_phone=phone_digits(phone)).order_by("-created_at").all().items
