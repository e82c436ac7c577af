"""Order aggregate (CQRS) — a placed order and its status lifecycle.

Status changes are permissive: administrators may move an order
from any status to any other. The only precondition is that an order cannot
be marked shipped without a tracking number. Payment status is tracked
separately and never coupled to the order status.

Customer-facing cancellation is the guarded path: it is only allowed while
the order has not reached a terminal status.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from commerce.checkout.validation import MAX_PHONE_DIGITS, MAX_PHONE_LENGTH, phone_digits, validate_checkout
from commerce.domain import commerce
from commerce.exceptions import TransitionPreconditionError
from commerce.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged, PaymentStatusChanged
from commerce.shared.pricing import amount_of, line_total, quantity_of, total

TRACKING_NUMBER_MAX_LENGTH = 100


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"
    CARD = "card"
    UPI = "upi"


TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

ORDER_NUMBER_PREFIX = "ORD"


def format_order_number(day, sequence: int) -> str:
    """`ORD-YYYYMMDD-NNNN`: the placement date and that day's running sequence."""
    return f"{ORDER_NUMBER_PREFIX}-{day:%Y%m%d}-{sequence:04d}"


def order_number_sequence(order_number) -> int:
    """The running sequence of ``order_number``, or 0 if it is not one of ours."""
    parts = (order_number or "").split("-")
    if len(parts) != 3 or parts[0] != ORDER_NUMBER_PREFIX or not parts[2].isdigit():
        return 0
    return int(parts[2])


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status: {value}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@commerce.value_object(part_of="Order")
class CustomerInfo:
    """Who the order is for and where it goes, as entered at checkout.

    A snapshot: later changes to the customer's details do not touch orders
    already placed.
    """

    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=MAX_PHONE_LENGTH)
    email = String(max_length=254)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    pincode = String(required=True, max_length=6)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@commerce.entity(part_of="Order")
class OrderItem:
    """A purchased variant, denormalized at placement and never changed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    variant_id = Identifier(required=True)
    variant_size = String(max_length=50)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@commerce.aggregate
class Order:
    order_number = String(max_length=30)
    customer = ValueObject(CustomerInfo)
    contact_phone = String(max_length=MAX_PHONE_DIGITS)  # digits of customer.phone, for lookups
    items = HasMany(OrderItem)
    subtotal = Float(default=0.0)
    delivery_charge = Float(default=0.0)
    total = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.CONFIRMED.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    order_date = DateTime()
    estimated_delivery = DateTime()
    actual_delivery = DateTime()
    shipped_at = DateTime()
    tracking_number = String(max_length=TRACKING_NUMBER_MAX_LENGTH)
    notes = Text()
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def shipped_order_must_have_tracking_number(self):
        if self.status == OrderStatus.SHIPPED.value and not self.tracking_number:
            raise ValidationError({"tracking_number": ["A shipped order must have a tracking number"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer, items_data, tier, estimator, payment_method=None, notes=None, order_number=None):
        """Materialize a checkout into a confirmed order.

        Customer info and items are validated again here; the client's
        checks are not trusted. Totals are recomputed from the items with
        ``tier``, and the estimated delivery date comes from ``estimator``.

        Args:
            customer: Dict with name, phone, email, address, city, pincode.
            items_data: List of dicts with product_id, product_name,
                        variant_id, variant_size, price, quantity.
            tier: The DeliveryTier in force at placement.
            estimator: A DeliveryEstimator.
            order_number: Human-facing reference, see :func:`format_order_number`.
        """
        cleaned = validate_checkout(customer, items_data)
        now = datetime.now(UTC)

        items = [
            OrderItem(
                product_id=str(item["product_id"]),
                product_name=item.get("product_name") or "",
                variant_id=str(item["variant_id"]),
                variant_size=item.get("variant_size") or "",
                price=amount_of(item.get("price")),
                quantity=quantity_of(item.get("quantity")),
                total=line_total(item.get("price"), item.get("quantity")),
            )
            for item in items_data
        ]
        subtotal = sum(item.total for item in items)
        charge = tier.charge_for(subtotal)

        order = cls(
            order_number=order_number,
            customer=CustomerInfo(**cleaned),
            contact_phone=phone_digits(cleaned["phone"]),
            subtotal=subtotal,
            delivery_charge=charge,
            total=total(subtotal, charge),
            status=OrderStatus.CONFIRMED.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=payment_method or PaymentMethod.COD.value,
            order_date=now,
            estimated_delivery=estimator.estimate(now),
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            order.add_items(item)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_name=order.customer.name,
                items=json.dumps([item.to_dict() for item in items], default=str),
                subtotal=order.subtotal,
                delivery_charge=order.delivery_charge,
                total=order.total,
                payment_method=order.payment_method,
                order_date=now,
                estimated_delivery=order.estimated_delivery,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status lifecycle
    # -------------------------------------------------------------------
    def check_status_change(self, new_status, tracking_number=None) -> OrderStatus:
        """Raise if moving to ``new_status`` is not possible; change nothing."""
        target = parse_status(new_status)
        tracking_number = (tracking_number or "").strip()

        if len(tracking_number) > TRACKING_NUMBER_MAX_LENGTH:
            raise ValidationError(
                {"tracking_number": [f"Tracking number cannot exceed {TRACKING_NUMBER_MAX_LENGTH} characters"]}
            )
        if target == OrderStatus.SHIPPED and not (tracking_number or self.tracking_number):
            raise TransitionPreconditionError(
                {"tracking_number": ["Tracking number is required when marking an order as shipped"]}
            )
        return target

    def update_status(self, new_status, tracking_number=None, changed_at=None):
        target = self.check_status_change(new_status, tracking_number)
        now = changed_at or datetime.now(UTC)
        previous_status = self.status

        # Tracking number first: the shipped invariant runs on every assignment
        if tracking_number and tracking_number.strip():
            self.tracking_number = tracking_number.strip()
        if target == OrderStatus.SHIPPED:
            self.shipped_at = now
        elif target == OrderStatus.DELIVERED:
            self.actual_delivery = now
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=target.value,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )

    def update_payment_status(self, payment_status):
        try:
            target = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status: {payment_status}"]}) from None

        now = datetime.now(UTC)
        previous = self.payment_status
        self.payment_status = target.value
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_payment_status=previous,
                new_payment_status=target.value,
                changed_at=now,
            )
        )

    def cancel(self, reason=None):
        """Cancel on the customer's behalf. Terminal orders cannot be cancelled."""
        current = OrderStatus(self.status)
        if current in TERMINAL_STATUSES:
            raise ValidationError({"status": [f"Cannot cancel an order that is {current.value}"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                reason=reason,
                cancelled_at=now,
            )
        )
