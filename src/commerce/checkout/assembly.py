"""Checkout assembly — turns a buy-now selection or a cart into a priced draft.

Every entry point funnels through :func:`price_lines`, so the same contents
price identically whichever way they reach checkout. A cart's stored totals
are never trusted; only its lines are read.
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from commerce import settings
from commerce.cart.state import CartLine, CartState, normalize
from commerce.checkout.validation import validate_checkout
from commerce.order.creation import PlaceOrder
from commerce.shared.catalog import Product, Variant
from commerce.shared.pricing import DeliveryTier, amount_of, line_total, quantity_of, total

BUY_NOW = "buy_now"
CART = "cart"
DIRECT = "direct"


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    product_name: str
    variant_id: str
    variant_size: str
    price: float
    quantity: int

    @property
    def total(self) -> float:
        return line_total(self.price, self.quantity)

    @classmethod
    def from_selection(cls, product: Product, variant: Variant, quantity) -> "OrderLine":
        return cls(
            product_id=str(product.id),
            product_name=product.name,
            variant_id=str(variant.id),
            variant_size=variant.size,
            price=amount_of(variant.price),
            quantity=quantity_of(quantity),
        )

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderLine":
        return cls.from_selection(line.product, line.variant, line.quantity)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "variant_id": self.variant_id,
            "variant_size": self.variant_size,
            "price": self.price,
            "quantity": self.quantity,
            "total": self.total,
        }


@dataclass(frozen=True)
class Quote:
    subtotal: float
    delivery_charge: float
    total: float


@dataclass(frozen=True)
class CheckoutDraft:
    """A validated, priced checkout ready to be submitted as an order."""

    customer: dict
    lines: tuple[OrderLine, ...]
    subtotal: float
    delivery_charge: float
    total: float
    source: str = CART
    payment_method: str | None = None
    notes: str | None = None

    def to_command(self) -> PlaceOrder:
        return PlaceOrder(
            customer=json.dumps(self.customer),
            items=json.dumps([line.to_dict() for line in self.lines]),
            payment_method=self.payment_method or settings.default_payment_method(),
            notes=self.notes,
        )


def price_lines(lines: Iterable[OrderLine], tier: DeliveryTier) -> Quote:
    """Subtotal is the sum of line totals; charge and total follow from it."""
    lines = list(lines)
    subtotal = sum(line.total for line in lines)
    charge = tier.charge_for(subtotal) if lines else 0.0
    return Quote(subtotal=subtotal, delivery_charge=charge, total=total(subtotal, charge))


def _draft(customer, lines, tier, source, payment_method, notes, extra_errors=None) -> CheckoutDraft:
    lines = tuple(lines)
    cleaned = validate_checkout(customer, lines, extra=extra_errors)
    quote = price_lines(lines, tier)
    return CheckoutDraft(
        customer=cleaned,
        lines=lines,
        subtotal=quote.subtotal,
        delivery_charge=quote.delivery_charge,
        total=quote.total,
        source=source,
        payment_method=payment_method,
        notes=notes,
    )


def assemble_buy_now(
    product: Product,
    variant: Variant,
    quantity: int,
    customer: Mapping,
    tier: DeliveryTier | None = None,
    *,
    payment_method: str | None = None,
    notes: str | None = None,
) -> CheckoutDraft:
    """Check out a single selection directly, bypassing the cart."""
    extra = {}
    if product.variants and product.variant(variant.id) is None:
        extra["items"] = ["Selected variant does not belong to this product"]

    line = OrderLine.from_selection(product, variant, quantity)
    return _draft(customer, [line], tier or settings.delivery_tier(), BUY_NOW, payment_method, notes, extra)


def assemble_cart(
    cart: CartState | Mapping,
    customer: Mapping,
    tier: DeliveryTier | None = None,
    *,
    payment_method: str | None = None,
    notes: str | None = None,
) -> CheckoutDraft:
    """Check out every line of ``cart``."""
    tier = tier or settings.delivery_tier()
    lines = [OrderLine.from_cart_line(line) for line in normalize(cart, tier).lines]
    return _draft(customer, lines, tier, CART, payment_method, notes)


def assemble_lines(
    lines: Iterable[OrderLine],
    customer: Mapping,
    tier: DeliveryTier | None = None,
    *,
    payment_method: str | None = None,
    notes: str | None = None,
) -> CheckoutDraft:
    """Check out lines already chosen by the caller, as the order API receives them."""
    return _draft(customer, lines, tier or settings.delivery_tier(), DIRECT, payment_method, notes)
