"""Delivery tier pricing shared by the cart, checkout assembly and order placement.

The tier is a two-step rule: orders at or above the free-delivery threshold
ship free, everything below pays the flat standard charge. Every amount is
clamped on the way in, so a missing, NaN, infinite or negative figure prices
as zero instead of poisoning the result.
"""

import math
from dataclasses import dataclass


def amount_of(value) -> float:
    """Coerce a monetary input to a finite, non-negative float (0.0 otherwise)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def quantity_of(value) -> int:
    """Coerce a quantity input to a non-negative int (0 otherwise)."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


def line_total(price, quantity) -> float:
    return amount_of(price) * quantity_of(quantity)


def delivery_charge(subtotal, free_threshold, standard_charge) -> float:
    """Charge for delivering an order worth ``subtotal``.

    Returns 0 when ``subtotal >= free_threshold``, ``standard_charge`` otherwise.
    """
    if amount_of(subtotal) >= amount_of(free_threshold):
        return 0.0
    return amount_of(standard_charge)


def total(subtotal, charge) -> float:
    return amount_of(subtotal) + amount_of(charge)


@dataclass(frozen=True)
class DeliveryTier:
    """The two configuration constants of the delivery rule."""

    free_delivery_threshold: float = 1000.0
    standard_delivery_charge: float = 50.0

    def charge_for(self, subtotal) -> float:
        return delivery_charge(subtotal, self.free_delivery_threshold, self.standard_delivery_charge)
