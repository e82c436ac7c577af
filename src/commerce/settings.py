"""Runtime settings for the commerce context, read from the environment.

Values are read on every call so a process can pick up new delivery
settings without a restart.
"""

import os

from commerce.shared.pricing import DeliveryTier


def delivery_tier() -> DeliveryTier:
    return DeliveryTier(
        free_delivery_threshold=float(os.getenv("FREE_DELIVERY_THRESHOLD", "1000")),
        standard_delivery_charge=float(os.getenv("STANDARD_DELIVERY_CHARGE", "50")),
    )


def estimated_delivery_window() -> tuple[int, int]:
    """Inclusive (min, max) number of days between order date and estimated delivery."""
    min_days = int(os.getenv("ESTIMATED_DELIVERY_MIN_DAYS", "3"))
    max_days = int(os.getenv("ESTIMATED_DELIVERY_MAX_DAYS", "5"))
    return min_days, max(min_days, max_days)


def default_payment_method() -> str:
    return os.getenv("DEFAULT_PAYMENT_METHOD", "cod")
