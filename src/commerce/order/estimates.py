"""Estimated delivery dates for new orders.

The day count is drawn from an inclusive window (3 to 5 days unless
configured otherwise). The picker is injectable so tests and alternative
carriers can make the estimate deterministic.
"""

import random
from collections.abc import Callable
from datetime import datetime, timedelta

from commerce import settings


class DeliveryEstimator:
    def __init__(self, window: tuple[int, int] | None = None, picker: Callable[[int, int], int] | None = None):
        self._window = window
        self._picker = picker or random.randint

    @property
    def window(self) -> tuple[int, int]:
        return self._window or settings.estimated_delivery_window()

    def days(self) -> int:
        low, high = self.window
        return self._picker(low, high)

    def estimate(self, order_date: datetime) -> datetime:
        return order_date + timedelta(days=self.days())


_estimator = DeliveryEstimator()


def current_estimator() -> DeliveryEstimator:
    return _estimator


def use_estimator(estimator: DeliveryEstimator) -> DeliveryEstimator:
    """Install ``estimator`` for new orders and return the one it replaces."""
    global _estimator
    previous, _estimator = _estimator, estimator
    return previous
