"""Per-session cart holder.

The store is created explicitly and handed to whoever needs the cart; there
is no process-wide cart. Every change goes through :func:`reduce`.
"""

from collections.abc import Mapping

import structlog

from commerce import settings
from commerce.cart.actions import AddItem, CartAction, Clear, RemoveItem, UpdateQuantity
from commerce.cart.reducer import reduce
from commerce.cart.state import CartState, derive, normalize
from commerce.shared.catalog import Product, Variant
from commerce.shared.pricing import DeliveryTier

logger = structlog.get_logger(__name__)


class CartStore:
    def __init__(self, tier: DeliveryTier | None = None, state: CartState | Mapping | None = None) -> None:
        self._tier = tier or settings.delivery_tier()
        self._state = normalize(state, self._tier)

    @classmethod
    def load(cls, data: Mapping | None, tier: DeliveryTier | None = None) -> "CartStore":
        """Restore a cart from session storage, re-deriving its totals from the lines."""
        return cls(tier=tier, state=data)

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def tier(self) -> DeliveryTier:
        return self._tier

    @property
    def is_empty(self) -> bool:
        return not self._state.lines

    def dispatch(self, action: CartAction) -> CartState:
        self._state = reduce(self._state, action, self._tier)
        logger.debug(
            "Cart updated",
            action=type(action).__name__,
            lines=len(self._state.lines),
            item_count=self._state.item_count,
            subtotal=self._state.subtotal,
            delivery_charge=self._state.delivery_charge,
            total=self._state.total,
        )
        return self._state

    def add_item(self, product: Product, variant: Variant, quantity: int = 1) -> CartState:
        return self.dispatch(AddItem(product=product, variant=variant, quantity=quantity))

    def remove_item(self, line_id: str) -> CartState:
        return self.dispatch(RemoveItem(line_id=line_id))

    def update_quantity(self, line_id: str, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(line_id=line_id, quantity=quantity))

    def clear(self) -> CartState:
        return self.dispatch(Clear())

    def reprice(self, tier: DeliveryTier) -> CartState:
        """Adopt new delivery settings and recompute the cart's charges."""
        self._tier = tier
        self._state = derive(self._state.lines, tier)
        logger.info(
            "Cart repriced for new delivery settings",
            free_delivery_threshold=tier.free_delivery_threshold,
            standard_delivery_charge=tier.standard_delivery_charge,
            delivery_charge=self._state.delivery_charge,
        )
        return self._state

    def snapshot(self) -> dict:
        return self._state.to_dict()
