"""Pure cart reducer: ``(state, action, tier) -> state``."""

from dataclasses import replace
from datetime import UTC, datetime
from typing import assert_never
from uuid import uuid4

from commerce.cart.actions import AddItem, CartAction, Clear, RemoveItem, UpdateQuantity
from commerce.cart.state import CartLine, CartState, derive, normalize
from commerce.shared.pricing import DeliveryTier, quantity_of


def _with_quantity(lines, line_id, quantity):
    return tuple(replace(line, quantity=quantity) if line.id == line_id else line for line in lines)


def _without(lines, line_id):
    return tuple(line for line in lines if line.id != line_id)


def _add(lines, product, variant, quantity):
    # A non-positive add has nothing to select
    if quantity < 1:
        return lines

    existing = next((ln for ln in lines if ln.key == (str(product.id), str(variant.id))), None)
    if existing is not None:
        return _with_quantity(lines, existing.id, quantity)

    line = CartLine(
        id=str(uuid4()),
        product=product,
        variant=variant,
        quantity=quantity,
        added_at=datetime.now(UTC),
    )
    return (*lines, line)


def reduce(state, action: CartAction, tier: DeliveryTier) -> CartState:
    """Apply ``action`` and recompute every derived field under ``tier``.

    ``state`` may be a :class:`CartState`, a stored mapping, or ``None``;
    it is normalized first. The input is never mutated.
    """
    current = normalize(state, tier)

    match action:
        case AddItem(product=product, variant=variant, quantity=quantity):
            lines = _add(current.lines, product, variant, quantity_of(quantity))
        case RemoveItem(line_id=line_id):
            lines = _without(current.lines, str(line_id))
        case UpdateQuantity(line_id=line_id, quantity=quantity):
            quantity = quantity_of(quantity)
            if quantity <= 0:
                lines = _without(current.lines, str(line_id))
            else:
                lines = _with_quantity(current.lines, str(line_id), quantity)
        case Clear():
            return CartState.empty()
        case _:
            assert_never(action)

    return derive(lines, tier)
