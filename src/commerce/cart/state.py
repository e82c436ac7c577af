"""Session cart value and its derived pricing fields.

``subtotal``, ``delivery_charge``, ``total`` and ``item_count`` are always
computed from the lines by :func:`derive`; nothing else assigns them.
:func:`normalize` re-derives values that arrive from session storage before
any action runs, so stored figures that disagree with the lines are replaced.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from commerce.shared.catalog import Product, Variant
from commerce.shared.pricing import DeliveryTier, line_total, quantity_of, total


@dataclass(frozen=True)
class CartLine:
    id: str
    product: Product
    variant: Variant
    quantity: int
    added_at: datetime

    @property
    def key(self) -> tuple[str, str]:
        return str(self.product.id), str(self.variant.id)

    @property
    def line_total(self) -> float:
        return line_total(getattr(self.variant, "price", None), self.quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product": self.product.to_dict(),
            "variant": self.variant.to_dict(),
            "quantity": self.quantity,
            "added_at": self.added_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "CartLine":
        product = data["product"]
        variant = data["variant"]
        added_at = data.get("added_at", data.get("addedAt"))
        if isinstance(added_at, str):
            added_at = datetime.fromisoformat(added_at)
        return cls(
            id=str(data["id"]),
            product=product if isinstance(product, Product) else Product.from_dict(product),
            variant=variant if isinstance(variant, Variant) else Variant.from_dict(variant),
            quantity=quantity_of(data.get("quantity")),
            added_at=added_at or datetime.now(UTC),
        )


@dataclass(frozen=True)
class CartState:
    lines: tuple[CartLine, ...] = ()
    subtotal: float | None = None
    delivery_charge: float | None = None
    total: float | None = None
    item_count: int | None = None

    @classmethod
    def empty(cls) -> "CartState":
        return cls(lines=(), subtotal=0.0, delivery_charge=0.0, total=0.0, item_count=0)

    def line(self, line_id) -> CartLine | None:
        return next((ln for ln in self.lines if ln.id == str(line_id)), None)

    def line_for(self, product_id, variant_id) -> CartLine | None:
        key = (str(product_id), str(variant_id))
        return next((ln for ln in self.lines if ln.key == key), None)

    def to_dict(self) -> dict:
        return {
            "lines": [ln.to_dict() for ln in self.lines],
            "subtotal": self.subtotal,
            "delivery_charge": self.delivery_charge,
            "total": self.total,
            "item_count": self.item_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "CartState":
        """Rebuild a cart from its stored shape without deriving anything.

        Older clients stored the lines under ``items`` and used camelCase
        totals; both are accepted. Lines with no usable quantity are dropped,
        and repeated (product, variant) pairs collapse onto the first line
        with the later quantity.
        """
        lines: list[CartLine] = []
        for raw in data.get("lines", data.get("items")) or ():
            line = raw if isinstance(raw, CartLine) else CartLine.from_dict(raw)
            if line.quantity < 1:
                continue
            index = next((i for i, existing in enumerate(lines) if existing.key == line.key), None)
            if index is None:
                lines.append(line)
            else:
                lines[index] = replace(lines[index], quantity=line.quantity)

        return cls(
            lines=tuple(lines),
            subtotal=data.get("subtotal"),
            delivery_charge=data.get("delivery_charge", data.get("deliveryCharge")),
            total=data.get("total"),
            item_count=data.get("item_count", data.get("itemCount")),
        )


def derive(lines, tier: DeliveryTier) -> CartState:
    """Compute every derived field from ``lines``. An empty cart is all zeros."""
    lines = tuple(lines)
    if not lines:
        return CartState.empty()

    subtotal = sum(line.line_total for line in lines)
    charge = tier.charge_for(subtotal)
    return CartState(
        lines=lines,
        subtotal=subtotal,
        delivery_charge=charge,
        total=total(subtotal, charge),
        item_count=sum(quantity_of(line.quantity) for line in lines),
    )


def normalize(value, tier: DeliveryTier) -> CartState:
    if value is None:
        return CartState.empty()
    if isinstance(value, Mapping):
        value = CartState.from_dict(value)
    derived = derive(value.lines, tier)
    return value if value == derived else derived
