"""Read-only catalog records consumed by the cart and checkout.

Products and their variants are owned by the catalog service; this context
only reads them, so they are modelled as frozen records rather than
aggregates. ``from_dict`` accepts both snake_case and the camelCase keys
older storefront clients persisted.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Variant:
    """A purchasable size/price unit of a product."""

    id: str
    size: str
    unit: str
    price: float
    discount_price: float | None = None
    stock_quantity: int | None = None
    in_stock: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "Variant":
        return cls(
            id=str(data["id"]),
            size=data.get("size", ""),
            unit=data.get("unit", ""),
            price=data.get("price"),
            discount_price=data.get("discount_price", data.get("discountPrice")),
            stock_quantity=data.get("stock_quantity", data.get("stockQuantity")),
            in_stock=data.get("in_stock", data.get("inStock", True)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "size": self.size,
            "unit": self.unit,
            "price": self.price,
            "discount_price": self.discount_price,
            "stock_quantity": self.stock_quantity,
            "in_stock": self.in_stock,
        }


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: str = ""
    image: str = ""
    variants: tuple[Variant, ...] = field(default_factory=tuple)

    def variant(self, variant_id) -> Variant | None:
        return next((v for v in self.variants if str(v.id) == str(variant_id)), None)

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        variants = tuple(
            v if isinstance(v, Variant) else Variant.from_dict(v) for v in (data.get("variants") or ())
        )
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            category=data.get("category", ""),
            image=data.get("image", ""),
            variants=variants,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "image": self.image,
            "variants": [v.to_dict() for v in self.variants],
        }
