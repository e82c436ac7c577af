"""The closed set of cart actions accepted by the reducer."""

from dataclasses import dataclass

from commerce.shared.catalog import Product, Variant


@dataclass(frozen=True)
class AddItem:
    """Select a variant. Re-selecting an existing variant replaces its quantity."""

    product: Product
    variant: Variant
    quantity: int = 1


@dataclass(frozen=True)
class RemoveItem:
    line_id: str


@dataclass(frozen=True)
class UpdateQuantity:
    """Set a line's quantity; zero or less removes the line."""

    line_id: str
    quantity: int


@dataclass(frozen=True)
class Clear:
    pass


CartAction = AddItem | RemoveItem | UpdateQuantity | Clear
