"""Cart models: line items and their identity keys."""
from dataclasses import dataclass
from typing import NamedTuple

from storefront.catalog import Product, Size


class ItemKey(NamedTuple):
    """Identity of a line item; additions with the same key merge."""
    product_id: int
    size: Size
    color: str


@dataclass
class LineItem:
    """One (product, size, color) entry in the cart."""
    product_id: int
    name: str
    unit_price: int
    image_ref: str
    size: Size
    color: str
    quantity: int = 1

    def __post_init__(self):
        self.size = Size(self.size)
        if self.unit_price <= 0:
            raise ValueError("unit_price must be positive")
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1")

    @property
    def key(self) -> ItemKey:
        return ItemKey(self.product_id, self.size, self.color)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    @classmethod
    def from_product(cls, product: Product, size: Size, color: str) -> "LineItem":
        return cls(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            image_ref=product.image,
            size=size,
            color=color,
        )

    def to_dict(self) -> dict:
        """Snapshot form, field names as stored by the web storefront."""
        return {
            "productId": self.product_id,
            "name": self.name,
            "unitPrice": self.unit_price,
            "imageRef": self.image_ref,
            "size": self.size.value,
            "color": self.color,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Parse a snapshot entry. Raises KeyError/ValueError/TypeError on bad data."""
        return cls(
            product_id=int(data["productId"]),
            name=str(data["name"]),
            unit_price=int(data["unitPrice"]),
            image_ref=str(data.get("imageRef", "")),
            size=Size(data["size"]),
            color=str(data["color"]),
            quantity=int(data["quantity"]),
        )
