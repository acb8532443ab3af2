"""Product catalog: typed products, sizes and the default repX range."""
from enum import Enum
from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator


class Size(str, Enum):
    """T-shirt sizes offered for every product."""
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


SIZES: tuple[Size, ...] = tuple(Size)
DEFAULT_SIZE = Size.L


class Product(BaseModel):
    """Catalog entry. Malformed entries fail here, not when added to a cart."""
    model_config = ConfigDict(frozen=True)

    id: PositiveInt
    name: str = Field(min_length=1)
    price: PositiveInt  # whole rupees
    image: str = ""
    colors: tuple[str, ...] = Field(min_length=1)
    tags: tuple[str, ...] = ()

    @field_validator("colors")
    @classmethod
    def colors_not_blank(cls, v):
        if any(not color.strip() for color in v):
            raise ValueError("colors must be non-empty strings")
        if len(set(v)) != len(v):
            raise ValueError("colors must be unique")
        return v

    @property
    def default_color(self) -> str:
        return self.colors[0]

    def has_color(self, color: str) -> bool:
        return color in self.colors


DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product(id=1, name="Beast Mode Tee", price=899, image="/images/beastmode.jpg",
            colors=("Black", "Charcoal"), tags=("Best Seller",)),
    Product(id=2, name="No Pain No Gain Tee", price=799, image="/images/nopain.jpg",
            colors=("White", "Navy"), tags=("Trending",)),
    Product(id=3, name="One More Rep Tee", price=849, image="/images/onemore.jpg",
            colors=("Black",)),
    Product(id=4, name="King of Gains Tee", price=999, image="/images/king.jpg",
            colors=("Black", "Olive"), tags=("New",)),
    Product(id=5, name="Old School Iron Tee", price=899, image="/images/oldschool.jpg",
            colors=("Grey",)),
)


class Catalog:
    """Read-only lookup over a fixed set of products."""

    def __init__(self, products: Iterable[Product] = DEFAULT_PRODUCTS):
        self._products: dict[int, Product] = {}
        for product in products:
            if product.id in self._products:
                raise ValueError(f"Duplicate product id {product.id}")
            self._products[product.id] = product

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)

    def get(self, product_id: int) -> Product:
        """Return the product or raise KeyError."""
        return self._products[product_id]
