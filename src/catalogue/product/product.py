"""Product record: the leaf of the order placement flow.

``stock`` is the only contended shared value in the system. It is decremented
by order placement and incremented by the explicit admin restock; both paths
hold the product's row lock while they do it.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from shared.errors import InsufficientStock, ValidationError
from shared.money import to_money


def _new_id() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Product:
    name: str
    price: Decimal
    stock: int = 0
    description: str | None = None
    category_id: str | None = None
    image_url: str | None = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        self.price = to_money(self.price)
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required", {"name": ["required"]})
        if self.price <= 0:
            raise ValidationError("Product price must be positive", {"price": [str(self.price)]})
        if not isinstance(self.stock, int) or isinstance(self.stock, bool) or self.stock < 0:
            raise ValidationError("Product stock must be a non-negative integer", {"stock": [str(self.stock)]})

    def has_stock_for(self, quantity: int) -> bool:
        return self.stock >= quantity

    def remove_stock(self, quantity: int) -> None:
        """Take units out of stock for a sale."""
        if quantity <= 0:
            raise ValidationError("Quantity must be positive", {"quantity": [str(quantity)]})
        if not self.has_stock_for(quantity):
            raise InsufficientStock(
                f"Insufficient stock for product {self.id}",
                {"product_id": self.id, "requested": quantity, "available": self.stock},
            )
        self.stock -= quantity
        self.updated_at = _now()

    def add_stock(self, quantity: int) -> None:
        """Put units back on the shelf (admin restock)."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive", {"quantity": [str(quantity)]})
        self.stock += quantity
        self.updated_at = _now()

    def change_price(self, new_price) -> None:
        """Reprice the product.

        Existing order items keep the price they were bought at; they hold
        their own snapshot.
        """
        price = to_money(new_price)
        if price <= 0:
            raise ValidationError("Product price must be positive", {"price": [str(price)]})
        self.price = price
        self.updated_at = _now()

    def update_details(self, name=None, description=None, category_id=None, image_url=None) -> None:
        if name is not None:
            if not name.strip():
                raise ValidationError("Product name is required", {"name": ["required"]})
            self.name = name
        if description is not None:
            self.description = description
        if category_id is not None:
            self.category_id = category_id
        if image_url is not None:
            self.image_url = image_url
        self.updated_at = _now()
