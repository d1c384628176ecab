"""Pydantic request/response schemas for the Ordering API.

These are external contracts, kept separate from the Order aggregate.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    product_id: str = Field(..., validation_alias=AliasChoices("product_id", "productId"))
    quantity: int


class PlaceOrderRequest(BaseModel):
    items: list[OrderLineSchema]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "6f1c2f0e-3a43-4a6e-9a55-0d7f0e8c9b11", "quantity": 2},
                        {"product_id": "0b9e7f53-51b6-4a55-8d0e-7c2f3d94ad20", "quantity": 1},
                    ]
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    status: str
    total_amount: Decimal
    currency: str
    items: list[OrderItemResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            status=order.status.value,
            total_amount=order.total_amount,
            currency=order.currency,
            items=[
                OrderItemResponse(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
