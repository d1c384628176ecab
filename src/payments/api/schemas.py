"""Pydantic request/response schemas for the Payments API."""

from pydantic import AliasChoices, BaseModel, Field


class CreateIntentRequest(BaseModel):
    order_id: str = Field(..., validation_alias=AliasChoices("order_id", "orderId"))

    model_config = {"json_schema_extra": {"examples": [{"order_id": "2f3c1d9a-8a0e-4c55-9a2e-5b0c7f6d1e42"}]}}


class IntentResponse(BaseModel):
    id: str
    client_secret: str


class WebhookAck(BaseModel):
    received: bool = True
