"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"email": "jane.doe@example.com", "name": "Jane Doe", "password": "correct-horse"}]
        }
    }

    email: str = Field(..., max_length=254)
    name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class UpdateRoleRequest(BaseModel):
    role: str


# --- Response Schemas ---


class RegisteredResponse(BaseModel):
    id: str
    token: str


class TokenResponse(BaseModel):
    token: str


class CustomerResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str
    created_at: datetime

    @classmethod
    def from_customer(cls, customer) -> CustomerResponse:
        return cls(
            id=customer.id,
            email=customer.email,
            name=customer.name,
            role=customer.role.value,
            created_at=customer.created_at,
        )
