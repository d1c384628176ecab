"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter, Depends

from identity.api.dependencies import current_principal, require_admin
from identity.api.schemas import (
    CustomerResponse,
    LoginRequest,
    RegisteredResponse,
    RegisterRequest,
    TokenResponse,
    UpdateRoleRequest,
)
from identity.customer.account import get_customer, list_customers, update_role
from identity.customer.registration import authenticate, register_customer
from identity.customer.tokens import Principal, issue_token
from shared.config import Settings
from shared.dependencies import get_app_settings, get_uow
from shared.persistence.unit_of_work import AbstractUnitOfWork

router = APIRouter(prefix="/auth", tags=["auth"])
admin_router = APIRouter(prefix="/admin/customers", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/register", status_code=201, response_model=RegisteredResponse)
def register(
    body: RegisterRequest,
    uow: AbstractUnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_app_settings),
) -> RegisteredResponse:
    customer = register_customer(uow, email=body.email, name=body.name, password=body.password)
    return RegisteredResponse(id=customer.id, token=issue_token(customer, settings))


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    uow: AbstractUnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_app_settings),
) -> TokenResponse:
    customer = authenticate(uow, email=body.email, password=body.password)
    return TokenResponse(token=issue_token(customer, settings))


@router.get("/me", response_model=CustomerResponse)
def me(
    principal: Principal = Depends(current_principal),
    uow: AbstractUnitOfWork = Depends(get_uow),
) -> CustomerResponse:
    return CustomerResponse.from_customer(get_customer(uow, principal.customer_id))


@admin_router.get("", response_model=list[CustomerResponse])
def all_customers(uow: AbstractUnitOfWork = Depends(get_uow)) -> list[CustomerResponse]:
    return [CustomerResponse.from_customer(customer) for customer in list_customers(uow)]


@admin_router.put("/{customer_id}/role", response_model=CustomerResponse)
def change_role(
    customer_id: str,
    body: UpdateRoleRequest,
    uow: AbstractUnitOfWork = Depends(get_uow),
) -> CustomerResponse:
    return CustomerResponse.from_customer(update_role(uow, customer_id, body.role))
