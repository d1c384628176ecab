"""FastAPI endpoints for the Ordering domain."""

from fastapi import APIRouter, Depends

from identity.api.dependencies import current_principal, require_admin
from identity.customer.tokens import Principal
from ordering.api.schemas import OrderResponse, PlaceOrderRequest, UpdateOrderStatusRequest
from ordering.order.placement import OrderLine, place_order
from ordering.order.retrieval import get_order, list_customer_orders
from ordering.order.status import cancel_order, update_order_status
from shared.config import Settings
from shared.dependencies import get_app_settings, get_uow
from shared.persistence.unit_of_work import AbstractUnitOfWork

router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"], dependencies=[Depends(require_admin)])


# ---------------------------------------------------------------------------
# Customer endpoints
# ---------------------------------------------------------------------------
@router.post("", status_code=201, response_model=OrderResponse)
def create_order(
    body: PlaceOrderRequest,
    principal: Principal = Depends(current_principal),
    uow: AbstractUnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_app_settings),
) -> OrderResponse:
    order = place_order(
        uow,
        principal.customer_id,
        [OrderLine(product_id=line.product_id, quantity=line.quantity) for line in body.items],
        max_attempts=settings.placement_max_attempts,
        currency=settings.payment_currency,
    )
    return OrderResponse.from_order(order)


@router.get("/me", response_model=list[OrderResponse])
def my_orders(
    principal: Principal = Depends(current_principal),
    uow: AbstractUnitOfWork = Depends(get_uow),
) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in list_customer_orders(uow, principal.customer_id)]


@router.get("/{order_id}", response_model=OrderResponse)
def order_detail(
    order_id: str,
    principal: Principal = Depends(current_principal),
    uow: AbstractUnitOfWork = Depends(get_uow),
) -> OrderResponse:
    return OrderResponse.from_order(get_order(uow, order_id, principal.customer_id))


@router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel(
    order_id: str,
    principal: Principal = Depends(current_principal),
    uow: AbstractUnitOfWork = Depends(get_uow),
) -> OrderResponse:
    return OrderResponse.from_order(cancel_order(uow, order_id, principal.customer_id))


# ---------------------------------------------------------------------------
# Admin endpoints
# ---------------------------------------------------------------------------
@admin_router.get("/{order_id}", response_model=OrderResponse)
def admin_order_detail(order_id: str, uow: AbstractUnitOfWork = Depends(get_uow)) -> OrderResponse:
    return OrderResponse.from_order(get_order(uow, order_id, requester_id=None, is_admin=True))


@admin_router.put("/{order_id}/status", response_model=OrderResponse)
def change_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    uow: AbstractUnitOfWork = Depends(get_uow),
) -> OrderResponse:
    return OrderResponse.from_order(update_order_status(uow, order_id, body.status))
