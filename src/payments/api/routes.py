"""FastAPI endpoints for the Payments domain."""

from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from identity.api.dependencies import current_principal
from identity.customer.tokens import Principal
from payments.api.schemas import CreateIntentRequest, IntentResponse, WebhookAck
from payments.gateway import get_gateway
from payments.gateway.port import PaymentGateway
from payments.payment.intent import create_payment_intent
from payments.payment.webhook import handle_webhook
from shared.dependencies import get_uow
from shared.persistence.unit_of_work import AbstractUnitOfWork

router = APIRouter(prefix="/payments", tags=["payments"])


def get_payment_gateway(request: Request) -> PaymentGateway:
    return getattr(request.app.state, "gateway", None) or get_gateway()


@router.post("/intent", status_code=201, response_model=IntentResponse)
def create_intent(
    body: CreateIntentRequest,
    principal: Principal = Depends(current_principal),
    uow: AbstractUnitOfWork = Depends(get_uow),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> IntentResponse:
    created = create_payment_intent(
        uow,
        gateway,
        body.order_id,
        requester_id=None if principal.is_admin else principal.customer_id,
    )
    return IntentResponse(id=created.payment_id, client_secret=created.client_secret)


@router.post("/webhook", response_model=WebhookAck)
async def receive_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    uow: AbstractUnitOfWork = Depends(get_uow),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> WebhookAck:
    # Signature verification needs the body exactly as sent
    payload = await request.body()
    await run_in_threadpool(handle_webhook, uow, gateway, payload, stripe_signature)
    return WebhookAck()
