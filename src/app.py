"""Storefront FastAPI application.

Composition root: wires the unit-of-work factory, the payment gateway, the
error mapping and every context's routers into one app.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from collections.abc import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalogue.api import admin_router as catalogue_admin_router
from catalogue.api import category_router, product_router
from identity.api.routes import admin_router as customer_admin_router
from identity.api.routes import router as auth_router
from ordering.api import admin_router as order_admin_router
from ordering.api import router as order_router
from payments.api import router as payment_router
from payments.gateway import PaymentGateway
from shared.config import get_settings
from shared.errors import HTTP_STATUS_BY_KIND, DomainError, ErrorKind
from shared.logging import configure_logging, request_context
from shared.persistence.sql import SqlAlchemyUnitOfWork, build_engine, build_session_factory
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _default_uow_factory() -> Callable[[], AbstractUnitOfWork]:
    settings = get_settings()
    session_factory = build_session_factory(build_engine(settings.database_url))
    return lambda: SqlAlchemyUnitOfWork(session_factory, lock_timeout_ms=settings.lock_timeout_ms)


def _error_body(kind: str, message: str, details=None) -> dict:
    return {"error": {"kind": kind, "message": message, "details": details or {}}}


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = HTTP_STATUS_BY_KIND[exc.kind]
    logger.info("request_failed", path=request.url.path, kind=exc.kind.value, status=status_code)
    return JSONResponse(status_code=status_code, content={"error": exc.to_dict()})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")} for error in exc.errors()
    ]
    return JSONResponse(
        status_code=HTTP_STATUS_BY_KIND[ErrorKind.VALIDATION],
        content=_error_body(ErrorKind.VALIDATION.value, "Invalid request", {"errors": errors}),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    details = None if get_settings().is_production else {"type": type(exc).__name__}
    return JSONResponse(status_code=500, content=_error_body("internal_error", "Internal server error", details))


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
def create_app(
    uow_factory: Callable[[], AbstractUnitOfWork] | None = None,
    gateway: PaymentGateway | None = None,
) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Storefront API",
        description="Catalogue, customer accounts, order placement and payments",
    )
    app.state.uow_factory = uow_factory or _default_uow_factory()
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind a request id to every log line emitted while serving the request."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        with request_context(request_id=request_id, method=request.method, path=request.url.path):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(auth_router)
    app.include_router(customer_admin_router)
    app.include_router(product_router)
    app.include_router(category_router)
    app.include_router(catalogue_admin_router)
    app.include_router(order_router)
    app.include_router(order_admin_router)
    app.include_router(payment_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "environment": get_settings().environment}

    return app


app = create_app()
