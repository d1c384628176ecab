"""FastAPI dependencies shared by every context's routes.

The composition root (``app.create_app``) stores the unit-of-work factory and
the payment gateway on ``app.state``; handlers receive them through these
functions so tests can swap either without touching the routes.
"""

from fastapi import Request

from shared.config import Settings, get_settings
from shared.persistence.unit_of_work import AbstractUnitOfWork


def get_uow(request: Request) -> AbstractUnitOfWork:
    return request.app.state.uow_factory()


def get_app_settings() -> Settings:
    return get_settings()
