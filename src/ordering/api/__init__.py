"""Ordering domain API package."""

from ordering.api.routes import admin_router, router

__all__ = ["router", "admin_router"]
