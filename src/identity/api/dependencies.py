"""Authentication dependencies for route handlers."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from identity.customer.tokens import Principal, decode_token
from shared.config import Settings
from shared.dependencies import get_app_settings
from shared.errors import Forbidden, Unauthenticated

bearer_scheme = HTTPBearer(auto_error=False)


def current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated()
    return decode_token(credentials.credentials, settings)


def require_admin(principal: Principal = Depends(current_principal)) -> Principal:
    if not principal.is_admin:
        raise Forbidden("Administrator role required")
    return principal
