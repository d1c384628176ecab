"""Bearer tokens: HS256 JWTs carrying the customer id and role."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from identity.customer.customer import Customer, Role, parse_role
from shared.config import Settings
from shared.errors import Unauthenticated

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a request."""

    customer_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def issue_token(customer: Customer, settings: Settings) -> str:
    now = datetime.now(UTC)
    claims = {
        "sub": customer.id,
        "role": customer.role.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str, settings: Settings) -> Principal:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM], options={"require": ["sub", "exp"]})
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthenticated("Invalid token") from exc
    return Principal(customer_id=claims["sub"], role=parse_role(claims.get("role", Role.CUSTOMER.value)))
