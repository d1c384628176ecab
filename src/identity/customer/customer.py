"""Customer record: the account that owns orders."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from identity.shared.email import normalize_email
from shared.errors import ValidationError


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass
class Customer:
    email: str
    name: str
    password_hash: str
    role: Role = Role.CUSTOMER
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.email = normalize_email(self.email)
        if not self.name or not self.name.strip():
            raise ValidationError("Name is required", {"name": ["required"]})
        if isinstance(self.role, str):
            self.role = parse_role(self.role)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def change_role(self, role: Role) -> None:
        self.role = role


def parse_role(value: str) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Invalid role: {value!r}", {"role": [str(value)]}) from None
