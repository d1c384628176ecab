"""Category record for grouping products."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from shared.errors import ValidationError


@dataclass
class Category:
    name: str
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Category name is required", {"name": ["required"]})
        self.name = self.name.strip()

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Category name is required", {"name": ["required"]})
        self.name = name.strip()
