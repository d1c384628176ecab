"""Category repository port and adapters."""

from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalogue.category.category import Category
from shared.persistence.errors import translate_db_errors
from shared.persistence.tables import CategoryRecord

TABLE = "categories"


class CategoryRepository(ABC):
    @abstractmethod
    def get(self, category_id: str) -> Category | None: ...

    @abstractmethod
    def get_by_name(self, name: str) -> Category | None: ...

    @abstractmethod
    def add(self, category: Category) -> None: ...

    @abstractmethod
    def save(self, category: Category) -> None: ...

    @abstractmethod
    def list(self) -> list[Category]:
        """Every category, by name."""


def _to_domain(record: CategoryRecord) -> Category:
    return Category(id=record.id, name=record.name, created_at=record.created_at)


class SqlAlchemyCategoryRepository(CategoryRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, category_id: str) -> Category | None:
        record = self.session.get(CategoryRecord, category_id)
        return _to_domain(record) if record else None

    def get_by_name(self, name: str) -> Category | None:
        record = self.session.execute(select(CategoryRecord).where(CategoryRecord.name == name)).scalar_one_or_none()
        return _to_domain(record) if record else None

    def add(self, category: Category) -> None:
        self.session.add(CategoryRecord(id=category.id, name=category.name, created_at=category.created_at))
        with translate_db_errors():
            self.session.flush()

    def save(self, category: Category) -> None:
        record = self.session.get(CategoryRecord, category.id)
        record.name = category.name
        with translate_db_errors():
            self.session.flush()

    def list(self) -> list[Category]:
        records = self.session.execute(select(CategoryRecord).order_by(CategoryRecord.name)).scalars().all()
        return [_to_domain(record) for record in records]


class InMemoryCategoryRepository(CategoryRepository):
    def __init__(self, transaction) -> None:
        self.transaction = transaction

    def get(self, category_id: str) -> Category | None:
        return self.transaction.read(TABLE, category_id)

    def get_by_name(self, name: str) -> Category | None:
        return next(self.transaction.find(TABLE, lambda category: category.name == name), None)

    def add(self, category: Category) -> None:
        self.transaction.ensure_unique(TABLE, category.id, "name", category.name)
        self.transaction.write(TABLE, category.id, category)

    def save(self, category: Category) -> None:
        self.transaction.ensure_unique(TABLE, category.id, "name", category.name)
        self.transaction.write(TABLE, category.id, category)

    def list(self) -> list[Category]:
        return sorted(self.transaction.rows(TABLE), key=lambda category: category.name)
