"""Product repository port and its SQLAlchemy and in-memory adapters."""

from abc import ABC, abstractmethod

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalogue.product.product import Product
from shared.persistence.errors import translate_db_errors
from shared.persistence.tables import ProductRecord

TABLE = "products"


class ProductRepository(ABC):
    @abstractmethod
    def get(self, product_id: str) -> Product | None:
        """Read a product without locking it."""

    @abstractmethod
    def get_for_update(self, product_id: str) -> Product | None:
        """Read a product and hold an exclusive row lock until the transaction ends."""

    @abstractmethod
    def add(self, product: Product) -> None: ...

    @abstractmethod
    def save(self, product: Product) -> None: ...

    @abstractmethod
    def delete(self, product_id: str) -> None: ...

    @abstractmethod
    def list(self, limit: int = 20, offset: int = 0, category_id: str | None = None) -> tuple[list[Product], int]:
        """A page of products, newest first, with the total count."""


def _to_domain(record: ProductRecord) -> Product:
    return Product(
        id=record.id,
        name=record.name,
        description=record.description,
        price=record.price,
        stock=record.stock,
        category_id=record.category_id,
        image_url=record.image_url,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _copy_onto(record: ProductRecord, product: Product) -> None:
    record.name = product.name
    record.description = product.description
    record.price = product.price
    record.stock = product.stock
    record.category_id = product.category_id
    record.image_url = product.image_url
    record.updated_at = product.updated_at


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, product_id: str) -> Product | None:
        record = self.session.get(ProductRecord, product_id)
        return _to_domain(record) if record else None

    def get_for_update(self, product_id: str) -> Product | None:
        statement = (
            select(ProductRecord)
            .where(ProductRecord.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        with translate_db_errors():
            record = self.session.execute(statement).scalar_one_or_none()
        return _to_domain(record) if record else None

    def add(self, product: Product) -> None:
        record = ProductRecord(id=product.id, created_at=product.created_at)
        _copy_onto(record, product)
        self.session.add(record)
        with translate_db_errors():
            self.session.flush()

    def save(self, product: Product) -> None:
        record = self.session.get(ProductRecord, product.id)
        _copy_onto(record, product)
        with translate_db_errors():
            self.session.flush()

    def delete(self, product_id: str) -> None:
        record = self.session.get(ProductRecord, product_id)
        if record is not None:
            self.session.delete(record)
            with translate_db_errors():
                self.session.flush()

    def list(self, limit: int = 20, offset: int = 0, category_id: str | None = None) -> tuple[list[Product], int]:
        query = select(ProductRecord)
        count_query = select(func.count()).select_from(ProductRecord)
        if category_id:
            query = query.where(ProductRecord.category_id == category_id)
            count_query = count_query.where(ProductRecord.category_id == category_id)
        query = query.order_by(ProductRecord.created_at.desc(), ProductRecord.id).limit(limit).offset(offset)
        records = self.session.execute(query).scalars().all()
        total = self.session.execute(count_query).scalar_one()
        return [_to_domain(record) for record in records], total


class InMemoryProductRepository(ProductRepository):
    def __init__(self, transaction) -> None:
        self.transaction = transaction

    def get(self, product_id: str) -> Product | None:
        return self.transaction.read(TABLE, product_id)

    def get_for_update(self, product_id: str) -> Product | None:
        self.transaction.lock(TABLE, product_id)
        return self.transaction.read(TABLE, product_id)

    def add(self, product: Product) -> None:
        self.transaction.write(TABLE, product.id, product)

    def save(self, product: Product) -> None:
        self.transaction.write(TABLE, product.id, product)

    def delete(self, product_id: str) -> None:
        self.transaction.delete(TABLE, product_id)

    def list(self, limit: int = 20, offset: int = 0, category_id: str | None = None) -> tuple[list[Product], int]:
        products = self.transaction.rows(TABLE)
        if category_id:
            products = [product for product in products if product.category_id == category_id]
        products.reverse()
        return products[offset : offset + limit], len(products)
