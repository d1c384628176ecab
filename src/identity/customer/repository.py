"""Customer repository port and adapters."""

from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.orm import Session

from identity.customer.customer import Customer
from shared.persistence.errors import translate_db_errors
from shared.persistence.tables import CustomerRecord

TABLE = "customers"


class CustomerRepository(ABC):
    @abstractmethod
    def get(self, customer_id: str) -> Customer | None: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Customer | None: ...

    @abstractmethod
    def add(self, customer: Customer) -> None: ...

    @abstractmethod
    def save(self, customer: Customer) -> None: ...

    @abstractmethod
    def list(self) -> list[Customer]:
        """Every customer, oldest first."""


def _to_domain(record: CustomerRecord) -> Customer:
    return Customer(
        id=record.id,
        email=record.email,
        name=record.name,
        password_hash=record.password_hash,
        role=record.role,
        created_at=record.created_at,
    )


class SqlAlchemyCustomerRepository(CustomerRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, customer_id: str) -> Customer | None:
        record = self.session.get(CustomerRecord, customer_id)
        return _to_domain(record) if record else None

    def get_by_email(self, email: str) -> Customer | None:
        statement = select(CustomerRecord).where(CustomerRecord.email == email.lower())
        record = self.session.execute(statement).scalar_one_or_none()
        return _to_domain(record) if record else None

    def add(self, customer: Customer) -> None:
        self.session.add(
            CustomerRecord(
                id=customer.id,
                email=customer.email,
                name=customer.name,
                password_hash=customer.password_hash,
                role=customer.role.value,
                created_at=customer.created_at,
            )
        )
        with translate_db_errors():
            self.session.flush()

    def save(self, customer: Customer) -> None:
        record = self.session.get(CustomerRecord, customer.id)
        record.name = customer.name
        record.password_hash = customer.password_hash
        record.role = customer.role.value
        with translate_db_errors():
            self.session.flush()

    def list(self) -> list[Customer]:
        records = self.session.execute(select(CustomerRecord).order_by(CustomerRecord.created_at)).scalars().all()
        return [_to_domain(record) for record in records]


class InMemoryCustomerRepository(CustomerRepository):
    def __init__(self, transaction) -> None:
        self.transaction = transaction

    def get(self, customer_id: str) -> Customer | None:
        return self.transaction.read(TABLE, customer_id)

    def get_by_email(self, email: str) -> Customer | None:
        email = email.lower()
        return next(self.transaction.find(TABLE, lambda customer: customer.email == email), None)

    def add(self, customer: Customer) -> None:
        self.transaction.ensure_unique(TABLE, customer.id, "email", customer.email)
        self.transaction.write(TABLE, customer.id, customer)

    def save(self, customer: Customer) -> None:
        self.transaction.write(TABLE, customer.id, customer)

    def list(self) -> list[Customer]:
        return self.transaction.rows(TABLE)
