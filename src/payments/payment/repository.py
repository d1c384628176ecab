"""Payment repository port and adapters."""

from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.orm import Session

from payments.payment.payment import Payment
from shared.persistence.errors import translate_db_errors
from shared.persistence.tables import PaymentRecord

TABLE = "payments"


class PaymentRepository(ABC):
    @abstractmethod
    def get(self, payment_id: str) -> Payment | None: ...

    @abstractmethod
    def get_by_provider_payment_id(self, provider_payment_id: str, for_update: bool = False) -> Payment | None:
        """Find a payment by the gateway's id, optionally holding its row lock."""

    @abstractmethod
    def add(self, payment: Payment) -> None:
        """Insert a payment; a provider id already on record raises ``Conflict``."""

    @abstractmethod
    def save(self, payment: Payment) -> None: ...

    @abstractmethod
    def list_for_order(self, order_id: str) -> list[Payment]: ...


def _to_domain(record: PaymentRecord) -> Payment:
    return Payment(
        id=record.id,
        order_id=record.order_id,
        provider=record.provider,
        provider_payment_id=record.provider_payment_id,
        amount=record.amount,
        currency=record.currency,
        status=record.status,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, payment_id: str) -> Payment | None:
        record = self.session.get(PaymentRecord, payment_id)
        return _to_domain(record) if record else None

    def get_by_provider_payment_id(self, provider_payment_id: str, for_update: bool = False) -> Payment | None:
        statement = select(PaymentRecord).where(PaymentRecord.provider_payment_id == provider_payment_id)
        if for_update:
            statement = statement.with_for_update().execution_options(populate_existing=True)
        with translate_db_errors():
            record = self.session.execute(statement).scalar_one_or_none()
        return _to_domain(record) if record else None

    def add(self, payment: Payment) -> None:
        self.session.add(
            PaymentRecord(
                id=payment.id,
                order_id=payment.order_id,
                provider=payment.provider,
                provider_payment_id=payment.provider_payment_id,
                amount=payment.amount,
                currency=payment.currency,
                status=payment.status.value,
                created_at=payment.created_at,
                updated_at=payment.updated_at,
            )
        )
        with translate_db_errors():
            self.session.flush()

    def save(self, payment: Payment) -> None:
        record = self.session.get(PaymentRecord, payment.id)
        record.status = payment.status.value
        record.updated_at = payment.updated_at
        with translate_db_errors():
            self.session.flush()

    def list_for_order(self, order_id: str) -> list[Payment]:
        statement = select(PaymentRecord).where(PaymentRecord.order_id == order_id).order_by(PaymentRecord.created_at)
        return [_to_domain(record) for record in self.session.execute(statement).scalars()]


class InMemoryPaymentRepository(PaymentRepository):
    def __init__(self, transaction) -> None:
        self.transaction = transaction

    def get(self, payment_id: str) -> Payment | None:
        return self.transaction.read(TABLE, payment_id)

    def get_by_provider_payment_id(self, provider_payment_id: str, for_update: bool = False) -> Payment | None:
        payment = next(
            self.transaction.find(TABLE, lambda row: row.provider_payment_id == provider_payment_id),
            None,
        )
        if payment is None or not for_update:
            return payment
        self.transaction.lock(TABLE, payment.id)
        return self.transaction.read(TABLE, payment.id)

    def add(self, payment: Payment) -> None:
        self.transaction.ensure_unique(TABLE, payment.id, "provider_payment_id", payment.provider_payment_id)
        self.transaction.write(TABLE, payment.id, payment)

    def save(self, payment: Payment) -> None:
        self.transaction.write(TABLE, payment.id, payment)

    def list_for_order(self, order_id: str) -> list[Payment]:
        return [payment for payment in self.transaction.rows(TABLE) if payment.order_id == order_id]
