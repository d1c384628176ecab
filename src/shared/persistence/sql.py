"""SQLAlchemy engine, session factory and unit of work."""

import structlog
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shared.persistence.errors import translate_db_errors
from shared.persistence.tables import Base
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; in-memory SQLite gets a single shared connection."""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs.setdefault("poolclass", StaticPool)
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(database_url, **kwargs)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create every table."""
    Base.metadata.create_all(engine)


def drop_schema(engine: Engine) -> None:
    """Drop every table."""
    Base.metadata.drop_all(engine)


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """One ``Session`` (and one database transaction) per ``with`` block.

    On PostgreSQL each transaction starts with ``SET LOCAL lock_timeout`` so a
    ``SELECT ... FOR UPDATE`` that cannot get its row lock in time fails with
    ``LockTimeout`` instead of queueing indefinitely.
    """

    def __init__(self, session_factory: sessionmaker[Session], lock_timeout_ms: int | None = None) -> None:
        self.session_factory = session_factory
        self.lock_timeout_ms = lock_timeout_ms
        self.session: Session | None = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        from catalogue.category.repository import SqlAlchemyCategoryRepository
        from catalogue.product.repository import SqlAlchemyProductRepository
        from identity.customer.repository import SqlAlchemyCustomerRepository
        from ordering.order.repository import SqlAlchemyOrderRepository
        from payments.payment.repository import SqlAlchemyPaymentRepository

        self.session = self.session_factory()
        if self.lock_timeout_ms and self.session.get_bind().dialect.name == "postgresql":
            self.session.execute(text(f"SET LOCAL lock_timeout = {int(self.lock_timeout_ms)}"))

        self.categories = SqlAlchemyCategoryRepository(self.session)
        self.products = SqlAlchemyProductRepository(self.session)
        self.customers = SqlAlchemyCustomerRepository(self.session)
        self.orders = SqlAlchemyOrderRepository(self.session)
        self.payments = SqlAlchemyPaymentRepository(self.session)
        return super().__enter__()

    def __exit__(self, *args) -> None:
        try:
            super().__exit__(*args)
        finally:
            self.session.close()
            self.session = None

    def commit(self) -> None:
        with translate_db_errors():
            self.session.commit()

    def rollback(self) -> None:
        if self.session is not None:
            self.session.rollback()
