"""Unit of work port.

Services receive a unit of work and open one transaction per ``with`` block::

    with uow:
        product = uow.products.get_for_update(product_id)
        product.remove_stock(2)
        uow.products.save(product)
        uow.commit()

Leaving the block without ``commit()`` rolls everything back, including on
exceptions. Row locks taken inside the block are released when it ends. The
same object may be entered again afterwards; each entry is a new transaction.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalogue.category.repository import CategoryRepository
    from catalogue.product.repository import ProductRepository
    from identity.customer.repository import CustomerRepository
    from ordering.order.repository import OrderRepository
    from payments.payment.repository import PaymentRepository


class AbstractUnitOfWork(ABC):
    categories: "CategoryRepository"
    products: "ProductRepository"
    customers: "CustomerRepository"
    orders: "OrderRepository"
    payments: "PaymentRepository"

    def __enter__(self) -> "AbstractUnitOfWork":
        return self

    def __exit__(self, *args) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
