"""Product administration and browsing."""

from decimal import Decimal

import structlog

from catalogue.product.product import Product
from shared.errors import Conflict, NotFound, ProductNotFound, ValidationError
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)

MAX_PAGE_SIZE = 100


def _check_category(uow: AbstractUnitOfWork, category_id: str | None) -> None:
    if category_id is not None and uow.categories.get(category_id) is None:
        raise NotFound("Category not found", {"category_id": category_id})


def list_products(
    uow: AbstractUnitOfWork, limit: int = 20, offset: int = 0, category_id: str | None = None
) -> tuple[list[Product], int]:
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}", {"limit": [str(limit)]})
    if offset < 0:
        raise ValidationError("offset must not be negative", {"offset": [str(offset)]})
    with uow:
        return uow.products.list(limit=limit, offset=offset, category_id=category_id)


def get_product(uow: AbstractUnitOfWork, product_id: str) -> Product:
    with uow:
        product = uow.products.get(product_id)
    if product is None:
        raise ProductNotFound(details={"product_id": product_id})
    return product


def create_product(
    uow: AbstractUnitOfWork,
    name: str,
    price: Decimal,
    stock: int = 0,
    description: str | None = None,
    category_id: str | None = None,
    image_url: str | None = None,
) -> Product:
    product = Product(
        name=name,
        price=price,
        stock=stock,
        description=description,
        category_id=category_id,
        image_url=image_url,
    )
    with uow:
        _check_category(uow, category_id)
        uow.products.add(product)
        uow.commit()

    logger.info("product_created", product_id=product.id, price=str(product.price), stock=product.stock)
    return product


def update_product(
    uow: AbstractUnitOfWork,
    product_id: str,
    name: str | None = None,
    description: str | None = None,
    price: Decimal | None = None,
    category_id: str | None = None,
    image_url: str | None = None,
) -> Product:
    """Edit a product's details. Stock is changed only through ``restock_product``."""
    with uow:
        product = uow.products.get_for_update(product_id)
        if product is None:
            raise ProductNotFound(details={"product_id": product_id})
        _check_category(uow, category_id)

        product.update_details(name=name, description=description, category_id=category_id, image_url=image_url)
        if price is not None:
            product.change_price(price)
        uow.products.save(product)
        uow.commit()

    logger.info("product_updated", product_id=product_id)
    return product


def restock_product(uow: AbstractUnitOfWork, product_id: str, quantity: int) -> Product:
    with uow:
        product = uow.products.get_for_update(product_id)
        if product is None:
            raise ProductNotFound(details={"product_id": product_id})
        product.add_stock(quantity)
        uow.products.save(product)
        uow.commit()

    logger.info("product_restocked", product_id=product_id, quantity=quantity, stock=product.stock)
    return product


def delete_product(uow: AbstractUnitOfWork, product_id: str) -> None:
    with uow:
        product = uow.products.get_for_update(product_id)
        if product is None:
            raise ProductNotFound(details={"product_id": product_id})
        if uow.orders.count_items_for_product(product_id):
            raise Conflict("Product is referenced by existing orders", {"product_id": product_id})
        uow.products.delete(product_id)
        uow.commit()

    logger.info("product_deleted", product_id=product_id)
