"""Category administration."""

import structlog

from catalogue.category.category import Category
from shared.errors import Conflict, NotFound
from shared.persistence.unit_of_work import AbstractUnitOfWork

logger = structlog.get_logger(__name__)


def upsert_category(uow: AbstractUnitOfWork, name: str, category_id: str | None = None) -> Category:
    """Create a category, or rename the one with ``category_id``.

    Names are unique; reusing another category's name raises ``Conflict``.
    """
    with uow:
        if category_id is None:
            category = Category(name=name)
            existing = uow.categories.get_by_name(category.name)
            if existing is not None:
                raise Conflict("Category name already exists", {"name": [category.name]})
            uow.categories.add(category)
        else:
            category = uow.categories.get(category_id)
            if category is None:
                raise NotFound("Category not found", {"category_id": category_id})
            category.rename(name)
            existing = uow.categories.get_by_name(category.name)
            if existing is not None and existing.id != category.id:
                raise Conflict("Category name already exists", {"name": [category.name]})
            uow.categories.save(category)
        uow.commit()

    logger.info("category_saved", category_id=category.id, name=category.name)
    return category


def list_categories(uow: AbstractUnitOfWork) -> list[Category]:
    with uow:
        return uow.categories.list()
