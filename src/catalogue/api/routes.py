"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter, Depends, Query, Response

from catalogue.api.schemas import (
    CategoryRequest,
    CategoryResponse,
    CreateProductRequest,
    ProductPageResponse,
    ProductResponse,
    RestockRequest,
    UpdateProductRequest,
)
from catalogue.category.management import list_categories, upsert_category
from catalogue.product.management import (
    create_product,
    delete_product,
    get_product,
    list_products,
    restock_product,
    update_product,
)
from identity.api.dependencies import require_admin
from shared.dependencies import get_uow
from shared.persistence.unit_of_work import AbstractUnitOfWork

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# --- Product endpoints ---


@product_router.get("", response_model=ProductPageResponse)
def browse_products(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    category_id: str | None = None,
    uow: AbstractUnitOfWork = Depends(get_uow),
) -> ProductPageResponse:
    products, total = list_products(uow, limit=limit, offset=offset, category_id=category_id)
    return ProductPageResponse(
        items=[ProductResponse.from_product(product) for product in products],
        total=total,
        limit=limit,
        offset=offset,
    )


@product_router.get("/{product_id}", response_model=ProductResponse)
def product_detail(product_id: str, uow: AbstractUnitOfWork = Depends(get_uow)) -> ProductResponse:
    return ProductResponse.from_product(get_product(uow, product_id))


# --- Category endpoints ---


@category_router.get("", response_model=list[CategoryResponse])
def browse_categories(uow: AbstractUnitOfWork = Depends(get_uow)) -> list[CategoryResponse]:
    return [CategoryResponse(id=category.id, name=category.name) for category in list_categories(uow)]


# --- Admin endpoints ---


@admin_router.post("/products", status_code=201, response_model=ProductResponse)
def add_product(body: CreateProductRequest, uow: AbstractUnitOfWork = Depends(get_uow)) -> ProductResponse:
    product = create_product(
        uow,
        name=body.name,
        price=body.price,
        stock=body.stock,
        description=body.description,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    return ProductResponse.from_product(product)


@admin_router.put("/products/{product_id}", response_model=ProductResponse)
def edit_product(
    product_id: str, body: UpdateProductRequest, uow: AbstractUnitOfWork = Depends(get_uow)
) -> ProductResponse:
    product = update_product(
        uow,
        product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    return ProductResponse.from_product(product)


@admin_router.post("/products/{product_id}/restock", response_model=ProductResponse)
def restock(product_id: str, body: RestockRequest, uow: AbstractUnitOfWork = Depends(get_uow)) -> ProductResponse:
    return ProductResponse.from_product(restock_product(uow, product_id, body.quantity))


@admin_router.delete("/products/{product_id}", status_code=204)
def remove_product(product_id: str, uow: AbstractUnitOfWork = Depends(get_uow)) -> Response:
    delete_product(uow, product_id)
    return Response(status_code=204)


@admin_router.post("/categories", status_code=201, response_model=CategoryResponse)
def add_category(body: CategoryRequest, uow: AbstractUnitOfWork = Depends(get_uow)) -> CategoryResponse:
    category = upsert_category(uow, body.name)
    return CategoryResponse(id=category.id, name=category.name)


@admin_router.put("/categories/{category_id}", response_model=CategoryResponse)
def rename_category(
    category_id: str, body: CategoryRequest, uow: AbstractUnitOfWork = Depends(get_uow)
) -> CategoryResponse:
    category = upsert_category(uow, body.name, category_id=category_id)
    return CategoryResponse(id=category.id, name=category.name)
