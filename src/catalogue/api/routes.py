"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter, Query

from catalogue.api.schemas import (
    CategoryDetailResponse,
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductListResponse,
    ProductResponse,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from catalogue.products import Catalogue, ProductDetails
from identity.auth.dependencies import AdminIdentity
from shared.database import get_database
from shared.responses import ApiResponse, Pagination

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


def _catalogue() -> Catalogue:
    return Catalogue(get_database())


# --- Product endpoints ---


@product_router.get("", response_model=ApiResponse[ProductListResponse])
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category_id: str | None = None,
) -> ApiResponse[ProductListResponse]:
    result = _catalogue().list_products(page=page, limit=limit, category_id=category_id)
    return ApiResponse(
        message="Products retrieved successfully",
        data=ProductListResponse(
            products=[ProductResponse.model_validate(product) for product in result.products],
            pagination=Pagination.of(result.page, result.limit, result.total),
        ),
    )


@product_router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
def get_product(product_id: str) -> ApiResponse[ProductResponse]:
    product = _catalogue().get_product(product_id)
    return ApiResponse(message="Product retrieved successfully", data=ProductResponse.model_validate(product))


@product_router.post("", status_code=201, response_model=ApiResponse[ProductResponse])
def create_product(body: CreateProductRequest, admin: AdminIdentity) -> ApiResponse[ProductResponse]:
    product = _catalogue().create_product(ProductDetails(**body.model_dump()))
    return ApiResponse(message="Product created successfully", data=ProductResponse.model_validate(product))


@product_router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
def update_product(product_id: str, body: UpdateProductRequest, admin: AdminIdentity) -> ApiResponse[ProductResponse]:
    product = _catalogue().update_product(product_id, body.model_dump(exclude_unset=True))
    return ApiResponse(message="Product updated successfully", data=ProductResponse.model_validate(product))


# --- Category endpoints ---


@category_router.get("", response_model=ApiResponse[list[CategoryResponse]])
def list_categories() -> ApiResponse[list[CategoryResponse]]:
    categories = _catalogue().list_categories()
    return ApiResponse(
        message="Categories retrieved successfully",
        data=[CategoryResponse.model_validate(category) for category in categories],
    )


@category_router.post("", status_code=201, response_model=ApiResponse[CategoryResponse])
def create_category(body: CreateCategoryRequest, admin: AdminIdentity) -> ApiResponse[CategoryResponse]:
    category = _catalogue().create_category(body.name, body.slug, body.description)
    return ApiResponse(message="Category created successfully", data=CategoryResponse.model_validate(category))


@category_router.get("/slug/{slug}", response_model=ApiResponse[CategoryDetailResponse])
def get_category_by_slug(slug: str) -> ApiResponse[CategoryDetailResponse]:
    details = _catalogue().get_category_by_slug(slug)
    data = CategoryDetailResponse(
        **CategoryResponse.model_validate(details.category).model_dump(),
        product_count=details.product_count,
    )
    return ApiResponse(message="Category fetched successfully", data=data)


@category_router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
def update_category(
    category_id: str, body: UpdateCategoryRequest, admin: AdminIdentity
) -> ApiResponse[CategoryResponse]:
    category = _catalogue().update_category(category_id, body.model_dump(exclude_unset=True, exclude_none=True))
    return ApiResponse(message="Category updated successfully", data=CategoryResponse.model_validate(category))


@category_router.delete("/{category_id}", response_model=ApiResponse[None])
def delete_category(category_id: str, admin: AdminIdentity) -> ApiResponse[None]:
    _catalogue().delete_category(category_id)
    return ApiResponse(message="Category deleted successfully")
