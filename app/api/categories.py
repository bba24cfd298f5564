from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.params import product_list_params
from app.api.products import ERROR_RESPONSES, page_response
from app.database import get_db
from app.schemas.params import ProductListParams
from app.schemas.product import CategoryListResponse, ProductListResponse
from app.services.catalog_service import CatalogService
from app.services.filters import ProductFilter
from app.services.storage import StorageQuery

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get(
    "/",
    response_model=CategoryListResponse,
    responses=ERROR_RESPONSES,
    summary="List categories",
)
def list_categories(db: Session = Depends(get_db)):
    """Get all categories ordered by name."""
    service = CatalogService(StorageQuery(db))
    categories = service.list_categories()

    return CategoryListResponse(
        message="Categories retrieved successfully" if categories else "No categories found",
        categories=categories,
    )


@router.get(
    "/{category_id}/products",
    response_model=ProductListResponse,
    responses=ERROR_RESPONSES,
    summary="List products of a category",
    description="Paginated products of one category. Returns 404 when the category doesn't exist."
)
def list_category_products(
    category_id: int,
    params: ProductListParams = Depends(product_list_params),
    db: Session = Depends(get_db)
):
    """Get paginated products of a category, filtered by price range."""
    service = CatalogService(StorageQuery(db))
    result = service.list_by_category(
        category_id,
        ProductFilter(min_price=params.min_price, max_price=params.max_price),
        params.page,
        params.limit,
    )
    return page_response(result, "No products found for this category")
