from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.params import popular_params, product_detail_params, product_list_params, search_params
from app.config import get_settings
from app.database import get_db
from app.schemas.params import PopularParams, ProductDetailParams, ProductListParams, SearchParams
from app.schemas.product import (
    ErrorResponse,
    PopularProductsResponse,
    ProductDetailResponse,
    ProductListResponse,
)
from app.services.catalog_service import CatalogService, ProductPage
from app.services.filters import ProductFilter
from app.services.popularity_service import PopularityService
from app.services.storage import StorageQuery
from app.utils.cache import get_cache

router = APIRouter(prefix="/products", tags=["Products"])

settings = get_settings()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def page_response(result: ProductPage, empty_message: str = "No products found") -> ProductListResponse:
    """Shape a product page into the list response."""
    return ProductListResponse(
        message="Products retrieved successfully" if result.products else empty_message,
        products=result.products,
        total=result.total,
        current_page=result.page,
        max_page_count=result.max_page,
    )


@router.get(
    "/",
    response_model=ProductListResponse,
    responses=ERROR_RESPONSES,
    summary="List products",
    description="Get a paginated list of products, newest first, filtered by price range."
)
def list_products(
    params: ProductListParams = Depends(product_list_params),
    db: Session = Depends(get_db)
):
    """
    Get paginated list of products.

    - **minPrice** / **maxPrice**: inclusive price range
    - A page past the last page returns 404; an empty catalog returns an empty page
    """
    service = CatalogService(StorageQuery(db))
    result = service.list_products(
        ProductFilter(min_price=params.min_price, max_price=params.max_price),
        params.page,
        params.limit,
    )
    return page_response(result)


@router.get(
    "/search",
    response_model=ProductListResponse,
    responses=ERROR_RESPONSES,
    summary="Search products",
    description="Case-insensitive search on product names. The price range is not applied."
)
def search_products(
    params: SearchParams = Depends(search_params),
    db: Session = Depends(get_db)
):
    """Search products by name. Parameter **s** is required."""
    service = CatalogService(StorageQuery(db))
    result = service.search(params.term, params.page, params.limit)
    return page_response(result, "No products matched the search")


@router.get(
    "/popular",
    response_model=PopularProductsResponse,
    responses=ERROR_RESPONSES,
    summary="Most purchased products",
    description="Products ranked by number of payments, ties broken by product ID."
)
def popular_products(
    params: PopularParams = Depends(popular_params),
    db: Session = Depends(get_db)
):
    """
    Get the top **n** products by purchase count.

    Rankings are cached in Redis when caching is enabled.
    """
    service = PopularityService(StorageQuery(db), cache=get_cache(), ttl=settings.POPULAR_CACHE_TTL)
    ranked = service.top_popular_products(params.n)

    return PopularProductsResponse(
        message="Popular products retrieved successfully" if ranked else "No popular products found",
        products=ranked,
    )


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    responses=ERROR_RESPONSES,
    summary="Get product by ID",
    description="Get a product with its store, categories, and paginated reviews and comments."
)
def get_product(
    product_id: int,
    params: ProductDetailParams = Depends(product_detail_params),
    db: Session = Depends(get_db)
):
    """
    Get a product by ID.

    - **pageReviews** / **limitReviews**: window over the product's reviews
    - **pageComments** / **limitComments**: window applied to each review's comments
    """
    service = CatalogService(StorageQuery(db))
    product = service.get_product_detail(
        product_id,
        params.page_reviews,
        params.limit_reviews,
        params.page_comments,
        params.limit_comments,
    )
    return ProductDetailResponse(message="Product retrieved successfully", product=product)
