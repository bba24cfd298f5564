from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.params import product_list_params
from app.api.products import ERROR_RESPONSES, page_response
from app.database import get_db
from app.schemas.params import ProductListParams
from app.schemas.product import ProductListResponse
from app.services.catalog_service import CatalogService
from app.services.filters import ProductFilter
from app.services.storage import StorageQuery

router = APIRouter(prefix="/stores", tags=["Stores"])


@router.get(
    "/{store_id}/products",
    response_model=ProductListResponse,
    responses=ERROR_RESPONSES,
    summary="List products of a store",
    description="Paginated products of one store. Returns 404 when the store doesn't exist."
)
def list_store_products(
    store_id: int,
    params: ProductListParams = Depends(product_list_params),
    db: Session = Depends(get_db)
):
    """Get paginated products of a store, filtered by price range."""
    service = CatalogService(StorageQuery(db))
    result = service.list_by_store(
        store_id,
        ProductFilter(min_price=params.min_price, max_price=params.max_price),
        params.page,
        params.limit,
    )
    return page_response(result, "No products found for this store")
