from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.params import comment_list_params
from app.api.products import ERROR_RESPONSES
from app.database import get_db
from app.schemas.params import CommentListParams
from app.schemas.product import CommentListResponse
from app.services.catalog_service import CatalogService
from app.services.storage import StorageQuery

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get(
    "/{review_id}/comments",
    response_model=CommentListResponse,
    responses=ERROR_RESPONSES,
    summary="List comments of a review",
    description="Paginated comments of one review, newest first."
)
def list_review_comments(
    review_id: int,
    params: CommentListParams = Depends(comment_list_params),
    db: Session = Depends(get_db)
):
    """Get paginated comments of a review with their authors' names."""
    service = CatalogService(StorageQuery(db))
    result = service.list_review_comments(review_id, params.page, params.limit)

    return CommentListResponse(
        message="Review and its comments" if result.comments else "No comments found for this review",
        comments=result.comments,
        total=result.total,
        current_page=result.page,
        max_page_count=result.max_page,
    )
