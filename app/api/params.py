from fastapi import Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from typing import Optional

from app.schemas.params import (
    CommentListParams,
    PopularParams,
    ProductDetailParams,
    ProductListParams,
    QueryParams,
    SearchParams,
)


def build_params(model: type[QueryParams], **values) -> QueryParams:
    """
    Build a parameter struct from the query values that were supplied.

    Absent values take the struct's defaults; out-of-bounds values are
    reported as request validation errors (400).
    """
    try:
        return model(**{name: value for name, value in values.items() if value is not None})
    except ValidationError as e:
        raise RequestValidationError(
            [{**error, "loc": ("query", *error["loc"])} for error in e.errors(include_url=False)]
        ) from e


def product_list_params(
    page: Optional[int] = Query(None, description="Page number"),
    limit: Optional[int] = Query(None, description="Items per page"),
    min_price: Optional[float] = Query(None, alias="minPrice", description="Lowest price, inclusive"),
    max_price: Optional[float] = Query(None, alias="maxPrice", description="Highest price, inclusive"),
) -> ProductListParams:
    return build_params(
        ProductListParams, page=page, limit=limit, min_price=min_price, max_price=max_price
    )


def search_params(
    s: Optional[str] = Query(None, description="Text to look for in product names"),
    page: Optional[int] = Query(None, description="Page number"),
    limit: Optional[int] = Query(None, description="Items per page"),
) -> SearchParams:
    return build_params(SearchParams, term=s, page=page, limit=limit)


def product_detail_params(
    page_reviews: Optional[int] = Query(None, alias="pageReviews", description="Page of reviews"),
    limit_reviews: Optional[int] = Query(None, alias="limitReviews", description="Reviews per page"),
    page_comments: Optional[int] = Query(
        None, alias="pageComments", description="Page of comments inside each review"
    ),
    limit_comments: Optional[int] = Query(
        None, alias="limitComments", description="Comments per review"
    ),
) -> ProductDetailParams:
    return build_params(
        ProductDetailParams,
        page_reviews=page_reviews,
        limit_reviews=limit_reviews,
        page_comments=page_comments,
        limit_comments=limit_comments,
    )


def comment_list_params(
    page: Optional[int] = Query(None, description="Page number"),
    limit: Optional[int] = Query(None, description="Comments per page"),
) -> CommentListParams:
    return build_params(CommentListParams, page=page, limit=limit)


def popular_params(
    n: Optional[int] = Query(None, description="Number of ranked products"),
) -> PopularParams:
    return build_params(PopularParams, n=n)
