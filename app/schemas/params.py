"""
Recognized query parameters per operation.

Each model lists every parameter an operation accepts with its type,
bounds and default, and validates itself on construction. Routes build
them from the raw query string (see ``app/api/params.py``).
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from app.config import get_settings

settings = get_settings()


class QueryParams(BaseModel):
    """Base for parameter structs: immutable, unknown fields rejected."""
    model_config = ConfigDict(frozen=True, extra="forbid")


class ProductListParams(QueryParams):
    """Parameters of product listings (all, per category, per store)."""
    page: int = Field(1, ge=1, le=settings.MAX_PAGE, description="Page number")
    limit: int = Field(
        settings.PRODUCTS_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT, description="Items per page"
    )
    min_price: float = Field(settings.DEFAULT_MIN_PRICE, ge=0, description="Lowest price, inclusive")
    max_price: float = Field(settings.DEFAULT_MAX_PRICE, ge=0, description="Highest price, inclusive")


class SearchParams(QueryParams):
    """Parameters of the name search. A blank term is rejected by the service."""
    term: Optional[str] = Field(None, description="Text to look for in product names")
    page: int = Field(1, ge=1, le=settings.MAX_PAGE, description="Page number")
    limit: int = Field(
        settings.PRODUCTS_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT, description="Items per page"
    )


class ProductDetailParams(QueryParams):
    """Review window and the comment window applied to every review."""
    page_reviews: int = Field(1, ge=1, le=settings.MAX_PAGE, description="Page of reviews")
    limit_reviews: int = Field(
        settings.REVIEWS_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT, description="Reviews per page"
    )
    page_comments: int = Field(
        1, ge=1, le=settings.MAX_PAGE, description="Page of comments inside each review"
    )
    limit_comments: int = Field(
        settings.COMMENTS_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT, description="Comments per review"
    )


class CommentListParams(QueryParams):
    page: int = Field(1, ge=1, le=settings.MAX_PAGE, description="Page number")
    limit: int = Field(
        settings.COMMENTS_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT, description="Comments per page"
    )


class PopularParams(QueryParams):
    n: int = Field(
        settings.POPULAR_DEFAULT_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT, description="Number of ranked products"
    )
