from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional


class CatalogModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StoreLocation(CatalogModel):
    """Structured store location."""
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class StoreResponse(CatalogModel):
    """Store as shown inside a product detail."""
    id: int
    name: str
    location: StoreLocation
    logo: Optional[str] = None


class CategoryResponse(CatalogModel):
    id: int
    name: str


class ProductSummary(CatalogModel):
    """Product row of a listing, enriched with its images and store name."""
    id: int
    name: str
    description: Optional[str] = None
    price: float
    size: Optional[str] = None
    brand_name: Optional[str] = None
    quantity: int
    store_id: int
    store_name: Optional[str] = None
    images: list[str] = []
    created_at: Optional[datetime] = None


class ProductListResponse(CatalogModel):
    """Schema for paginated product list response."""
    message: str
    products: list[ProductSummary]
    total: int
    current_page: int
    max_page_count: int


class CommentResponse(CatalogModel):
    id: int
    review_id: int
    body: str
    author_name: Optional[str] = None
    created_at: Optional[datetime] = None


class ReviewResponse(CatalogModel):
    """Review with its own page of comments."""
    id: int
    rating: int
    body: Optional[str] = None
    author_name: Optional[str] = None
    created_at: Optional[datetime] = None
    comments: list[CommentResponse] = []
    comments_total: int = 0
    comments_max_page_count: int = 0


class ProductDetail(ProductSummary):
    """Product with store, categories and paginated reviews."""
    store: Optional[StoreResponse] = None
    categories: list[CategoryResponse] = []
    reviews: list[ReviewResponse] = []
    reviews_total: int = 0
    reviews_current_page: int = 1
    reviews_max_page_count: int = 0
    comments_current_page: int = 1


class ProductDetailResponse(CatalogModel):
    message: str
    product: ProductDetail


class CommentListResponse(CatalogModel):
    """Schema for paginated comments of a single review."""
    message: str
    comments: list[CommentResponse]
    total: int
    current_page: int
    max_page_count: int


class CategoryListResponse(CatalogModel):
    message: str
    categories: list[CategoryResponse]


class PopularProduct(CatalogModel):
    """Ranked product with purchase count and one representative image."""
    rank: int
    product_id: int
    purchases: int
    name: str
    size: Optional[str] = None
    price: float
    description: Optional[str] = None
    brand_name: Optional[str] = None
    image: Optional[str] = None


class PopularProductsResponse(CatalogModel):
    message: str
    products: list[PopularProduct]


class ErrorResponse(BaseModel):
    """Error body returned with every non-2xx status."""
    message: str
    error: str
