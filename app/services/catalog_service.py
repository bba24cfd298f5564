from dataclasses import dataclass, replace
from sqlalchemy.orm import selectinload
from typing import Dict, List, Optional
import logging

from app.models.photo import PhotoOwner, PhotoRole
from app.models.product import Category, Product, ProductCategory
from app.models.review import Comment, Review
from app.models.store import Store
from app.schemas.product import (
    CategoryResponse,
    CommentResponse,
    ProductDetail,
    ProductSummary,
    ReviewResponse,
    StoreLocation,
    StoreResponse,
)
from app.services.exceptions import BadRequestError, NotFoundError
from app.services.filters import ProductFilter
from app.services.pagination import paginate
from app.services.photos import photo_paths
from app.services.storage import StorageQuery

logger = logging.getLogger(__name__)

# Newest first; id breaks timestamp ties so pages never overlap
PRODUCT_ORDER = (Product.created_at.desc(), Product.id.asc())
REVIEW_ORDER = (Review.created_at.desc(), Review.id.asc())
COMMENT_ORDER = (Comment.created_at.desc(), Comment.id.asc())


@dataclass
class ProductPage:
    products: List[ProductSummary]
    total: int
    page: int
    max_page: int


@dataclass
class CommentPage:
    comments: List[CommentResponse]
    total: int
    page: int
    max_page: int


class CatalogService:
    """
    Service class composing catalog views.

    This service handles:
    - Filtered, paginated product listings (all, per category, per store)
    - Name search
    - Product detail with paginated reviews and per-review comment pages
    - Comment pages of a single review
    - Category listing

    Parameter validation happens before the first read. A missing product,
    review or scoping entity raises NotFoundError; so does a page past the
    end of a non-empty listing. An empty listing is a successful empty page.
    """

    def __init__(self, storage: StorageQuery):
        self.storage = storage

    def list_products(self, product_filter: ProductFilter, page: int, limit: int) -> ProductPage:
        """
        Get a page of products matching the filter, newest first.

        Args:
            product_filter: Price range and optional scoping
            page: Page number (1-indexed)
            limit: Number of items per page

        Returns:
            ProductPage with enriched products and pagination metadata
        """
        product_filter.validate()
        return self._product_page(product_filter, page, limit)

    def list_by_category(
        self, category_id: int, product_filter: ProductFilter, page: int, limit: int
    ) -> ProductPage:
        """Same as list_products, restricted to an existing category."""
        product_filter.validate()

        if self.storage.find_by_id(Category, category_id) is None:
            raise NotFoundError("Category not found", f"Category with ID {category_id} not found")

        return self._product_page(replace(product_filter, category_id=category_id), page, limit)

    def list_by_store(
        self, store_id: int, product_filter: ProductFilter, page: int, limit: int
    ) -> ProductPage:
        """Same as list_products, restricted to an existing store."""
        product_filter.validate()

        if self.storage.find_by_id(Store, store_id) is None:
            raise NotFoundError("Store not found", f"Store with ID {store_id} not found")

        return self._product_page(replace(product_filter, store_id=store_id), page, limit)

    def search(self, term: Optional[str], page: int, limit: int) -> ProductPage:
        """
        Search products by name.

        The price range is not applied to search results.

        Raises:
            BadRequestError: If the term is missing or blank
        """
        if term is None or not term.strip():
            raise BadRequestError("Search term is required", "Parameter 's' must not be empty")

        return self._product_page(ProductFilter.for_search(term), page, limit)

    def get_product_detail(
        self,
        product_id: int,
        review_page: int,
        review_limit: int,
        comment_page: int,
        comment_limit: int,
    ) -> ProductDetail:
        """
        Get one product with a page of its reviews, each with a page of comments.

        The comment window (comment_page, comment_limit) is applied to every
        review separately. Nested pages past the end come back empty.

        Args:
            product_id: Product to show
            review_page: Page of reviews (1-indexed)
            review_limit: Reviews per page
            comment_page: Page of comments inside each review (1-indexed)
            comment_limit: Comments per review

        Returns:
            ProductDetail

        Raises:
            NotFoundError: If the product doesn't exist
        """
        product = self.storage.find_by_id(
            Product,
            product_id,
            include=[
                selectinload(Product.store),
                selectinload(Product.category_links).selectinload(ProductCategory.category),
            ],
        )
        if product is None:
            raise NotFoundError("Product not found", f"Product with ID {product_id} not found")

        reviews_total = self.storage.count(Review, Review.product_id == product.id)
        review_window = paginate(review_page, review_limit, reviews_total)

        reviews = []
        if reviews_total and review_window.in_range:
            reviews = self.storage.find(
                Review,
                Review.product_id == product.id,
                order_by=REVIEW_ORDER,
                limit=review_window.limit,
                offset=review_window.offset,
                include=[selectinload(Review.author)],
            )

        review_views = self._reviews_with_comments(reviews, comment_page, comment_limit)

        images = photo_paths(self.storage, PhotoOwner.PRODUCT, [product.id], PhotoRole.PRODUCT_IMAGE)
        detail = ProductDetail(
            **self._summary(product, images.get(product.id, [])).model_dump(),
            store=self._store_view(product.store),
            categories=[
                CategoryResponse.model_validate(link.category)
                for link in sorted(product.category_links, key=lambda link: link.category_id)
                if link.category is not None
            ],
            reviews=review_views,
            reviews_total=reviews_total,
            reviews_current_page=review_page,
            reviews_max_page_count=review_window.max_page,
            comments_current_page=comment_page,
        )

        logger.debug(
            f"Product #{product_id} detail: {len(review_views)} of {reviews_total} reviews"
        )
        return detail

    def list_review_comments(self, review_id: int, page: int, limit: int) -> CommentPage:
        """
        Get a page of comments for a single review, newest first.

        Raises:
            NotFoundError: If the review doesn't exist or the page is past the end
        """
        if self.storage.find_by_id(Review, review_id) is None:
            raise NotFoundError("Review not found", f"Review with ID {review_id} not found")

        total = self.storage.count(Comment, Comment.review_id == review_id)
        window = paginate(page, limit, total)
        if not window.in_range:
            raise NotFoundError(
                "Page not found", f"Page {page} exceeds the last page ({window.max_page})"
            )

        comments = []
        if total:
            comments = self.storage.find(
                Comment,
                Comment.review_id == review_id,
                order_by=COMMENT_ORDER,
                limit=window.limit,
                offset=window.offset,
                include=[selectinload(Comment.author)],
            )

        return CommentPage(
            comments=[self._comment_view(c) for c in comments],
            total=total,
            page=page,
            max_page=window.max_page,
        )

    def list_categories(self) -> List[CategoryResponse]:
        """Get every category ordered by name."""
        categories = self.storage.find(Category, order_by=(Category.name.asc(), Category.id.asc()))
        return [CategoryResponse.model_validate(c) for c in categories]

    def _product_page(self, product_filter: ProductFilter, page: int, limit: int) -> ProductPage:
        criteria = product_filter.criteria()

        total = self.storage.count(Product, *criteria)
        window = paginate(page, limit, total)

        if not window.in_range:
            raise NotFoundError(
                "Page not found", f"Page {page} exceeds the last page ({window.max_page})"
            )

        if total == 0:
            return ProductPage(products=[], total=0, page=page, max_page=0)

        products = self.storage.find(
            Product,
            *criteria,
            order_by=PRODUCT_ORDER,
            limit=window.limit,
            offset=window.offset,
            include=[selectinload(Product.store)],
        )

        images = photo_paths(
            self.storage, PhotoOwner.PRODUCT, [p.id for p in products], PhotoRole.PRODUCT_IMAGE
        )

        return ProductPage(
            products=[self._summary(p, images.get(p.id, [])) for p in products],
            total=total,
            page=page,
            max_page=window.max_page,
        )

    def _reviews_with_comments(
        self, reviews: List[Review], comment_page: int, comment_limit: int
    ) -> List[ReviewResponse]:
        if not reviews:
            return []

        review_ids = [r.id for r in reviews]
        comment_totals: Dict[int, int] = dict(
            self.storage.count_grouped(Comment.review_id, Comment.review_id.in_(review_ids))
        )

        comment_offset = (comment_page - 1) * comment_limit
        comments = []
        # Nothing to fetch when the window starts past every review's last comment
        if comment_offset < max(comment_totals.values(), default=0):
            comments = self.storage.find_windowed(
                Comment,
                Comment.review_id,
                review_ids,
                order_by=COMMENT_ORDER,
                limit=comment_limit,
                offset=comment_offset,
                include=[selectinload(Comment.author)],
            )

        comments_by_review: Dict[int, List[CommentResponse]] = {rid: [] for rid in review_ids}
        for comment in comments:
            comments_by_review[comment.review_id].append(self._comment_view(comment))

        views = []
        for review in reviews:
            total = comment_totals.get(review.id, 0)
            views.append(
                ReviewResponse(
                    id=review.id,
                    rating=review.rating,
                    body=review.body,
                    author_name=review.author.display_name if review.author else None,
                    created_at=review.created_at,
                    comments=comments_by_review[review.id],
                    comments_total=total,
                    comments_max_page_count=paginate(comment_page, comment_limit, total).max_page,
                )
            )
        return views

    def _store_view(self, store: Optional[Store]) -> Optional[StoreResponse]:
        if store is None:
            return None

        logos = photo_paths(self.storage, PhotoOwner.STORE, [store.id], PhotoRole.STORE_LOGO)
        return StoreResponse(
            id=store.id,
            name=store.name,
            location=StoreLocation(
                city=store.city,
                country=store.country,
                latitude=store.latitude,
                longitude=store.longitude,
            ),
            logo=next(iter(logos.get(store.id, [])), None),
        )

    @staticmethod
    def _summary(product: Product, images: List[str]) -> ProductSummary:
        return ProductSummary(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            size=product.size,
            brand_name=product.brand_name,
            quantity=product.quantity,
            store_id=product.store_id,
            store_name=product.store.name if product.store else None,
            images=images,
            created_at=product.created_at,
        )

    @staticmethod
    def _comment_view(comment: Comment) -> CommentResponse:
        return CommentResponse(
            id=comment.id,
            review_id=comment.review_id,
            body=comment.body,
            author_name=comment.author.display_name if comment.author else None,
            created_at=comment.created_at,
        )
