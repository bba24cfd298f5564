from dataclasses import dataclass, field
from typing import Optional, List

from app.config import get_settings
from app.models.product import Product, ProductCategory
from app.services.exceptions import BadRequestError


@dataclass(frozen=True)
class ProductFilter:
    """
    Product constraints shared by every listing.

    Price bounds are inclusive and default to the configured range. Search
    is a case-insensitive substring match on the product name with LIKE
    wildcards escaped.
    """
    min_price: float = field(default_factory=lambda: get_settings().DEFAULT_MIN_PRICE)
    max_price: float = field(default_factory=lambda: get_settings().DEFAULT_MAX_PRICE)
    category_id: Optional[int] = None
    store_id: Optional[int] = None
    search_term: Optional[str] = None
    apply_price: bool = True

    @classmethod
    def for_search(cls, term: Optional[str]) -> "ProductFilter":
        """Search matches on the name alone; the price range is not applied."""
        return cls(search_term=term, apply_price=False)

    def validate(self) -> None:
        """Reject contradictory constraints before anything is read."""
        if self.apply_price:
            if self.min_price < 0 or self.max_price < 0:
                raise BadRequestError("Invalid price range", "Price bounds must be non-negative")
            if self.min_price > self.max_price:
                raise BadRequestError(
                    "Invalid price range",
                    f"minPrice ({self.min_price}) is greater than maxPrice ({self.max_price})",
                )
        if self.search_term is not None and not self.search_term.strip():
            raise BadRequestError("Search term is required", "Parameter 's' must not be empty")

    def criteria(self) -> List:
        """Build the SQLAlchemy clauses; the storage layer ANDs them together."""
        clauses = []

        if self.apply_price:
            clauses.append(Product.price >= self.min_price)
            clauses.append(Product.price <= self.max_price)

        if self.category_id is not None:
            clauses.append(
                Product.category_links.any(ProductCategory.category_id == self.category_id)
            )

        if self.store_id is not None:
            clauses.append(Product.store_id == self.store_id)

        if self.search_term is not None:
            clauses.append(Product.name.icontains(self.search_term.strip(), autoescape=True))

        return clauses
