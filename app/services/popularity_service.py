from pydantic import ValidationError
from typing import List, Optional
import logging

from app.models.payment import Payment
from app.models.photo import PhotoOwner, PhotoRole
from app.models.product import Product
from app.schemas.product import PopularProduct
from app.services.photos import photo_paths
from app.services.storage import StorageQuery
from app.utils.cache import CacheService

logger = logging.getLogger(__name__)


class PopularityService:
    """
    Ranks products by how often they were paid for.

    RANKING STRATEGY:
    =================
    1. One aggregate over the payment ledger: count per product, highest
       count first, product id ascending on ties, top ``n`` only
    2. One batched lookup of the ranked products (no query per product)
    3. One batched lookup of their product images
    4. Merge in rank order, dropping ledger entries whose product no
       longer exists

    The ledger is append-only and keeps ids of deleted products, so step 4
    is an expected filtering step, not an error path. Ranks are numbered
    after the drop, so they are always 1..k.

    When a cache is given, rankings are read through it under
    ``popular:{n}``.
    """

    CACHE_PREFIX = "popular"

    def __init__(self, storage: StorageQuery, cache: Optional[CacheService] = None, ttl: int = None):
        self.storage = storage
        self.cache = cache
        self.ttl = ttl

    def top_popular_products(self, n: int = 10) -> List[PopularProduct]:
        """
        Get the ``n`` most purchased products.

        Args:
            n: Number of ranked entries to compute

        Returns:
            Ranked products, possibly fewer than ``n``; empty when there are
            no payments
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")

        if self.cache is not None:
            cached = self.cache.get(self.CACHE_PREFIX, str(n))
            if cached is not None:
                try:
                    ranked = [PopularProduct.model_validate(item) for item in cached]
                    logger.debug(f"Popular products cache hit for n={n}")
                    return ranked
                except (ValidationError, TypeError) as e:
                    # Stale or foreign entry: recompute and overwrite it
                    logger.warning(f"Discarding unreadable popular products cache entry for n={n}: {e}")
            else:
                logger.debug(f"Popular products cache miss for n={n}")

        ranked = self._rank(n)

        if self.cache is not None:
            self.cache.set(
                self.CACHE_PREFIX,
                str(n),
                [item.model_dump() for item in ranked],
                self.ttl,
            )

        return ranked

    def invalidate(self) -> int:
        """Drop every cached ranking."""
        if self.cache is None:
            return 0
        return self.cache.delete_pattern(f"{self.CACHE_PREFIX}:*")

    def _rank(self, n: int) -> List[PopularProduct]:
        counts = self.storage.count_grouped(Payment.product_id, limit=n)
        if not counts:
            return []

        product_ids = [product_id for product_id, _ in counts]
        products = {
            p.id: p for p in self.storage.find(Product, Product.id.in_(product_ids))
        }
        images = photo_paths(
            self.storage, PhotoOwner.PRODUCT, list(products), PhotoRole.PRODUCT_IMAGE
        )

        live_counts = [(pid, count) for pid, count in counts if pid in products]
        dropped = len(counts) - len(live_counts)
        if dropped:
            logger.info(f"Dropped {dropped} ranked entries referencing deleted products")

        ranked = []
        for rank, (product_id, purchases) in enumerate(live_counts, start=1):
            product = products[product_id]
            ranked.append(
                PopularProduct(
                    rank=rank,
                    product_id=product.id,
                    purchases=purchases,
                    name=product.name,
                    size=product.size,
                    price=product.price,
                    description=product.description,
                    brand_name=product.brand_name,
                    image=next(iter(images.get(product.id, [])), None),
                )
            )
        return ranked
