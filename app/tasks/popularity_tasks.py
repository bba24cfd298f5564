import logging

from app.config import get_settings
from app.database import SessionLocal
from app.services.popularity_service import PopularityService
from app.services.storage import StorageQuery
from app.tasks.celery_app import celery_app
from app.utils.cache import get_cache

logger = logging.getLogger(__name__)

settings = get_settings()


@celery_app.task(bind=True, name="refresh_popular_products")
def refresh_popular_products(self, n: int = None) -> dict:
    """
    Background task to recompute the popular products ranking.

    Drops every cached ranking, then computes and caches the top ``n``
    so the next read of the default ranking is served from Redis.

    Args:
        n: Number of ranked products (defaults to POPULAR_DEFAULT_LIMIT)

    Returns:
        Dictionary with refresh result
    """
    n = n or settings.POPULAR_DEFAULT_LIMIT
    logger.info(f"Refreshing popular products ranking (n={n})")

    db = SessionLocal()

    try:
        service = PopularityService(
            StorageQuery(db), cache=get_cache(), ttl=settings.POPULAR_CACHE_TTL
        )
        invalidated = service.invalidate()
        ranked = service.top_popular_products(n)

        logger.info(f"Popular products ranking refreshed: {len(ranked)} products")

        return {
            "status": "success",
            "n": n,
            "ranked": len(ranked),
            "invalidated": invalidated,
        }

    except Exception as e:
        logger.error(f"Error refreshing popular products: {e}")
        raise self.retry(exc=e, countdown=60, max_retries=3)

    finally:
        db.close()
