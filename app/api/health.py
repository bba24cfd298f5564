from fastapi import APIRouter
from sqlalchemy import text
import logging

from app.database import engine
from app.utils.cache import redis_client

router = APIRouter(prefix="/health", tags=["Health"])

logger = logging.getLogger(__name__)


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the catalog database and Redis are reachable."
)
def readiness_check():
    """
    Readiness check for all dependencies.

    Returns status of:
    - Database connection
    - Redis connection (ranking cache and task broker)
    """
    checks = {
        "database": False,
        "redis": False
    }

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        logger.warning(f"Readiness: database unreachable: {e}")
        checks["database_error"] = "unreachable"

    try:
        redis_client.ping()
        checks["redis"] = True
    except Exception as e:
        logger.warning(f"Readiness: redis unreachable: {e}")
        checks["redis_error"] = "unreachable"

    all_healthy = all([checks["database"], checks["redis"]])

    return {
        "status": "ready" if all_healthy else "not_ready",
        "checks": checks
    }
