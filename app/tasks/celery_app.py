from celery import Celery

from app.config import get_settings

settings = get_settings()

# Create Celery application
celery_app = Celery(
    "catalog",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.tasks.popularity_tasks"]
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task settings
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max
    task_soft_time_limit=240,  # Soft limit 4 minutes

    # Worker settings
    worker_prefetch_multiplier=1,
    worker_concurrency=2,

    # Retry settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Periodic ranking refresh (run with `celery -A app.tasks.celery_app beat`)
    beat_schedule={
        "refresh-popular-products": {
            "task": "refresh_popular_products",
            "schedule": float(settings.POPULAR_REFRESH_SECONDS),
        },
    },
)
