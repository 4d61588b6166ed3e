"""Celery application configuration"""

from celery import Celery
from app.config import settings

# Create Celery app
celery_app = Celery(
    "restaurant_sites",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.jobs.tasks",
    ],
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Beat schedule mirrors the /cron endpoints for deployments without an external scheduler
    beat_schedule={
        "sweep-domain-health": {
            "task": "sweep_domain_health",
            "schedule": 900.0,  # Every 15 minutes
        },
        "refresh-team-schedules": {
            "task": "refresh_schedules",
            "schedule": float(settings.schedule_cache_ttl_seconds),
        },
    },
)
