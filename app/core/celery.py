"""
Celery configuration for background tasks
"""
from celery import Celery
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

redis_url = settings.redis_url

# Create Celery instance
celery_app = Celery(
    "zenith",
    broker=redis_url,
    backend=redis_url,
    include=[
        "app.modules.currencies.tasks",
    ]
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,  # 5 minutes
    task_soft_time_limit=4 * 60,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    # Result backend settings
    result_expires=3600,  # 1 hour

    # Task routes for different queues
    task_routes={
        "app.modules.currencies.tasks.*": {"queue": "currencies"},
    },

    # Beat schedule for periodic tasks
    beat_schedule={
        "update-exchange-rates": {
            "task": "app.modules.currencies.tasks.update_exchange_rates",
            "schedule": 60.0,  # Cada minuto; la frecuencia real viene de company_settings
        },
    }
)

if __name__ == "__main__":
    celery_app.start()
