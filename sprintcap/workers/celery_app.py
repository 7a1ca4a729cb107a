"""
Celery application instance.

Configured with Redis broker and backend. Beat refreshes the persisted
current sprint shortly after midnight so dashboards never read a stale row.
"""

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from sprintcap.core.config import settings
from sprintcap.core.logging import configure_logging

celery_app = Celery(
    "sprintcap",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "sprintcap.workers.sprint_tasks",
    ],
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    # Timezone
    timezone="UTC",
    enable_utc=True,
    # Results
    result_expires=3600,
    # Retry policy
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    # Concurrency
    worker_prefetch_multiplier=1,
    # Routing
    task_default_queue="default",
    task_queues={
        "default": {},
        "sprints": {},
    },
    task_routes={
        "sprintcap.workers.sprint_tasks.*": {"queue": "sprints"},
    },
    # Schedule
    beat_schedule={
        "refresh-global-sprint": {
            "task": "sprintcap.workers.sprint_tasks.refresh_global_sprint",
            "schedule": crontab(hour=0, minute=5),
        },
    },
)


@setup_logging.connect
def setup_worker_logging(*args, **kwargs) -> None:
    configure_logging(settings.LOG_LEVEL)
