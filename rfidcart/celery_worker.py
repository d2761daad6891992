# rfidcart/celery_worker.py
from celery import Celery

from rfidcart.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    RELEASE_INTERVAL_SECONDS,
)

celery_app = Celery(
    "rfidcart",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAZNE: explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "rfidcart.tasks.release",
    "rfidcart.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "release-abandoned-carts": {
        "task": "rfidcart.tasks.release.release_abandoned_carts_task",
        "schedule": RELEASE_INTERVAL_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
