from celery import Celery

from eventhall.core.config import settings

celery_app = Celery(
    "eventhall",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["eventhall.worker.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_always_eager=settings.celery_task_always_eager,
    task_eager_propagates=False,
    task_ignore_result=True,
)
