from celery.utils.log import get_task_logger

from eventhall.core.config import settings
from eventhall.notifications import render_notification
from eventhall.worker.celery_app import celery_app

logger = get_task_logger(__name__)


@celery_app.task(name="deliver_notification")
def deliver_notification(template_id: str, recipient: str, payload: dict) -> dict:
    subject, body = render_notification(template_id, payload)

    # Mail transport is external; this is the hand-off point.
    logger.info(
        "notification_delivered template=%s recipient=%s sender=%s subject=%r chars=%d",
        template_id,
        recipient,
        settings.mail_from_address,
        subject,
        len(body),
    )
    return {"template": template_id, "recipient": recipient, "subject": subject}
