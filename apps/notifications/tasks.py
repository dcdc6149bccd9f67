"""
Celery tasks for push notification delivery.
"""

import logging
from datetime import timedelta

from celery import shared_task
from django.utils import timezone

from .services import PushService

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=0)
def send_push_notification(self, title: str, body: str, url: str = '', image_url=None, article_ids=None):
    """
    Fan a notification out to all subscribers.

    With article_ids and no url this is a digest linking to the homepage.
    """
    service = PushService()
    if article_ids and not url:
        result = service.send_digest(article_ids, title=title, body=body)
    else:
        result = service.send_to_all(
            title=title,
            body=body,
            url=url,
            image_url=image_url,
            article_ids=article_ids,
        )
    logger.info("Push task %s finished: %s", self.request.id, result)
    return result


@shared_task
def prune_notification_logs(days: int = 90):
    """Delete notification logs older than days."""
    cutoff = timezone.now() - timedelta(days=days)
    deleted = PushService().prune_logs(cutoff)
    logger.info("Pruned %d notification log(s) older than %d days", deleted, days)
    return {'deleted': deleted}
