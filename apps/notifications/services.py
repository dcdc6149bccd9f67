"""
Web push delivery.

PushService fans a notification out to every stored browser subscription
using pywebpush. Subscriptions the push service reports as gone (404/410)
are deleted; any other failure is logged and counted.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction
from pywebpush import webpush, WebPushException

from apps.core.exceptions import PushDeliveryError, ValidationError

from .models import NotificationLog, PushSubscriber

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20
EXPIRED_STATUS_CODES = (404, 410)


class PushService:
    """
    Service for sending push notifications via the Web Push API.
    """

    def __init__(self, private_key: Optional[str] = None, subject: Optional[str] = None):
        self.vapid_private_key = private_key or settings.VAPID_PRIVATE_KEY
        self.vapid_subject = subject or settings.VAPID_SUBJECT
        self.ttl = getattr(settings, 'PUSH_TTL_SECONDS', 86400)
        self.timeout = getattr(settings, 'PUSH_TIMEOUT_SECONDS', 10)

        if not self.vapid_private_key:
            logger.warning("VAPID keys not configured. Push notifications will not work.")

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, subscription: Dict[str, Any]):
        """
        Store a browser subscription.

        Re-subscribing a known endpoint refreshes its keys.

        Returns:
            (PushSubscriber, created)
        """
        if not isinstance(subscription, dict):
            raise ValidationError(message="Invalid keys")

        endpoint = subscription.get('endpoint')
        keys = subscription.get('keys')
        if not isinstance(keys, dict):
            keys = {}
        p256dh = keys.get('p256dh')
        auth = keys.get('auth')

        if not endpoint or not p256dh or not auth:
            raise ValidationError(message="Invalid keys")

        subscriber, created = PushSubscriber.objects.update_or_create(
            endpoint=endpoint,
            defaults={'p256dh': p256dh, 'auth': auth},
        )
        logger.info("Push subscription %s (%s)", subscriber.id, 'new' if created else 'refreshed')
        return subscriber, created

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def send_to_all(
        self,
        title: str,
        body: str,
        url: str,
        image_url: Optional[str] = None,
        article_ids: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Send one notification to every subscriber.

        Returns:
            Dict with sent/failed/removed counts and the log id
        """
        subscribers = list(PushSubscriber.objects.all())
        if not subscribers:
            raise ValidationError(message="No subscribers")

        if not self.vapid_private_key:
            raise PushDeliveryError(message="VAPID keys not configured")

        payload = json.dumps({
            'title': title,
            'body': body,
            'url': url,
            'image': image_url,
        })

        sent = 0
        failed = 0
        expired = []

        for subscriber in subscribers:
            try:
                self._send(subscriber, payload)
                sent += 1
            except WebPushException as e:
                status_code = getattr(e.response, 'status_code', None)
                if status_code in EXPIRED_STATUS_CODES:
                    expired.append(subscriber.id)
                else:
                    logger.error("Push to %s failed: %s", subscriber.id, e)
                failed += 1
            except Exception:
                logger.exception("Push to %s failed", subscriber.id)
                failed += 1

        if expired:
            PushSubscriber.objects.filter(id__in=expired).delete()
            logger.info("Removed %d expired push subscription(s)", len(expired))

        log = NotificationLog.objects.create(
            title=title,
            body=body,
            url=url,
            recipient_count=len(subscribers),
            delivered_count=sent,
            article_ids=[str(pk) for pk in (article_ids or [])],
        )

        logger.info(
            "Push notification '%s' sent to %d/%d subscriber(s)",
            title, sent, len(subscribers),
        )

        return {
            'sent': sent,
            'failed': failed,
            'removed': len(expired),
            'log_id': str(log.id),
        }

    def send_digest(self, article_ids: List[str], title: str, body: str) -> Dict[str, Any]:
        """Notify everyone about a set of articles, linking to the homepage."""
        return self.send_to_all(
            title=title,
            body=body,
            url=settings.SITE_URL.rstrip('/') + '/',
            article_ids=article_ids,
        )

    def _send(self, subscriber: PushSubscriber, payload: str) -> None:
        webpush(
            subscription_info=subscriber.subscription_info(),
            data=payload,
            vapid_private_key=self.vapid_private_key,
            vapid_claims={'sub': self.vapid_subject},
            ttl=self.ttl,
            timeout=self.timeout,
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def history(self, limit: int = HISTORY_LIMIT):
        return list(NotificationLog.objects.order_by('-sent_at')[:limit])

    @transaction.atomic
    def prune_logs(self, before) -> int:
        deleted, _ = NotificationLog.objects.filter(sent_at__lt=before).delete()
        return deleted
