"""
Push notification models.
"""

from django.db import models
from django.utils import timezone

from apps.core.models import BaseModel


class PushSubscriber(BaseModel):
    """
    A browser push subscription (one per endpoint).
    """

    endpoint = models.URLField(
        max_length=1000,
        unique=True,
        verbose_name='Endpoint',
        help_text='Push service URL issued by the browser'
    )

    p256dh = models.CharField(
        max_length=255,
        verbose_name='P-256 Key',
        help_text='Client public key for payload encryption'
    )

    auth = models.CharField(
        max_length=255,
        verbose_name='Auth Secret'
    )

    class Meta:
        db_table = 'push_subscribers'
        verbose_name = 'Push Subscriber'
        verbose_name_plural = 'Push Subscribers'
        ordering = ['-created_at']

    def __str__(self):
        return self.endpoint[:80]

    def subscription_info(self):
        """Dict in the shape pywebpush expects."""
        return {
            'endpoint': self.endpoint,
            'keys': {'p256dh': self.p256dh, 'auth': self.auth},
        }


class NotificationLog(BaseModel):
    """
    One fan-out to all subscribers.
    """

    title = models.CharField(max_length=200, verbose_name='Title')
    body = models.TextField(verbose_name='Body')
    url = models.URLField(max_length=1000, verbose_name='URL')

    recipient_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Recipients',
        help_text='Subscribers at send time'
    )

    delivered_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Delivered'
    )

    article_ids = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Article IDs',
        help_text='Articles included in a digest'
    )

    sent_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        verbose_name='Sent At'
    )

    class Meta:
        db_table = 'notification_logs'
        verbose_name = 'Notification Log'
        verbose_name_plural = 'Notification Logs'
        ordering = ['-sent_at']

    def __str__(self):
        return f"{self.title} ({self.delivered_count}/{self.recipient_count})"
