"""
Rate limiting for Newsdesk.

Custom DRF throttle classes for different endpoint types. Rates come from
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']; each class falls back to its own
default when the scope is not configured.

Usage in views:
    from apps.core.throttling import StateChangeThrottle

    class ArticleViewSet(viewsets.ModelViewSet):
        throttle_classes = [StateChangeThrottle]
"""

from rest_framework.throttling import UserRateThrottle, AnonRateThrottle
import logging

logger = logging.getLogger(__name__)


class BurstThrottle(UserRateThrottle):
    """
    Burst throttle for dashboard reads and writes.

    Default: 120 requests/minute
    """
    scope = 'burst'

    def get_rate(self):
        try:
            return super().get_rate()
        except Exception:
            return '120/minute'


class StateChangeThrottle(UserRateThrottle):
    """
    Throttle for featured/trending toggles.

    Applies to:
    - POST /api/articles/{id}/feature/
    - POST /api/articles/{id}/trending/

    Default: 30 requests/minute
    """
    scope = 'state_change'

    def get_rate(self):
        try:
            return super().get_rate()
        except Exception:
            return '30/minute'


class NotificationThrottle(UserRateThrottle):
    """
    Throttle for push fan-out endpoints; each call reaches every subscriber.

    Applies to:
    - POST /api/notifications/send/
    - POST /api/notifications/digest/

    Default: 5 requests/minute
    """
    scope = 'notification'

    def get_rate(self):
        try:
            return super().get_rate()
        except Exception:
            return '5/minute'


class SubscribeThrottle(AnonRateThrottle):
    """
    Throttle for anonymous browser subscriptions.

    Default: 20 requests/minute per IP
    """
    scope = 'subscribe'

    def get_rate(self):
        try:
            return super().get_rate()
        except Exception:
            return '20/minute'
