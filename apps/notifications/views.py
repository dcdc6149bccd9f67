"""
Push notification API views.

POST /api/notifications/subscribe/  - Store a browser subscription (public)
POST /api/notifications/send/       - Send to all subscribers (editor)
POST /api/notifications/digest/     - Send an article digest (editor)
GET  /api/notifications/history/    - Last 20 sends (editor)
"""

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import ValidationError
from apps.core.middleware import celery_request_id_headers
from apps.core.permissions import IsEditor
from apps.core.throttling import BurstThrottle, NotificationThrottle, SubscribeThrottle

from .models import PushSubscriber
from .serializers import (
    DigestSerializer,
    NotificationLogSerializer,
    SendNotificationSerializer,
    SubscribeSerializer,
)
from .services import PushService
from .tasks import send_push_notification

logger = logging.getLogger(__name__)


def dispatch_push(**kwargs):
    """
    Queue a fan-out. Returns the result inline when the task already ran
    (eager mode), otherwise the task id.
    """
    if not PushSubscriber.objects.exists():
        raise ValidationError(message="No subscribers")

    result = send_push_notification.apply_async(
        kwargs=kwargs,
        headers=celery_request_id_headers(),
    )
    if result.ready():
        return Response({'status': 'sent', **result.get()})
    return Response({'status': 'queued', 'task_id': result.id}, status=status.HTTP_202_ACCEPTED)


class SubscribeView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [SubscribeThrottle]

    def post(self, request):
        serializer = SubscribeSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(message="Invalid keys", details=serializer.errors)

        _, created = PushService().subscribe(serializer.validated_data)
        return Response(
            {'subscribed': True},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class SendNotificationView(APIView):
    permission_classes = [IsAuthenticated, IsEditor]
    throttle_classes = [NotificationThrottle]

    def post(self, request):
        serializer = SendNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return dispatch_push(
            title=data['title'],
            body=data['body'],
            url=data['url'],
            image_url=data.get('image_url') or None,
        )


class DigestView(APIView):
    permission_classes = [IsAuthenticated, IsEditor]
    throttle_classes = [NotificationThrottle]

    def post(self, request):
        serializer = DigestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return dispatch_push(
            title=data['title'],
            body=data['body'],
            article_ids=[str(pk) for pk in data['article_ids']],
        )


class NotificationHistoryView(APIView):
    permission_classes = [IsAuthenticated, IsEditor]
    throttle_classes = [BurstThrottle]

    def get(self, request):
        logs = PushService().history()
        return Response({'results': NotificationLogSerializer(logs, many=True).data})
