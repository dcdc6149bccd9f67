"""
Push notification serializers.
"""

from rest_framework import serializers

from .models import NotificationLog


class SubscriptionKeysSerializer(serializers.Serializer):
    p256dh = serializers.CharField(max_length=255)
    auth = serializers.CharField(max_length=255)


class SubscribeSerializer(serializers.Serializer):
    """Browser PushSubscription.toJSON() body."""
    endpoint = serializers.URLField(max_length=1000)
    keys = SubscriptionKeysSerializer()


class SendNotificationSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    body = serializers.CharField()
    url = serializers.URLField(max_length=1000)
    image_url = serializers.URLField(max_length=1000, required=False, allow_null=True, allow_blank=True)


class DigestSerializer(serializers.Serializer):
    article_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    title = serializers.CharField(max_length=200)
    body = serializers.CharField()


class NotificationLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationLog
        fields = [
            'id', 'title', 'body', 'url',
            'recipient_count', 'delivered_count',
            'article_ids', 'sent_at',
        ]
        read_only_fields = fields
