"""
Admin interface for push subscribers and send history.
"""

from django.contrib import admin
from .models import NotificationLog, PushSubscriber


@admin.register(PushSubscriber)
class PushSubscriberAdmin(admin.ModelAdmin):
    list_display = ['endpoint_short', 'created_at', 'updated_at']
    search_fields = ['endpoint']
    readonly_fields = ['id', 'endpoint', 'p256dh', 'auth', 'created_at', 'updated_at']

    def endpoint_short(self, obj):
        return str(obj)
    endpoint_short.short_description = 'Endpoint'

    def has_add_permission(self, request):
        return False


@admin.register(NotificationLog)
class NotificationLogAdmin(admin.ModelAdmin):
    list_display = ['title', 'delivered_count', 'recipient_count', 'sent_at']
    search_fields = ['title', 'body']
    date_hierarchy = 'sent_at'
    readonly_fields = [
        'id', 'title', 'body', 'url', 'recipient_count',
        'delivered_count', 'article_ids', 'sent_at', 'created_at',
    ]

    def has_add_permission(self, request):
        return False
