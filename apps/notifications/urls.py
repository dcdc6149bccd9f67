"""
Push notification API URLs.
"""

from django.urls import path
from .views import DigestView, NotificationHistoryView, SendNotificationView, SubscribeView

app_name = 'notifications'

urlpatterns = [
    path('subscribe/', SubscribeView.as_view(), name='subscribe'),
    path('send/', SendNotificationView.as_view(), name='send'),
    path('digest/', DigestView.as_view(), name='digest'),
    path('history/', NotificationHistoryView.as_view(), name='history'),
]
