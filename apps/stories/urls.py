"""
Web story API URLs.
"""

from django.urls import path, include
from config.routers import NewsdeskRouter
from .views import (
    PublicStoryDetailView,
    PublicStoryListView,
    StorySlideViewSet,
    WebStoryViewSet,
)

app_name = 'stories'

router = NewsdeskRouter()
router.register(r'', WebStoryViewSet, basename='story')

urlpatterns = [
    path(
        'slides/<uuid:pk>/',
        StorySlideViewSet.as_view({'patch': 'partial_update', 'delete': 'destroy'}),
        name='slide-detail',
    ),
    path('', include(router.urls)),
]

# Public story URLs - mounted at /api/public/stories/ in main urls.py
public_urlpatterns = [
    path('', PublicStoryListView.as_view(), name='story-list'),
    path('<uuid:pk>/', PublicStoryDetailView.as_view(), name='story-detail'),
]
