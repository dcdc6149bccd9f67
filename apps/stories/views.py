"""
Web story API views.

Dashboard (staff):
GET    /api/stories/                     - List stories (?q=title search)
POST   /api/stories/                     - Create story
GET    /api/stories/{id}/                - Story with slides
PATCH  /api/stories/{id}/                - Update story
DELETE /api/stories/{id}/                - Delete story and its slides (admin)
POST   /api/stories/{id}/slides/         - Add slide
PATCH  /api/stories/slides/{slide_id}/   - Update slide
DELETE /api/stories/slides/{slide_id}/   - Delete slide

Public:
GET /api/public/stories/?page=N
GET /api/public/stories/{id}/
"""

import logging

from django.db.models import Count, Prefetch
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.cache import cached_public, invalidate_public_content
from apps.core.exceptions import NotFoundError
from apps.core.pagination import page_number_param, paginate_page
from apps.core.permissions import NewsroomPermission
from apps.core.throttling import BurstThrottle

from .models import WebStory, StorySlide
from .serializers import (
    StorySlideSerializer,
    WebStoryDetailSerializer,
    WebStoryListSerializer,
    WebStoryWriteSerializer,
)

logger = logging.getLogger(__name__)

PUBLIC_PAGE_SIZE = 12


def story_queryset():
    return WebStory.objects.annotate(slide_count=Count('slides')).order_by('-created_at')


class WebStoryViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, NewsroomPermission]
    throttle_classes = [BurstThrottle]
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_queryset(self):
        queryset = story_queryset()
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('slides')

        search = self.request.query_params.get('q')
        if search:
            queryset = queryset.filter(title__icontains=search.strip())
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return WebStoryListSerializer
        if self.action in ('create', 'update', 'partial_update'):
            return WebStoryWriteSerializer
        return WebStoryDetailSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        story = serializer.save(author=request.user)
        logger.info("Web story %s created", story.id)
        invalidate_public_content(f"story {story.id} created")
        return Response(WebStoryDetailSerializer(story).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        story = self.get_object()
        serializer = self.get_serializer(story, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        story = serializer.save()
        invalidate_public_content(f"story {story.id} updated")
        return Response(WebStoryDetailSerializer(story).data)

    def perform_destroy(self, instance):
        story_id = instance.id
        instance.delete()
        logger.info("Web story %s deleted", story_id)
        invalidate_public_content(f"story {story_id} deleted")

    @action(detail=True, methods=['post'], url_path='slides')
    def add_slide(self, request, pk=None):
        """Body: {"image_url": "...", "caption": "..."}"""
        story = self.get_object()
        serializer = StorySlideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slide = serializer.save(story=story)
        invalidate_public_content(f"story {story.id} slide added")
        return Response(StorySlideSerializer(slide).data, status=status.HTTP_201_CREATED)


class StorySlideViewSet(viewsets.GenericViewSet):
    """Update or delete a single slide."""

    permission_classes = [IsAuthenticated, NewsroomPermission]
    throttle_classes = [BurstThrottle]
    queryset = StorySlide.objects.all()
    serializer_class = StorySlideSerializer

    def partial_update(self, request, pk=None):
        slide = self.get_object()
        serializer = self.get_serializer(slide, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        slide = serializer.save()
        invalidate_public_content(f"story {slide.story_id} slide updated")
        return Response(serializer.data)

    def destroy(self, request, pk=None):
        slide = self.get_object()
        story_id = slide.story_id
        slide.delete()
        invalidate_public_content(f"story {story_id} slide deleted")
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Public
# =============================================================================

class PublicStoryListView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        page = page_number_param(request)
        data = cached_public(
            ('stories', page),
            lambda: paginate_page(story_queryset(), page, WebStoryListSerializer, PUBLIC_PAGE_SIZE),
        )
        return Response(data)


class PublicStoryDetailView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, pk):
        def build():
            story = (
                WebStory.objects
                .prefetch_related(Prefetch('slides', queryset=StorySlide.objects.order_by('created_at')))
                .filter(pk=pk)
                .first()
            )
            return WebStoryDetailSerializer(story).data if story else None

        data = cached_public(('story', pk), build)
        if data is None:
            raise NotFoundError(message="Story not found")
        return Response(data)
