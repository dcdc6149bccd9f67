"""
Dashboard API views for articles.

GET    /api/articles/                  - List articles (?filter=today, ?category=Politics)
POST   /api/articles/                  - Create article
GET    /api/articles/{id}/             - Article detail
PATCH  /api/articles/{id}/             - Update article
DELETE /api/articles/{id}/             - Delete article (admin)
POST   /api/articles/{id}/feature/     - Feature / unfeature
POST   /api/articles/{id}/trending/    - Mark / unmark trending
GET    /api/articles/stats/            - Dashboard statistics
POST   /api/articles/seo-check/        - On-page SEO analysis
"""

import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.permissions import IsEditor, NewsroomPermission
from apps.core.throttling import BurstThrottle, StateChangeThrottle

from .models import Article
from .promotion import get_promotion_engine
from .seo import analyze_seo
from .serializers import (
    ArticleDetailSerializer,
    ArticleListSerializer,
    ArticleWriteSerializer,
    FeatureRequestSerializer,
    SeoCheckSerializer,
    TrendingRequestSerializer,
)
from .services import ArticleService, dashboard_stats

logger = logging.getLogger(__name__)


class ArticleViewSet(viewsets.ModelViewSet):
    """
    Article management for newsroom staff.

    Featured/trending flags change only through the feature and trending
    actions, which run the promotion rules.
    """

    permission_classes = [IsAuthenticated, NewsroomPermission]
    throttle_classes = [BurstThrottle]
    queryset = Article.objects.select_related('author__staff_profile').by_recency()
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_serializer_class(self):
        if self.action == 'list':
            return ArticleListSerializer
        if self.action in ('create', 'update', 'partial_update'):
            return ArticleWriteSerializer
        return ArticleDetailSerializer

    def get_throttles(self):
        if self.action in ('feature', 'trending'):
            return [StateChangeThrottle()]
        return super().get_throttles()

    def get_queryset(self):
        queryset = super().get_queryset()

        if self.request.query_params.get('filter') == 'today':
            queryset = queryset.created_today()

        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.in_category(category)

        featured = self.request.query_params.get('is_featured')
        if featured is not None:
            queryset = queryset.filter(is_featured=featured.lower() in ('true', '1'))

        trending = self.request.query_params.get('is_trending')
        if trending is not None:
            queryset = queryset.filter(is_trending=trending.lower() in ('true', '1'))

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        article = ArticleService().create_article(serializer.validated_data, author=request.user)
        return Response(ArticleDetailSerializer(article).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        article = self.get_object()
        serializer = self.get_serializer(article, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        article = ArticleService().update_article(article, serializer.validated_data)
        return Response(ArticleDetailSerializer(article).data)

    def destroy(self, request, *args, **kwargs):
        article = self.get_object()
        ArticleService().delete_article(article)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ========================================================================
    # Promotion
    # ========================================================================

    @action(detail=True, methods=['post'], url_path='feature')
    def feature(self, request, pk=None):
        """
        Body: {"is_featured": true|false}

        409 when the article is trending, is a latest headline, or the
        featured slots are full.
        """
        serializer = FeatureRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        get_promotion_engine().request_feature(pk, serializer.validated_data['is_featured'])
        return self._promotion_response(pk)

    @action(detail=True, methods=['post'], url_path='trending')
    def trending(self, request, pk=None):
        """
        Body: {"is_trending": true, "topic": "Election2026"} or {"is_trending": false}

        400 when the topic is missing, 409 when the article is featured, is a
        latest headline, or the trending slots are full.
        """
        serializer = TrendingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        get_promotion_engine().request_trending(
            pk,
            serializer.validated_data['is_trending'],
            topic=serializer.validated_data.get('topic'),
        )
        return self._promotion_response(pk)

    def _promotion_response(self, pk):
        article = Article.objects.select_related('author__staff_profile').get(pk=pk)
        return Response(ArticleListSerializer(article).data)


class ArticleStatsView(APIView):
    """
    Dashboard statistics.

    GET /api/articles/stats/
    """

    permission_classes = [IsAuthenticated, NewsroomPermission]
    throttle_classes = [BurstThrottle]

    def get(self, request):
        return Response(dashboard_stats())


class SeoCheckView(APIView):
    """
    Score a draft for on-page SEO.

    POST /api/articles/seo-check/
    Body: {"content": "<p>...</p>", "keyword": "...", "title": "...",
           "meta_title": "...", "meta_description": "..."}
    """

    permission_classes = [IsAuthenticated, IsEditor]
    throttle_classes = [BurstThrottle]

    def post(self, request):
        serializer = SeoCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(analyze_seo(**serializer.validated_data))
