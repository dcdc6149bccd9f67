"""
Public (anonymous) read API for the news site.

GET /api/public/home/?page=N
GET /api/public/category/<label>/?page=N
GET /api/public/articles/<slug>/
GET /api/public/search/?query=...

Responses are cached under the versioned public cache keys
(apps.core.cache); any article change invalidates them all.
"""

import logging

from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.cache import cached_public
from apps.core.exceptions import NotFoundError
from apps.core.pagination import page_number_param, paginate_page

from .models import Article
from .promotion import PromotionLimits
from .serializers import PublicArticleCardSerializer, PublicArticleSerializer
from .services import search_articles

logger = logging.getLogger(__name__)

PUBLIC_PAGE_SIZE = 6
RELATED_LIMIT = 4


def paginate(queryset, page_number):
    return paginate_page(queryset, page_number, PublicArticleCardSerializer, PUBLIC_PAGE_SIZE)


def build_home(page_number):
    limits = PromotionLimits.from_settings()
    articles = Article.objects.all()

    headlines = list(articles.by_recency()[:limits.headline_window])
    headline_ids = [a.id for a in headlines]
    featured = articles.featured().by_recency()[:limits.max_featured]
    trending = articles.trending().order_by('-updated_at')[:limits.max_trending]
    remaining = (
        articles.exclude(id__in=headline_ids)
        .exclude(is_featured=True)
        .by_recency()
    )

    return {
        'latest_headlines': PublicArticleCardSerializer(headlines, many=True).data,
        'featured': PublicArticleCardSerializer(featured, many=True).data,
        'trending': PublicArticleCardSerializer(trending, many=True).data,
        'articles': paginate(remaining, page_number),
    }


def related_articles(article, limit=RELATED_LIMIT):
    """Newest articles sharing at least one category with article."""
    labels = set(article.categories or [])
    if not labels:
        return []

    ids = []
    candidates = Article.objects.exclude(id=article.id).by_recency().values_list('id', 'categories')
    for pk, categories in candidates.iterator():
        if labels.intersection(categories or []):
            ids.append(pk)
            if len(ids) == limit:
                break
    return list(Article.objects.filter(id__in=ids).by_recency())


def build_article(slug):
    article = Article.objects.select_related('author__staff_profile').filter(slug=slug).first()
    if article is None:
        return None
    return {
        'article': PublicArticleSerializer(article).data,
        'related': PublicArticleCardSerializer(related_articles(article), many=True).data,
    }


class PublicAPIView(APIView):
    """Anonymous, unauthenticated read endpoint."""
    permission_classes = [AllowAny]
    authentication_classes = []


class PublicHomeView(PublicAPIView):
    def get(self, request):
        page = page_number_param(request)
        data = cached_public(('home', page), lambda: build_home(page))
        return Response(data)


class PublicCategoryView(PublicAPIView):
    def get(self, request, label):
        page = page_number_param(request)

        def build():
            queryset = Article.objects.in_category(label).by_recency()
            return {'category': label, **paginate(queryset, page)}

        return Response(cached_public(('category', label, page), build))


class PublicArticleDetailView(PublicAPIView):
    def get(self, request, slug):
        # None (unknown slug) is never cached
        data = cached_public(('article', slug), lambda: build_article(slug))
        if data is None:
            raise NotFoundError(message="Article not found")
        return Response(data)


class PublicSearchView(PublicAPIView):
    """GET /api/public/search/?query=police"""

    def get(self, request):
        results = search_articles(request.query_params.get('query', ''))
        return Response({
            'exact': PublicArticleCardSerializer(results['exact'], many=True).data,
            'related': PublicArticleCardSerializer(results['related'], many=True).data,
        })
