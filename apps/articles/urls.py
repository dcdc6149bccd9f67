"""
Article API URLs.

Dashboard endpoints are mounted at /api/articles/, public ones at
/api/public/ (see public_urlpatterns).
"""

from django.urls import path, include
from config.routers import NewsdeskRouter
from .views import ArticleViewSet, ArticleStatsView, SeoCheckView
from .public_views import (
    PublicArticleDetailView,
    PublicCategoryView,
    PublicHomeView,
    PublicSearchView,
)

app_name = 'articles'

router = NewsdeskRouter()
router.register(r'', ArticleViewSet, basename='article')

urlpatterns = [
    # Before the router so they are not taken for article ids
    path('stats/', ArticleStatsView.as_view(), name='article-stats'),
    path('seo-check/', SeoCheckView.as_view(), name='article-seo-check'),

    path('', include(router.urls)),
]

# Public read API - mounted at /api/public/ in main urls.py
public_urlpatterns = [
    path('home/', PublicHomeView.as_view(), name='home'),
    path('search/', PublicSearchView.as_view(), name='search'),
    path('category/<str:label>/', PublicCategoryView.as_view(), name='category'),
    path('articles/<slug:slug>/', PublicArticleDetailView.as_view(), name='article-detail'),
]
