"""
URL configuration for Newsdesk project.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.contrib.sitemaps.views import sitemap

from apps.core.urls import auth_urlpatterns
from apps.articles.feeds import LatestArticlesFeed
from apps.articles.sitemaps import ArticleSitemap, CategorySitemap, StaticPagesSitemap
from apps.articles.urls import public_urlpatterns as public_article_urlpatterns
from apps.stories.sitemaps import WebStorySitemap
from apps.stories.urls import public_urlpatterns as public_story_urlpatterns

sitemaps = {
    'static': StaticPagesSitemap,
    'categories': CategorySitemap,
    'articles': ArticleSitemap,
    'stories': WebStorySitemap,
}

urlpatterns = [
    path('admin/', admin.site.urls),
    # Dashboard auth
    path('api/auth/', include((auth_urlpatterns, 'auth'))),
    # Dashboard resources
    path('api/articles/', include('apps.articles.urls')),
    path('api/stories/', include('apps.stories.urls')),
    path('api/notifications/', include('apps.notifications.urls')),
    # Public site API
    path('api/public/', include((public_article_urlpatterns, 'public'))),
    path('api/public/stories/', include((public_story_urlpatterns, 'public-stories'))),
    path('rss.xml', LatestArticlesFeed(), name='rss'),
    path('sitemap.xml', sitemap, {'sitemaps': sitemaps}, name='sitemap'),
    # Observability endpoints
    path('', include('apps.core.urls')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

# Customize admin site
admin.site.site_header = "Newsdesk Administration"
admin.site.site_title = "Newsdesk Admin Portal"
admin.site.index_title = "Welcome to Newsdesk Administration"
