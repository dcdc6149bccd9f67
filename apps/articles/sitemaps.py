"""
XML sitemap sections for the public site, served at /sitemap.xml.

Locations point at the reader-facing site (settings.SITE_URL), not at the
host serving the API.
"""

from urllib.parse import quote, urlsplit

from django.conf import settings
from django.contrib.sitemaps import Sitemap

from .models import Article
from .services import count_by_category


class SiteURLSitemap(Sitemap):
    """Builds absolute URLs from SITE_URL instead of the request host."""

    def get_protocol(self, protocol=None):
        return urlsplit(settings.SITE_URL).scheme or 'https'

    def get_domain(self, site=None):
        parts = urlsplit(settings.SITE_URL)
        return parts.netloc + parts.path.rstrip('/')


class StaticPagesSitemap(SiteURLSitemap):
    changefreq = 'daily'

    PAGES = {
        'home': ('/', 1.0),
        'web-stories': ('/web-stories', 0.8),
    }

    def items(self):
        return list(self.PAGES)

    def location(self, item):
        return self.PAGES[item][0]

    def priority(self, item):
        return self.PAGES[item][1]


class CategorySitemap(SiteURLSitemap):
    changefreq = 'weekly'
    priority = 0.7

    def items(self):
        labels = count_by_category(Article.objects.values_list('categories', flat=True))
        return sorted(labels)

    def location(self, item):
        return f"/category/{quote(item, safe='')}"


class ArticleSitemap(SiteURLSitemap):
    changefreq = 'never'
    priority = 0.6

    def items(self):
        return Article.objects.by_recency().only('slug', 'updated_at')

    def lastmod(self, item):
        return item.updated_at
