from apps.articles.sitemaps import SiteURLSitemap

from .models import WebStory


class WebStorySitemap(SiteURLSitemap):
    changefreq = 'monthly'
    priority = 0.5

    def items(self):
        return WebStory.objects.order_by('-created_at').only('id', 'created_at')

    def lastmod(self, item):
        return item.created_at
