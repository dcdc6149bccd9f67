"""
RSS 2.0 feed of the newest articles, served at /rss.xml.
"""

from django.conf import settings
from django.contrib.syndication.views import Feed
from django.utils.feedgenerator import Rss201rev2Feed

from .models import Article
from .seo import strip_tags

FEED_SIZE = 50
DESCRIPTION_FALLBACK_LENGTH = 200


class LatestArticlesFeed(Feed):
    feed_type = Rss201rev2Feed

    def title(self):
        return settings.SITE_NAME

    def link(self):
        return settings.SITE_URL

    def description(self):
        return settings.SITE_DESCRIPTION

    def items(self):
        return Article.objects.select_related('author__staff_profile').by_recency()[:FEED_SIZE]

    def item_title(self, item):
        return item.title

    def item_description(self, item):
        if item.meta_description:
            return item.meta_description
        text = ' '.join(strip_tags(item.content).split())
        return text[:DESCRIPTION_FALLBACK_LENGTH]

    def item_link(self, item):
        return item.public_url

    def item_guid(self, item):
        return item.public_url

    item_guid_is_permalink = True

    def item_pubdate(self, item):
        return item.created_at

    def item_updateddate(self, item):
        return item.updated_at

    def item_categories(self, item):
        return item.categories or []

    def item_author_name(self, item):
        if item.author is None:
            return None
        profile = getattr(item.author, 'staff_profile', None)
        return (profile.display_name if profile else '') or item.author.username
