"""
Article models for Newsdesk project.
Manages published articles and their homepage promotion flags.
"""

from django.conf import settings
from django.db import connection, models
from django.db.models import Q
from django.utils import timezone
from apps.core.models import BaseModel


class ArticleQuerySet(models.QuerySet):
    """Query helpers used by the dashboard and the public site."""

    def featured(self):
        return self.filter(is_featured=True)

    def trending(self):
        return self.filter(is_trending=True)

    def by_recency(self):
        # id breaks ties between articles created in the same instant
        return self.order_by('-created_at', 'id')

    def in_category(self, label):
        """
        Articles whose categories list contains label.

        SQLite has no JSON containment lookup; there the match runs in Python.
        """
        if connection.vendor == 'postgresql':
            return self.filter(categories__contains=[label])
        ids = [
            pk for pk, categories in self.values_list('id', 'categories')
            if isinstance(categories, list) and label in categories
        ]
        return self.filter(id__in=ids)

    def created_today(self):
        return self.filter(created_at__date=timezone.localdate())


class Article(BaseModel):
    """
    A published news article.

    is_featured / is_trending / trending_topic are owned by the promotion
    rule engine (apps.articles.promotion); never assign them directly.
    """

    title = models.CharField(
        max_length=300,
        verbose_name='Title',
        help_text='Headline shown on the site'
    )

    slug = models.SlugField(
        max_length=300,
        unique=True,
        verbose_name='Slug',
        help_text='URL path segment for the public article page'
    )

    content = models.TextField(
        verbose_name='Content',
        help_text='Article body (HTML)'
    )

    image_url = models.URLField(
        max_length=1000,
        verbose_name='Image URL',
        help_text='Lead image'
    )

    categories = models.JSONField(
        default=list,
        verbose_name='Categories',
        help_text='Ordered list of category labels'
    )

    # SEO
    meta_title = models.CharField(
        max_length=300,
        null=True,
        blank=True,
        verbose_name='Meta Title',
    )

    meta_description = models.TextField(
        null=True,
        blank=True,
        verbose_name='Meta Description',
    )

    meta_keywords = models.CharField(
        max_length=500,
        null=True,
        blank=True,
        verbose_name='Meta Keywords',
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='articles',
        verbose_name='Author',
    )

    # Promotion
    is_featured = models.BooleanField(
        default=False,
        db_index=True,
        verbose_name='Featured',
        help_text='Shown in the featured slots on the homepage'
    )

    is_trending = models.BooleanField(
        default=False,
        db_index=True,
        verbose_name='Trending',
        help_text='Shown in the trending strip with its topic'
    )

    trending_topic = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        verbose_name='Trending Topic',
        help_text='Short label; set only while trending'
    )

    objects = ArticleQuerySet.as_manager()

    class Meta:
        db_table = 'articles'
        verbose_name = 'Article'
        verbose_name_plural = 'Articles'
        ordering = ['-created_at', 'id']
        constraints = [
            models.CheckConstraint(
                condition=~Q(is_featured=True, is_trending=True),
                name='article_not_featured_and_trending',
            ),
            models.CheckConstraint(
                condition=(
                    Q(is_trending=True, trending_topic__isnull=False) & ~Q(trending_topic='')
                ) | Q(is_trending=False, trending_topic__isnull=True),
                name='article_trending_topic_consistent',
            ),
        ]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return f"/article/{self.slug}"

    @property
    def public_url(self):
        return f"{settings.SITE_URL.rstrip('/')}{self.get_absolute_url()}"


class PromotionLock(models.Model):
    """
    One row per promotion flag.

    Promotions of a flag take SELECT ... FOR UPDATE on its row so the
    count check and the write happen as one step. The row carries no data.
    """

    class Name(models.TextChoices):
        FEATURED = 'featured', 'Featured'
        TRENDING = 'trending', 'Trending'

    name = models.CharField(
        max_length=20,
        primary_key=True,
        choices=Name.choices,
    )

    class Meta:
        db_table = 'promotion_locks'
        verbose_name = 'Promotion Lock'
        verbose_name_plural = 'Promotion Locks'

    def __str__(self):
        return self.name
