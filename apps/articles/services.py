"""
Article services: create/update/delete, categories, search and statistics.

Promotion flags are not touched here; see apps.articles.promotion.
"""

import logging
import re
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q

from apps.core.cache import invalidate_public_content
from apps.core.exceptions import DuplicateError, ValidationError
from .models import Article

logger = logging.getLogger(__name__)

SLUG_TAKEN_MESSAGE = "This URL slug is already taken. Please change it."

OPTIONAL_TEXT_FIELDS = ('meta_title', 'meta_description', 'meta_keywords')

SEARCH_LIMIT = 20
# Queries this short only match content on whole words ("ice" must not match "police")
WHOLE_WORD_MAX_LENGTH = 3


def clean_categories(value: Any) -> List[str]:
    """
    Normalise a categories value to an ordered list of unique labels.

    Accepts a list or a bare string (the legacy single-category format).
    Blank labels are dropped; the first occurrence of a label wins.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]

    cleaned: List[str] = []
    for label in value:
        if not isinstance(label, str):
            continue
        label = label.strip()
        if label and label not in cleaned:
            cleaned.append(label)
    return cleaned


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ArticleService:
    """
    Writes articles and keeps the public cache in step.

    Usage:
        service = ArticleService()
        article = service.create_article(serializer.validated_data, author=request.user)
    """

    def __init__(self, on_change: Optional[Callable[[str], None]] = None):
        self.on_change = on_change or invalidate_public_content

    def create_article(self, data: Dict[str, Any], author=None) -> Article:
        fields = self._prepare(data)
        if not fields.get('image_url'):
            raise ValidationError(message="Image URL is required.", field='image_url')
        self._check_slug_free(fields['slug'])

        article = Article(author=author, **fields)
        self._save(article)

        logger.info("Article %s created: %s", article.id, article.slug)
        self.on_change(f"article {article.id} created")
        return article

    def update_article(self, article: Article, data: Dict[str, Any]) -> Article:
        fields = self._prepare(data)
        # Keep the current image unless a new one was supplied
        if not fields.get('image_url'):
            fields.pop('image_url', None)

        if 'slug' in fields and fields['slug'] != article.slug:
            self._check_slug_free(fields['slug'], exclude_id=article.id)

        for name, value in fields.items():
            setattr(article, name, value)
        self._save(article)

        logger.info("Article %s updated", article.id)
        self.on_change(f"article {article.id} updated")
        return article

    def delete_article(self, article: Article) -> None:
        """Unconditional; featured/trending articles may be deleted too."""
        article_id = article.id
        article.delete()
        logger.info("Article %s deleted", article_id)
        self.on_change(f"article {article_id} deleted")

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        allowed = ('title', 'slug', 'content', 'image_url', 'categories') + OPTIONAL_TEXT_FIELDS
        fields = {k: v for k, v in data.items() if k in allowed}

        if 'categories' in fields:
            fields['categories'] = clean_categories(fields['categories'])
            if not fields['categories']:
                raise ValidationError(message="At least one category is required.", field='categories')

        for name in OPTIONAL_TEXT_FIELDS:
            if name in fields:
                fields[name] = blank_to_none(fields[name])
        return fields

    @staticmethod
    def _check_slug_free(slug: str, exclude_id=None) -> None:
        queryset = Article.objects.filter(slug=slug)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        if queryset.exists():
            raise DuplicateError(message=SLUG_TAKEN_MESSAGE, field='slug')

    @staticmethod
    def _save(article: Article) -> None:
        try:
            with transaction.atomic():
                article.save()
        except IntegrityError as e:
            # Lost a race for the slug
            if 'slug' in str(e).lower():
                raise DuplicateError(message=SLUG_TAKEN_MESSAGE, field='slug')
            raise


# =============================================================================
# Search
# =============================================================================

def _matches_content(content: str, query: str) -> bool:
    if len(query) > WHOLE_WORD_MAX_LENGTH:
        return query.lower() in content.lower()
    return re.search(rf'\b{re.escape(query)}\b', content, re.IGNORECASE) is not None


def search_articles(query: str) -> Dict[str, List[Article]]:
    """
    Search titles and content.

    Returns {'exact': [...], 'related': [...]}: exact hits have the query in
    the title, related hits only in the content. At most SEARCH_LIMIT of the
    newest candidates are considered.
    """
    query = (query or '').strip()
    if not query:
        raise ValidationError(message="Query is required", field='query')

    candidates = (
        Article.objects
        .filter(Q(title__icontains=query) | Q(content__icontains=query))
        .by_recency()[:SEARCH_LIMIT]
    )

    exact, related = [], []
    lowered = query.lower()
    for article in candidates:
        if lowered in article.title.lower():
            exact.append(article)
        elif _matches_content(article.content, query):
            related.append(article)

    logger.debug("Search '%s': %d exact, %d related", query, len(exact), len(related))
    return {'exact': exact, 'related': related}


# =============================================================================
# Statistics
# =============================================================================

def count_by_category(category_lists: Iterable[Any]) -> Dict[str, int]:
    """Articles per label; an article counts once per label it carries."""
    counter: Counter = Counter()
    for categories in category_lists:
        counter.update(clean_categories(categories))
    return dict(counter.most_common())


def dashboard_stats(max_promoted: int = 7) -> Dict[str, Any]:
    from apps.stories.models import WebStory

    articles = Article.objects.all()
    promoted_fields = ('id', 'title', 'categories', 'trending_topic')

    return {
        'total_articles': articles.count(),
        'featured_count': articles.featured().count(),
        'trending_count': articles.trending().count(),
        'featured': list(articles.featured().by_recency().values(*promoted_fields)[:max_promoted]),
        'trending': list(
            articles.trending().order_by('-updated_at').values(*promoted_fields)[:max_promoted]
        ),
        'by_category': count_by_category(articles.values_list('categories', flat=True)),
        'total_stories': WebStory.objects.count(),
    }
