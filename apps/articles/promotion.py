"""
Article promotion rules.

Decides whether an article may enter or leave the featured and trending
slots, and applies the change when it may:

- an article is never featured and trending at the same time
- at most 7 articles are featured and at most 7 are trending
- the 4 most recently created articles (the latest headlines) cannot be
  promoted; the window is recomputed on every request
- a trending article always has a topic, a non-trending one never does

Every rule is checked before anything is written, and each accepted
request is a single-record update. Rejections raise a PromotionError
subclass, which the API exception handler turns into a 404/409/400.

Counts are derived from the article table on every check. The
count-check-and-write runs under ArticleStore.locked(), which the Django
store implements as a row lock on PromotionLock, so concurrent promotions
of the same flag cannot overshoot a cap.

Usage:
    engine = get_promotion_engine()
    engine.request_feature(article_id, turn_on=True)
    engine.request_trending(article_id, turn_on=True, topic='Election2026')
"""

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import (
    ConflictError,
    LimitExceededError,
    NewsdeskException,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

FEATURED = 'featured'
TRENDING = 'trending'

TOPIC_MAX_LENGTH = 100


# =============================================================================
# Errors
# =============================================================================

class PromotionError(NewsdeskException):
    """Base class for rejected promotion requests."""

    reason = ''

    def __init__(self, message: Optional[str] = None, reason: Optional[str] = None, **kwargs):
        self.reason = reason or self.reason
        details = kwargs.pop('details', None) or {}
        if self.reason:
            details.setdefault('reason', self.reason)
        super().__init__(message=message, details=details, **kwargs)


class ArticleNotFound(PromotionError, NotFoundError):
    default_detail = "Article not found"
    reason = 'not found'


class PromotionConflict(PromotionError, ConflictError):
    default_detail = "This change would break a promotion rule"


class PromotionLimitExceeded(PromotionError, LimitExceededError):
    default_detail = "Promotion limit reached"
    reason = 'limit exceeded'


class PromotionInvalidArgument(PromotionError, ValidationError):
    default_detail = "Invalid promotion request"


# =============================================================================
# Store
# =============================================================================

@dataclass(frozen=True)
class ArticleFlags:
    """The slice of an article the rules look at."""
    id: Any
    created_at: datetime
    is_featured: bool = False
    is_trending: bool = False
    trending_topic: Optional[str] = None


class ArticleStore(ABC):
    """Storage the promotion rules read from and write to."""

    @abstractmethod
    def find_by_id(self, article_id) -> Optional[ArticleFlags]:
        """Return the article or None if it does not exist."""

    @abstractmethod
    def count_featured(self) -> int:
        pass

    @abstractmethod
    def count_trending(self) -> int:
        pass

    @abstractmethod
    def find_latest_ids(self, n: int = 4) -> List[Any]:
        """Ids of the n newest articles, newest first, ties broken by id."""

    @abstractmethod
    def update_flags(self, article_id, **fields) -> bool:
        """Write is_featured/is_trending/trending_topic. False if the row is gone."""

    @abstractmethod
    def locked(self, flag: str):
        """Context manager that serializes check-and-write for one flag."""


class DjangoArticleStore(ArticleStore):
    """ArticleStore backed by the Article table."""

    FIELDS = ('id', 'created_at', 'is_featured', 'is_trending', 'trending_topic')

    @property
    def articles(self):
        from apps.articles.models import Article
        return Article.objects

    def find_by_id(self, article_id) -> Optional[ArticleFlags]:
        try:
            queryset = self.articles.filter(id=article_id)
            if transaction.get_connection().in_atomic_block:
                queryset = queryset.select_for_update()
            row = queryset.values(*self.FIELDS).first()
        except (DjangoValidationError, ValueError):
            # Malformed id
            return None
        return ArticleFlags(**row) if row else None

    def count_featured(self) -> int:
        return self.articles.featured().count()

    def count_trending(self) -> int:
        return self.articles.trending().count()

    def find_latest_ids(self, n: int = 4) -> List[Any]:
        return list(self.articles.by_recency().values_list('id', flat=True)[:n])

    def update_flags(self, article_id, **fields) -> bool:
        updated = self.articles.filter(id=article_id).update(
            updated_at=timezone.now(), **fields
        )
        return updated == 1

    @contextmanager
    def locked(self, flag: str) -> Iterator[None]:
        from apps.articles.models import PromotionLock

        with transaction.atomic():
            PromotionLock.objects.select_for_update().get_or_create(name=flag)
            yield


class InMemoryArticleStore(ArticleStore):
    """
    ArticleStore kept in a dict. Used by tests and scripts.

    A single lock covers both flags.
    """

    def __init__(self, articles: Optional[List[ArticleFlags]] = None):
        self._articles: Dict[Any, ArticleFlags] = {}
        self._lock = threading.RLock()
        for article in articles or []:
            self.add(article)

    def add(self, article: ArticleFlags) -> ArticleFlags:
        with self._lock:
            self._articles[article.id] = article
        return article

    def remove(self, article_id) -> None:
        with self._lock:
            self._articles.pop(article_id, None)

    def all(self) -> List[ArticleFlags]:
        with self._lock:
            return list(self._articles.values())

    def find_by_id(self, article_id) -> Optional[ArticleFlags]:
        return self._articles.get(article_id)

    def count_featured(self) -> int:
        return sum(1 for a in self.all() if a.is_featured)

    def count_trending(self) -> int:
        return sum(1 for a in self.all() if a.is_trending)

    def find_latest_ids(self, n: int = 4) -> List[Any]:
        ordered = sorted(self.all(), key=lambda a: str(a.id))
        ordered.sort(key=lambda a: a.created_at, reverse=True)
        return [a.id for a in ordered[:n]]

    def update_flags(self, article_id, **fields) -> bool:
        with self._lock:
            current = self._articles.get(article_id)
            if current is None:
                return False
            self._articles[article_id] = replace(current, **fields)
            return True

    @contextmanager
    def locked(self, flag: str) -> Iterator[None]:
        with self._lock:
            yield


# =============================================================================
# Engine
# =============================================================================

@dataclass(frozen=True)
class PromotionLimits:
    max_featured: int = 7
    max_trending: int = 7
    headline_window: int = 4

    @classmethod
    def from_settings(cls) -> 'PromotionLimits':
        return cls(
            max_featured=getattr(settings, 'PROMOTION_MAX_FEATURED', cls.max_featured),
            max_trending=getattr(settings, 'PROMOTION_MAX_TRENDING', cls.max_trending),
            headline_window=getattr(settings, 'PROMOTION_HEADLINE_WINDOW', cls.headline_window),
        )


ChangeHook = Callable[[str], None]


class PromotionEngine:
    """
    Applies featured/trending requests against an ArticleStore.

    The engine holds no state between calls. on_change is called with a
    short description after every write that changed an article, once the
    store lock has been released.
    """

    def __init__(
        self,
        store: ArticleStore,
        limits: Optional[PromotionLimits] = None,
        on_change: Optional[ChangeHook] = None,
    ):
        self.store = store
        self.limits = limits or PromotionLimits()
        self.on_change = on_change

    def request_feature(self, article_id, turn_on: bool) -> ArticleFlags:
        """
        Feature or unfeature an article.

        Raises:
            ArticleNotFound, PromotionConflict, PromotionLimitExceeded
        """
        with self.store.locked(FEATURED):
            article = self._get(article_id)

            if not turn_on:
                if not article.is_featured:
                    return article
                result = self._write(article, is_featured=False)
            else:
                if article.is_trending:
                    raise PromotionConflict(
                        message="Article is already trending. Remove it from trending before featuring it.",
                        reason='already trending',
                    )
                self._check_not_headline(article)
                if self.store.count_featured() >= self.limits.max_featured:
                    raise PromotionLimitExceeded(
                        message=f"Cannot feature more than {self.limits.max_featured} articles.",
                        details={'limit': self.limits.max_featured, 'flag': FEATURED},
                    )
                if article.is_featured:
                    return article
                result = self._write(article, is_featured=True)

        logger.info("Article %s %s", article_id, 'featured' if turn_on else 'unfeatured')
        self._notify(f"article {article_id} {'featured' if turn_on else 'unfeatured'}")
        return result

    def request_trending(self, article_id, turn_on: bool, topic: Optional[str] = None) -> ArticleFlags:
        """
        Mark or unmark an article as trending.

        Turning trending on requires a topic; turning it off clears the topic
        in the same write. Re-sending trending=True for a trending article
        replaces its topic. The cap is checked for every turn-on request, so
        at the cap even a trending article is rejected.

        Raises:
            ArticleNotFound, PromotionConflict, PromotionLimitExceeded,
            PromotionInvalidArgument
        """
        with self.store.locked(TRENDING):
            article = self._get(article_id)

            if not turn_on:
                if not article.is_trending and article.trending_topic is None:
                    return article
                result = self._write(article, is_trending=False, trending_topic=None)
            else:
                if article.is_featured:
                    raise PromotionConflict(
                        message="Article is already featured. Remove it from featured before marking it trending.",
                        reason='already featured',
                    )
                self._check_not_headline(article)
                if self.store.count_trending() >= self.limits.max_trending:
                    raise PromotionLimitExceeded(
                        message=f"Cannot mark more than {self.limits.max_trending} articles as trending.",
                        details={'limit': self.limits.max_trending, 'flag': TRENDING},
                    )
                topic = self._clean_topic(topic)
                if article.is_trending and article.trending_topic == topic:
                    return article
                result = self._write(article, is_trending=True, trending_topic=topic)

        logger.info(
            "Article %s %s",
            article_id,
            f"trending on '{result.trending_topic}'" if turn_on else 'no longer trending',
        )
        self._notify(f"article {article_id} {'trending' if turn_on else 'untrending'}")
        return result

    def latest_headline_ids(self) -> List[Any]:
        return self.store.find_latest_ids(self.limits.headline_window)

    def _get(self, article_id) -> ArticleFlags:
        article = self.store.find_by_id(article_id)
        if article is None:
            raise ArticleNotFound(details={'article_id': str(article_id)})
        return article

    def _check_not_headline(self, article: ArticleFlags) -> None:
        if article.id in self.latest_headline_ids():
            raise PromotionConflict(
                message=(
                    f"Article is one of the {self.limits.headline_window} latest headlines "
                    "and cannot be promoted yet."
                ),
                reason='is latest headline',
            )

    @staticmethod
    def _clean_topic(topic: Optional[str]) -> str:
        topic = (topic or '').strip()
        if not topic:
            raise PromotionInvalidArgument(
                message="A trending topic is required.",
                reason='topic required',
                field='topic',
            )
        if len(topic) > TOPIC_MAX_LENGTH:
            raise PromotionInvalidArgument(
                message=f"Trending topic must be at most {TOPIC_MAX_LENGTH} characters.",
                reason='topic too long',
                field='topic',
            )
        return topic

    def _write(self, article: ArticleFlags, **fields) -> ArticleFlags:
        if not self.store.update_flags(article.id, **fields):
            # Deleted between the read and the write
            raise ArticleNotFound(details={'article_id': str(article.id)})
        return replace(article, **fields)

    def _notify(self, reason: str) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(reason)
        except Exception:
            # Write already committed
            logger.exception("Promotion change hook failed: %s", reason)


def get_promotion_engine() -> PromotionEngine:
    """Engine wired to the database and the public cache."""
    from apps.core.cache import invalidate_public_content

    return PromotionEngine(
        DjangoArticleStore(),
        limits=PromotionLimits.from_settings(),
        on_change=invalidate_public_content,
    )
