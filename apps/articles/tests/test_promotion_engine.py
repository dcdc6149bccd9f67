"""
Tests for the article promotion rules.

Runs the engine against InMemoryArticleStore, so no database is needed.

Tests cover:
- Headline protection (the four newest articles)
- Featured and trending caps
- Featured/trending mutual exclusivity
- Topic required when trending, cleared when not
- Idempotent turn-off
- Change hook behaviour
- Concurrent requests against the caps
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import MagicMock

import pytest

from apps.articles.promotion import (
    ArticleFlags,
    ArticleNotFound,
    InMemoryArticleStore,
    PromotionConflict,
    PromotionEngine,
    PromotionInvalidArgument,
    PromotionLimitExceeded,
    PromotionLimits,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=dt_timezone.utc)


# ============================================================================
# Fixtures
# ============================================================================

def make_flags(minutes_old, **kwargs):
    return ArticleFlags(id=uuid.uuid4(), created_at=NOW - timedelta(minutes=minutes_old), **kwargs)


@pytest.fixture
def store():
    """Four headlines followed by ten older articles, newest first."""
    return InMemoryArticleStore([make_flags(i) for i in range(14)])


@pytest.fixture
def ordered(store):
    return sorted(store.all(), key=lambda a: a.created_at, reverse=True)


@pytest.fixture
def headline_ids(ordered):
    return [a.id for a in ordered[:4]]


@pytest.fixture
def eligible(ordered):
    """Ids outside the headline window."""
    return [a.id for a in ordered[4:]]


@pytest.fixture
def on_change():
    return MagicMock()


@pytest.fixture
def engine(store, on_change):
    return PromotionEngine(store, on_change=on_change)


def assert_invariants(store):
    articles = store.all()
    assert not any(a.is_featured and a.is_trending for a in articles)
    assert sum(a.is_featured for a in articles) <= 7
    assert sum(a.is_trending for a in articles) <= 7
    for a in articles:
        assert a.is_trending == bool(a.trending_topic)


# ============================================================================
# Headline protection
# ============================================================================

class TestHeadlineProtection:
    """The four newest articles cannot be promoted."""

    def test_newest_article_cannot_be_featured(self, engine, store, headline_ids):
        with pytest.raises(PromotionConflict) as exc_info:
            engine.request_feature(headline_ids[0], True)

        assert exc_info.value.reason == 'is latest headline'
        assert exc_info.value.status_code == 409
        assert store.find_by_id(headline_ids[0]).is_featured is False

    @pytest.mark.parametrize('rank', [0, 1, 2, 3])
    def test_every_headline_rank_is_protected_for_trending(self, engine, headline_ids, rank):
        with pytest.raises(PromotionConflict) as exc_info:
            engine.request_trending(headline_ids[rank], True, topic='Election2026')
        assert exc_info.value.reason == 'is latest headline'

    def test_fifth_newest_is_eligible(self, engine, eligible):
        result = engine.request_feature(eligible[0], True)
        assert result.is_featured is True

    def test_window_slides_when_newer_articles_arrive(self, engine, store, eligible):
        target = eligible[0]
        engine.request_feature(target, True)
        engine.request_feature(target, False)

        # Four newer articles push everything down a rank
        for _ in range(4):
            store.add(ArticleFlags(id=uuid.uuid4(), created_at=NOW + timedelta(minutes=1)))

        newly_aged_out = [a for a in store.all() if a.created_at == NOW][0]
        assert engine.request_feature(newly_aged_out.id, True).is_featured is True

    def test_headline_may_always_be_unfeatured(self, engine, store, headline_ids):
        store.update_flags(headline_ids[0], is_featured=True)

        result = engine.request_feature(headline_ids[0], False)

        assert result.is_featured is False

    def test_ties_at_the_window_edge_broken_by_id(self):
        same_instant = NOW - timedelta(minutes=5)
        newest = make_flags(0)
        tied = [ArticleFlags(id=uuid.uuid4(), created_at=same_instant) for _ in range(6)]
        store = InMemoryArticleStore([newest] + tied)
        engine = PromotionEngine(store)

        by_id = sorted(tied, key=lambda a: str(a.id))
        assert engine.latest_headline_ids() == [newest.id] + [a.id for a in by_id[:3]]

        with pytest.raises(PromotionConflict):
            engine.request_feature(by_id[2].id, True)
        assert engine.request_feature(by_id[3].id, True).is_featured is True

    def test_headline_window_is_configurable(self, store, ordered):
        engine = PromotionEngine(store, limits=PromotionLimits(headline_window=1))
        assert engine.request_feature(ordered[1].id, True).is_featured is True


# ============================================================================
# Caps
# ============================================================================

class TestFeaturedCap:
    """At most seven articles are featured."""

    def test_eighth_feature_is_rejected(self, engine, store, eligible):
        for article_id in eligible[:7]:
            engine.request_feature(article_id, True)

        with pytest.raises(PromotionLimitExceeded) as exc_info:
            engine.request_feature(eligible[7], True)

        assert exc_info.value.reason == 'limit exceeded'
        assert exc_info.value.error_details['limit'] == 7
        assert store.count_featured() == 7
        assert store.find_by_id(eligible[7]).is_featured is False

    def test_slot_frees_after_unfeature(self, engine, store, eligible):
        for article_id in eligible[:7]:
            engine.request_feature(article_id, True)
        engine.request_feature(eligible[0], False)

        assert engine.request_feature(eligible[7], True).is_featured is True
        assert store.count_featured() == 7

    def test_refeaturing_at_cap_is_rejected(self, engine, store, eligible, on_change):
        for article_id in eligible[:7]:
            engine.request_feature(article_id, True)
        on_change.reset_mock()

        with pytest.raises(PromotionLimitExceeded):
            engine.request_feature(eligible[0], True)

        assert store.find_by_id(eligible[0]).is_featured is True
        assert store.count_featured() == 7
        on_change.assert_not_called()

    def test_refeaturing_below_cap_is_a_no_op(self, engine, store, eligible, on_change):
        engine.request_feature(eligible[0], True)
        on_change.reset_mock()

        result = engine.request_feature(eligible[0], True)

        assert result.is_featured is True
        on_change.assert_not_called()


class TestTrendingCap:
    """At most seven articles are trending."""

    def test_eighth_trending_is_rejected(self, engine, store, eligible):
        for article_id in eligible[:7]:
            engine.request_trending(article_id, True, topic='Storm')

        with pytest.raises(PromotionLimitExceeded):
            engine.request_trending(eligible[7], True, topic='Storm')

        assert store.count_trending() == 7

    def test_topic_change_at_cap_is_rejected(self, engine, store, eligible):
        for article_id in eligible[:7]:
            engine.request_trending(article_id, True, topic='Storm')

        with pytest.raises(PromotionLimitExceeded):
            engine.request_trending(eligible[0], True, topic='Flood')

        assert store.find_by_id(eligible[0]).trending_topic == 'Storm'
        assert store.count_trending() == 7

    def test_topic_can_change_below_cap(self, engine, store, eligible):
        engine.request_trending(eligible[0], True, topic='Storm')

        result = engine.request_trending(eligible[0], True, topic='Flood')

        assert result.trending_topic == 'Flood'
        assert store.count_trending() == 1

    def test_caps_are_independent(self, engine, store, eligible):
        for article_id in eligible[:5]:
            engine.request_feature(article_id, True)
        for article_id in eligible[5:10]:
            engine.request_trending(article_id, True, topic='Budget')

        assert store.count_featured() == 5
        assert store.count_trending() == 5
        assert_invariants(store)


# ============================================================================
# Mutual exclusivity
# ============================================================================

class TestMutualExclusivity:

    def test_trending_article_cannot_be_featured(self, engine, store, eligible):
        engine.request_trending(eligible[0], True, topic='Election2026')

        with pytest.raises(PromotionConflict) as exc_info:
            engine.request_feature(eligible[0], True)

        assert exc_info.value.reason == 'already trending'
        article = store.find_by_id(eligible[0])
        assert article.is_trending is True
        assert article.is_featured is False

    def test_featured_article_cannot_trend(self, engine, eligible):
        engine.request_feature(eligible[0], True)

        with pytest.raises(PromotionConflict) as exc_info:
            engine.request_trending(eligible[0], True, topic='Election2026')

        assert exc_info.value.reason == 'already featured'

    def test_conflict_is_checked_before_cap(self, engine, eligible):
        """A trending article gets the conflict, not the limit, when featured is full."""
        for article_id in eligible[1:8]:
            engine.request_feature(article_id, True)
        engine.request_trending(eligible[0], True, topic='Storm')

        with pytest.raises(PromotionConflict):
            engine.request_feature(eligible[0], True)

    def test_switching_requires_turning_off_first(self, engine, store, eligible):
        engine.request_feature(eligible[0], True)
        engine.request_feature(eligible[0], False)

        result = engine.request_trending(eligible[0], True, topic='Markets')

        assert result.is_trending is True
        assert_invariants(store)


# ============================================================================
# Trending topic
# ============================================================================

class TestTrendingTopic:

    def test_trending_with_topic(self, engine, store, eligible, on_change):
        engine.request_trending(eligible[0], True, topic='Election2026')

        article = store.find_by_id(eligible[0])
        assert article.is_trending is True
        assert article.trending_topic == 'Election2026'
        on_change.assert_called_once()

    def test_untrending_clears_topic(self, engine, store, eligible):
        engine.request_trending(eligible[0], True, topic='Election2026')

        engine.request_trending(eligible[0], False)

        article = store.find_by_id(eligible[0])
        assert article.is_trending is False
        assert article.trending_topic is None

    @pytest.mark.parametrize('topic', [None, '', '   '])
    def test_topic_required(self, engine, store, eligible, on_change, topic):
        before = store.find_by_id(eligible[0])

        with pytest.raises(PromotionInvalidArgument) as exc_info:
            engine.request_trending(eligible[0], True, topic=topic)

        assert exc_info.value.reason == 'topic required'
        assert exc_info.value.status_code == 400
        assert store.find_by_id(eligible[0]) == before
        on_change.assert_not_called()

    def test_topic_is_trimmed(self, engine, eligible):
        result = engine.request_trending(eligible[0], True, topic='  Election2026  ')
        assert result.trending_topic == 'Election2026'

    def test_topic_too_long(self, engine, eligible):
        with pytest.raises(PromotionInvalidArgument) as exc_info:
            engine.request_trending(eligible[0], True, topic='x' * 101)
        assert exc_info.value.reason == 'topic too long'

    def test_topic_ignored_when_turning_off(self, engine, store, eligible):
        engine.request_trending(eligible[0], True, topic='Storm')

        result = engine.request_trending(eligible[0], False, topic='Ignored')

        assert result.trending_topic is None


# ============================================================================
# Idempotency and not found
# ============================================================================

class TestTurnOff:

    def test_unfeature_unfeatured_article_is_a_no_op(self, engine, store, eligible, on_change):
        before = store.find_by_id(eligible[0])

        result = engine.request_feature(eligible[0], False)

        assert result == before
        assert store.find_by_id(eligible[0]) == before
        on_change.assert_not_called()

    def test_untrend_untrended_article_is_a_no_op(self, engine, eligible, on_change):
        result = engine.request_trending(eligible[0], False)

        assert result.is_trending is False
        on_change.assert_not_called()

    def test_turn_off_works_on_headlines(self, engine, headline_ids):
        assert engine.request_trending(headline_ids[0], False).is_trending is False


class TestNotFound:

    def test_feature_unknown_article(self, engine):
        with pytest.raises(ArticleNotFound) as exc_info:
            engine.request_feature(uuid.uuid4(), True)
        assert exc_info.value.status_code == 404

    def test_trending_unknown_article(self, engine):
        with pytest.raises(ArticleNotFound):
            engine.request_trending(uuid.uuid4(), False)

    def test_deleted_between_read_and_write(self, store, eligible):
        engine = PromotionEngine(store)
        store.update_flags = MagicMock(return_value=False)

        with pytest.raises(ArticleNotFound):
            engine.request_feature(eligible[0], True)


# ============================================================================
# Change hook
# ============================================================================

class TestChangeHook:

    def test_called_once_per_write(self, engine, eligible, on_change):
        engine.request_feature(eligible[0], True)
        engine.request_feature(eligible[0], False)

        assert on_change.call_count == 2
        assert 'featured' in on_change.call_args_list[0].args[0]

    def test_not_called_on_rejection(self, engine, headline_ids, on_change):
        with pytest.raises(PromotionConflict):
            engine.request_feature(headline_ids[0], True)
        on_change.assert_not_called()

    def test_hook_failure_does_not_undo_write(self, store, eligible):
        engine = PromotionEngine(store, on_change=MagicMock(side_effect=RuntimeError('cache down')))

        result = engine.request_feature(eligible[0], True)

        assert result.is_featured is True
        assert store.find_by_id(eligible[0]).is_featured is True


class TestRandomizedSequence:
    """Invariants hold after any sequence of accepted and rejected requests."""

    def test_invariants_hold(self, engine, store, ordered):
        import random

        rng = random.Random(2026)
        ids = [a.id for a in ordered]
        for _ in range(300):
            article_id = rng.choice(ids)
            turn_on = rng.random() < 0.6
            try:
                if rng.random() < 0.5:
                    engine.request_feature(article_id, turn_on)
                else:
                    topic = rng.choice([None, 'Storm', 'Budget'])
                    engine.request_trending(article_id, turn_on, topic=topic)
            except (PromotionConflict, PromotionLimitExceeded, PromotionInvalidArgument):
                pass
            assert_invariants(store)


# ============================================================================
# Concurrency
# ============================================================================

class TestConcurrentRequests:
    """Parallel promotions cannot push a flag past its cap."""

    def _run_in_parallel(self, targets):
        barrier = threading.Barrier(len(targets))
        outcomes = []
        outcomes_lock = threading.Lock()

        def worker(target):
            barrier.wait()
            try:
                target()
                outcome = 'ok'
            except PromotionLimitExceeded:
                outcome = 'limit'
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=worker, args=(t,)) for t in targets]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    def test_parallel_features_stop_at_cap(self, engine, store, eligible):
        outcomes = self._run_in_parallel([
            lambda article_id=article_id: engine.request_feature(article_id, True)
            for article_id in eligible
        ])

        assert outcomes.count('ok') == 7
        assert outcomes.count('limit') == len(eligible) - 7
        assert store.count_featured() == 7
        assert_invariants(store)

    def test_parallel_trending_stops_at_cap(self, engine, store, eligible):
        outcomes = self._run_in_parallel([
            lambda article_id=article_id: engine.request_trending(article_id, True, topic='Storm')
            for article_id in eligible
        ])

        assert outcomes.count('ok') == 7
        assert store.count_trending() == 7
        assert_invariants(store)
