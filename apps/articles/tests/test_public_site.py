"""
Tests for the anonymous public API and the RSS feed.

Tests cover:
- Homepage sections (headlines, featured, trending, remaining articles)
- Category pages and pagination
- Article page with related articles
- Cache hits and invalidation after edits and promotions
- /rss.xml
- /sitemap.xml
"""

from datetime import datetime, timezone as dt_timezone

import pytest
from rest_framework import status

from apps.articles.models import Article
from apps.articles.promotion import get_promotion_engine
from apps.articles.public_views import PUBLIC_PAGE_SIZE, related_articles
from apps.stories.models import WebStory


def ids(rows):
    return [row['id'] for row in rows]


@pytest.mark.django_db
class TestPublicHome:

    def test_sections(self, api_client, headlines, older_articles):
        engine = get_promotion_engine()
        engine.request_feature(older_articles[0].id, True)
        engine.request_trending(older_articles[1].id, True, topic='Storm')

        response = api_client.get('/api/public/home/')

        assert response.status_code == status.HTTP_200_OK
        assert ids(response.data['latest_headlines']) == [str(a.id) for a in headlines]
        assert ids(response.data['featured']) == [str(older_articles[0].id)]
        assert response.data['trending'][0]['trending_topic'] == 'Storm'

        remaining = ids(response.data['articles']['results'])
        assert str(headlines[0].id) not in remaining
        assert str(older_articles[0].id) not in remaining
        assert remaining[0] == str(older_articles[1].id)
        assert len(remaining) == PUBLIC_PAGE_SIZE

    def test_second_page(self, api_client, older_articles):
        response = api_client.get('/api/public/home/', {'page': 2})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['articles']['page'] == 2
        assert response.data['articles']['has_previous'] is True

    def test_page_out_of_range(self, api_client, older_articles):
        response = api_client.get('/api/public/home/', {'page': 99})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_bad_page_falls_back_to_first(self, api_client, older_articles):
        response = api_client.get('/api/public/home/', {'page': 'abc'})
        assert response.data['articles']['page'] == 1

    def test_empty_site(self, api_client, db):
        response = api_client.get('/api/public/home/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['latest_headlines'] == []
        assert response.data['articles']['count'] == 0

    def test_cached_until_invalidated(self, api_client, older_articles):
        first = api_client.get('/api/public/home/').data

        # Bypasses ArticleService, so no invalidation
        Article.objects.filter(id=older_articles[0].id).update(title='Silently changed')
        assert api_client.get('/api/public/home/').data == first

        get_promotion_engine().request_feature(older_articles[5].id, True)
        refreshed = api_client.get('/api/public/home/').data
        assert ids(refreshed['featured']) == [str(older_articles[5].id)]

    def test_page_spellings_share_one_cache_entry(self, api_client, older_articles):
        first = api_client.get('/api/public/home/', {'page': 1}).data

        # Bypasses ArticleService, so any fresh build would show the new title
        Article.objects.filter(id=older_articles[1].id).update(title='Silently changed')

        for spelling in ('01', 'x', ''):
            assert api_client.get('/api/public/home/', {'page': spelling}).data == first
        assert api_client.get('/api/public/home/').data == first

    def test_edit_through_api_invalidates(self, api_client, editor_client, older_articles):
        api_client.get('/api/public/home/')

        editor_client.patch(
            f'/api/articles/{older_articles[4].id}/', {'title': 'Fresh headline text'}, format='json'
        )

        response = api_client.get('/api/public/home/')
        titles = [row['title'] for row in response.data['articles']['results']]
        assert 'Fresh headline text' in titles

    def test_ignores_credentials(self, editor_client, db):
        """Public endpoints never authenticate, so a bad token cannot break them."""
        editor_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        assert editor_client.get('/api/public/home/').status_code == status.HTTP_200_OK


@pytest.mark.django_db
class TestPublicCategory:

    def test_category_page(self, api_client, make_article):
        local = make_article(categories=['Local News', 'Politics'])
        make_article(categories=['Sports'])

        response = api_client.get('/api/public/category/Local%20News/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['category'] == 'Local News'
        assert ids(response.data['results']) == [str(local.id)]

    def test_unknown_category_is_empty(self, api_client, make_article):
        make_article()

        response = api_client.get('/api/public/category/Nothing/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 0


@pytest.mark.django_db
class TestPublicArticle:

    def test_article_page(self, api_client, make_article):
        article = make_article(slug='budget-vote', categories=['Politics'])
        related = make_article(categories=['Politics'])
        make_article(categories=['Sports'])

        response = api_client.get('/api/public/articles/budget-vote/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['article']['id'] == str(article.id)
        assert response.data['article']['url'].endswith('/article/budget-vote')
        assert ids(response.data['related']) == [str(related.id)]

    def test_unknown_slug(self, api_client, db):
        response = api_client.get('/api/public/articles/missing/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_related_limit(self, make_article):
        article = make_article(categories=['Politics'])
        for _ in range(6):
            make_article(categories=['Politics'])

        assert len(related_articles(article)) == 4

    def test_no_categories_no_related(self, make_article):
        article = make_article(categories=[])
        make_article(categories=['Politics'])

        assert related_articles(article) == []


@pytest.mark.django_db
class TestRssFeed:

    def test_feed(self, client, make_article):
        make_article(title='Storm hits coast', slug='storm', meta_description='Winds up to 90mph.')
        make_article(title='Plain item', content='<p>Body <b>text</b> only.</p>')

        response = client.get('/rss.xml')

        assert response.status_code == 200
        assert response['Content-Type'].startswith('application/rss+xml')
        body = response.content.decode()
        assert '<title>Storm hits coast</title>' in body
        assert 'Winds up to 90mph.' in body
        assert 'Body text only.' in body
        assert '/article/storm' in body


@pytest.mark.django_db
class TestSitemap:

    def test_lists_every_public_page(self, client, make_article, settings):
        settings.SITE_URL = 'https://news.example.com/'
        make_article(slug='storm', categories=['Local News', 'Weather'])
        make_article(slug='budget', categories=['Politics', 'Weather'])
        story = WebStory.objects.create(
            title='Flood in pictures', cover_image='https://cdn.example.com/cover.jpg'
        )

        response = client.get('/sitemap.xml')

        assert response.status_code == 200
        body = response.content.decode()
        for loc in (
            'https://news.example.com/',
            'https://news.example.com/web-stories',
            'https://news.example.com/category/Local%20News',
            'https://news.example.com/category/Politics',
            'https://news.example.com/category/Weather',
            'https://news.example.com/article/storm',
            'https://news.example.com/article/budget',
            f'https://news.example.com/web-stories/{story.id}',
        ):
            assert f'<loc>{loc}</loc>' in body
        assert body.count('/category/Weather<') == 1

    def test_article_lastmod_is_updated_at(self, client, make_article):
        article = make_article(slug='storm')
        Article.objects.filter(id=article.id).update(
            updated_at=datetime(2026, 3, 14, 9, 30, tzinfo=dt_timezone.utc)
        )

        body = client.get('/sitemap.xml').content.decode()

        assert '<lastmod>2026-03-14' in body

    def test_empty_site_lists_static_pages(self, client, db):
        response = client.get('/sitemap.xml')

        assert response.status_code == 200
        assert response.content.decode().count('<url>') == 2
