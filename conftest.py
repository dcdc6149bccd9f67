"""
Shared pytest fixtures for Newsdesk tests.
"""

import itertools
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from apps.articles.models import Article
from apps.core.models import StaffProfile

User = get_user_model()

_sequence = itertools.count(1)


@pytest.fixture(autouse=True)
def clear_cache():
    """Public responses are cached in locmem; start every test clean."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Create an API client."""
    return APIClient()


@pytest.fixture
def make_user(db):
    """Factory for users with a given newsroom role."""

    def make(role='editor', username=None, **kwargs):
        n = next(_sequence)
        username = username or f'{role}{n}'
        user = User.objects.create_user(
            username=username,
            email=kwargs.pop('email', f'{username}@example.com'),
            password=kwargs.pop('password', 'testpass123'),
            **kwargs,
        )
        StaffProfile.objects.filter(user=user).update(role=role)
        return user

    return make


@pytest.fixture
def editor_user(make_user):
    return make_user('editor')


@pytest.fixture
def admin_user(make_user):
    return make_user('admin')


@pytest.fixture
def viewer_user(make_user):
    return make_user('viewer')


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def editor_client(editor_user):
    """API client authenticated as an editor."""
    return _client_for(editor_user)


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as an admin."""
    return _client_for(admin_user)


@pytest.fixture
def viewer_client(viewer_user):
    """API client authenticated as a viewer."""
    return _client_for(viewer_user)


@pytest.fixture
def make_article(db):
    """
    Factory for articles.

    Each call creates an article one minute older than the previous one
    unless created_at is given, so the first article made is the newest.
    """
    base = timezone.now()
    counter = itertools.count()

    def make(**kwargs):
        n = next(counter)
        unique = next(_sequence)
        fields = {
            'title': f'Article {unique}',
            'slug': f'article-{unique}',
            'content': f'<p>Body of article {unique}.</p>',
            'image_url': f'https://cdn.example.com/{unique}.jpg',
            'categories': ['Politics'],
            'created_at': base - timedelta(minutes=n),
        }
        fields.update(kwargs)
        return Article.objects.create(**fields)

    return make


@pytest.fixture
def headlines(make_article):
    """The four newest articles, newest first."""
    return [make_article(title=f'Headline {i}') for i in range(4)]


@pytest.fixture
def older_articles(headlines, make_article):
    """Ten articles outside the headline window, newest first."""
    return [make_article() for _ in range(10)]
