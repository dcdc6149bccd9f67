"""
Tests for shared core helpers.

Tests cover:
- Exception classes and the API exception handler envelope
- Role lookup and permission classes
- Versioned public cache
- Page-number pagination for public payloads
"""

from unittest.mock import MagicMock, patch

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from rest_framework import serializers
from rest_framework.exceptions import NotAuthenticated, PermissionDenied, Throttled
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from apps.articles.models import Article
from apps.core.cache import (
    VERSION_KEY,
    cached_public,
    get_public_version,
    invalidate_public_content,
    public_cache_key,
)
from apps.core.exceptions import (
    ConflictError,
    DuplicateError,
    ErrorCode,
    LimitExceededError,
    NotFoundError,
    newsdesk_exception_handler,
)
from apps.core.models import StaffProfile
from apps.core.pagination import page_number_param, paginate_page
from apps.core.permissions import NewsroomPermission, get_user_role, has_role

User = get_user_model()


# ============================================================================
# Exceptions
# ============================================================================

class TestExceptionHandler:

    def context(self, request_id='req-42'):
        request = MagicMock()
        request.request_id = request_id
        return {'request': request}

    def test_custom_exception_envelope(self):
        exc = DuplicateError(message="Slug taken", field='slug')

        response = newsdesk_exception_handler(exc, self.context())

        assert response.status_code == 409
        assert response.data == {
            'error': {'code': 'DUPLICATE', 'message': 'Slug taken', 'field': 'slug'},
            'request_id': 'req-42',
        }

    @pytest.mark.parametrize('exc_class,status_code,code', [
        (ConflictError, 409, ErrorCode.CONFLICT),
        (LimitExceededError, 409, ErrorCode.LIMIT_EXCEEDED),
        (NotFoundError, 404, ErrorCode.NOT_FOUND),
    ])
    def test_status_and_codes(self, exc_class, status_code, code):
        response = newsdesk_exception_handler(exc_class(details={'k': 'v'}), self.context())

        assert response.status_code == status_code
        assert response.data['error']['code'] == code.value
        assert response.data['error']['details'] == {'k': 'v'}

    def test_drf_validation_error(self):
        exc = serializers.ValidationError({'title': ['This field is required.']})

        response = newsdesk_exception_handler(exc, self.context())

        assert response.status_code == 400
        assert response.data['error']['code'] == 'VALIDATION_ERROR'
        assert response.data['error']['details'] == {'title': ['This field is required.']}

    def test_not_authenticated(self):
        response = newsdesk_exception_handler(NotAuthenticated(), self.context())
        assert response.data['error']['code'] in ('AUTHENTICATION_REQUIRED', 'PERMISSION_DENIED')

    @pytest.mark.parametrize('exc,code', [
        (PermissionDenied(), 'PERMISSION_DENIED'),
        (Throttled(wait=5), 'RATE_LIMITED'),
    ])
    def test_drf_status_codes(self, exc, code):
        response = newsdesk_exception_handler(exc, self.context())
        assert response.data['error']['code'] == code

    def test_every_error_code_is_emitted(self):
        """Each code is produced by an exception class or by the handler."""
        assert {c.value for c in ErrorCode} == {
            'VALIDATION_ERROR', 'AUTHENTICATION_REQUIRED', 'PERMISSION_DENIED',
            'RATE_LIMITED', 'NOT_FOUND', 'DUPLICATE', 'CONFLICT',
            'LIMIT_EXCEEDED', 'PUSH_DELIVERY_ERROR', 'INTERNAL_ERROR',
        }

    def test_unhandled_exception_is_500(self):
        response = newsdesk_exception_handler(RuntimeError('boom'), self.context())

        assert response.status_code == 500
        assert response.data['error']['message'] == 'An unexpected error occurred'


# ============================================================================
# Permissions
# ============================================================================

@pytest.mark.django_db
class TestRoles:

    def test_roles_from_profile(self, make_user):
        assert get_user_role(make_user('viewer')) == 'viewer'
        assert get_user_role(make_user('editor')) == 'editor'
        assert get_user_role(make_user('admin')) == 'admin'

    def test_superuser_is_admin(self, db):
        user = User.objects.create_superuser(username='root', password='x', email='root@example.com')
        StaffProfile.objects.filter(user=user).update(role='viewer')
        assert get_user_role(user) == 'admin'

    def test_no_profile_is_viewer(self, make_user):
        user = make_user('editor')
        StaffProfile.objects.filter(user=user).delete()
        assert get_user_role(user) == 'viewer'

    def test_anonymous(self):
        assert get_user_role(AnonymousUser()) is None
        assert has_role(AnonymousUser(), 'viewer') is False

    def test_levels(self, make_user):
        editor = make_user('editor')
        assert has_role(editor, 'viewer')
        assert has_role(editor, 'editor')
        assert not has_role(editor, 'admin')

    @pytest.mark.parametrize('role,method,allowed', [
        ('viewer', 'get', True),
        ('viewer', 'post', False),
        ('editor', 'patch', True),
        ('editor', 'delete', False),
        ('admin', 'delete', True),
    ])
    def test_newsroom_permission(self, make_user, role, method, allowed):
        request = getattr(APIRequestFactory(), method)('/api/articles/')
        request.user = make_user(role)

        assert NewsroomPermission().has_permission(request, view=None) is allowed


# ============================================================================
# Public cache
# ============================================================================

class TestPublicCache:

    def test_version_seeded_from_clock(self):
        with patch('apps.core.cache.time.time', return_value=1_700_000_000.5):
            assert get_public_version() == 1_700_000_000_500

    def test_invalidate_bumps_version(self):
        version = get_public_version()
        invalidate_public_content('test')
        assert get_public_version() == version + 1

    def test_evicted_version_never_goes_backwards(self):
        with patch('apps.core.cache.time.time', return_value=1_700_000_000.0):
            version = get_public_version()
            invalidate_public_content('a')
            invalidate_public_content('b')
        stale_key = public_cache_key('home', 1)
        cache.set(stale_key, {'stale': True})

        cache.delete(VERSION_KEY)
        with patch('apps.core.cache.time.time', return_value=1_700_000_001.0):
            assert get_public_version() > version + 2
            assert cached_public(('home', 1), lambda: {'stale': False}) == {'stale': False}

    def test_invalidate_without_version_key(self):
        cache.delete(VERSION_KEY)
        with patch('apps.core.cache.time.time', return_value=1_700_000_002.0):
            invalidate_public_content('evicted')
        assert get_public_version() == 1_700_000_002_000

    def test_keys_are_versioned_and_quoted(self):
        version = get_public_version()
        key = public_cache_key('category', 'Local News', 1)
        assert key == f'newsdesk:public:v{version}:category:Local%20News:1'

    def test_cached_until_invalidated(self):
        builder = MagicMock(side_effect=[{'n': 1}, {'n': 2}])

        assert cached_public(('home', 1), builder) == {'n': 1}
        assert cached_public(('home', 1), builder) == {'n': 1}
        invalidate_public_content()
        assert cached_public(('home', 1), builder) == {'n': 2}
        assert builder.call_count == 2

    def test_none_is_not_cached(self):
        builder = MagicMock(return_value=None)

        cached_public(('article', 'missing'), builder)
        cached_public(('article', 'missing'), builder)

        assert builder.call_count == 2


# ============================================================================
# Pagination
# ============================================================================

class TitleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Article
        fields = ['title']


@pytest.mark.django_db
class TestPaginatePage:

    def test_pages(self, make_article):
        for _ in range(5):
            make_article()

        page = paginate_page(Article.objects.by_recency(), 2, TitleSerializer, 2)

        assert page['count'] == 5
        assert page['num_pages'] == 3
        assert page['page'] == 2
        assert page['has_next'] and page['has_previous']
        assert len(page['results']) == 2

    def test_non_numeric_page(self, make_article):
        make_article()
        assert paginate_page(Article.objects.all(), 'x', TitleSerializer, 2)['page'] == 1

    def test_out_of_range(self, make_article):
        make_article()
        with pytest.raises(NotFoundError):
            paginate_page(Article.objects.all(), 5, TitleSerializer, 2)


class TestPageNumberParam:

    @pytest.mark.parametrize('query,expected', [
        ({}, 1),
        ({'page': '3'}, 3),
        ({'page': '03'}, 3),
        ({'page': 'x'}, 1),
        ({'page': ''}, 1),
        ({'page': '-2'}, -2),
    ])
    def test_resolves_page(self, query, expected):
        request = Request(APIRequestFactory().get('/api/public/home/', query))
        assert page_number_param(request) == expected
