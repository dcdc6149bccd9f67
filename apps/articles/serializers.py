"""
Article serializers for the dashboard and the public site.
"""

from rest_framework import serializers

from .models import Article
from .services import clean_categories


class CategoriesField(serializers.Field):
    """
    A list of category labels.

    A bare string is accepted as a one-element list.
    """

    default_error_messages = {
        'invalid': 'Expected a list of category labels.',
        'empty': 'At least one category is required.',
    }

    def to_internal_value(self, data):
        if not isinstance(data, (str, list)):
            self.fail('invalid')
        categories = clean_categories(data)
        if not categories:
            self.fail('empty')
        return categories

    def to_representation(self, value):
        return clean_categories(value)


class ArticleListSerializer(serializers.ModelSerializer):
    """Compact serializer for the dashboard table."""

    categories = CategoriesField()
    author_name = serializers.SerializerMethodField()

    class Meta:
        model = Article
        fields = [
            'id',
            'title',
            'slug',
            'categories',
            'image_url',
            'is_featured',
            'is_trending',
            'trending_topic',
            'author_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_author_name(self, obj):
        author = obj.author
        if author is None:
            return None
        profile = getattr(author, 'staff_profile', None)
        return (profile.display_name if profile else '') or author.get_full_name() or author.username


class ArticleDetailSerializer(ArticleListSerializer):
    """Full article for the editor."""

    class Meta(ArticleListSerializer.Meta):
        fields = ArticleListSerializer.Meta.fields + [
            'content',
            'meta_title',
            'meta_description',
            'meta_keywords',
        ]
        read_only_fields = fields


class ArticleWriteSerializer(serializers.ModelSerializer):
    """
    Validates create/update payloads.

    Slug uniqueness is checked by ArticleService so a clash is reported as a
    409 with an editor-facing message, not as a field error.
    Promotion flags are not writable here.
    """

    slug = serializers.SlugField(max_length=300)
    categories = CategoriesField()
    image_url = serializers.URLField(max_length=1000, required=False, allow_blank=True)
    meta_title = serializers.CharField(max_length=300, required=False, allow_blank=True, allow_null=True)
    meta_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    meta_keywords = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = Article
        fields = [
            'title',
            'slug',
            'content',
            'image_url',
            'categories',
            'meta_title',
            'meta_description',
            'meta_keywords',
        ]


class FeatureRequestSerializer(serializers.Serializer):
    is_featured = serializers.BooleanField()


class TrendingRequestSerializer(serializers.Serializer):
    is_trending = serializers.BooleanField()
    # Presence and length are promotion rules, checked by the engine
    topic = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=True)


class SeoCheckSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True)
    keyword = serializers.CharField(required=False, allow_blank=True, default='')
    title = serializers.CharField(required=False, allow_blank=True, default='')
    meta_title = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    meta_description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


# =============================================================================
# Public site
# =============================================================================

class PublicArticleCardSerializer(serializers.ModelSerializer):
    """Article card used in listings, search results and related articles."""

    categories = CategoriesField()

    class Meta:
        model = Article
        fields = [
            'id',
            'title',
            'slug',
            'categories',
            'image_url',
            'trending_topic',
            'created_at',
        ]
        read_only_fields = fields


class PublicArticleSerializer(PublicArticleCardSerializer):
    """Full public article page."""

    author_name = serializers.SerializerMethodField()
    url = serializers.CharField(source='public_url', read_only=True)

    class Meta(PublicArticleCardSerializer.Meta):
        fields = PublicArticleCardSerializer.Meta.fields + [
            'content',
            'meta_title',
            'meta_description',
            'meta_keywords',
            'author_name',
            'url',
            'updated_at',
        ]
        read_only_fields = fields

    def get_author_name(self, obj):
        return ArticleListSerializer().get_author_name(obj)
