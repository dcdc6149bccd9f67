"""
Web story serializers.
"""

from rest_framework import serializers

from .models import WebStory, StorySlide


class StorySlideSerializer(serializers.ModelSerializer):
    caption = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = StorySlide
        fields = ['id', 'story', 'image_url', 'caption', 'created_at', 'updated_at']
        read_only_fields = ['id', 'story', 'created_at', 'updated_at']

    def validate_caption(self, value):
        value = (value or '').strip()
        return value or None


class WebStoryListSerializer(serializers.ModelSerializer):
    """Compact serializer for story grids."""

    slide_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = WebStory
        fields = ['id', 'title', 'cover_image', 'slide_count', 'created_at', 'updated_at']
        read_only_fields = fields


class WebStoryDetailSerializer(serializers.ModelSerializer):
    """Story with its slides in playback order."""

    slides = StorySlideSerializer(many=True, read_only=True)

    class Meta:
        model = WebStory
        fields = ['id', 'title', 'cover_image', 'author', 'slides', 'created_at', 'updated_at']
        read_only_fields = fields


class WebStoryWriteSerializer(serializers.ModelSerializer):
    """
    Create/update payload.

    cover_image is required on create; on update an empty value keeps the
    current image.
    """

    cover_image = serializers.URLField(max_length=1000, required=False, allow_blank=True)

    class Meta:
        model = WebStory
        fields = ['title', 'cover_image']

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required.")
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('cover_image'):
            raise serializers.ValidationError({'cover_image': "Cover image URL is required."})
        if self.instance is not None and not attrs.get('cover_image'):
            attrs.pop('cover_image', None)
        return attrs
