"""
Admin interface for web stories.
"""

from django.contrib import admin
from .models import WebStory, StorySlide


class StorySlideInline(admin.TabularInline):
    model = StorySlide
    extra = 0
    fields = ['image_url', 'caption', 'created_at']
    readonly_fields = ['created_at']


@admin.register(WebStory)
class WebStoryAdmin(admin.ModelAdmin):
    list_display = ['title', 'author', 'slide_count', 'created_at']
    search_fields = ['title']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['author']
    inlines = [StorySlideInline]

    def slide_count(self, obj):
        return obj.slides.count()
    slide_count.short_description = 'Slides'
