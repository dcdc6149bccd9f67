"""
Admin interface for Article management.

Promotion flags are read-only here; they change through the dashboard API
so the promotion rules always apply.
"""

from django.contrib import admin
from django.utils.html import format_html
from .models import Article, PromotionLock
from .services import ArticleService


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    """
    Admin interface for Article model.
    """

    list_display = [
        'title_short',
        'slug',
        'categories_display',
        'promotion_badge',
        'author',
        'created_at',
    ]

    list_filter = [
        'is_featured',
        'is_trending',
        ('created_at', admin.DateFieldListFilter),
    ]

    search_fields = [
        'title',
        'slug',
        'content',
        'trending_topic',
    ]

    readonly_fields = [
        'id',
        'is_featured',
        'is_trending',
        'trending_topic',
        'created_at',
        'updated_at',
    ]

    raw_id_fields = ['author']

    date_hierarchy = 'created_at'

    prepopulated_fields = {'slug': ('title',)}

    fieldsets = (
        ('Article', {
            'fields': ('id', 'title', 'slug', 'categories', 'image_url', 'content', 'author')
        }),
        ('SEO', {
            'fields': ('meta_title', 'meta_description', 'meta_keywords'),
            'classes': ('collapse',),
        }),
        ('Promotion', {
            'fields': ('is_featured', 'is_trending', 'trending_topic'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def title_short(self, obj):
        """Display shortened title."""
        if len(obj.title) > 60:
            return obj.title[:60] + '...'
        return obj.title
    title_short.short_description = 'Title'

    def categories_display(self, obj):
        return ', '.join(obj.categories or [])
    categories_display.short_description = 'Categories'

    def promotion_badge(self, obj):
        """Featured/trending badge."""
        if obj.is_featured:
            return format_html(
                '<span style="background-color: {}; color: white; padding: 3px 10px; '
                'border-radius: 3px;">{}</span>',
                '#007bff',
                'Featured',
            )
        if obj.is_trending:
            return format_html(
                '<span style="background-color: {}; color: white; padding: 3px 10px; '
                'border-radius: 3px;">Trending: {}</span>',
                '#fd7e14',
                obj.trending_topic,
            )
        return '-'
    promotion_badge.short_description = 'Promotion'

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        ArticleService().on_change(f"article {obj.id} saved in admin")

    def delete_model(self, request, obj):
        ArticleService().delete_article(obj)


@admin.register(PromotionLock)
class PromotionLockAdmin(admin.ModelAdmin):
    list_display = ['name']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
