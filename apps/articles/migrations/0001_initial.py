# Generated migration for articles and promotion locks

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def create_promotion_locks(apps, schema_editor):
    PromotionLock = apps.get_model('articles', 'PromotionLock')
    for name in ('featured', 'trending'):
        PromotionLock.objects.get_or_create(name=name)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Article',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('title', models.CharField(help_text='Headline shown on the site', max_length=300, verbose_name='Title')),
                ('slug', models.SlugField(help_text='URL path segment for the public article page', max_length=300, unique=True, verbose_name='Slug')),
                ('content', models.TextField(help_text='Article body (HTML)', verbose_name='Content')),
                ('image_url', models.URLField(help_text='Lead image', max_length=1000, verbose_name='Image URL')),
                ('categories', models.JSONField(default=list, help_text='Ordered list of category labels', verbose_name='Categories')),
                ('meta_title', models.CharField(blank=True, max_length=300, null=True, verbose_name='Meta Title')),
                ('meta_description', models.TextField(blank=True, null=True, verbose_name='Meta Description')),
                ('meta_keywords', models.CharField(blank=True, max_length=500, null=True, verbose_name='Meta Keywords')),
                ('is_featured', models.BooleanField(db_index=True, default=False, help_text='Shown in the featured slots on the homepage', verbose_name='Featured')),
                ('is_trending', models.BooleanField(db_index=True, default=False, help_text='Shown in the trending strip with its topic', verbose_name='Trending')),
                ('trending_topic', models.CharField(blank=True, help_text='Short label; set only while trending', max_length=100, null=True, verbose_name='Trending Topic')),
                ('author', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='articles', to=settings.AUTH_USER_MODEL, verbose_name='Author')),
            ],
            options={
                'verbose_name': 'Article',
                'verbose_name_plural': 'Articles',
                'db_table': 'articles',
                'ordering': ['-created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='PromotionLock',
            fields=[
                ('name', models.CharField(choices=[('featured', 'Featured'), ('trending', 'Trending')], max_length=20, primary_key=True, serialize=False)),
            ],
            options={
                'verbose_name': 'Promotion Lock',
                'verbose_name_plural': 'Promotion Locks',
                'db_table': 'promotion_locks',
            },
        ),
        migrations.AddConstraint(
            model_name='article',
            constraint=models.CheckConstraint(
                condition=models.Q(('is_featured', True), ('is_trending', True), _negated=True),
                name='article_not_featured_and_trending',
            ),
        ),
        migrations.AddConstraint(
            model_name='article',
            constraint=models.CheckConstraint(
                condition=models.Q(
                    models.Q(
                        ('is_trending', True),
                        ('trending_topic__isnull', False),
                        models.Q(('trending_topic', ''), _negated=True),
                    ),
                    models.Q(('is_trending', False), ('trending_topic__isnull', True)),
                    _connector='OR',
                ),
                name='article_trending_topic_consistent',
            ),
        ),
        migrations.RunPython(create_promotion_locks, migrations.RunPython.noop),
    ]
