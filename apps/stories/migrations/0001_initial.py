# Generated migration for web stories

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='WebStory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('title', models.CharField(max_length=300, verbose_name='Title')),
                ('cover_image', models.URLField(help_text='Image shown in the stories grid', max_length=1000, verbose_name='Cover Image')),
                ('author', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='web_stories', to=settings.AUTH_USER_MODEL, verbose_name='Author')),
            ],
            options={
                'verbose_name': 'Web Story',
                'verbose_name_plural': 'Web Stories',
                'db_table': 'web_stories',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='StorySlide',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('image_url', models.URLField(max_length=1000, verbose_name='Image URL')),
                ('caption', models.TextField(blank=True, null=True, verbose_name='Caption')),
                ('story', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='slides', to='stories.webstory', verbose_name='Story')),
            ],
            options={
                'verbose_name': 'Story Slide',
                'verbose_name_plural': 'Story Slides',
                'db_table': 'story_slides',
                'ordering': ['created_at'],
            },
        ),
    ]
