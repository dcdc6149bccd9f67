# Generated migration for push subscribers and notification logs

import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='PushSubscriber',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('endpoint', models.URLField(help_text='Push service URL issued by the browser', max_length=1000, unique=True, verbose_name='Endpoint')),
                ('p256dh', models.CharField(help_text='Client public key for payload encryption', max_length=255, verbose_name='P-256 Key')),
                ('auth', models.CharField(max_length=255, verbose_name='Auth Secret')),
            ],
            options={
                'verbose_name': 'Push Subscriber',
                'verbose_name_plural': 'Push Subscribers',
                'db_table': 'push_subscribers',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='NotificationLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID)', primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, help_text='Timestamp when record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated', verbose_name='Updated At')),
                ('title', models.CharField(max_length=200, verbose_name='Title')),
                ('body', models.TextField(verbose_name='Body')),
                ('url', models.URLField(max_length=1000, verbose_name='URL')),
                ('recipient_count', models.PositiveIntegerField(default=0, help_text='Subscribers at send time', verbose_name='Recipients')),
                ('delivered_count', models.PositiveIntegerField(default=0, verbose_name='Delivered')),
                ('article_ids', models.JSONField(blank=True, default=list, help_text='Articles included in a digest', verbose_name='Article IDs')),
                ('sent_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Sent At')),
            ],
            options={
                'verbose_name': 'Notification Log',
                'verbose_name_plural': 'Notification Logs',
                'db_table': 'notification_logs',
                'ordering': ['-sent_at'],
            },
        ),
    ]
