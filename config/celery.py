"""
Celery configuration for Newsdesk project.

Includes request ID propagation for cross-service tracing.
"""

import os
from celery import Celery
from celery.signals import task_prerun, task_postrun

# Set default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('newsdesk')

# Load configuration from Django settings with CELERY namespace
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()

app.conf.task_routes = {
    'apps.notifications.tasks.*': {'queue': 'push'},
}

# Default queue if not specified
app.conf.task_default_queue = 'default'


@task_prerun.connect
def setup_task_request_context(task_id, task, args, kwargs, **signals_kwargs):
    """
    Set up request context at the start of each Celery task.

    Extracts request_id from task headers (if passed via celery_request_id_headers)
    and sets up thread-local context for logging correlation.
    """
    from apps.core.middleware import setup_celery_request_context

    headers = getattr(task.request, 'headers', None) or {}
    setup_celery_request_context(headers)


@task_postrun.connect
def cleanup_task_request_context(task_id, task, args, kwargs, retval, state, **signals_kwargs):
    """Clean up request context after task completes."""
    from apps.core.middleware import clear_request_context
    clear_request_context()
