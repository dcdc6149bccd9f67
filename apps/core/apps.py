from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'

    def ready(self):
        """Register health checks and profile signals on startup."""
        from apps.core import signals  # noqa: F401
        from apps.core.observability import register_default_checks
        register_default_checks()
