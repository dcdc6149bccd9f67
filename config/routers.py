"""
Shared DRF router.

Each app mounts its own router; DefaultRouter registers the
'drf_format_suffix' converter once per instance, which raises
"Converter 'drf_format_suffix' is already registered" as soon as a second
app includes one. Format suffixes are not used by this API.
"""

from rest_framework.routers import DefaultRouter


class NewsdeskRouter(DefaultRouter):
    """DefaultRouter without format suffix patterns."""
    include_format_suffixes = False
