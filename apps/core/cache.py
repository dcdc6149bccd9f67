"""
Versioned cache for public content.

Public listings are cached under keys that embed a global version number.
Any change that affects what readers see (publishing, editing, promoting)
bumps the version, so every cached listing misses at once without having
to know which keys exist.

The version is seeded from the clock in milliseconds, so a version key that
was evicted comes back higher than any version already used, as long as
bumps stay below one per millisecond.
"""

import logging
import time
from urllib.parse import quote

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

VERSION_KEY = 'newsdesk:public:version'


def _clock_version() -> int:
    return int(time.time() * 1000)


def get_public_version() -> int:
    version = cache.get(VERSION_KEY)
    if version is None:
        seed = _clock_version()
        cache.add(VERSION_KEY, seed, timeout=None)
        version = cache.get(VERSION_KEY, seed)
    return version


def public_cache_key(*parts) -> str:
    """Build a key such as 'newsdesk:public:v3:home'."""
    # Category labels may contain spaces
    suffix = ':'.join(quote(str(p), safe='') for p in parts)
    return f'newsdesk:public:v{get_public_version()}:{suffix}'


def invalidate_public_content(reason: str = '') -> None:
    """Drop every cached public listing by bumping the version."""
    try:
        cache.incr(VERSION_KEY)
    except ValueError:
        # Key missing or evicted
        cache.set(VERSION_KEY, _clock_version(), timeout=None)
    logger.info("Public content invalidated: %s", reason or 'unspecified')


def cached_public(key_parts, builder, timeout=None):
    """
    Return the cached value for key_parts, building and storing it on a miss.

    Usage:
        data = cached_public(('home',), build_home_payload)
    """
    key = public_cache_key(*key_parts)
    value = cache.get(key)
    if value is None:
        value = builder()
        if value is not None:
            cache.set(
                key,
                value,
                timeout if timeout is not None else settings.PUBLIC_CACHE_TIMEOUT,
            )
    return value
