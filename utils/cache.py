"""
Cache Module - Entity query cache on top of Flask-Caching

Every entity has a version token stored in the cache. Query results are
stored under (entity key, version, variant); invalidating an entity writes a
new token, so all of its cached queries stop being found at once in every
process that shares the backend. Orphaned entries expire with
CACHE_DEFAULT_TIMEOUT.
"""

import uuid
from flask import current_app
from extensions import cache


def _version_key(entity_key):
    return f"query-version:{entity_key}"


def _current_version(entity_key):
    version = cache.get(_version_key(entity_key))
    if version is None:
        version = uuid.uuid4().hex
        cache.set(_version_key(entity_key), version, timeout=0)
    return version


def _query_key(entity_key, variant):
    return f"query:{entity_key}:{_current_version(entity_key)}:{variant!r}"


def cached_query(entity_key, variant, loader):
    """Return the cached result for entity_key/variant, loading it on a miss

    None results are not cached, so absent singletons are re-read each time.
    """
    if not current_app.config.get('QUERY_CACHE_ENABLED', True):
        return loader()

    key = _query_key(entity_key, variant)
    result = cache.get(key)
    if result is not None:
        current_app.logger.debug(f"Query cache hit: {entity_key} {variant}")
        return result

    result = loader()
    if result is not None:
        cache.set(key, result)
    return result


def invalidate(entity_key):
    """Drop every cached query of one entity"""
    cache.set(_version_key(entity_key), uuid.uuid4().hex, timeout=0)
    current_app.logger.debug(f"Query cache invalidated: {entity_key}")


__all__ = ['cached_query', 'invalidate']
