"""Memoization of conversions, kept outside of the (pure) converter."""

from __future__ import annotations

from functools import wraps
import logging
from threading import Lock
from typing import Callable, Hashable

from textual.cache import LRUCache

from ansispan.segments import Segment, ansi_to_segments
from ansispan.styles import TAILWIND, StyleTable

log = logging.getLogger(__name__)

_MISSING = object()


def memoize[**P, R](maxsize: int = 256) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorate a function to cache results in a bounded LRU cache.

    Arguments must be hashable. The cache is exposed as a `cache` attribute
    on the decorated function.

    Args:
        maxsize: Maximum number of results to keep.
    """
    if maxsize < 1:
        raise ValueError("maxsize must be at least 1")

    def decorator(function: Callable[P, R]) -> Callable[P, R]:
        cache: LRUCache[Hashable, R] = LRUCache(maxsize)
        lock = Lock()

        @wraps(function)
        def cached(*args: P.args, **kwargs: P.kwargs) -> R:
            key = (args, tuple(sorted(kwargs.items())))
            with lock:
                result = cache.get(key, _MISSING)
            if result is not _MISSING:
                log.debug("cache hit for %s", function.__qualname__)
                return result  # type: ignore[return-value]
            result = function(*args, **kwargs)
            with lock:
                cache.set(key, result)
            return result

        cached.cache = cache  # type: ignore[attr-defined]
        return cached

    return decorator


@memoize(256)
def cached_ansi_to_segments(
    text: str, table: StyleTable = TAILWIND
) -> tuple[Segment, ...]:
    """A cached version of `ansi_to_segments`, returning an immutable tuple."""
    return tuple(ansi_to_segments(text, table))


def set_cache_size(maxsize: int) -> None:
    """Set how many conversions `cached_ansi_to_segments` keeps.

    This clears the cache. The CLI calls it with the `cache.size` setting,
    before converting anything or starting the viewer.

    Args:
        maxsize: Maximum number of conversions to keep.
    """
    if maxsize < 1:
        raise ValueError("maxsize must be at least 1")
    cache: LRUCache = cached_ansi_to_segments.cache  # type: ignore[attr-defined]
    cache.clear()
    cache.maxsize = maxsize
    log.debug("conversion cache size set to %d", maxsize)
