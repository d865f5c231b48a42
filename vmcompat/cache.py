"""
One-time cache for the resolved scenario map.

Resolution downloads manifests, so a test process does it once and every
later caller shares the same read-only result.
"""

import threading
from typing import Callable, Optional

from .loader import ManifestLoader
from .logger import get_logger
from .resolver import ScenarioMap


class VersionMappingCache:
    """
    Holds at most one ScenarioMap.

    The first get() runs the computation under a lock; concurrent callers
    wait for it and then read the stored map. A failed computation stores
    nothing and its exception reaches the caller that triggered it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._mapping: Optional[ScenarioMap] = None

    @property
    def is_resolved(self) -> bool:
        return self._mapping is not None

    def get(self, compute: Callable[[], ScenarioMap]) -> ScenarioMap:
        with self._lock:
            if self._mapping is None:
                self._mapping = compute()
                get_logger().debug("Scenario versions cached")
            return self._mapping

    def clear(self):
        with self._lock:
            self._mapping = None


# Process-wide cache instance
_default_cache = VersionMappingCache()


def get_version_mapping(
    loader: Optional[ManifestLoader] = None,
    cache: Optional[VersionMappingCache] = None,
) -> ScenarioMap:
    """
    Return the scenario map, resolving it on first use.

    Args:
        loader: ManifestLoader used if resolution is needed (default: from env)
        cache: Cache to use (default: the process-wide cache)
    """
    if cache is None:
        cache = _default_cache

    def compute() -> ScenarioMap:
        return (loader or ManifestLoader()).resolve()

    return cache.get(compute)


def reset_version_mapping():
    """Reset the process-wide cache (useful for testing)."""
    _default_cache.clear()
