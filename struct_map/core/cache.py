"""Plan cache.

Compiled plans are memoized for the lifetime of the process. Lookups of
warm entries are plain dict reads; only a miss takes the lock, so many
threads can execute the same plan without contending.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class PlanCache(Generic[K, V]):
    """Memoizes compiled plans with at most one compilation per key.

    A failed compilation is not stored: the exception propagates to the
    caller and the next lookup of the same key compiles again.
    """

    def __init__(self) -> None:
        self._plans: dict[K, V] = {}
        self._lock = threading.Lock()

    def get(self, key: K, compile_fn: Callable[[K], V]) -> V:
        """Return the plan for *key*, compiling it with *compile_fn* on a miss."""
        try:
            return self._plans[key]
        except KeyError:
            return self._get_sync(key, compile_fn)

    def _get_sync(self, key: K, compile_fn: Callable[[K], V]) -> V:
        with self._lock:
            # Another thread may have compiled it while we waited.
            if key in self._plans:
                return self._plans[key]

            plan = compile_fn(key)
            self._plans[key] = plan
            return plan

    def clear(self) -> None:
        """Drop every cached plan."""
        with self._lock:
            self._plans.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._plans

    def __len__(self) -> int:
        """Number of cached plans."""
        return len(self._plans)
