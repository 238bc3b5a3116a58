"""Unit tests for PlanCache."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from struct_map.core.cache import PlanCache


class TestPlanCache:
    def test_miss_compiles_and_stores(self) -> None:
        cache: PlanCache[str, object] = PlanCache()
        plan = object()
        assert cache.get("a", lambda key: plan) is plan
        assert "a" in cache
        assert len(cache) == 1

    def test_hit_skips_compilation(self) -> None:
        cache: PlanCache[str, int] = PlanCache()
        calls: list[str] = []

        def compile_fn(key: str) -> int:
            calls.append(key)
            return len(calls)

        assert cache.get("a", compile_fn) == 1
        assert cache.get("a", compile_fn) == 1
        assert calls == ["a"]

    def test_failure_not_cached(self) -> None:
        cache: PlanCache[str, int] = PlanCache()

        def failing(key: str) -> int:
            raise RuntimeError("bad type")

        with pytest.raises(RuntimeError, match="bad type"):
            cache.get("a", failing)
        assert "a" not in cache
        assert cache.get("a", lambda key: 7) == 7

    def test_distinct_keys(self) -> None:
        cache: PlanCache[str, str] = PlanCache()
        assert cache.get("a", str.upper) == "A"
        assert cache.get("b", str.upper) == "B"
        assert len(cache) == 2

    def test_clear(self) -> None:
        cache: PlanCache[str, str] = PlanCache()
        cache.get("a", str.upper)
        cache.clear()
        assert len(cache) == 0
        assert "a" not in cache

    def test_concurrent_first_use_compiles_once(self) -> None:
        cache: PlanCache[str, object] = PlanCache()
        calls: list[str] = []
        workers = 8
        barrier = threading.Barrier(workers)

        def compile_fn(key: str) -> object:
            calls.append(key)
            time.sleep(0.01)
            return object()

        def resolve() -> object:
            barrier.wait()
            return cache.get("shared", compile_fn)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: resolve(), range(workers)))

        assert calls == ["shared"]
        assert all(result is results[0] for result in results)
