"""Unit tests for StructMapper and the module-level helpers."""

from __future__ import annotations

import dataclasses
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import pytest

import struct_map
from struct_map.core.cache import PlanCache
from struct_map.core.config import MapConfig
from struct_map.core.engine import StructMapper
from struct_map.core.enums import Direction
from struct_map.core.exceptions import UnknownOptionError
from struct_map.mapping.fields import mapfield


@dataclass
class Item:
    name: str = ""
    count: int = 0


@dataclass
class Nested:
    item: Item = dataclasses.field(default_factory=Item)


@dataclass
class BadOption:
    name: str = mapfield("name,often", default="")


@dataclass
class Header:
    content_type: str = mapfield("content-type", default="")
    request_id: str = mapfield("x-request-id,required", default="")


class TestPlanResolution:
    def test_plan_compiled_once(self, mapper: StructMapper) -> None:
        assert mapper.marshal_plan(Item) is mapper.marshal_plan(Item)
        assert len(mapper.cache) == 1

    def test_directions_cached_separately(self, mapper: StructMapper) -> None:
        mapper.marshal_plan(Item)
        mapper.unmarshal_plan(Item)
        assert len(mapper.cache) == 2
        assert (Direction.MARSHAL, Item, mapper.config) in mapper.cache
        assert (Direction.UNMARSHAL, Item, mapper.config) in mapper.cache

    def test_shared_cache_keyed_by_config(self) -> None:
        cache: PlanCache = PlanCache()
        dotted = StructMapper(cache=cache)
        underscored = StructMapper(MapConfig(delimiter="_"), cache=cache)

        assert dotted.marshal_plan(Nested).keys == ["item.name", "item.count"]
        assert underscored.marshal_plan(Nested).keys == ["item_name", "item_count"]
        assert len(cache) == 2

    def test_failed_compilation_retried(self, mapper: StructMapper) -> None:
        for _ in range(2):
            with pytest.raises(UnknownOptionError, match="often"):
                mapper.marshal(BadOption(), {})
        assert len(mapper.cache) == 0

    def test_compilation_logged(
        self, mapper: StructMapper, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="struct_map.core.engine")
        mapper.marshal_plan(Item)
        assert "Compiled marshal plan for Item with 2 fields" in caplog.text

    def test_compilation_failure_logged(
        self, mapper: StructMapper, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="struct_map.core.engine")
        with pytest.raises(UnknownOptionError):
            mapper.unmarshal_plan(BadOption)
        assert "Failed to compile unmarshal plan for BadOption" in caplog.text


class TestConcurrency:
    def test_concurrent_first_marshal(self, mapper: StructMapper) -> None:
        # A type no other test has compiled
        Fresh = dataclasses.make_dataclass(
            "Fresh",
            [
                ("a", str, mapfield("alpha", default="")),
                ("b", int, dataclasses.field(default=0)),
            ],
        )
        workers = 8
        barrier = threading.Barrier(workers)

        def run(index: int) -> dict[str, list[str]]:
            values: dict[str, list[str]] = {}
            barrier.wait()
            mapper.marshal(Fresh(a=f"v{index}", b=index), values)
            return values

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(run, range(workers)))

        assert results == [{"alpha": [f"v{i}"], "b": [str(i)]} for i in range(workers)]
        assert len(mapper.cache) == 1


class TestModuleHelpers:
    def test_marshal_unmarshal(self) -> None:
        values: dict[str, list[str]] = {}
        struct_map.marshal(Item(name="pen", count=3), values)
        assert values == {"name": ["pen"], "count": ["3"]}

        dst = Item()
        struct_map.unmarshal(values, dst)
        assert dst == Item(name="pen", count=3)

    def test_header_helpers(self) -> None:
        headers: dict[str, list[str]] = {}
        struct_map.marshal_header(Header(content_type="text/plain", request_id="r1"), headers)
        assert headers == {"Content-Type": ["text/plain"], "X-Request-Id": ["r1"]}

        dst = Header()
        struct_map.unmarshal_header(headers, dst)
        assert dst == Header(content_type="text/plain", request_id="r1")

    def test_header_required_uses_canonical_key(self) -> None:
        with pytest.raises(struct_map.MissingKeyError, match="X-Request-Id"):
            struct_map.unmarshal_header({}, Header())

    def test_default_mappers_configured(self) -> None:
        assert struct_map.default_mapper.config == MapConfig()
        assert struct_map.header_mapper.config.key_transform is struct_map.canonical_header_key
