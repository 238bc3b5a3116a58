"""Shared test fixtures."""

from __future__ import annotations

import pytest

from struct_map.core.config import MapConfig
from struct_map.core.engine import StructMapper
from struct_map.core.headers import canonical_header_key


@pytest.fixture
def mapper() -> StructMapper:
    """Mapper with the default config and a private plan cache."""
    return StructMapper()


@pytest.fixture
def header_mapper() -> StructMapper:
    """Mapper canonicalizing keys as HTTP header names."""
    return StructMapper(MapConfig(key_transform=canonical_header_key))
