"""Struct mapping engine.

StructMapper resolves the compiled plan of a record type through its plan
cache and runs the marshal or unmarshal executor with it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from struct_map.core.cache import PlanCache
from struct_map.core.config import MapConfig
from struct_map.core.enums import Direction
from struct_map.core.exceptions import InvalidTargetError, PlanCompilationError
from struct_map.mapping.compiler import compile_plan
from struct_map.mapping.marshal import marshal_record
from struct_map.mapping.plan import RecordPlan
from struct_map.mapping.unmarshal import unmarshal_record

logger = logging.getLogger(__name__)

PlanKey = tuple[Direction, type, MapConfig]


def _compile(key: PlanKey) -> RecordPlan:
    direction, cls, config = key
    try:
        plan = compile_plan(cls, config, direction)
    except PlanCompilationError as e:
        logger.debug(f"Failed to compile {direction.value} plan for {cls.__qualname__}: {e}")
        raise
    logger.debug(
        f"Compiled {direction.value} plan for {cls.__qualname__} with {len(plan.fields)} fields"
    )
    return plan


class StructMapper:
    """Converts records to and from flat string-list mappings.

    Safe to share between threads: plans are compiled at most once per
    record type and are immutable afterwards.

    Args:
        config: Delimiter, key transform and tag key. Defaults to MapConfig().
        cache: Plan cache to use. Mappers may share one; entries are keyed by
            direction, record type and config.
    """

    def __init__(
        self,
        config: MapConfig | None = None,
        cache: PlanCache[PlanKey, RecordPlan] | None = None,
    ) -> None:
        self._config = config if config is not None else MapConfig()
        self._cache: PlanCache[PlanKey, RecordPlan] = cache if cache is not None else PlanCache()

    @property
    def config(self) -> MapConfig:
        return self._config

    @property
    def cache(self) -> PlanCache[PlanKey, RecordPlan]:
        return self._cache

    def _plan(self, direction: Direction, cls: type) -> RecordPlan:
        return self._cache.get((direction, cls, self._config), _compile)

    def marshal_plan(self, cls: type) -> RecordPlan:
        """Return the compiled marshal plan of a record class."""
        return self._plan(Direction.MARSHAL, cls)

    def unmarshal_plan(self, cls: type) -> RecordPlan:
        """Return the compiled unmarshal plan of a record class."""
        return self._plan(Direction.UNMARSHAL, cls)

    def marshal(self, src: Any, values: MutableMapping[str, list[str]]) -> None:
        """Write the fields of record *src* into *values*.

        Existing lists under written keys are overwritten in place. Keys of
        empty ``omitempty`` fields are left as they are.

        Raises:
            InvalidTargetError: If *values* or *src* is None.
            PlanCompilationError: If the type of *src* cannot be mapped.
            MissingValueError: If a required field is empty.
        """
        if values is None:
            raise InvalidTargetError("cannot marshal into a None mapping")
        if src is None:
            raise InvalidTargetError("cannot marshal from None")

        plan = self.marshal_plan(type(src))
        marshal_record(plan, src, values)

    def unmarshal(self, values: Mapping[str, Sequence[str]] | None, dst: Any) -> None:
        """Populate the fields of record instance *dst* from *values*.

        A None mapping reads as empty.

        Raises:
            InvalidTargetError: If *dst* is None or a class.
            PlanCompilationError: If the type of *dst* cannot be mapped.
            MissingKeyError: If a required key is absent.
            ParseIntError: If an integer value is malformed.
            ListElementError: If an integer list element is malformed.
        """
        if dst is None or isinstance(dst, type):
            raise InvalidTargetError(
                f"can only unmarshal into a record instance, got {dst!r}"
            )

        plan = self.unmarshal_plan(type(dst))
        unmarshal_record(plan, values if values is not None else {}, dst)
