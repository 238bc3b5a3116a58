"""Unmarshal executor.

Populates a record in place from a flat mapping by walking its plan. A key
whose list is empty counts as absent. Absent optional fields are reset to
their zero value; nested records and optional records are allocated when
they hold None.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from functools import singledispatch
from typing import Any

from struct_map.core.exceptions import (
    IntegerRangeError,
    IntegerSyntaxError,
    ListElementError,
    MissingKeyError,
    ParseIntError,
)
from struct_map.mapping.plan import (
    CustomPlan,
    FieldPlan,
    IntegerListPlan,
    IntegerPlan,
    PointerPlan,
    RecordPlan,
    StringListPlan,
    StringPlan,
    new_record,
    zero_value,
)

Source = Mapping[str, Sequence[str]]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Longest significant digit run an int64 can hold
_MAX_INT_DIGITS = 19


def parse_int(text: str, bits: int = 64) -> int:
    """Parse signed base-10 text into an integer of the given bit width.

    Only an optional sign followed by ASCII digits is accepted: no
    whitespace, underscores or other bases.

    Raises:
        IntegerSyntaxError: If *text* is not a base-10 integer.
        IntegerRangeError: If the value does not fit in *bits*.
    """
    if not _INT_PATTERN.fullmatch(text):
        raise IntegerSyntaxError(text, bits)
    if len(text.lstrip("+-").lstrip("0")) > _MAX_INT_DIGITS:
        raise IntegerRangeError(text, bits)

    value = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise IntegerRangeError(text, bits)
    return value


def unmarshal_record(plan: RecordPlan, values: Source, dst: Any) -> None:
    """Populate every mapped field of *dst* from *values*."""
    for field in plan.fields:
        _unmarshal_field(field, values, dst)


def _set(dst: Any, attribute: str, value: Any) -> None:
    # Frozen dataclasses are populated too
    object.__setattr__(dst, attribute, value)


def _lookup(values: Source, key: str) -> Sequence[str] | None:
    found = values.get(key)
    if not found:
        return None
    return found


def _unmarshal_field(field: FieldPlan, values: Source, dst: Any) -> None:
    current = getattr(dst, field.attribute, None)

    if field.nested:
        _set(dst, field.attribute, _populate(field.node, values, current))
        return

    found = _lookup(values, field.key)
    if found is None:
        if field.required:
            raise MissingKeyError(field.key)
        _set(dst, field.attribute, zero_value(field.node))
        return

    _set(dst, field.attribute, _decode(field.node, found, current))


# --- Nested records ---


@singledispatch
def _populate(node: Any, values: Source, current: Any) -> Any:
    raise TypeError(f"no nested unmarshal executor for {type(node).__name__}")


@_populate.register(RecordPlan)
def _populate_record(node: RecordPlan, values: Source, current: Any) -> Any:
    if current is None:
        current = new_record(node)
    unmarshal_record(node, values, current)
    return current


@_populate.register(PointerPlan)
def _populate_pointer(node: PointerPlan, values: Source, current: Any) -> Any:
    return _populate(node.elem, values, current)


# --- Leaves ---


@singledispatch
def _decode(node: Any, found: Sequence[str], current: Any) -> Any:
    raise TypeError(f"no unmarshal executor for {type(node).__name__}")


@_decode.register(StringPlan)
def _decode_string(node: StringPlan, found: Sequence[str], current: Any) -> Any:
    return found[0]


@_decode.register(IntegerPlan)
def _decode_int(node: IntegerPlan, found: Sequence[str], current: Any) -> Any:
    return parse_int(found[0], node.bits)


def _resize(current: Any, items: list[Any]) -> list[Any]:
    """Reuse the destination list when there is one."""
    if isinstance(current, list):
        current[:] = items
        return current
    return items


@_decode.register(StringListPlan)
def _decode_string_list(node: StringListPlan, found: Sequence[str], current: Any) -> Any:
    return _resize(current, list(found))


@_decode.register(IntegerListPlan)
def _decode_int_list(node: IntegerListPlan, found: Sequence[str], current: Any) -> Any:
    items = []
    for index, text in enumerate(found):
        try:
            items.append(parse_int(text, node.bits))
        except ParseIntError as e:
            raise ListElementError(index, e) from e
    return _resize(current, items)


@_decode.register(CustomPlan)
def _decode_custom(node: CustomPlan, found: Sequence[str], current: Any) -> Any:
    if current is None:
        current = node.factory()
    # Errors raised by unmarshal_value propagate unchanged
    current.unmarshal_value(list(found))
    return current


@_decode.register(PointerPlan)
def _decode_pointer(node: PointerPlan, found: Sequence[str], current: Any) -> Any:
    return _decode(node.elem, found, current)
