"""Marshal executor.

Writes a record's field values into a flat mapping by walking its plan.
Fields are written in declaration order and the first error aborts the
call; keys written before the error stay in the mapping.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from functools import singledispatch
from typing import Any

from struct_map.core.exceptions import MissingValueError
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
)

Values = MutableMapping[str, list[str]]


def marshal_record(plan: RecordPlan, src: Any, values: Values) -> None:
    """Write every mapped field of *src* into *values*."""
    for field in plan.fields:
        _encode(field.node, getattr(src, field.attribute), values, field)


def _store(values: Values, key: str, items: list[str]) -> None:
    """Replace the list under *key*, reusing the existing list object."""
    existing = values.get(key)
    if isinstance(existing, list):
        existing[:] = items
    else:
        values[key] = items


def _skip_empty(field: FieldPlan) -> bool:
    """Apply the empty-value policy.

    Raises for required fields. Otherwise returns True when the key must be
    left untouched; an existing entry under the key is not cleared.
    """
    if field.required:
        raise MissingValueError(field.key)
    return field.omit_empty


@singledispatch
def _encode(node: Any, src: Any, values: Values, field: FieldPlan) -> None:
    raise TypeError(f"no marshal executor for {type(node).__name__}")


@_encode.register(StringPlan)
def _encode_string(node: StringPlan, src: Any, values: Values, field: FieldPlan) -> None:
    value = src or ""
    if not value and _skip_empty(field):
        return
    _store(values, field.key, [value])


@_encode.register(IntegerPlan)
def _encode_int(node: IntegerPlan, src: Any, values: Values, field: FieldPlan) -> None:
    value = int(src or 0)
    if value == 0 and _skip_empty(field):
        return
    _store(values, field.key, [str(value)])


@_encode.register(StringListPlan)
def _encode_string_list(
    node: StringListPlan, src: Any, values: Values, field: FieldPlan
) -> None:
    items = src or []
    if not items and _skip_empty(field):
        return
    _store(values, field.key, list(items))


@_encode.register(IntegerListPlan)
def _encode_int_list(node: IntegerListPlan, src: Any, values: Values, field: FieldPlan) -> None:
    items = src or []
    if not items and _skip_empty(field):
        return
    _store(values, field.key, [str(int(item)) for item in items])


@_encode.register(CustomPlan)
def _encode_custom(node: CustomPlan, src: Any, values: Values, field: FieldPlan) -> None:
    # Errors raised by marshal_value propagate unchanged
    items = list(src.marshal_value()) if src is not None else []
    if not items and _skip_empty(field):
        return
    _store(values, field.key, items)


@_encode.register(PointerPlan)
def _encode_pointer(node: PointerPlan, src: Any, values: Values, field: FieldPlan) -> None:
    if src is None:
        if field.required:
            raise MissingValueError(field.key)
        return
    _encode(node.elem, src, values, field)


@_encode.register(RecordPlan)
def _encode_record(node: RecordPlan, src: Any, values: Values, field: FieldPlan) -> None:
    if src is None:
        src = new_record(node)
    marshal_record(node, src, values)
