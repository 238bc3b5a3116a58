"""Plan compiler.

Walks a record type's fields and their tags and compiles them into a
RecordPlan. Compilation is a pure function of (type, config, direction),
which is what makes caching its result sound.

Dispatch order for a field type:

1. A class implementing the direction's custom protocol -> CustomPlan
2. ``X | None`` -> PointerPlan
3. ``list[str]`` / ``list[int]`` -> StringListPlan / IntegerListPlan
4. dataclass or Pydantic model -> RecordPlan
5. ``str`` / ``int`` -> StringPlan / IntegerPlan
"""

from __future__ import annotations

import types
from dataclasses import dataclass, replace
from typing import Annotated, Any, Union, get_args, get_origin

from struct_map.core.config import MapConfig
from struct_map.core.enums import Direction
from struct_map.core.exceptions import (
    InvalidOptionError,
    PlanCompilationError,
    UnsupportedKindError,
)
from struct_map.mapping.fields import Bits, RecordField, is_class, is_record, kind_name, record_fields
from struct_map.mapping.plan import (
    CustomPlan,
    FieldPlan,
    IntegerListPlan,
    IntegerPlan,
    PlanNode,
    PointerPlan,
    RecordPlan,
    StringListPlan,
    StringPlan,
    is_nested,
)
from struct_map.mapping.protocol import ValueMarshaler, ValueUnmarshaler
from struct_map.mapping.tags import OMIT_EMPTY, REQUIRED, parse_tag

_CAPABILITIES: dict[Direction, type] = {
    Direction.MARSHAL: ValueMarshaler,
    Direction.UNMARSHAL: ValueUnmarshaler,
}

_UNION_TYPES = (Union, types.UnionType)


@dataclass(frozen=True)
class _Context:
    config: MapConfig
    direction: Direction
    prefix: tuple[str, ...] = ()
    records: tuple[type, ...] = ()  # records being compiled, outermost first

    def unsupported(self, kind: str) -> UnsupportedKindError:
        return UnsupportedKindError(self.direction.verb, kind)


def compile_plan(cls: type, config: MapConfig, direction: Direction) -> RecordPlan:
    """Compile the plan of a record class.

    Args:
        cls: A dataclass or Pydantic model class.
        config: Delimiter, key transform and tag key to compile with.
        direction: Selects which custom conversion protocol is honored.

    Raises:
        PlanCompilationError: If any field cannot be mapped.
    """
    ctx = _Context(config=config, direction=direction)
    if not is_record(cls):
        raise ctx.unsupported(kind_name(cls))
    return _compile_record(cls, ctx)


def _split_annotated(hint: Any) -> tuple[Any, int | None]:
    """Strip Annotated, returning the bare type and any Bits width."""
    if get_origin(hint) is not Annotated:
        return hint, None

    bits = None
    for meta in hint.__metadata__:
        if isinstance(meta, Bits):
            bits = meta.size
    return get_args(hint)[0], bits


def _has_capability(tp: Any, direction: Direction) -> bool:
    return is_class(tp) and issubclass(tp, _CAPABILITIES[direction])


def _compile_type(hint: Any, ctx: _Context, bits: int | None = None) -> PlanNode:
    tp, width = _split_annotated(hint)
    # A width on Optional[int] applies to the int inside it
    bits = width or bits

    if _has_capability(tp, ctx.direction):
        return CustomPlan(factory=tp)

    origin = get_origin(tp)
    if origin in _UNION_TYPES:
        args = get_args(tp)
        members = [arg for arg in args if arg is not type(None)]
        if len(members) == 1 and len(args) == 2:
            return PointerPlan(elem=_compile_type(members[0], ctx, bits))
        raise ctx.unsupported(kind_name(tp))

    if origin is list:
        return _compile_list(tp, ctx, bits)

    if is_record(tp):
        return _compile_record(tp, ctx)

    # bool subclasses int but is not an integer field
    if tp is str:
        return StringPlan()
    if tp is int:
        return IntegerPlan(bits=bits or 64)

    raise ctx.unsupported(kind_name(tp))


def _compile_list(tp: Any, ctx: _Context, outer_bits: int | None = None) -> PlanNode:
    args = get_args(tp)
    elem, bits = _split_annotated(args[0] if args else Any)

    if elem is str:
        return StringListPlan()
    if elem is int:
        return IntegerListPlan(bits=bits or outer_bits or 64)

    raise ctx.unsupported(f"list of {kind_name(elem)}")


def _compile_record(cls: type, ctx: _Context) -> RecordPlan:
    if cls in ctx.records:
        raise PlanCompilationError(f"recursive record {cls.__name__}")
    ctx = replace(ctx, records=(*ctx.records, cls))

    declared = record_fields(cls)
    fields: list[FieldPlan] = []
    for record_field in declared:
        try:
            field = _compile_field(record_field, ctx)
        except PlanCompilationError as e:
            e.add_field(record_field.name)
            raise

        if field is not None:
            fields.append(field)

    return RecordPlan(
        factory=cls,
        fields=tuple(fields),
        init_fields=tuple(f.name for f in declared if f.needs_init),
    )


def _compile_field(record_field: RecordField, ctx: _Context) -> FieldPlan | None:
    """Compile one field, or return None when its tag excludes it."""
    tag = parse_tag(record_field.tag(ctx.config.tag_key))
    if tag is None:
        return None

    prefix = ctx.prefix
    if tag.name:
        prefix = (*prefix, tag.name)
    elif not record_field.embedded:
        prefix = (*prefix, record_field.name)

    node = _compile_type(record_field.hint, replace(ctx, prefix=prefix))

    if is_nested(node):
        if tag.required:
            raise InvalidOptionError(REQUIRED)
        if tag.omit_empty:
            raise InvalidOptionError(OMIT_EMPTY)
        return FieldPlan(attribute=record_field.name, key="", node=node, nested=True)

    # An embedded field that is not a record still needs a key of its own
    if record_field.embedded and not tag.name:
        prefix = (*prefix, record_field.name)

    return FieldPlan(
        attribute=record_field.name,
        key=ctx.config.compose_key(prefix),
        node=node,
        required=tag.required,
        omit_empty=tag.omit_empty,
    )
