"""Mapping plan data classes.

Frozen dataclasses describing how a record type converts to and from a flat
mapping. Built once by the compiler and shared read-only by every marshal
and unmarshal call for that type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel


@dataclass(frozen=True)
class StringPlan:
    """A ``str`` leaf."""


@dataclass(frozen=True)
class IntegerPlan:
    """A signed ``int`` leaf of a fixed bit width."""

    bits: int = 64


@dataclass(frozen=True)
class StringListPlan:
    """A ``list[str]`` leaf."""


@dataclass(frozen=True)
class IntegerListPlan:
    """A ``list[int]`` leaf; every element shares one bit width."""

    bits: int = 64


@dataclass(frozen=True)
class PointerPlan:
    """An optional value; ``None`` stands for the nil pointer."""

    elem: PlanNode


@dataclass(frozen=True)
class CustomPlan:
    """A value converting itself through the custom conversion protocols."""

    factory: type  # builds the destination when the field holds None


@dataclass(frozen=True)
class FieldPlan:
    """Mapping plan for one field of a record."""

    attribute: str
    key: str  # empty for nested fields
    node: PlanNode
    required: bool = False
    omit_empty: bool = False
    nested: bool = False


@dataclass(frozen=True)
class RecordPlan:
    """Mapping plan for a record: its mapped fields in declaration order."""

    factory: type
    fields: tuple[FieldPlan, ...] = ()
    init_fields: tuple[str, ...] = ()  # constructor arguments without defaults

    def field(self, attribute: str) -> FieldPlan:
        """Look up the plan of a mapped field by attribute name."""
        for field in self.fields:
            if field.attribute == attribute:
                return field
        raise KeyError(attribute)

    @property
    def keys(self) -> list[str]:
        """Every key this plan reads or writes, in declaration order."""
        keys: list[str] = []
        for field in self.fields:
            if field.nested:
                keys.extend(_nested_record(field.node).keys)
            else:
                keys.append(field.key)
        return keys


PlanNode = Union[
    StringPlan,
    IntegerPlan,
    StringListPlan,
    IntegerListPlan,
    PointerPlan,
    CustomPlan,
    RecordPlan,
]


def _nested_record(node: Any) -> RecordPlan:
    while isinstance(node, PointerPlan):
        node = node.elem
    return node  # type: ignore[no-any-return]


def is_nested(node: PlanNode) -> bool:
    """Return True if *node* is a record, possibly behind optional layers."""
    return isinstance(_nested_record(node), RecordPlan)


def new_record(plan: RecordPlan) -> Any:
    """Build a record whose mapped fields all hold their zero values.

    Only constructor arguments without defaults are passed. An excluded
    dataclass field without a default receives None. Pydantic models are
    built with ``model_construct`` so excluded fields are left unset
    instead of failing validation.
    """
    if issubclass(plan.factory, BaseModel):
        zeros = {
            field.attribute: zero_value(field.node)
            for field in plan.fields
            if field.attribute in plan.init_fields
        }
        return plan.factory.model_construct(**zeros)

    kwargs: dict[str, Any] = dict.fromkeys(plan.init_fields)
    for field in plan.fields:
        if field.attribute in kwargs:
            kwargs[field.attribute] = zero_value(field.node)
    return plan.factory(**kwargs)


def zero_value(node: PlanNode) -> Any:
    """Value a field takes when its key is absent from the mapping."""
    if isinstance(node, StringPlan):
        return ""
    if isinstance(node, IntegerPlan):
        return 0
    if isinstance(node, (StringListPlan, IntegerListPlan)):
        return []
    if isinstance(node, PointerPlan):
        return None
    if isinstance(node, CustomPlan):
        return node.factory()
    return new_record(node)
