"""Mapping layer - compile record types into plans and execute them."""

from __future__ import annotations

from struct_map.mapping.compiler import compile_plan
from struct_map.mapping.fields import Bits, Int8, Int16, Int32, Int64, mapfield
from struct_map.mapping.marshal import marshal_record
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
)
from struct_map.mapping.protocol import ValueMarshaler, ValueUnmarshaler
from struct_map.mapping.unmarshal import parse_int, unmarshal_record

__all__ = [
    "compile_plan",
    "marshal_record",
    "unmarshal_record",
    "parse_int",
    "mapfield",
    "Bits",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "ValueMarshaler",
    "ValueUnmarshaler",
    "PlanNode",
    "RecordPlan",
    "FieldPlan",
    "StringPlan",
    "IntegerPlan",
    "StringListPlan",
    "IntegerListPlan",
    "PointerPlan",
    "CustomPlan",
]
