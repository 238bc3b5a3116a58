"""Record introspection.

Records are dataclasses or Pydantic models. This module lists their fields
in declaration order together with the resolved type hint and the metadata
the compiler reads tags from.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, get_origin, get_type_hints

from pydantic import BaseModel

from struct_map.core.config import DEFAULT_TAG_KEY
from struct_map.core.exceptions import PlanCompilationError

EMBEDDED = "embedded"

_INT_SIZES = (8, 16, 32, 64)


@dataclass(frozen=True)
class Bits:
    """Annotated marker fixing the bit width of an int field."""

    size: int

    def __post_init__(self) -> None:
        if self.size not in _INT_SIZES:
            raise ValueError(f"unsupported int size {self.size}, expected one of {_INT_SIZES}")


Int8 = Annotated[int, Bits(8)]
Int16 = Annotated[int, Bits(16)]
Int32 = Annotated[int, Bits(32)]
Int64 = Annotated[int, Bits(64)]


@dataclass(frozen=True)
class RecordField:
    """A single declared field of a record type."""

    name: str
    hint: Any
    metadata: Mapping[str, Any]
    needs_init: bool  # must be passed to the constructor

    @property
    def embedded(self) -> bool:
        return bool(self.metadata.get(EMBEDDED, False))

    def tag(self, tag_key: str) -> str:
        return str(self.metadata.get(tag_key, ""))


def mapfield(tag: str = "", *, embedded: bool = False, **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a ``map`` tag.

    Args:
        tag: ``"<name>,<option>,..."`` tag string.
        embedded: Promote the fields of this nested record into the parent's
            namespace when the tag gives no name.
        **kwargs: Passed through to :func:`dataclasses.field`.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[DEFAULT_TAG_KEY] = tag
    if embedded:
        metadata[EMBEDDED] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def is_class(tp: Any) -> bool:
    """Check if a type hint is a plain class."""
    # Parameterized generics such as list[int] pass isinstance(tp, type) on 3.10
    return isinstance(tp, type) and get_origin(tp) is None


def _is_pydantic_model(tp: Any) -> bool:
    return is_class(tp) and issubclass(tp, BaseModel)


def is_record(tp: Any) -> bool:
    """Check if a type is a dataclass or a Pydantic model class."""
    return is_class(tp) and (dataclasses.is_dataclass(tp) or _is_pydantic_model(tp))


def _pydantic_fields(cls: type[BaseModel]) -> list[RecordField]:
    fields = []
    for name, info in cls.model_fields.items():
        # Pydantic moves Annotated metadata onto the FieldInfo
        hint: Any = info.annotation
        if info.metadata:
            hint = Annotated[(hint, *info.metadata)]
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        fields.append(
            RecordField(
                name=name,
                hint=hint,
                metadata=extra,
                needs_init=info.is_required(),
            )
        )
    return fields


def _dataclass_fields(cls: type) -> list[RecordField]:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise PlanCompilationError(f"cannot resolve type hints of {cls.__qualname__}: {e}") from e
    return [
        RecordField(
            name=f.name,
            hint=hints[f.name],
            metadata=f.metadata,
            needs_init=(
                f.init
                and f.default is dataclasses.MISSING
                and f.default_factory is dataclasses.MISSING
            ),
        )
        for f in dataclasses.fields(cls)
    ]


def record_fields(cls: type) -> list[RecordField]:
    """List the fields of a record class in declaration order."""
    if _is_pydantic_model(cls):
        return _pydantic_fields(cls)
    return _dataclass_fields(cls)


def kind_name(tp: Any) -> str:
    """Readable name of a type hint for error messages."""
    if is_class(tp):
        return tp.__name__
    return repr(tp).replace("typing.", "")
