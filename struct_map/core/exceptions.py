"""struct-map exception hierarchy.

Compilation errors describe a record type that cannot be mapped and are
raised again on every call until the type is fixed. Value errors depend on
the data passed to a single marshal or unmarshal call.
"""

from __future__ import annotations


class StructMapError(Exception):
    """Base exception for all struct-map errors."""


# --- Compilation ---


class PlanCompilationError(StructMapError):
    """Raised when a record type cannot be compiled into a plan.

    ``path`` holds the attribute names leading to the offending field,
    outermost first. It is filled in while the error unwinds through the
    compiler.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        self.path: tuple[str, ...] = ()
        super().__init__(detail)

    def add_field(self, name: str) -> None:
        self.path = (name, *self.path)

    def __str__(self) -> str:
        if not self.path:
            return self.detail
        return f"field {'.'.join(self.path)}: {self.detail}"


class UnsupportedKindError(PlanCompilationError):
    """Raised for a field type the mapper cannot convert."""

    def __init__(self, verb: str, kind: str) -> None:
        self.kind = kind
        super().__init__(f"cannot {verb} {kind}")


class UnknownOptionError(PlanCompilationError):
    """Raised for an unrecognized tag option."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"unknown option {option}")


class ConflictingOptionsError(PlanCompilationError):
    """Raised when a field is both required and omitempty."""

    def __init__(self) -> None:
        super().__init__("a field cannot be set as both required and omitempty")


class InvalidOptionError(PlanCompilationError):
    """Raised when a record field carries a leaf-only option."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"cannot set {option} option for record")


# --- Values ---


class InvalidTargetError(StructMapError, TypeError):
    """Raised when the source or destination of a call is unusable."""


class MissingValueError(StructMapError):
    """Raised by marshal when a required field holds an empty value."""

    def __init__(self, key: str) -> None:
        self.key = key
        if key:
            super().__init__(f"key {key}: missing required value")
        else:
            super().__init__("missing required value")


class MissingKeyError(StructMapError):
    """Raised by unmarshal when a required key is absent."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f'value not found for required key "{key}"')


class ParseIntError(StructMapError, ValueError):
    """Base for integer parsing failures."""

    def __init__(self, text: str, bits: int, reason: str) -> None:
        self.text = text
        self.bits = bits
        super().__init__(f'parsing "{text}": {reason}')


class IntegerSyntaxError(ParseIntError):
    """Raised when text is not a base-10 integer."""

    def __init__(self, text: str, bits: int) -> None:
        super().__init__(text, bits, "invalid syntax")


class IntegerRangeError(ParseIntError):
    """Raised when a parsed integer does not fit the field's bit width."""

    def __init__(self, text: str, bits: int) -> None:
        super().__init__(text, bits, f"value out of range for int{bits}")


class ListElementError(StructMapError):
    """Raised when one element of a list value cannot be converted."""

    def __init__(self, index: int, cause: Exception) -> None:
        self.index = index
        self.cause = cause
        super().__init__(f"int list index #{index}: {cause}")
