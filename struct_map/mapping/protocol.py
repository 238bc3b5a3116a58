"""Custom conversion protocols.

A field whose class implements one of these protocols bypasses the built-in
conversions entirely, whatever its shape. The compiler checks
ValueMarshaler for marshal plans and ValueUnmarshaler for unmarshal plans.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ValueMarshaler(Protocol):
    """Converts itself into the list of strings stored under its key."""

    def marshal_value(self) -> list[str]:
        """Return the values to store. An empty list counts as empty."""
        ...


@runtime_checkable
class ValueUnmarshaler(Protocol):
    """Populates itself in place from the list of strings under its key."""

    def unmarshal_value(self, values: list[str]) -> None:
        """Load *values*, which always holds at least one element."""
        ...
