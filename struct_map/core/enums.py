"""Mapping direction enumeration."""

from __future__ import annotations

from enum import Enum


class Direction(Enum):
    """Conversion direction a plan is compiled for."""

    MARSHAL = "marshal"
    UNMARSHAL = "unmarshal"

    @property
    def verb(self) -> str:
        """Phrase used in unsupported-kind messages."""
        if self is Direction.MARSHAL:
            return "marshal from"
        return "unmarshal into"
