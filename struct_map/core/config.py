"""Mapper configuration.

MapConfig is a frozen Pydantic model so instances are hashable and can take
part in plan cache keys.
"""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_DELIMITER = "."
DEFAULT_TAG_KEY = "map"


class MapConfig(BaseModel):
    """Configuration shared by the marshal and unmarshal directions.

    Args:
        delimiter: Joins nested name segments into a key. An empty string
            falls back to ``"."``.
        key_transform: Applied to every fully composed key, e.g. to
            canonicalize HTTP header casing.
        tag_key: Field metadata key holding the ``"name,opt,..."`` tag.
    """

    model_config = ConfigDict(frozen=True)

    delimiter: str = DEFAULT_DELIMITER
    key_transform: Callable[[str], str] | None = None
    tag_key: str = DEFAULT_TAG_KEY

    @field_validator("delimiter")
    @classmethod
    def _default_delimiter(cls, value: str) -> str:
        return value or DEFAULT_DELIMITER

    @field_validator("tag_key")
    @classmethod
    def _non_empty_tag_key(cls, value: str) -> str:
        if not value:
            raise ValueError("tag_key must not be empty")
        return value

    def compose_key(self, segments: tuple[str, ...]) -> str:
        """Join name segments and apply the key transform."""
        key = self.delimiter.join(segments)
        if self.key_transform is not None:
            key = self.key_transform(key)
        return key
