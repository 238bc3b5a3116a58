"""Field tag parsing.

A tag is ``"<name>,<option>,..."``. The name ``-`` on its own excludes the
field; ``-,`` names the key ``-`` literally, following the encoding/json
convention.
"""

from __future__ import annotations

from dataclasses import dataclass

from struct_map.core.exceptions import ConflictingOptionsError, UnknownOptionError

REQUIRED = "required"
OMIT_EMPTY = "omitempty"


@dataclass(frozen=True)
class Tag:
    """Parsed field tag."""

    name: str = ""
    required: bool = False
    omit_empty: bool = False


def parse_tag(raw: str) -> Tag | None:
    """Parse a raw tag string.

    Returns:
        The parsed tag, or None when the field is excluded.

    Raises:
        UnknownOptionError: For an unrecognized option token.
        ConflictingOptionsError: When both required and omitempty are set.
    """
    name, *options = raw.split(",")
    if name == "-" and not options:
        return None

    required = False
    omit_empty = False
    for option in options:
        if option == REQUIRED:
            required = True
        elif option == OMIT_EMPTY:
            omit_empty = True
        elif option:
            raise UnknownOptionError(option)

    if required and omit_empty:
        raise ConflictingOptionsError()

    return Tag(name=name, required=required, omit_empty=omit_empty)
