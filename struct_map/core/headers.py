"""HTTP header key canonicalization.

Used as the key transform of the header mapper so that ``content-type``
and ``CONTENT-TYPE`` both map to ``Content-Type``.
"""

from __future__ import annotations

import string
from functools import lru_cache

# RFC 7230 token characters
_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


@lru_cache(maxsize=512)
def canonical_header_key(key: str) -> str:
    """Return the canonical form of an HTTP header key.

    The first letter and every letter following a hyphen are upper-cased,
    the rest lower-cased. Keys holding a space or any other non-token
    character are returned unchanged.
    """
    if any(c not in _TOKEN_CHARS for c in key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))
