"""Mini README: Short opaque identifier generation.

Structure:
    * generate_id - nine character lowercase base-36 token.

Identifiers only need to be unique within a running session; callers must not
rely on their format.
"""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 9


def generate_id() -> str:
    """Return a fresh random identifier such as ``"k3j9x0a2b"``."""

    return "".join(secrets.choice(_ALPHABET) for _ in range(ID_LENGTH))
