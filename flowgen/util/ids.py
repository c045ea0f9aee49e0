from typing import Optional

import ulid


def new_id(prefix: str = "") -> str:
    """
    Returns a sortable unique string id built from a ULID.

    ulid-py exposes the canonical form through `.str`.
    """
    return prefix + ulid.new().str


def parse_int_id(value: str) -> Optional[int]:
    """Path/body ids arrive as text; None when the text is not an integer."""
    try:
        return int(value.strip())
    except (TypeError, ValueError, AttributeError):
        return None
