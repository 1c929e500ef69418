"""Utility functions for response formatting."""

import json

from .constants import CHARACTER_LIMIT


def dump_json(payload: object) -> str:
    """Serialize object to JSON string."""
    return json.dumps(payload, ensure_ascii=False, default=str, indent=2)


def truncate_text(text: str, limit: int = CHARACTER_LIMIT) -> str:
    """Cut ``text`` down to ``limit`` characters, appending a notice when it was cut."""
    if len(text) <= limit:
        return text
    return (
        text[:limit]
        + f"\n\n*...response truncated at {limit} characters; "
        "request fewer data points to see the full result*"
    )
