"""
Value formatter for the ``key: value`` lines of an alert's data block.

Data values stay un-stringified until a formatter renders them here. Nested
structures (request parameters, attached job arguments) are shown as compact
JSON so that nothing is hidden behind a repr.
"""

import json
from typing import Any, Mapping

DEFAULT_MAX_LEN = 1000


def format_value(val: Any, max_len: int = DEFAULT_MAX_LEN) -> str:
    """
    Format a single value into a human-readable string.

    - ``None`` becomes an empty string.
    - Strings are returned unchanged, other primitives via ``str(val)``.
    - Dicts, lists and tuples become compact JSON (truncated to *max_len*).
    """
    if val is None:
        return ""

    if isinstance(val, str):
        return val

    if not isinstance(val, (Mapping, list, tuple)):
        return str(val)

    try:
        dumped = json.dumps(val, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        dumped = str(val)
    return f"{dumped[:max_len]}..." if len(dumped) > max_len else dumped


def format_data_lines(data: Mapping[str, Any], max_len: int = DEFAULT_MAX_LEN) -> list[str]:
    return [f"{k}: {format_value(v, max_len)}" for k, v in data.items()]
