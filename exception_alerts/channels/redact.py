"""Removal of sensitive entries from notification data."""

from typing import Any, Mapping, Optional

from exception_alerts.channels import DataPredicate


def redact(data: Mapping[str, Any], predicate: Optional[DataPredicate]) -> dict:
    """
    Return a copy of *data* without the pairs *predicate* matches.

    Nested mappings are redacted before their parent entry is judged, so the
    predicate sees the already-filtered child. Lists are left untouched.
    """
    if predicate is None:
        return dict(data)

    result = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            value = redact(value, predicate)
        if predicate(key, value):
            continue
        result[key] = value
    return result
