"""Serialization of filters for the GET query endpoint."""

import json
from typing import Any, Iterable

from ..models import Filter


def encode_filter_value(value: Any) -> str:
    """Encode a filter value for a ``column.operator.value`` triple.

    ``None`` becomes the literal ``null`` (never an empty string) and
    composite values are embedded as JSON text.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(list(value) if isinstance(value, tuple) else value)
    return str(value)


def encode_filter(filter_: Filter) -> str:
    return f"{filter_.column}.{filter_.operator}.{encode_filter_value(filter_.value)}"


def filters_to_param(filters: Iterable[Filter]) -> str:
    """Join filters into the comma-separated ``filter`` query parameter."""
    return ",".join(encode_filter(f) for f in filters)
