"""
Query preprocessing for MongoDB filters.

Filters arrive from MCP clients as plain JSON, so identifier values such as
``{"_id": "507f1f77bcf86cd799439011"}`` are strings. MongoDB stores them as
ObjectId, and a string never matches an ObjectId. This module rewrites
identifier-like fields into ObjectId before the filter reaches the driver.
"""

import re
from typing import Any

from bson import ObjectId


OBJECT_ID_FIELD_PATTERNS = (
    re.compile(r'^_id$'),
    re.compile(r'Id$'),
    re.compile(r'^id$', re.IGNORECASE),
    re.compile(r'_id$'),
    re.compile(r'^ref', re.IGNORECASE),
)


def is_object_id_field(field_name: str) -> bool:
    """Return True if the field name looks like it holds an ObjectId reference."""
    return any(pattern.search(field_name) for pattern in OBJECT_ID_FIELD_PATTERNS)


def _coerce(value: Any) -> Any:
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def preprocess_query_value(value: Any, field_name: str = None) -> Any:
    """
    Process an operator sub-document such as ``{"$in": [...], "$ne": "..."}``.

    Operator values are converted only when the owning field is identifier-like.
    Keys without the ``$`` prefix are copied as they are.
    """
    if not isinstance(value, dict):
        return value

    id_field = is_object_id_field(field_name) if field_name else False
    processed = {}

    for operator, operator_value in value.items():
        if not operator.startswith('$') or not id_field:
            processed[operator] = operator_value
        elif isinstance(operator_value, list):
            processed[operator] = [_coerce(item) for item in operator_value]
        else:
            processed[operator] = _coerce(operator_value)

    return processed


def preprocess_query(query: Any) -> Any:
    """
    Convert string identifiers in a query filter into ObjectId instances.

    Returns a new structure; the input is never modified. Values that are not
    valid ObjectId strings pass through unchanged.

    Args:
        query: A MongoDB filter (dict). Anything else is returned as is.

    Returns:
        The processed filter
    """
    if not isinstance(query, dict):
        return query

    processed = {}

    for key, value in query.items():
        id_field = is_object_id_field(key)

        if isinstance(value, dict):
            processed[key] = preprocess_query_value(value, key) if id_field else preprocess_query(value)
        elif isinstance(value, list):
            processed[key] = [
                _coerce(item) if id_field and isinstance(item, str) else preprocess_query(item)
                for item in value
            ]
        elif id_field:
            processed[key] = _coerce(value)
        else:
            processed[key] = value

    return processed
