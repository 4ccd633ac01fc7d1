"""
Redaction of sensitive values from outbound payloads.
"""

import copy
from typing import Any, Iterable


SENSITIVE_FIELDS = ('connectionstring', 'password', 'key', 'secret', 'token')
REDACTED = '[REDACTED]'

# Diagnostic counters whose names contain "key" but never hold secrets
METRIC_FIELDS = (
    'keysExamined',
    'keysInserted',
    'keysDeleted',
    'keyUpdates',
    'totalKeysExamined',
)


def is_sensitive_field(field_name: str) -> bool:
    """Return True if the lowercased field name contains a sensitive term."""
    lowered = field_name.lower()
    return any(term in lowered for term in SENSITIVE_FIELDS)


def _sanitize_in_place(obj: Any, exempt: frozenset) -> None:
    if isinstance(obj, dict):
        for key, value in obj.items():
            if isinstance(key, str) and key not in exempt and is_sensitive_field(key):
                obj[key] = REDACTED
            else:
                _sanitize_in_place(value, exempt)
    elif isinstance(obj, list):
        # Objects nested in arrays are scanned as well
        for item in obj:
            _sanitize_in_place(item, exempt)


def sanitize_response(data: Any, exempt: Iterable[str] = ()) -> Any:
    """
    Return a deep copy of data with every sensitive key's value replaced.

    Any key whose lowercase form contains one of SENSITIVE_FIELDS is set to
    REDACTED, at any depth, including inside lists. Keys listed in exempt
    are kept as they are. The caller's object is never mutated. Scalars are
    returned unchanged.
    """
    if not isinstance(data, (dict, list)):
        return data

    sanitized = copy.deepcopy(data)
    _sanitize_in_place(sanitized, frozenset(exempt))
    return sanitized
