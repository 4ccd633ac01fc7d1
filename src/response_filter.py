"""
Response filtering utilities for keeping diagnostic payloads small.

collStats, dbStats, serverStatus and profiler output are very verbose. The
filters here reduce them to a verbosity tier before they are returned to the
model:

    minimal   - a fixed set of headline fields (also used for unknown levels)
    standard  - minimal plus a second set of fields
    full      - the payload unchanged

Fields missing from the payload are omitted from the result, never set to None.
"""

from typing import Any, Dict


VERBOSITY_LEVELS = ("minimal", "standard", "full")

COLLECTION_STATS_FIELDS = {
    "minimal": ("ns", "count", "size", "avgObjSize", "storageSize",
                "nindexes", "totalIndexSize", "indexSizes"),
    "standard": ("capped", "max", "freeStorageSize"),
}

DATABASE_STATS_FIELDS = {
    "minimal": ("db", "collections", "views", "objects", "avgObjSize", "dataSize",
                "storageSize", "indexes", "indexSize", "totalSize"),
    "standard": ("scaleFactor", "freeStorageSize"),
}

PROFILER_ENTRY_FIELDS = {
    "minimal": ("op", "ns", "millis", "ts"),
    "standard": ("planSummary", "docsExamined", "keysExamined", "nreturned", "user"),
}

SLOW_OPERATION_DETAIL_FIELDS = ("query", "lockStats")


def _pick(payload: Dict[str, Any], fields) -> Dict[str, Any]:
    return {field: payload[field] for field in fields if field in payload}


def _filter_by_verbosity(payload: Dict[str, Any], verbosity: str, tiers: dict) -> Dict[str, Any]:
    if verbosity == "full":
        return payload

    fields = tiers["minimal"]
    if verbosity == "standard":
        fields = fields + tiers["standard"]

    return _pick(payload, fields)


def exclude_zero_metrics(obj: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drop keys whose value is 0, None, an empty list or an empty dict.

    Booleans are kept; False is not a zero metric.
    """
    result = {}

    for key, value in obj.items():
        if value is None:
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
            continue
        if isinstance(value, (list, tuple, dict)) and len(value) == 0:
            continue
        result[key] = value

    return result


def filter_collection_stats(stats: Dict[str, Any], verbosity: str = "minimal") -> Dict[str, Any]:
    """Filter collStats output by verbosity level."""
    return _filter_by_verbosity(stats, verbosity, COLLECTION_STATS_FIELDS)


def filter_database_stats(stats: Dict[str, Any], verbosity: str = "minimal") -> Dict[str, Any]:
    """Filter dbStats output by verbosity level."""
    return _filter_by_verbosity(stats, verbosity, DATABASE_STATS_FIELDS)


def filter_profiler_entry(entry: Dict[str, Any], verbosity: str = "minimal") -> Dict[str, Any]:
    """Filter a system.profile document by verbosity level."""
    return _filter_by_verbosity(entry, verbosity, PROFILER_ENTRY_FIELDS)


def filter_server_status(
    status: Dict[str, Any],
    include_wired_tiger: bool = False,
    include_replication: bool = False,
    include_storage_engine: bool = False
) -> Dict[str, Any]:
    """
    Remove the large optional sections of serverStatus output.

    Args:
        status: serverStatus command result
        include_wired_tiger: Keep the 'wiredTiger' section
        include_replication: Keep the 'repl' section
        include_storage_engine: Keep the 'storageEngine' section

    Returns:
        A shallow copy of status without the excluded sections
    """
    filtered = dict(status)

    if not include_wired_tiger:
        filtered.pop("wiredTiger", None)
    if not include_replication:
        filtered.pop("repl", None)
    if not include_storage_engine:
        filtered.pop("storageEngine", None)

    return filtered


def filter_slow_operation(op: Dict[str, Any], include_query_details: bool = False) -> Dict[str, Any]:
    """Strip query text and lock statistics from an operation unless requested."""
    if include_query_details:
        return op

    return {key: value for key, value in op.items() if key not in SLOW_OPERATION_DETAIL_FIELDS}
