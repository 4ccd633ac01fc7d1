"""
Safety checks for write operations driven by a filter.

Nothing here raises or touches the database: the functions return advisory
results and the calling tool decides what to do with them.
"""

from dataclasses import dataclass
from typing import Optional


EMPTY_FILTER_WARNING = "Empty filter will match ALL documents in the collection"


@dataclass
class FilterValidationResult:
    """Classification of a filter by shape."""
    is_valid: bool
    is_empty: bool
    is_match_all: bool
    warning: Optional[str] = None


def get_operation_warning(count: int, operation: str) -> Optional[str]:
    """
    Build a warning scaled to the number of documents an operation would affect.

    Args:
        count: Number of matching documents
        operation: 'update' or 'delete'

    Returns:
        None for 0-10 documents, otherwise a message whose severity grows at
        11, 100 and 1000 documents
    """
    if count >= 1000:
        return f"⚠⚠ LARGE OPERATION: Will {operation} {count:,} documents"
    if count >= 100:
        return f"⚠ Large operation: Will {operation} {count} documents"
    if count > 10:
        return f"Will {operation} {count} documents"
    return None


def validate_filter(filter: Optional[dict]) -> FilterValidationResult:
    """Classify a filter. Only an absent or empty filter counts as match-all."""
    is_empty = not filter
    return FilterValidationResult(
        is_valid=True,
        is_empty=is_empty,
        is_match_all=is_empty,
        warning=EMPTY_FILTER_WARNING if is_empty else None
    )


def should_block_filter(
    filter: Optional[dict],
    allow_empty_filter: bool = False,
    operation: Optional[str] = None
) -> dict:
    """
    Decide whether a write with this filter should be refused.

    Returns:
        {"blocked": True, "reason": <message>} for an empty filter when
        allow_empty_filter is False, otherwise {"blocked": False}
    """
    validation = validate_filter(filter)

    if validation.is_empty and not allow_empty_filter:
        operation_name = operation or "operation"
        return {
            "blocked": True,
            "reason": (
                f"⚠ Operation blocked for safety: {operation_name}\n"
                "\n"
                "Filter: {} (empty - matches ALL documents)\n"
                "\n"
                "To preview impact: Add {dryRun: true}\n"
                "To proceed anyway: Add {allowEmptyFilter: true}\n"
                f"Recommended: Run {operation_name} with dryRun first"
            )
        }

    return {"blocked": False}
