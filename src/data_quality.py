"""
Helpers for the data-quality tools: duplicate detection, collection cloning
and export formatting.

These build pipelines and shape results; the MCP tools in server.py run them.
"""

import csv
import io
import json
import math
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId, json_util


HIGH_DUPLICATE_PERCENTAGE = 10
LARGE_EXPORT_BYTES = 1000000
INLINE_EXPORT_BYTES = 100000
EXPORT_PREVIEW_CHARS = 200


# ============================================================================
# Duplicate Detection
# ============================================================================

def build_duplicates_pipeline(
    fields: list,
    min_count: int = 2,
    sort: str = "count",
    limit: int = 100,
    include_documents: bool = True
) -> list:
    """
    Build an aggregation pipeline that groups documents sharing the same values.

    A single field groups on its value; several fields group on a composite key.
    """
    if len(fields) == 1:
        group_id = f"${fields[0]}"
    else:
        group_id = {field: f"${field}" for field in fields}

    group = {"_id": group_id, "count": {"$sum": 1}}
    project = {"value": "$_id", "count": 1, "_id": 0}

    if include_documents:
        group["documents"] = {"$push": "$$ROOT"}
        project["documents"] = {"$slice": ["$documents", 5]}
    else:
        group["documentIds"] = {"$push": "$_id"}
        project["documentIds"] = {"$slice": ["$documentIds", 10]}

    return [
        {"$group": group},
        {"$match": {"count": {"$gte": min_count}}},
        {"$sort": {"count": -1} if sort == "count" else {"_id": 1}},
        {"$limit": limit},
        {"$project": project},
    ]


def summarize_duplicates(groups: list, total_documents: int) -> dict:
    """Compute duplicate statistics for the groups returned by the pipeline."""
    affected = sum(group.get("count", 0) for group in groups)
    unique = total_documents - affected + len(groups)
    percentage = (affected / total_documents) * 100 if total_documents > 0 else 0

    return {
        "totalDocuments": total_documents,
        "uniqueDocuments": unique,
        "duplicateDocuments": affected,
        "duplicatePercentage": round(percentage, 2),
    }


def duplicate_recommendations(collection: str, fields: list, groups: list, statistics: dict) -> list:
    """Suggest follow-up actions for a duplicate scan."""
    if not groups:
        return ["✓ No duplicates found"]

    recommendations = []
    percentage = statistics["duplicatePercentage"]
    affected = statistics["duplicateDocuments"]

    if percentage > HIGH_DUPLICATE_PERCENTAGE:
        recommendations.append(f"⚠ High duplicate rate ({percentage:.1f}%) - consider data cleanup")

    if len(fields) == 1:
        recommendations.append(
            f'Consider adding unique index: create_index("{collection}", {{{fields[0]}: 1}}, {{unique: true}})'
        )

    if affected > 1000:
        recommendations.append("Use delete_many with filter after manual review to clean up duplicates")
    elif affected > 0:
        recommendations.append(f"{affected} documents have duplicates - review and clean up as needed")

    return recommendations


# ============================================================================
# Collection Cloning
# ============================================================================

def build_clone_pipeline(query_filter: dict, projection: Optional[dict], destination: str) -> list:
    """Build a $match / $project / $out pipeline that copies into destination."""
    pipeline = [{"$match": query_filter}]
    if projection:
        pipeline.append({"$project": projection})
    pipeline.append({"$out": destination})
    return pipeline


def index_copy_options(index: dict) -> Optional[dict]:
    """
    Return create_index options for copying an index, or None for the
    default _id index which every collection already has.
    """
    name = index.get("name")
    if name == "_id_":
        return None

    options = {"name": name}
    if index.get("unique"):
        options["unique"] = True
    if index.get("sparse"):
        options["sparse"] = True
    if index.get("expireAfterSeconds") is not None:
        options["expireAfterSeconds"] = index["expireAfterSeconds"]
    return options


def estimate_clone(source_stats: dict, match_count: int) -> dict:
    """Estimate the size and duration of a clone for dry runs."""
    size = source_stats.get("size", 0)
    count = source_stats.get("count", 0)

    if match_count > 0 and count > 0:
        estimated_size = math.floor(size * (match_count / count))
    else:
        estimated_size = 0

    return {
        "estimatedSize": estimated_size,
        "estimatedTimeMs": (match_count // 1000) * 100,
    }


# ============================================================================
# Export Formatting
# ============================================================================

def flatten_document(doc: dict, prefix: str = "") -> dict:
    """
    Flatten nested documents into dotted keys for tabular output.

    Arrays become JSON strings and ObjectIds their hex representation.
    """
    flattened = {}

    for key, value in doc.items():
        new_key = f"{prefix}.{key}" if prefix else key

        if isinstance(value, dict):
            flattened.update(flatten_document(value, new_key))
        elif isinstance(value, list):
            flattened[new_key] = json_util.dumps(value)
        elif isinstance(value, ObjectId):
            flattened[new_key] = str(value)
        else:
            flattened[new_key] = value

    return flattened


def _csv_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json_util.dumps(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def documents_to_csv(documents: list, flatten: bool = True) -> str:
    """Render documents as CSV with a header made of every key seen."""
    rows = [flatten_document(doc) for doc in documents] if flatten else documents

    headers = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_cell(row.get(header)) for header in headers])

    return output.getvalue().rstrip("\n")


def has_nested_values(documents: list) -> bool:
    return any(
        isinstance(value, (dict, list))
        for doc in documents
        for value in doc.values()
    )


def format_export(documents: list, format: str = "json", flatten: bool = True, pretty: bool = False) -> tuple:
    """
    Serialize documents for export.

    Returns:
        (data, warnings) where data is the serialized string

    Raises:
        ValueError: If format is not json, jsonl or csv
    """
    warnings = []

    if format == "json":
        data = json_util.dumps(documents, indent=2 if pretty else None)
    elif format == "jsonl":
        data = "\n".join(json_util.dumps(doc) for doc in documents)
    elif format == "csv":
        data = documents_to_csv(documents, flatten)
        if not flatten and has_nested_values(documents):
            warnings.append(
                "⚠ Document contains nested objects. Consider using flatten: true for better CSV compatibility"
            )
    else:
        raise ValueError(f"Unsupported format: {format}")

    return data, warnings


def export_payload(collection: str, format: str, documents: list, data: str, warnings: list) -> dict:
    """Assemble the export result, inlining data only when it is small enough."""
    size_bytes = len(data.encode("utf-8"))

    if size_bytes > LARGE_EXPORT_BYTES:
        warnings.append("⚠ Large export - consider saving to file or using limit parameter")

    result = {
        "collection": collection,
        "format": format,
        "documentsExported": len(documents),
        "sizeBytes": size_bytes,
    }
    if warnings:
        result["warnings"] = warnings

    if size_bytes <= INLINE_EXPORT_BYTES:
        result["data"] = json.loads(data) if format == "json" else data
    else:
        result["preview"] = data[:EXPORT_PREVIEW_CHARS] + "..."
        result["message"] = "Data too large to display. Use limit parameter to reduce size."

    return result
