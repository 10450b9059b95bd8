"""CLI JSON output wrapper adding schema metadata to every payload."""

from __future__ import annotations

import json
from typing import Any

from tagvec.utils.schema import build_schema_stamp


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Args:
        schema_id: Identifier for the output type (e.g., "query_results").
        schema_version: Integer version for backward compatibility.
        **data: Payload data to include in the response.

    Returns:
        JSON string with schema metadata and payload.

    Example:
        >>> json_response("query_results", 1, page=1, results=[])
        {
          "schema_id": "query_results",
          "schema_version": 1,
          "producer": "tagvec-0.1.0",
          "produced_at": "2026-10-19T10:30:00+00:00",
          "page": 1,
          "results": []
        }
    """
    stamp = build_schema_stamp(schema_id=schema_id, schema_version=schema_version)
    return json.dumps(stamp.apply(data), indent=2, default=str)
