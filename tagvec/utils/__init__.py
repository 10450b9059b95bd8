"""Utility modules for common operations."""

from tagvec.utils.deterministic import compute_query_hash
from tagvec.utils.hashing import compute_sha256_text
from tagvec.utils.schema import SchemaStamp, build_schema_stamp

__all__ = [
    "SchemaStamp",
    "build_schema_stamp",
    "compute_query_hash",
    "compute_sha256_text",
]
