"""Tag vector indexing and querying."""

from tagvec.index.codec import ExportedData, SnapshotValidationError
from tagvec.index.engine import TagVectorIndex
from tagvec.index.models import (
    CategoryWeight,
    IndexStats,
    IndexTag,
    Item,
    MemoryUsage,
    QueryResult,
    SparseVector,
    Tag,
)

__all__ = [
    "CategoryWeight",
    "ExportedData",
    "IndexStats",
    "IndexTag",
    "Item",
    "MemoryUsage",
    "QueryResult",
    "SnapshotValidationError",
    "SparseVector",
    "Tag",
    "TagVectorIndex",
]
