"""Column type inference for untyped record data."""

from .inference import Record, TypeInferenceEngine, infer_column_types
from .types import ColumnProfile, ColumnType, TypeKind

__all__ = [
    "ColumnProfile",
    "ColumnType",
    "Record",
    "TypeInferenceEngine",
    "TypeKind",
    "infer_column_types",
]
