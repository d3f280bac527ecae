"""Domain layer - document variants, results and errors.

Key principles:
1. No dependencies on infrastructure
2. Explicit tagged variants instead of runtime-checked unions
3. Immutability for stored documents and ranked results
"""

from vector_search.domain.documents import (
    BoolValue,
    Document,
    FieldValue,
    NumberValue,
    OpaqueValue,
    RecordDocument,
    SequenceValue,
    TextDocument,
    TextValue,
    coerce_document,
    coerce_field_value,
)
from vector_search.domain.errors import InvalidDocumentError, StopWordListError, VectorSearchError
from vector_search.domain.search import SearchResult


__all__ = [
    "BoolValue",
    "Document",
    "FieldValue",
    "InvalidDocumentError",
    "NumberValue",
    "OpaqueValue",
    "RecordDocument",
    "SearchResult",
    "SequenceValue",
    "StopWordListError",
    "TextDocument",
    "TextValue",
    "VectorSearchError",
    "coerce_document",
    "coerce_field_value",
]
