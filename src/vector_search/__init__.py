"""In-process text similarity search over plain text and field-keyed records."""

from vector_search.domain import (
    Document,
    InvalidDocumentError,
    RecordDocument,
    SearchResult,
    StopWordListError,
    TextDocument,
    VectorSearchError,
)
from vector_search.search import STOP_WORDS, StopWordRegistry, VectorSearchEngine, configure_stop_words, tokenize


__version__ = "0.1.0"

__all__ = [
    "STOP_WORDS",
    "Document",
    "InvalidDocumentError",
    "RecordDocument",
    "SearchResult",
    "StopWordListError",
    "StopWordRegistry",
    "TextDocument",
    "VectorSearchEngine",
    "VectorSearchError",
    "__version__",
    "configure_stop_words",
    "tokenize",
]
