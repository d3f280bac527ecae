"""Error types shared across the search engine."""


class VectorSearchError(Exception):
    """Base error for the vector search engine."""


class InvalidDocumentError(VectorSearchError, TypeError):
    """Raised when an input is neither a text value nor a field-keyed record."""


class StopWordListError(VectorSearchError, ValueError):
    """Raised when a stop-word list cannot be resolved or read."""
