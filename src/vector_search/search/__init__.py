"""
Search indexing and query engine package.

This package provides a pure-Python vector search stack:
- stopwords: Process-wide stop-word registry and bundled lists
- analyzers: Delimiter tokenizer and filters producing concordances
- models: Vector (concordance + magnitude) and index types
- vectors: Magnitude and substring-aware relation scoring
- indexer: Document -> Vector / FieldIndex
- store: Append-only document store with parallel indexes
- engine: Search orchestration (immediate and deferred)
"""

from vector_search.search.analyzers import ConcordanceAnalyzer, tokenize
from vector_search.search.engine import VectorSearchEngine
from vector_search.search.models import Vector
from vector_search.search.stopwords import STOP_WORDS, StopWordRegistry, configure_stop_words
from vector_search.search.vectors import build_vector, magnitude, relation


__all__ = [
    "STOP_WORDS",
    "ConcordanceAnalyzer",
    "StopWordRegistry",
    "Vector",
    "VectorSearchEngine",
    "build_vector",
    "configure_stop_words",
    "magnitude",
    "relation",
    "tokenize",
]
