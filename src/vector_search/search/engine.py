"""In-process vector search engine.

Hides tokenization, indexing, scoring and ranking behind a small interface:

    engine = VectorSearchEngine(["the cat sat on the mat", {"title": "Breaking News"}])
    engine.search("cat")                      # immediate
    await engine.search_async("new", ["title"])  # deferred

Scoring is brute force: every query scans every stored vector, and each
vector comparison is O(candidate tokens x query tokens). The deferred variant
runs the same synchronous routine after a single cooperative yield to the
event loop; it is a scheduling indirection, not a worker offload, so it is
never faster than the immediate variant.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Iterable
import logging
from typing import Any

from vector_search.domain.documents import Document, OpaqueValue, RecordDocument, coerce_document
from vector_search.domain.search import SearchResult
from vector_search.observability.context import engine_scope
from vector_search.observability.metrics import (
    INDEX_DOC_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    UNREPRESENTABLE_VALUES,
    track_latency,
)
from vector_search.observability.tracing import create_span
from vector_search.search.analyzers import ConcordanceAnalyzer
from vector_search.search.indexer import DocumentIndexer
from vector_search.search.models import Index, Vector
from vector_search.search.stopwords import StopWordRegistry
from vector_search.search.store import DocumentStore, StoreSnapshot
from vector_search.search.vectors import relation


logger = logging.getLogger(__name__)


def _normalize_field_filter(field_filter: Iterable[str] | str | None) -> frozenset[str]:
    if field_filter is None:
        return frozenset()
    if isinstance(field_filter, str):
        return frozenset({field_filter})
    return frozenset(field_filter)


def rank_snapshot(snapshot: StoreSnapshot, query: Vector, field_filter: frozenset[str]) -> list[SearchResult]:
    """Score every stored index against ``query`` and rank the non-zero matches.

    Results are sorted by descending score; Python's sort is stable, so equal
    scores keep emission order (document position, then record field order).
    """

    results: list[SearchResult] = []
    for position, index in enumerate(snapshot.indexes):
        if isinstance(index, Vector):
            score = relation(index, query)
            if score > 0:
                results.append(SearchResult(document_position=position, score=score))
            continue

        for field_name, vector in index.items():
            if field_filter and field_name not in field_filter:
                continue
            score = relation(vector, query)
            if score > 0:
                results.append(SearchResult(document_position=position, score=score, field_key=field_name))

    results.sort(key=lambda result: result.score, reverse=True)
    return results


class VectorSearchEngine:
    """Index a collection of documents and rank them against free-text queries."""

    def __init__(
        self,
        documents: Iterable[Any] = (),
        *,
        stopwords: StopWordRegistry | Iterable[str] | None = None,
        name: str = "default",
    ) -> None:
        """Build indexes for the initial documents.

        Args:
            documents: Text values, field-keyed mappings, or Document instances
            stopwords: Stop words for this engine; the process-wide registry when None
            name: Label used in metrics, spans and logs

        Raises:
            InvalidDocumentError: if any initial document is neither text nor a record.
                Validation runs before indexing, so a bad batch builds nothing.
        """
        self.name = name
        self.analyzer = ConcordanceAnalyzer(stopwords)
        self.indexer = DocumentIndexer(self.analyzer, on_unrepresentable=self._record_unrepresentable)
        self._store = DocumentStore()

        initial = [coerce_document(raw) for raw in documents]
        with engine_scope(name), create_span(
            "vector_search.build", attributes={"engine": name, "documents": len(initial)}
        ):
            for document in initial:
                self._store.append(document, self._index_document)
            INDEX_DOC_COUNT.labels(engine=self.name).set(len(self._store))
            logger.info("Engine %s indexed %d documents", self.name, len(initial))

    @property
    def documents(self) -> tuple[Document, ...]:
        """Read-only view of the stored documents, in insertion order."""
        return self._store.documents()

    def get_documents(self) -> tuple[Document, ...]:
        return self._store.documents()

    def __len__(self) -> int:
        return len(self._store)

    def add_document(self, document: Any) -> int:
        """Index and append one document; return its position."""

        coerced = coerce_document(document)
        with engine_scope(self.name):
            position = self._store.append(coerced, self._index_document)
            INDEX_DOC_COUNT.labels(engine=self.name).set(position + 1)
            logger.debug("Engine %s added document at position %d", self.name, position)
        return position

    def resolve(self, result: SearchResult) -> Document:
        """Map a result back to the document it was computed from."""
        return self._store[result.document_position]

    def fields(self) -> list[str]:
        """Ordered union of the field names of every stored record."""

        seen: dict[str, None] = {}
        for document in self._store.documents():
            if isinstance(document, RecordDocument):
                for name in document.keys():
                    seen.setdefault(name, None)
        return list(seen)

    def search(self, query: str, field_filter: Iterable[str] | str | None = ()) -> list[SearchResult]:
        """Rank stored documents against ``query`` and return the results immediately.

        ``field_filter`` restricts record documents to the named fields; an empty
        filter searches every field. Plain text documents ignore the filter.
        """

        snapshot = self._store.snapshot()
        query_vector = self.indexer.vectorize(query)
        return self._rank(snapshot, query_vector, _normalize_field_filter(field_filter), mode="immediate")

    def search_async(
        self, query: str, field_filter: Iterable[str] | str | None = ()
    ) -> Coroutine[Any, Any, list[SearchResult]]:
        """Deferred variant of :meth:`search`; await the returned coroutine for the results.

        Store state and query tokens are captured at call time, so documents
        appended before the coroutine runs are not seen. Scoring runs on the
        event loop thread after one cooperative yield.
        """

        snapshot = self._store.snapshot()
        query_vector = self.indexer.vectorize(query)
        return self._rank_deferred(snapshot, query_vector, _normalize_field_filter(field_filter))

    async def _rank_deferred(
        self, snapshot: StoreSnapshot, query_vector: Vector, field_filter: frozenset[str]
    ) -> list[SearchResult]:
        await asyncio.sleep(0)
        return self._rank(snapshot, query_vector, field_filter, mode="deferred")

    def _rank(
        self,
        snapshot: StoreSnapshot,
        query_vector: Vector,
        field_filter: frozenset[str],
        *,
        mode: str,
    ) -> list[SearchResult]:
        attributes = {
            "engine": self.name,
            "search.mode": mode,
            "search.query_tokens": len(query_vector.concordance),
            "search.documents": len(snapshot),
            "search.field_filter": sorted(field_filter),
        }
        with engine_scope(self.name), create_span("vector_search.search", attributes=attributes) as span:
            with track_latency(SEARCH_LATENCY, engine=self.name, mode=mode):
                results = rank_snapshot(snapshot, query_vector, field_filter)
            span.set_attribute("search.results", len(results))
            SEARCH_COUNT.labels(engine=self.name, mode=mode).inc()
            logger.debug(
                "Search on %s (%s) matched %d of %d documents",
                self.name,
                mode,
                len({result.document_position for result in results}),
                len(snapshot),
            )
        return results

    def _index_document(self, document: Document) -> Index:
        with create_span("vector_search.index_document", attributes={"engine": self.name}):
            return self.indexer.index_document(document)

    def _record_unrepresentable(self, field_name: str, value: OpaqueValue) -> None:
        UNREPRESENTABLE_VALUES.labels(engine=self.name).inc()
