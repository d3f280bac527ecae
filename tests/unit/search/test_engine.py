"""Unit tests for search orchestration on VectorSearchEngine."""

import asyncio
import math

import pytest

from vector_search.domain.documents import RecordDocument, TextDocument
from vector_search.domain.errors import InvalidDocumentError
from vector_search.domain.search import SearchResult
from vector_search.search.engine import VectorSearchEngine
from vector_search.search.stopwords import StopWordRegistry


def test_plain_text_scenario(scenario_stop_words):
    engine = VectorSearchEngine(["the cat sat on the mat", "the dog ran in the yard"])

    results = engine.search("cat")

    assert [result.document_position for result in results] == [0]
    assert results[0].score == pytest.approx(1 / math.sqrt(3))
    assert results[0].field_key is None
    assert engine.search("xyz") == []


def test_record_field_filter_scenario(scenario_stop_words):
    engine = VectorSearchEngine([{"title": "Breaking News", "body": "Big story"}])

    title_results = engine.search("new", ["title"])

    assert len(title_results) == 1
    assert title_results[0].document_position == 0
    assert title_results[0].field_key == "title"
    assert title_results[0].score == pytest.approx(1 / math.sqrt(2))
    assert engine.search("new", ["body"]) == []


def test_equal_scores_keep_insertion_order(scenario_stop_words):
    engine = VectorSearchEngine(["banana", "apple pie", "apple tart", "apple"])

    results = engine.search("apple")

    assert [result.document_position for result in results] == [3, 1, 2]
    assert results[1].score == results[2].score


def test_equal_scores_across_record_fields_keep_field_order(scenario_stop_words):
    engine = VectorSearchEngine([{"b": "same words", "a": "same words"}, "same words"])

    results = engine.search("same")

    assert [(result.document_position, result.field_key) for result in results] == [
        (0, "b"),
        (0, "a"),
        (1, None),
    ]


def test_substring_relation_is_directional_through_search(scenario_stop_words):
    engine = VectorSearchEngine(["programming", "program"])

    assert [result.document_position for result in engine.search("program")] == [0, 1]
    assert [result.document_position for result in engine.search("programming")] == [0]


def test_results_are_sorted_by_descending_score(scenario_stop_words):
    engine = VectorSearchEngine(["cat", "cat dog", "cat dog bird fish", "bird"])

    results = engine.search("cat")

    scores = [result.score for result in results]
    assert scores == sorted(scores, reverse=True)
    assert [result.document_position for result in results] == [0, 1, 2]
    assert all(result.score > 0 for result in results)


def test_empty_query_returns_nothing(scenario_stop_words):
    engine = VectorSearchEngine(["cat"])
    assert engine.search("") == []
    assert engine.search("the on") == []


def test_field_filter_is_a_subset_of_the_unfiltered_union(tweets):
    engine = VectorSearchEngine(tweets)

    union = engine.search("program")
    filtered = engine.search("program", ["content", "username"])

    assert {result.field_key for result in union} >= {"content"}
    assert filtered == [result for result in union if result.field_key in {"content", "username"}]


def test_unknown_field_filter_yields_no_record_results(tweets):
    engine = VectorSearchEngine([*tweets, "a program about engines"])

    results = engine.search("program", ["nope"])

    # Plain text documents have no fields, so the filter never excludes them
    assert results == [SearchResult(document_position=3, score=results[0].score)]


def test_single_field_name_is_accepted_as_filter(tweets):
    engine = VectorSearchEngine(tweets)
    assert engine.search("ada", "username") == engine.search("ada", ["username"])


def test_sequence_fields_are_searchable(tweets):
    engine = VectorSearchEngine(tweets)

    results = engine.search("machine", ["medias"])

    assert [(result.document_position, result.field_key) for result in results] == [(2, "medias")]


def test_add_document_appends_and_becomes_searchable(scenario_stop_words):
    engine = VectorSearchEngine(["the cat sat on the mat"])

    position = engine.add_document({"title": "Zebra crossing"})

    assert position == 1
    assert len(engine.documents) == 2
    results = engine.search("zebra")
    assert [(result.document_position, result.field_key) for result in results] == [(1, "title")]
    assert isinstance(engine.resolve(results[0]), RecordDocument)
    assert engine.resolve(results[0]).get("title") == "Zebra crossing"


def test_documents_view_is_read_only_and_ordered():
    engine = VectorSearchEngine(["one", {"k": "two"}])

    documents = engine.documents

    assert isinstance(documents, tuple)
    assert documents[0] == TextDocument("one")
    assert isinstance(documents[1], RecordDocument)
    assert engine.get_documents() == documents
    assert len(engine) == 2


def test_invalid_initial_document_fails_fast():
    with pytest.raises(InvalidDocumentError):
        VectorSearchEngine(["fine", 42])


def test_invalid_added_document_is_rejected_without_side_effects():
    engine = VectorSearchEngine(["fine"])

    with pytest.raises(InvalidDocumentError):
        engine.add_document(["not", "a", "document"])
    with pytest.raises(InvalidDocumentError):
        engine.add_document({1: "numeric key"})

    assert len(engine.documents) == 1


def test_stop_word_changes_apply_to_future_tokenization_only():
    registry = StopWordRegistry({""})
    engine = VectorSearchEngine(["the cat"], stopwords=registry)

    registry.add("cat")

    # Existing index still holds "cat"; the query "cat" is now dropped entirely
    assert engine.search("cat") == []
    # A token that is still allowed keeps matching the old index
    assert [result.document_position for result in engine.search("the")] == [0]

    engine.add_document("cat and the hat")
    assert [result.document_position for result in engine.search("hat")] == [1]
    assert "cat" not in engine.indexer.vectorize("cat and the hat").concordance


def test_engines_share_the_process_wide_registry_by_default(scenario_stop_words):
    first = VectorSearchEngine(["the cat"])
    second = VectorSearchEngine(["the dog"])

    assert first.search("the") == []
    assert second.search("the") == []


def test_fields_lists_record_keys_in_first_seen_order(tweets):
    engine = VectorSearchEngine(["plain", *tweets, {"extra": 1, "link": "x"}])
    assert engine.fields() == ["link", "displayname", "username", "content", "medias", "extra"]


@pytest.mark.asyncio
async def test_deferred_search_matches_immediate_search(tweets):
    engine = VectorSearchEngine([*tweets, "program programs programming"])

    for query, fields in [("program", []), ("program", ["content"]), ("engine", []), ("zzz", [])]:
        assert await engine.search_async(query, fields) == engine.search(query, fields)


@pytest.mark.asyncio
async def test_deferred_search_uses_state_captured_at_call_time(scenario_stop_words):
    engine = VectorSearchEngine(["cat"])

    pending = engine.search_async("cat")
    engine.add_document("cat cat")

    results = await pending

    assert [result.document_position for result in results] == [0]
    assert [result.document_position for result in engine.search("cat")] == [0, 1]


@pytest.mark.asyncio
async def test_deferred_search_yields_to_the_event_loop(scenario_stop_words):
    engine = VectorSearchEngine(["cat"])
    order: list[str] = []

    async def other() -> None:
        order.append("other")

    async def deferred() -> None:
        await engine.search_async("cat")
        order.append("search")

    await asyncio.gather(deferred(), other())

    assert order == ["other", "search"]
