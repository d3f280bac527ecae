"""Unit tests for document variants and coercion."""

import pytest

from vector_search.domain.documents import (
    BoolValue,
    NumberValue,
    OpaqueValue,
    RecordDocument,
    SequenceValue,
    TextDocument,
    TextValue,
    coerce_document,
    coerce_field_value,
)
from vector_search.domain.errors import InvalidDocumentError, VectorSearchError


def test_text_input_becomes_text_document():
    assert coerce_document("hello") == TextDocument("hello")


def test_documents_pass_through_unchanged():
    document = TextDocument("x")
    assert coerce_document(document) is document


def test_mapping_becomes_record_with_tagged_values():
    document = coerce_document({"s": "x", "n": 2, "f": 1.5, "b": False, "l": [1, "a", None], "o": None})

    assert isinstance(document, RecordDocument)
    assert document.keys() == ("s", "n", "f", "b", "l", "o")
    assert document.fields["s"] == TextValue("x")
    assert document.fields["n"] == NumberValue(2)
    assert document.fields["f"] == NumberValue(1.5)
    assert document.fields["b"] == BoolValue(False)
    assert document.fields["l"] == SequenceValue((NumberValue(1), TextValue("a"), OpaqueValue(None)))
    assert document.fields["o"] == OpaqueValue(None)


def test_bool_is_not_treated_as_number():
    assert coerce_field_value(True) == BoolValue(True)


def test_nested_sequences_and_mappings_are_opaque():
    value = coerce_field_value([[1, 2], {"a": 1}, ("t",)])
    assert value == SequenceValue((OpaqueValue([1, 2]), OpaqueValue({"a": 1}), OpaqueValue(("t",))))
    assert coerce_field_value({"a": 1}) == OpaqueValue({"a": 1})
    assert OpaqueValue(object()).type_name == "object"


@pytest.mark.parametrize("raw", [42, 1.5, None, ["a"], b"bytes", object()])
def test_non_text_non_mapping_inputs_are_invalid(raw):
    with pytest.raises(InvalidDocumentError) as exc_info:
        coerce_document(raw)
    assert isinstance(exc_info.value, TypeError)
    assert isinstance(exc_info.value, VectorSearchError)


def test_record_keys_must_be_text():
    with pytest.raises(InvalidDocumentError, match="field names must be text"):
        coerce_document({"ok": 1, 2: "bad"})


def test_record_fields_are_immutable():
    source = {"a": "x"}
    document = coerce_document(source)
    source["b"] = "y"

    assert document.keys() == ("a",)
    with pytest.raises(TypeError):
        document.fields["b"] = TextValue("y")  # type: ignore[index]


def test_to_python_round_trips_plain_values():
    raw = {"s": "x", "n": 2, "b": True, "l": ["a", 1], "o": None}
    document = coerce_document(raw)

    assert document.to_python() == raw
    assert document.get("s") == "x"
    assert document.get("missing", "default") == "default"
    assert TextDocument("t").to_python() == "t"
