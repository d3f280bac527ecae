"""Document model for the search engine.

Documents are explicit tagged variants:
- TextDocument: a single text value, indexed as one vector
- RecordDocument: an ordered mapping of field name -> FieldValue, indexed per field

Field values are themselves tagged (text, number, bool, sequence). Values with
no text representation are kept as OpaqueValue so the indexer can degrade them
to empty text instead of failing.

Plain Python inputs (str, Mapping) are converted with coerce_document(), which
is the only place where runtime type inspection happens.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from vector_search.domain.errors import InvalidDocumentError


@dataclass(frozen=True)
class TextValue:
    value: str

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class NumberValue:
    value: int | float

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class OpaqueValue:
    """A value kind with no text representation (None, nested mappings, objects)."""

    value: Any = None

    @property
    def type_name(self) -> str:
        return type(self.value).__name__

    def to_python(self) -> Any:
        return self.value


ScalarValue = Union[TextValue, NumberValue, BoolValue, OpaqueValue]


@dataclass(frozen=True)
class SequenceValue:
    """Ordered sequence of scalar values (e.g. a list of media links)."""

    items: tuple[ScalarValue, ...] = ()

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


FieldValue = Union[TextValue, NumberValue, BoolValue, SequenceValue, OpaqueValue]


@dataclass(frozen=True)
class TextDocument:
    """Plain text document."""

    text: str

    def to_python(self) -> Any:
        return self.text


@dataclass(frozen=True)
class RecordDocument:
    """Structured document with named fields in insertion order."""

    fields: Mapping[str, FieldValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the mapping so stored records cannot be mutated after indexing
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def keys(self) -> tuple[str, ...]:
        return tuple(self.fields)

    def get(self, name: str, default: Any = None) -> Any:
        value = self.fields.get(name)
        if value is None:
            return default
        return value.to_python()

    def to_python(self) -> dict[str, Any]:
        return {name: value.to_python() for name, value in self.fields.items()}


Document = Union[TextDocument, RecordDocument]


def coerce_field_value(raw: Any) -> FieldValue:
    """Convert a plain Python value into its tagged FieldValue."""

    if isinstance(raw, (TextValue, NumberValue, BoolValue, SequenceValue, OpaqueValue)):
        return raw
    if isinstance(raw, str):
        return TextValue(raw)
    # bool is a subclass of int, so it must be checked first
    if isinstance(raw, bool):
        return BoolValue(raw)
    if isinstance(raw, (int, float)):
        return NumberValue(raw)
    if isinstance(raw, (list, tuple)):
        return SequenceValue(tuple(_coerce_scalar(item) for item in raw))
    return OpaqueValue(raw)


def _coerce_scalar(raw: Any) -> ScalarValue:
    value = coerce_field_value(raw)
    if isinstance(value, SequenceValue):
        return OpaqueValue(raw)
    return value


def coerce_document(raw: Any) -> Document:
    """Convert a plain Python value into a Document.

    Raises:
        InvalidDocumentError: if the input is neither text nor a mapping with text keys.
    """

    if isinstance(raw, (TextDocument, RecordDocument)):
        return raw
    if isinstance(raw, str):
        return TextDocument(raw)
    if isinstance(raw, Mapping):
        fields: dict[str, FieldValue] = {}
        for key, value in raw.items():
            if not isinstance(key, str):
                msg = f"Record field names must be text, got {type(key).__name__}: {key!r}"
                raise InvalidDocumentError(msg)
            fields[key] = coerce_field_value(value)
        return RecordDocument(fields)
    msg = f"Documents must be text or a field-keyed record, got {type(raw).__name__}"
    raise InvalidDocumentError(msg)
