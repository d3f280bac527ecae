"""Document indexing for the vector search engine.

A text document becomes a single Vector. A record document becomes a
FieldIndex: one Vector per field, in the record's field order. Field values
are canonicalized to text before tokenization; value kinds with no text form
degrade to empty text (logged, never raised) so one odd field cannot keep a
record out of the index.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
import logging
import math
from types import MappingProxyType

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
)
from vector_search.domain.errors import InvalidDocumentError
from vector_search.search.analyzers import Concordance
from vector_search.search.models import Index, Vector
from vector_search.search.vectors import build_vector


logger = logging.getLogger(__name__)

# Receives (field name, opaque value) whenever a value indexes as empty text
UnrepresentableHook = Callable[[str, OpaqueValue], None]


def format_number(value: int | float) -> str:
    """Render a number the way JavaScript's ``Number.prototype.toString`` does.

    The value is taken as a double and printed with the shortest digits that
    round-trip. Decimal exponents from -6 to 20 print in plain notation
    (``3.0`` -> ``"3"``, ``1e-6`` -> ``"0.000001"``); anything outside uses
    exponent notation (``"1e+21"``, ``"1e-7"``). Non-finite values print as
    ``NaN``, ``Infinity`` and ``-Infinity``.
    """

    try:
        number = float(value)
    except OverflowError:
        number = math.inf if value > 0 else -math.inf
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"

    sign = "-" if number < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(number))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    # number == 0.<digits> * 10**n
    n = exponent + k
    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if n > 0 else '-'}{abs(n - 1)}"
    return sign + text


def _scalar_text(value: FieldValue) -> str | None:
    if isinstance(value, TextValue):
        return value.value
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, NumberValue):
        return format_number(value.value)
    return None


def canonicalize_field_value(
    name: str,
    value: FieldValue,
    on_unrepresentable: UnrepresentableHook | None = None,
) -> str:
    """Return the text that gets tokenized for a record field."""

    if isinstance(value, SequenceValue):
        parts: list[str] = []
        for item in value.items:
            text = _scalar_text(item)
            if text is None:
                _report_unrepresentable(name, item, on_unrepresentable)
                text = ""
            parts.append(text)
        return "\n".join(parts)

    text = _scalar_text(value)
    if text is None:
        _report_unrepresentable(name, value, on_unrepresentable)
        return ""
    return text


def _report_unrepresentable(name: str, value: FieldValue, hook: UnrepresentableHook | None) -> None:
    opaque = value if isinstance(value, OpaqueValue) else OpaqueValue(value)
    logger.debug("UnrepresentableFieldValue: field %r holds %s, indexed as empty text", name, opaque.type_name)
    if hook is not None:
        hook(name, opaque)


class DocumentIndexer:
    """Turn documents into vectors with a shared analyzer."""

    def __init__(
        self,
        analyzer: Callable[[str], Concordance],
        *,
        on_unrepresentable: UnrepresentableHook | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.on_unrepresentable = on_unrepresentable

    def vectorize(self, text: str) -> Vector:
        return build_vector(self.analyzer(text))

    def index_document(self, document: Document) -> Index:
        if isinstance(document, TextDocument):
            return self.vectorize(document.text)
        if isinstance(document, RecordDocument):
            field_index: dict[str, Vector] = {}
            for name, value in document.fields.items():
                text = canonicalize_field_value(name, value, self.on_unrepresentable)
                field_index[name] = self.vectorize(text)
            return MappingProxyType(field_index)
        msg = f"Cannot index {type(document).__name__}; expected TextDocument or RecordDocument"
        raise InvalidDocumentError(msg)


def is_field_index(index: Index) -> bool:
    return not isinstance(index, Vector)
