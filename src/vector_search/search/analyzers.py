"""Analyzer utilities for the vector search engine.

Text is turned into a concordance (token -> occurrence count) by a small
composable pipeline: a delimiter tokenizer followed by token filters. The
tokenizer deliberately keeps empty tokens produced by adjacent delimiters; the
stop-word filter is what removes them (the bundled lists contain the empty
token).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol

from vector_search.search.stopwords import STOP_WORDS, StopWordRegistry


Concordance = dict[str, int]

# Punctuation delimiters plus ECMAScript whitespace. Python's \s differs: it
# also matches \x1c-\x1f and \x85, and does not match \ufeff.
DELIMITER_PATTERN = re.compile(
    r"[.,/#!$%^&*;:{}=\-_`~()\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"
)


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class DelimiterTokenizer:
    """Split text on a delimiter class, yielding every substring (empty ones included)."""

    def __init__(self, pattern: re.Pattern[str] = DELIMITER_PATTERN) -> None:
        self.pattern = pattern

    def __call__(self, text: str) -> Iterator[Token]:
        start = 0
        position = 0
        for match in self.pattern.finditer(text):
            yield Token(text=text[start : match.start()], position=position, start_char=start, end_char=match.start())
            position += 1
            start = match.end()
        yield Token(text=text[start:], position=position, start_char=start, end_char=len(text))


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if not token.text.islower():
                token.text = token.text.lower()
            yield token


class StopFilter:
    """Removes stopwords from the stream.

    The source is consulted once per stream, so a registry edited between
    calls affects the next tokenization and never an earlier one.
    """

    def __init__(self, stopwords: StopWordRegistry | Iterable[str] | None = None) -> None:
        if stopwords is None:
            stopwords = STOP_WORDS
        if isinstance(stopwords, StopWordRegistry):
            self.source: StopWordRegistry | frozenset[str] = stopwords
        else:
            self.source = frozenset(word.lower() for word in stopwords)

    def current(self) -> frozenset[str]:
        if isinstance(self.source, StopWordRegistry):
            return self.source.snapshot()
        return self.source

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        stopwords = self.current()
        for token in tokens:
            if token.text not in stopwords:
                yield token


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        return list(stream)


class ConcordanceAnalyzer:
    """Analyzer wired into the engine: lowercase, split, drop stop words, count."""

    def __init__(self, stopwords: StopWordRegistry | Iterable[str] | None = None) -> None:
        self.pipeline = AnalyzerPipeline(DelimiterTokenizer(), [LowercaseFilter(), StopFilter(stopwords)])

    def tokens(self, text: str) -> list[Token]:
        return self.pipeline(text)

    def __call__(self, text: str) -> Concordance:
        concordance: Concordance = {}
        for token in self.tokens(text):
            concordance[token.text] = concordance.get(token.text, 0) + 1
        return concordance


def tokenize(text: str, stopwords: StopWordRegistry | Iterable[str] | None = None) -> Concordance:
    """Return the concordance of ``text`` using the process-wide stop words by default."""

    return ConcordanceAnalyzer(stopwords)(text)
