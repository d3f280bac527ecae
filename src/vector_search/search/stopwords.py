"""Stop-word configuration shared by every tokenization call.

The registry is process-wide state: engines read it at tokenization time, so
changes apply to future queries and newly added documents only. Indexes that
were already built are never recomputed.

Bundled lists live in ``data/stopwords_<name>.txt`` (one word per line; a blank
line stands for the empty token produced by adjacent delimiters).
"""

from __future__ import annotations

from collections.abc import Iterable
from importlib import resources
import logging
from pathlib import Path
import threading

from vector_search.domain.errors import StopWordListError


logger = logging.getLogger(__name__)

BUNDLED_LISTS: tuple[str, ...] = ("en", "fr")
DEFAULT_LANGUAGE = "en"


def _parse_lines(text: str) -> set[str]:
    return {line.strip().lower() for line in text.splitlines()}


def bundled_stop_words(language: str = DEFAULT_LANGUAGE) -> frozenset[str]:
    """Return a bundled stop-word list by language name."""

    normalized = language.strip().lower()
    if normalized not in BUNDLED_LISTS:
        msg = f"Unknown stop-word list '{language}'. Available: {list(BUNDLED_LISTS)}"
        raise StopWordListError(msg)
    data = resources.files("vector_search.search").joinpath("data", f"stopwords_{normalized}.txt")
    return frozenset(_parse_lines(data.read_text(encoding="utf-8")))


def load_stop_words(path: Path) -> frozenset[str]:
    """Read a one-word-per-line stop-word file."""

    try:
        text = Path(path).expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read stop-word file {path}: {exc}"
        raise StopWordListError(msg) from exc
    return frozenset(_parse_lines(text))


class StopWordRegistry:
    """Thread-safe mutable set of tokens to drop from concordances."""

    def __init__(self, words: Iterable[str] | None = None) -> None:
        self._lock = threading.RLock()
        self._words: set[str] | None = None
        if words is not None:
            self._words = {word.lower() for word in words}

    def _ensure_loaded(self) -> set[str]:
        # Called with the lock held; loads the default list once on first use
        if self._words is None:
            self._words = set(bundled_stop_words(DEFAULT_LANGUAGE))
            logger.debug("Loaded default stop-word list '%s' (%d words)", DEFAULT_LANGUAGE, len(self._words))
        return self._words

    @property
    def initialized(self) -> bool:
        with self._lock:
            return self._words is not None

    def snapshot(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._ensure_loaded())

    def replace(self, words: Iterable[str]) -> None:
        with self._lock:
            self._words = {word.lower() for word in words}

    def update(self, words: Iterable[str]) -> None:
        with self._lock:
            self._ensure_loaded().update(word.lower() for word in words)

    def add(self, word: str) -> None:
        with self._lock:
            self._ensure_loaded().add(word.lower())

    def discard(self, word: str) -> None:
        with self._lock:
            self._ensure_loaded().discard(word.lower())

    def clear(self) -> None:
        with self._lock:
            self._words = set()

    def reset(self) -> None:
        """Forget the current list; the default is reloaded on next use."""
        with self._lock:
            self._words = None

    def __contains__(self, word: object) -> bool:
        with self._lock:
            return word in self._ensure_loaded()

    def __len__(self) -> int:
        with self._lock:
            return len(self._ensure_loaded())


STOP_WORDS = StopWordRegistry()


def configure_stop_words(
    *,
    language: str = DEFAULT_LANGUAGE,
    path: Path | None = None,
    extra: Iterable[str] = (),
    registry: StopWordRegistry | None = None,
) -> StopWordRegistry:
    """Initialize a registry (the process-wide one by default) from configuration."""

    target = registry if registry is not None else STOP_WORDS
    words = set(load_stop_words(path) if path is not None else bundled_stop_words(language))
    words.update(word.strip().lower() for word in extra)
    target.replace(words)
    logger.info(
        "Stop words configured",
        extra={"stop_word_source": str(path) if path is not None else language, "stop_word_count": len(words)},
    )
    return target
