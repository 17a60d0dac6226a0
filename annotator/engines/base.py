"""Base classes and constants for sentence splitting engines."""

import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional


# Sentence-ending punctuation
TERMINALS = frozenset(".!?")

# Closing quotes/brackets absorbed into the sentence they follow
CLOSERS = frozenset("\"”')]")

# Tokens whose final period never ends a sentence (case-sensitive)
DEFAULT_ABBREVIATIONS = frozenset({
    "Mr.", "Mrs.", "Ms.", "Dr.", "Prof.", "St.", "Jr.", "Sr.", "vs.", "e.g.", "i.e.",
})

_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"\S+")


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def collapse_with_map(text: str) -> tuple[str, list[int]]:
    """Collapse whitespace and remember where each character came from.

    Args:
        text: Original text

    Returns:
        (collapsed, index_map) where ``collapsed == collapse_whitespace(text)``
        and ``index_map[i]`` is the position in text of ``collapsed[i]``.
        A collapsed space maps to the first character of its whitespace run.
    """
    parts = []
    index_map: list[int] = []
    prev_end = None
    for m in _TOKEN.finditer(text or ""):
        if prev_end is not None:
            parts.append(" ")
            index_map.append(prev_end)
        parts.append(m.group())
        index_map.extend(range(m.start(), m.end()))
        prev_end = m.end()
    return "".join(parts), index_map


def original_range(index_map: list[int], start: int, end: int) -> tuple[int, int]:
    """Translate a non-empty collapsed range [start, end) into original offsets."""
    return index_map[start], index_map[end - 1] + 1


class SentenceSplitter(ABC):
    """Base class for sentence splitting engines."""

    def __init__(self, abbreviations: Optional[Iterable[str]] = None):
        """Initialize sentence splitter.

        Args:
            abbreviations: Tokens that do not end a sentence (defaults to
                DEFAULT_ABBREVIATIONS)
        """
        if abbreviations is None:
            abbreviations = DEFAULT_ABBREVIATIONS
        self.abbreviations = frozenset(abbreviations)

    @abstractmethod
    def segment_with_indices(self, text: str) -> list[tuple[str, int, int]]:
        """Split text into sentences and return them with their indices.

        Whitespace is collapsed first; indices refer to the collapsed text,
        so ``collapse_whitespace(text)[start:end] == sentence``.

        Args:
            text: Input text to split

        Returns:
            List of (sentence_text, start_index, end_index) tuples
        """
        pass

    def split(self, text: str) -> list[str]:
        """Split text into sentence strings."""
        return [sent for sent, _, _ in self.segment_with_indices(text)]

    @staticmethod
    def _trimmed(text: str, start: int, end: int) -> Optional[tuple[str, int, int]]:
        """Trim spaces at both ends of text[start:end], keeping indices exact."""
        while start < end and text[start] == " ":
            start += 1
        while end > start and text[end - 1] == " ":
            end -= 1
        if start >= end:
            return None
        return text[start:end], start, end
