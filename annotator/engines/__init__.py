"""Sentence splitting engines."""

from .base import SentenceSplitter, collapse_whitespace, collapse_with_map, original_range
from .abbrev_engine import AbbreviationSplitter
from .lookbehind_engine import LookbehindSplitter

__all__ = [
    "SentenceSplitter",
    "AbbreviationSplitter",
    "LookbehindSplitter",
    "collapse_whitespace",
    "collapse_with_map",
    "original_range",
    "create_splitter",
    "split_sentences",
]


def create_splitter(engine: str = "abbrev", abbreviations=None) -> SentenceSplitter:
    """Build a splitter by engine name."""
    if engine == "abbrev":
        return AbbreviationSplitter(abbreviations)
    elif engine == "lookbehind":
        return LookbehindSplitter(abbreviations)
    else:
        raise ValueError(f"Unknown engine: {engine}")


def split_sentences(text: str) -> list[str]:
    """Split text into sentences with the default abbreviation-aware engine."""
    return AbbreviationSplitter().split(text)
