"""Punctuation scanner that honours an abbreviation list."""

import logging

from .base import CLOSERS, TERMINALS, SentenceSplitter, collapse_whitespace

logger = logging.getLogger(__name__)


class AbbreviationSplitter(SentenceSplitter):
    """Split at ., ! and ? unless the mark closes a known abbreviation."""

    def is_abbreviation(self, text: str, mark_start: int, mark_end: int) -> bool:
        """Check whether the token ending at a punctuation run is an abbreviation.

        Args:
            text: Collapsed text
            mark_start: Index of the first mark in the run
            mark_end: Index one past the last mark in the run

        Returns:
            True if the maximal non-whitespace token ending at the run is listed
        """
        j = mark_start
        while j > 0 and not text[j - 1].isspace():
            j -= 1
        return text[j:mark_end] in self.abbreviations

    def find_boundaries(self, text: str) -> list[int]:
        """Return the end index of every sentence boundary in collapsed text.

        A run of terminal marks ("?!", "...") yields a single boundary after
        its last mark. Marks followed directly by a lowercase letter or a
        digit ("e.g", "3.14") are inside a token and never split; a glued
        capital ("rained.Then") still starts a new sentence.
        """
        ends = []
        n = len(text)
        i = 0
        while i < n:
            if text[i] not in TERMINALS:
                i += 1
                continue

            k = i
            while k + 1 < n and text[k + 1] in TERMINALS:
                k += 1
            run_end = k + 1

            following = text[run_end] if run_end < n else ""
            if following.islower() or following.isdigit():
                i = run_end
                continue

            if self.is_abbreviation(text, i, run_end):
                i = run_end
                continue

            end = run_end
            while end < n and text[end] in CLOSERS:
                end += 1
            ends.append(end)
            i = end

        return ends

    def segment_with_indices(self, text: str) -> list[tuple[str, int, int]]:
        """Split text at sentence boundaries.

        Args:
            text: Input text

        Returns:
            List of (sentence_text, start_index, end_index) tuples over the
            collapsed text
        """
        text = collapse_whitespace(text)
        if not text:
            return []

        sentences = []
        start = 0
        for end in self.find_boundaries(text):
            piece = self._trimmed(text, start, end)
            if piece:
                sentences.append(piece)
            start = end

        tail = self._trimmed(text, start, len(text))
        if tail:
            sentences.append(tail)

        logger.debug(f"Split {len(text)} chars into {len(sentences)} sentences")
        return sentences
