"""Simple splitter: break on whitespace that follows ., ! or ?."""

import re

from .base import SentenceSplitter, collapse_whitespace


class LookbehindSplitter(SentenceSplitter):
    """Fast splitter without abbreviation handling."""

    split_pattern = re.compile(r"(?<=[.!?])\s+")

    def segment_with_indices(self, text: str) -> list[tuple[str, int, int]]:
        text = collapse_whitespace(text)
        if not text:
            return []

        sentences = []
        start = 0
        for gap in self.split_pattern.finditer(text):
            piece = self._trimmed(text, start, gap.start())
            if piece:
                sentences.append(piece)
            start = gap.end()

        tail = self._trimmed(text, start, len(text))
        if tail:
            sentences.append(tail)
        return sentences
