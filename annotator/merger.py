"""Reconcile checker matches into a sorted, non-overlapping list."""

import logging
from typing import Iterable

from .models import CheckerMatch, Span

logger = logging.getLogger(__name__)


def merge_matches(matches: Iterable[CheckerMatch]) -> list[CheckerMatch]:
    """
    Sort matches and drop every match that overlaps an earlier one.

    Matches are ordered by offset, shorter first on ties. A match is kept
    only if it starts at or after the end of the last kept match. Kept
    matches are copies carrying a fresh 0-based index; the input objects
    are left untouched.

    Args:
        matches: Checker matches in any order

    Returns:
        Sorted, pairwise non-overlapping matches indexed 0..n-1
    """
    ordered = sorted(matches, key=lambda m: (m.offset, m.length))

    merged = []
    last_end = -1
    for m in ordered:
        if m.offset < last_end:
            continue
        merged.append(m.with_index(len(merged)))
        last_end = m.end

    dropped = len(ordered) - len(merged)
    if dropped:
        logger.debug(f"Dropped {dropped} overlapping matches")
    return merged


def highlight_ranges(matches: Iterable[CheckerMatch]) -> list[Span]:
    """Union of match ranges; overlapping or touching ranges are joined."""
    ranges = sorted((m.offset, m.end) for m in matches if m.length > 0)

    out: list[list[int]] = []
    for start, end in ranges:
        if out and start <= out[-1][1]:
            out[-1][1] = max(out[-1][1], end)
        else:
            out.append([start, end])
    return [Span(start, end) for start, end in out]


def apply_replacements(text: str, matches: Iterable[CheckerMatch]) -> str:
    """
    Apply the first suggestion of every match to text.

    Matches are merged first so edits never overlap; matches without a
    suggestion are skipped.

    Args:
        text: Original text the offsets refer to
        matches: Checker matches

    Returns:
        The corrected text
    """
    result = text
    shift = 0
    for m in merge_matches(matches):
        replacement = m.suggestion
        if replacement is None:
            continue
        start = m.offset + shift
        result = result[:start] + replacement + result[start + m.length:]
        shift += len(replacement) - m.length
    return result
