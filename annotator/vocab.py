"""Vocabulary matching and clean-up of vocabulary lists."""

import logging
import re
from typing import Iterable, Optional, Union

from .models import Example, Span, VocabItem

logger = logging.getLogger(__name__)

MAX_EXAMPLES = 2


def _as_item(item: Union[VocabItem, dict]) -> VocabItem:
    return item if isinstance(item, VocabItem) else VocabItem.from_dict(item)


def _word_key(word: str) -> str:
    return " ".join(word.split()).lower()


def vocab_pattern(words: Iterable[str]) -> Optional[re.Pattern]:
    """Build one whole-word alternation, longest word first.

    Words of a phrase may be separated by any whitespace run in the text.
    """
    keys = sorted({_word_key(w) for w in words if w and w.strip()}, key=len, reverse=True)
    if not keys:
        return None
    alternatives = (r"\s+".join(re.escape(part) for part in key.split(" ")) for key in keys)
    return re.compile(r"\b(" + "|".join(alternatives) + r")\b", re.IGNORECASE)


def find_vocab_spans(text: str, vocab: Iterable[Union[VocabItem, dict]]) -> list[tuple[Span, VocabItem]]:
    """
    Find every occurrence of every vocabulary word in text.

    Matching is whole-word and case-insensitive. When one word contains
    another ("workbook" and "work") the longer word wins.

    Args:
        text: Sentence or passage
        vocab: Vocabulary entries; for duplicate words the first entry is used

    Returns:
        (span, item) pairs sorted by start
    """
    if not text:
        return []

    lookup: dict[str, VocabItem] = {}
    for raw in vocab or []:
        item = _as_item(raw)
        key = _word_key(item.word)
        if key and key not in lookup:
            lookup[key] = item

    pattern = vocab_pattern(item.word for item in lookup.values())
    if pattern is None:
        return []

    found = []
    for m in pattern.finditer(text):
        item = lookup.get(_word_key(m.group(1)))
        if item is not None and m.end() > m.start():
            found.append((Span(m.start(), m.end()), item))
    return found


def clean_pronunciation(raw: Optional[str]) -> str:
    """
    Tidy a pronunciation string.

    Repeated slashes are collapsed and outer slashes removed. A bracket
    pair wrapping further bracketed content is stripped once; a single
    [ ... ] is left as is.
    """
    if not raw:
        return ""
    s = re.sub(r"/{2,}", "/", str(raw).strip())
    s = re.sub(r"^\s*/\s*|\s*/\s*$", "", s).strip()

    if s.startswith("[") and s.endswith("]"):
        inner = s[1:-1].strip()
        if (inner.startswith("[") and inner.endswith("]")) or re.search(r"\[.+\]", inner):
            return inner
    return s


def unique_examples(examples: Iterable[Example]) -> list[Example]:
    """Drop examples whose English sentence repeats, ignoring case."""
    out = []
    seen = set()
    for ex in examples:
        key = ex.en.strip().lower()
        if key and key not in seen:
            seen.add(key)
            out.append(ex)
    return out


def normalize_vocab(items: Iterable[Union[VocabItem, dict]]) -> list[VocabItem]:
    """Clean pronunciations and keep at most two distinct examples per word."""
    out = []
    for raw in items or []:
        item = _as_item(raw)
        out.append(VocabItem(
            word=item.word,
            translation=item.translation,
            pos=item.pos,
            pronunciation=clean_pronunciation(item.pronunciation) or None,
            examples=unique_examples(item.examples)[:MAX_EXAMPLES],
        ))
    return out


def harmonize_vocab(*lists: Iterable[Union[VocabItem, dict]]) -> list[list[VocabItem]]:
    """
    Fill gaps in several vocabulary lists from each other.

    Entries are keyed by lower-cased word. Missing part of speech,
    translation and pronunciation are taken from the first list that has
    them; examples are merged without duplicates up to two per word.

    Returns:
        The lists in the same order, with filled-in copies of each entry
    """
    normalized = [normalize_vocab(items) for items in lists]

    pool: dict[str, VocabItem] = {}
    for items in normalized:
        for item in items:
            key = _word_key(item.word)
            if not key:
                continue
            cur = pool.setdefault(key, VocabItem(word=item.word))
            cur.pos = cur.pos or item.pos
            cur.translation = cur.translation or item.translation
            cur.pronunciation = cur.pronunciation or item.pronunciation
            cur.examples = unique_examples(cur.examples + item.examples)

    result = []
    for items in normalized:
        filled = []
        for item in items:
            src = pool.get(item.word.lower())
            if src is None:
                filled.append(item)
                continue
            filled.append(VocabItem(
                word=item.word,
                translation=item.translation or src.translation,
                pos=item.pos or src.pos,
                pronunciation=item.pronunciation or src.pronunciation,
                examples=unique_examples(item.examples + src.examples)[:MAX_EXAMPLES],
            ))
        result.append(filled)

    logger.debug(f"Harmonized {len(pool)} words across {len(lists)} lists")
    return result
