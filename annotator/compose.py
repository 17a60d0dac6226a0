"""Cut a sentence into pieces carrying role tags, vocabulary and errors."""

from typing import Iterable, Optional, Sequence

from .models import CheckerMatch, Piece, RoleSpan, SentenceAnno, Span, VocabItem
from .vocab import find_vocab_spans


def _first_covering(spans, a: int, b: int):
    for span, item in spans:
        if span.covers(a, b):
            return item
    return None


def compose(
    sentence_text: str,
    role_spans: Sequence[RoleSpan],
    vocab_spans: Sequence[tuple[Span, VocabItem]],
    error_spans: Sequence[tuple[Span, CheckerMatch]] = (),
) -> list[Piece]:
    """
    Partition a sentence at every span boundary.

    Each piece carries the union of the role tags covering it and at most
    one vocabulary item and one error (the first covering entry wins).
    Joining the pieces' text gives back sentence_text.

    Args:
        sentence_text: The sentence
        role_spans: Tagged spans, sentence-relative
        vocab_spans: (span, item) pairs from find_vocab_spans
        error_spans: (span, match) pairs, sentence-relative

    Returns:
        Pieces in order; empty for an empty sentence
    """
    n = len(sentence_text)
    if n == 0:
        return []

    cuts = {0, n}
    for sp in role_spans:
        cuts.update((sp.start, sp.end))
    for span, _ in list(vocab_spans) + list(error_spans):
        cuts.update((span.start, span.end))
    points = sorted(c for c in cuts if 0 <= c <= n)

    pieces = []
    for a, b in zip(points, points[1:]):
        tags: list[str] = []
        for sp in role_spans:
            if sp.start < b and sp.end > a:
                tags.extend(t for t in sp.tags if t not in tags)
        pieces.append(Piece(
            start=a,
            end=b,
            text=sentence_text[a:b],
            role_tags=tags,
            vocab=_first_covering(vocab_spans, a, b),
            error=_first_covering(error_spans, a, b),
        ))
    return pieces


def error_spans_for(
    anno: SentenceAnno,
    matches: Iterable[CheckerMatch],
) -> list[tuple[Span, CheckerMatch]]:
    """Clip text-level checker matches to a sentence and make them relative."""
    out = []
    for m in matches:
        a = max(m.offset, anno.start)
        b = min(m.end, anno.end)
        if a < b:
            out.append((Span(a - anno.start, b - anno.start), m))
    return out


def compose_sentence(
    anno: SentenceAnno,
    vocab: Iterable[VocabItem] = (),
    grammar_only: bool = False,
    matches: Optional[Iterable[CheckerMatch]] = None,
) -> list[Piece]:
    """
    Compose one annotated sentence with its vocabulary hits.

    Args:
        anno: Annotated sentence
        vocab: Vocabulary entries to look for
        grammar_only: Drop pieces that carry no tag at all; a piece tagged only
            with a grammar category such as "Tense" is kept
        matches: Merged checker matches over the original text

    Returns:
        Pieces of the sentence
    """
    errors = error_spans_for(anno, matches) if matches else []
    pieces = compose(anno.text, anno.spans, find_vocab_spans(anno.text, vocab), errors)
    if grammar_only:
        pieces = [p for p in pieces if p.role_tags]
    return pieces
