"""Sentence annotation, grammar-point detection and checker span reconciliation."""

from .annotate import UNCLASSIFIED, Annotator, annotate_text, classify_pattern
from .checker import (
    chunk_text,
    classify_issue,
    collect_chunk_matches,
    ingest_matches,
    issue_group,
    issues_to_matches,
    shift_matches,
)
from .compose import compose, compose_sentence
from .config import Config, HighlightFilters
from .engines import create_splitter, split_sentences
from .merger import apply_replacements, highlight_ranges, merge_matches
from .models import (
    CheckerMatch,
    ChoiceItem,
    ClozeItem,
    Piece,
    ReadItem,
    RoleSpan,
    RuleMatch,
    SentenceAnno,
    Span,
    VocabItem,
)
from .quiz import build_quizzes
from .rules import RuleRegistry, default_registry
from .vocab import find_vocab_spans, harmonize_vocab, normalize_vocab

__version__ = "0.1.0"
