"""Data models for the annotation engine."""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, List, Optional, Union


@dataclass(frozen=True)
class Span:
    """Right-open interval [start, end) over a text."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid span: [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def covers(self, a: int, b: int) -> bool:
        """True if this span intersects the piece [a, b)."""
        return self.start < b and self.end > a

    def shift(self, delta: int) -> "Span":
        return Span(self.start + delta, self.end + delta)


@dataclass
class RuleMatch:
    """One occurrence of a rule pattern, with absolute offsets."""

    start: int
    end: int
    rule_id: str
    label: str
    category: str
    stage: str
    match: str
    explanation: Optional[str] = None
    role: Optional[str] = None  # S/V/O/C for role rules

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "rule_id": self.rule_id,
            "label": self.label,
            "category": self.category,
            "stage": self.stage,
            "start": self.start,
            "end": self.end,
            "match": self.match,
            "explanation": self.explanation,
            "role": self.role,
        }


@dataclass
class RoleSpan:
    """A tagged substring of a sentence (sentence-relative offsets)."""

    start: int
    end: int
    text: str
    tags: List[str] = field(default_factory=list)
    rule_ids: List[str] = field(default_factory=list)

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "tags": list(self.tags),
            "rule_ids": list(self.rule_ids),
        }


@dataclass
class SentenceAnno:
    """Annotated sentence: text, sentence-level tags and tagged spans."""

    text: str
    tags: List[str] = field(default_factory=list)
    spans: List[RoleSpan] = field(default_factory=list)
    start: int = 0  # offsets in the original input; text == input[start:end]
    end: int = 0

    def spans_with(self, tag: str) -> List[RoleSpan]:
        return [sp for sp in self.spans if tag in sp.tags]

    def has_tag(self, tag: str) -> bool:
        return any(tag in sp.tags for sp in self.spans)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "tags": list(self.tags),
            "start": self.start,
            "end": self.end,
            "spans": [sp.to_dict() for sp in self.spans],
        }


@dataclass
class CheckerMatch:
    """An error reported by an external grammar checker."""

    offset: int
    length: int
    message: str
    replacements: List[str] = field(default_factory=list)
    rule_id: Optional[str] = None
    issue_type: Optional[str] = None
    category: Optional[str] = None
    index: Optional[int] = None  # assigned by merge_matches

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def span(self) -> Span:
        return Span(self.offset, self.end)

    @property
    def suggestion(self) -> Optional[str]:
        return self.replacements[0] if self.replacements else None

    def with_index(self, index: int) -> "CheckerMatch":
        return replace(self, replacements=list(self.replacements), index=index)

    def shifted(self, delta: int) -> "CheckerMatch":
        return replace(self, replacements=list(self.replacements), offset=self.offset + delta)

    def to_dict(self) -> dict:
        """Convert to dictionary for the rendering side."""
        return {
            "index": self.index,
            "offset": self.offset,
            "length": self.length,
            "message": self.message,
            "suggestion": self.suggestion,
            "replacements": list(self.replacements),
            "rule_id": self.rule_id,
            "issue_type": self.issue_type,
            "category": self.category,
        }


@dataclass
class Example:
    """Example sentence for a vocabulary word."""

    en: str
    zh: Optional[str] = None


@dataclass
class VocabItem:
    """Vocabulary entry supplied with a unit of content."""

    word: str
    translation: Optional[str] = None
    pos: Optional[str] = None
    pronunciation: Optional[str] = None
    examples: List[Example] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "VocabItem":
        """Create a VocabItem from a content record.

        Content files store the pronunciation under ``kk``; both keys are accepted.
        """
        examples = []
        for ex in data.get("examples") or []:
            if isinstance(ex, dict):
                en = str(ex.get("en") or "").strip()
                if en:
                    zh = str(ex.get("zh") or "").strip() or None
                    examples.append(Example(en=en, zh=zh))
            elif isinstance(ex, str) and ex.strip():
                examples.append(Example(en=ex.strip()))

        pronunciation = data.get("pronunciation", data.get("kk"))
        return cls(
            word=str(data.get("word") or "").strip(),
            translation=data.get("translation") or None,
            pos=data.get("pos") or None,
            pronunciation=pronunciation or None,
            examples=examples,
        )

    def to_dict(self) -> dict:
        return {
            "word": self.word,
            "translation": self.translation,
            "pos": self.pos,
            "pronunciation": self.pronunciation,
            "examples": [{"en": e.en, "zh": e.zh} for e in self.examples],
        }


@dataclass
class Piece:
    """Minimal non-overlapping slice of a sentence with its covering metadata."""

    start: int
    end: int
    text: str
    role_tags: List[str] = field(default_factory=list)
    vocab: Optional[VocabItem] = None
    error: Optional[CheckerMatch] = None

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "role_tags": list(self.role_tags),
            "vocab": self.vocab.word if self.vocab else None,
            "error": self.error.index if self.error else None,
        }


@dataclass
class ClozeItem:
    """Fill-in-the-blank item."""

    type: ClassVar[str] = "cloze"

    prompt: str
    answer: str

    def to_dict(self) -> dict:
        return {"type": self.type, "prompt": self.prompt, "answer": self.answer}


@dataclass
class ChoiceItem:
    """Multiple-choice sentence pattern item."""

    type: ClassVar[str] = "choice"

    prompt: str
    options: List[str]
    answer: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "prompt": self.prompt,
            "options": list(self.options),
            "answer": self.answer,
        }


@dataclass
class ReadItem:
    """Read-aloud item without an answer key."""

    type: ClassVar[str] = "read"

    prompt: str

    def to_dict(self) -> dict:
        return {"type": self.type, "prompt": self.prompt}


QuizItem = Union[ClozeItem, ChoiceItem, ReadItem]


@dataclass
class LearningGoal:
    """A rule observed in a text, with its occurrence count."""

    rule_id: str
    label: str
    category: str
    stage: str
    count: int


@dataclass
class GrammarSummary:
    """All rule matches in a text, grouped three ways."""

    text_length: int
    total: int
    matches: List[RuleMatch]
    by_rule: Dict[str, List[RuleMatch]]
    by_category: Dict[str, List[RuleMatch]]
    by_stage: Dict[str, List[RuleMatch]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text_length": self.text_length,
            "total": self.total,
            "by_rule": {k: len(v) for k, v in self.by_rule.items()},
            "by_category": {k: len(v) for k, v in self.by_category.items()},
            "by_stage": {k: len(v) for k, v in self.by_stage.items()},
        }


@dataclass
class TextChunk:
    """A slice of a longer text sent to the checker on its own."""

    text: str
    origin_offset: int
