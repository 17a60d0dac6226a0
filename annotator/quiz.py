"""Build practice items from annotated sentences."""

import logging
from typing import Optional, Sequence

from .annotate import UNCLASSIFIED, classify_pattern
from .engines import collapse_whitespace
from .models import ChoiceItem, ClozeItem, QuizItem, ReadItem, RoleSpan, SentenceAnno

logger = logging.getLogger(__name__)

# Blank targets in order of preference: object, complement, subject
CLOZE_PRIORITY = ("O", "C", "S")

FALLBACK_PATTERNS = ("S + V", "S + V + O", "S + V + C", "S + V + IO + DO")

CHOICE_INSTRUCTION = "Choose the sentence pattern:"


def pick_cloze_target(sentence: SentenceAnno, tags: Sequence[str] = CLOZE_PRIORITY) -> Optional[RoleSpan]:
    """First span carrying the highest-priority tag, or None."""
    for tag in tags:
        spans = sentence.spans_with(tag)
        if spans:
            return spans[0]
    return None


def with_distractors(answer: str, pool: Sequence[str], max_options: int = 4) -> list[str]:
    """
    Answer first, then other observed patterns, then canonical fallbacks.

    Options are unique and capped at max_options.
    """
    options = [answer]
    for candidate in list(pool) + list(FALLBACK_PATTERNS):
        if len(options) >= max_options:
            break
        if candidate and candidate not in options:
            options.append(candidate)
    return options


class QuizBuilder:
    """
    Turn each sentence into a cloze, choice or read-aloud item.

    An object or complement is blanked when present. Otherwise a sentence
    whose pattern includes a verb becomes a pattern-identification item,
    and a sentence with only a subject falls back to blanking the subject.
    Sentences without role spans are read aloud.
    """

    def __init__(
        self,
        max_options: int = 4,
        blank: str = "_____",
        instruction: str = CHOICE_INSTRUCTION,
    ):
        """
        Initialize the builder.

        Args:
            max_options: Maximum options per choice item, answer included
            blank: Placeholder that replaces the cloze target
            instruction: Line placed above the quoted sentence of a choice item
        """
        if max_options < 2:
            raise ValueError(f"max_options must be at least 2, got {max_options}")
        self.max_options = max_options
        self.blank = blank
        self.instruction = instruction

    @classmethod
    def from_config(cls, config) -> "QuizBuilder":
        return cls(
            max_options=config.quiz.max_options,
            blank=config.quiz.blank,
            instruction=config.quiz.choice_instruction,
        )

    # Sentence text keeps the original layout; prompts are shown on one line
    def _cloze(self, sentence: SentenceAnno, target: RoleSpan) -> ClozeItem:
        prompt = sentence.text[:target.start] + self.blank + sentence.text[target.end:]
        return ClozeItem(prompt=collapse_whitespace(prompt), answer=collapse_whitespace(target.text))

    def _choice(self, sentence: SentenceAnno, pattern: str, pool: Sequence[str]) -> ChoiceItem:
        others = [p for p in pool if p != pattern]
        return ChoiceItem(
            prompt=f"{self.instruction}\n“{collapse_whitespace(sentence.text)}”",
            options=with_distractors(pattern, others, self.max_options),
            answer=pattern,
        )

    def build(self, sentences: Sequence[SentenceAnno]) -> list[QuizItem]:
        """
        Build one item per sentence, in input order.

        Args:
            sentences: Annotated sentences of one passage

        Returns:
            Quiz items, one per sentence
        """
        patterns = [classify_pattern(s) for s in sentences]
        pool = [p for p in patterns if p != UNCLASSIFIED]

        items: list[QuizItem] = []
        for sentence, pattern in zip(sentences, patterns):
            target = pick_cloze_target(sentence, CLOZE_PRIORITY[:2])
            if target is not None:
                items.append(self._cloze(sentence, target))
                continue

            if pattern != UNCLASSIFIED and "V" in pattern.split(" + "):
                items.append(self._choice(sentence, pattern, pool))
                continue

            target = pick_cloze_target(sentence)
            if target is not None:
                items.append(self._cloze(sentence, target))
            else:
                items.append(ReadItem(prompt=collapse_whitespace(sentence.text)))

        logger.debug(f"Built {len(items)} quiz items")
        return items


def build_quizzes(sentences: Sequence[SentenceAnno], max_options: int = 4) -> list[QuizItem]:
    """Build quiz items with default settings."""
    return QuizBuilder(max_options=max_options).build(sentences)
