"""Base classes and enums for grammar rules."""

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Union

from ..models import RuleMatch


class Stage(str, Enum):
    """School stage a rule is taught at."""

    JH = "JH"  # junior high
    SH = "SH"  # senior high


class Category(str, Enum):
    """Grammar point category."""

    TENSE = "Tense"
    MODAL = "Modal"
    VOICE = "Voice"
    RELATIVE_CLAUSE = "RelativeClause"
    NOUN_CLAUSE = "NounClause"
    ADVERB_CLAUSE = "AdverbClause"
    CONDITIONAL = "Conditional"
    COMPARISON = "Comparison"
    GERUND_INFINITIVE = "Gerund/Infinitive"
    PARTICIPLE = "Participle"
    INVERSION = "Inversion"
    SUBJUNCTIVE = "Subjunctive"
    ARTICLE_QUANTIFIER = "Article/Quantifier"
    PREPOSITION = "Preposition"
    LINKING_PATTERNS = "Linking/Patterns"
    PHRASAL_VERB = "PhrasalVerb"
    ROLE = "Role"
    OTHER = "Other"


class Role(str, Enum):
    """Grammatical role of a span."""

    S = "S"  # subject
    V = "V"  # verb
    O = "O"  # object
    C = "C"  # complement


class GrammarRule(ABC):
    """Base class for all grammar rules.

    A rule scans the full text, not a single sentence; sentence attribution
    happens in the annotator.
    """

    def __init__(
        self,
        id: str,
        label: str,
        stage: Stage,
        category: Category,
        description: str = "",
        role: Optional[Role] = None,
        once_per_sentence: bool = False,
    ):
        """
        Initialize the rule.

        Args:
            id: Unique rule identifier.
            label: Human-readable name.
            stage: School stage (JH/SH).
            category: Grammar category.
            description: Longer explanation shown to learners.
            role: S/V/O/C role for role rules, None otherwise.
            once_per_sentence: Keep only the first match inside each sentence.
        """
        self.id = id
        self.label = label
        self.stage = Stage(stage)
        self.category = Category(category)
        self.description = description
        self.role = Role(role) if role is not None else None
        self.once_per_sentence = once_per_sentence

    @property
    def is_role_rule(self) -> bool:
        return self.role is not None

    @abstractmethod
    def test(self, text: str) -> list[RuleMatch]:
        """
        Find every match of this rule in text.

        Args:
            text: Full input text.

        Returns:
            Matches in text order; the same input always yields the same list.
        """
        pass

    def make_match(self, start: int, end: int, text: str, explanation: Optional[str] = None) -> RuleMatch:
        return RuleMatch(
            start=start,
            end=end,
            rule_id=self.id,
            label=self.label,
            category=self.category.value,
            stage=self.stage.value,
            match=text[start:end],
            explanation=explanation,
            role=self.role.value if self.role else None,
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(id={self.id!r}, category={self.category.value})"


class RegexRule(GrammarRule):
    """Rule backed by a regular expression, scanned globally."""

    def __init__(
        self,
        id: str,
        label: str,
        stage: Stage,
        category: Category,
        description: str,
        pattern: Union[str, re.Pattern],
        *,
        flags: int = re.IGNORECASE,
        group: Union[int, str] = 0,
        explain: Optional[Callable[[re.Match], Optional[str]]] = None,
        role: Optional[Role] = None,
        once_per_sentence: bool = False,
    ):
        """
        Initialize a regex rule.

        Args:
            pattern: Regex source or compiled pattern.
            flags: Flags used when pattern is a string.
            group: Capturing group whose span is reported (0 = whole match).
            explain: Builds an explanation from the match object.
        """
        super().__init__(id, label, stage, category, description, role, once_per_sentence)
        self.pattern = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)
        self.group = group
        self.explain = explain

    def test(self, text: str) -> list[RuleMatch]:
        out = []
        pos = 0
        n = len(text)
        while pos <= n:
            m = self.pattern.search(text, pos)
            if m is None:
                break

            start, end = m.span(self.group)
            if start != -1 and end > start:
                explanation = self.explain(m) if self.explain else None
                out.append(self.make_match(start, end, text, explanation))

            # Zero-width matches must still move the scan forward
            pos = m.end() if m.end() > m.start() else m.end() + 1
        return out
