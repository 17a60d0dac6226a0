"""
Sentence annotator: split text, run the rule table once, and attribute
matches to the sentences they fall in.
"""

import logging
from typing import Any, Optional

from .engines import AbbreviationSplitter, SentenceSplitter, collapse_with_map, create_splitter, original_range
from .models import RoleSpan, RuleMatch, SentenceAnno
from .rules import Role, RuleRegistry, default_registry

logger = logging.getLogger(__name__)

UNCLASSIFIED = "unclassified"

# Sentence pattern ids and their difficulty levels
PATTERN_LEVELS = {
    "sv": "L1",
    "svo": "L1",
    "svc": "L2",
    "svio": "L3",
}


def classify_pattern(sentence: SentenceAnno) -> str:
    """
    Name the sentence pattern from the role spans present.

    Args:
        sentence: Annotated sentence

    Returns:
        "S + V + O", "S + V + C", "S + V", the roles found joined with " + ",
        or UNCLASSIFIED when the sentence has no role spans
    """
    has = {role.value: sentence.has_tag(role.value) for role in Role}

    if has["S"] and has["V"] and has["O"]:
        return "S + V + O"
    if has["S"] and has["V"] and has["C"]:
        return "S + V + C"
    if has["S"] and has["V"]:
        return "S + V"

    present = [role for role in ("S", "V", "O", "C") if has[role]]
    return " + ".join(present) if present else UNCLASSIFIED


def pattern_tags(spans: list[RoleSpan]) -> list[str]:
    """Sentence-level pattern id and level derived from role spans."""
    objects = sum(1 for sp in spans if Role.O.value in sp.tags)
    has_verb = any(Role.V.value in sp.tags for sp in spans)
    has_complement = any(Role.C.value in sp.tags for sp in spans)

    if objects >= 2:
        pattern = "svio"
    elif has_complement:
        pattern = "svc"
    elif objects == 1:
        pattern = "svo"
    elif has_verb:
        pattern = "sv"
    else:
        return ["L1"]
    return [pattern, PATTERN_LEVELS[pattern]]


class Annotator:
    """Annotate text sentence by sentence with role and category tags."""

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        filters: Any = None,
        splitter: Optional[SentenceSplitter] = None,
    ):
        """
        Initialize the annotator.

        Args:
            registry: Rule table to run (defaults to the built-in table)
            filters: HighlightFilters narrowing the table
            splitter: Sentence splitter (defaults to AbbreviationSplitter)
        """
        if registry is None:
            registry = default_registry()
        self.registry = registry.apply_filters(filters)
        self.splitter = splitter or AbbreviationSplitter()
        self._rules = {rule.id: rule for rule in self.registry}

    @classmethod
    def from_config(cls, config, registry: Optional[RuleRegistry] = None) -> "Annotator":
        """Build an annotator from a Config."""
        splitter = create_splitter(
            config.segmentation.engine,
            config.segmentation.abbreviations,
        )
        return cls(registry=registry, filters=config.filters, splitter=splitter)

    def annotate(self, text: str) -> list[SentenceAnno]:
        """
        Annotate every sentence of text.

        Splitting and rule matching run on the whitespace-collapsed text, but
        every offset handed out refers to the original text: a sentence's
        ``text == original[start:end]`` and span offsets are relative to the
        sentence, so checker matches over the original text line up with them.

        Args:
            text: Raw input text

        Returns:
            One SentenceAnno per sentence, in text order
        """
        collapsed, index_map = collapse_with_map(text)
        if not collapsed:
            return []

        sentences = self.splitter.segment_with_indices(collapsed)
        matches = self.registry.run(collapsed)
        logger.debug(f"{len(sentences)} sentences, {len(matches)} rule matches")

        return [
            self._annotate_sentence(text, index_map, start, end, matches)
            for _, start, end in sentences
        ]

    def _annotate_sentence(
        self,
        text: str,
        index_map: list[int],
        start: int,
        end: int,
        matches: list[RuleMatch],
    ) -> SentenceAnno:
        # start/end and match offsets are collapsed; output offsets are original
        orig_start, orig_end = original_range(index_map, start, end)
        sentence = text[orig_start:orig_end]
        by_range: dict[tuple[int, int], RoleSpan] = {}
        stages = set()
        seen_once = set()

        for m in matches:
            if m.end <= start or m.start >= end:
                continue

            rule = self._rules.get(m.rule_id)
            if rule is not None and rule.once_per_sentence:
                if rule.id in seen_once:
                    continue
                seen_once.add(rule.id)

            a = max(m.start, start)
            b = min(m.end, end)
            if a >= b:
                continue
            a, b = original_range(index_map, a, b)
            a -= orig_start
            b -= orig_start

            if m.role is None:
                stages.add(m.stage)
            tag = m.role or m.category

            span = by_range.get((a, b))
            if span is None:
                span = RoleSpan(start=a, end=b, text=sentence[a:b])
                by_range[(a, b)] = span
            if tag not in span.tags:
                span.tags.append(tag)
            if m.rule_id not in span.rule_ids:
                span.rule_ids.append(m.rule_id)

        spans = sorted(by_range.values(), key=lambda sp: (sp.start, sp.end))
        tags = pattern_tags(spans) + sorted(stages)
        return SentenceAnno(text=sentence, tags=tags, spans=spans, start=orig_start, end=orig_end)


def annotate_text(
    text: str,
    registry: Optional[RuleRegistry] = None,
    filters: Any = None,
) -> list[SentenceAnno]:
    """Annotate text with a one-off Annotator."""
    return Annotator(registry=registry, filters=filters).annotate(text)
