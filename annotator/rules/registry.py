"""Read-only rule table with filtering and per-rule failure isolation."""

import logging
from typing import Any, Iterable, Iterator, Optional

import pandas as pd

from ..models import GrammarSummary, LearningGoal, RuleMatch
from .base import Category, GrammarRule, Stage
from .grammar_rules import build_grammar_rules
from .role_rules import build_role_rules

logger = logging.getLogger(__name__)


def extract_all_text(unit: Any) -> str:
    """Collect every string inside a unit-like object, one per line.

    Args:
        unit: A string, or nested dicts/lists of content.

    Returns:
        The visible text joined with newlines ("" for empty input).
    """
    if not unit:
        return ""
    if isinstance(unit, str):
        return unit

    acc = []

    def visit(value: Any) -> None:
        if isinstance(value, str):
            acc.append(value)
        elif isinstance(value, (list, tuple)):
            for item in value:
                visit(item)
        elif isinstance(value, dict):
            for item in value.values():
                visit(item)

    visit(unit)
    return "\n".join(acc)


def _group(matches: list[RuleMatch], key) -> dict[str, list[RuleMatch]]:
    groups: dict[str, list[RuleMatch]] = {}
    for m in matches:
        groups.setdefault(key(m), []).append(m)
    return groups


class RuleRegistry:
    """
    Immutable table of grammar rules.

    The table is fixed at construction. Filtering returns a new registry,
    so a registry can be shared between concurrent callers.
    """

    def __init__(self, rules: Iterable[GrammarRule]):
        """
        Initialize the registry.

        Args:
            rules: Rules in the order they should run.

        Raises:
            ValueError: If two rules share an id.
        """
        self._rules: tuple[GrammarRule, ...] = tuple(rules)
        seen = set()
        for rule in self._rules:
            if rule.id in seen:
                raise ValueError(f"Duplicate rule id: {rule.id}")
            seen.add(rule.id)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[GrammarRule]:
        return iter(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return self.get(rule_id) is not None

    @property
    def ids(self) -> list[str]:
        return [rule.id for rule in self._rules]

    @property
    def role_rules(self) -> list[GrammarRule]:
        return [rule for rule in self._rules if rule.is_role_rule]

    def get(self, rule_id: str) -> Optional[GrammarRule]:
        """Look up a rule by id."""
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def select(
        self,
        stages: Optional[Iterable[Stage]] = None,
        categories: Optional[Iterable[Category]] = None,
        query: str = "",
        include_roles: bool = True,
    ) -> "RuleRegistry":
        """
        Narrow the table.

        Args:
            stages: Stages to keep (None = all).
            categories: Categories to keep (None or empty = all).
            query: Case-insensitive substring of rule id or label.
            include_roles: Keep S/V/O/C rules regardless of the other filters.

        Returns:
            A new registry with the surviving rules in their original order.
        """
        stage_set = {Stage(s) for s in stages} if stages is not None else None
        category_set = {Category(c) for c in categories} if categories else None
        needle = (query or "").strip().lower()

        kept = []
        for rule in self._rules:
            if rule.is_role_rule:
                if include_roles:
                    kept.append(rule)
                continue
            if stage_set is not None and rule.stage not in stage_set:
                continue
            if category_set is not None and rule.category not in category_set:
                continue
            if needle and needle not in rule.id.lower() and needle not in rule.label.lower():
                continue
            kept.append(rule)
        return RuleRegistry(kept)

    def apply_filters(self, filters: Any) -> "RuleRegistry":
        """Narrow the table with a HighlightFilters-like object."""
        if filters is None:
            return self
        return self.select(
            stages=getattr(filters, "stages", None),
            categories=getattr(filters, "categories", None),
            query=getattr(filters, "query", ""),
            include_roles=getattr(filters, "include_roles", True),
        )

    def run(self, text: str) -> list[RuleMatch]:
        """
        Run every rule over the full text.

        A rule that raises contributes no matches; the failure is logged
        and the remaining rules still run.

        Args:
            text: Full input text.

        Returns:
            Matches grouped by rule in table order, each group in text order.
        """
        if not text:
            return []

        matches = []
        for rule in self._rules:
            try:
                found = rule.test(text)
            except Exception:
                logger.exception(f"Rule {rule.id} failed; skipping it")
                continue
            matches.extend(found)
        return matches

    def summarize(self, unit_or_text: Any) -> GrammarSummary:
        """Detect grammar points in a text or unit-like object."""
        text = extract_all_text(unit_or_text)
        matches = self.run(text)
        return GrammarSummary(
            text_length=len(text),
            total=len(matches),
            matches=matches,
            by_rule=_group(matches, lambda m: m.rule_id),
            by_category=_group(matches, lambda m: m.category),
            by_stage=_group(matches, lambda m: m.stage),
        )

    def learning_goals(self, unit_or_text: Any, top_n: int = 6) -> list[LearningGoal]:
        """
        Derive learning goals from the rules a text exercises.

        Role rules are not goals and are left out.

        Args:
            unit_or_text: Text or unit-like object.
            top_n: Maximum number of goals.

        Returns:
            Goals sorted by count (descending), then label.
        """
        matches = [m for m in self.summarize(unit_or_text).matches if m.role is None]
        if not matches:
            return []

        df = pd.DataFrame([m.to_dict() for m in matches])
        counts = (
            df.groupby(["rule_id", "label", "category", "stage"], sort=False)
            .size()
            .reset_index(name="occurrences")
            .sort_values(["occurrences", "label"], ascending=[False, True], kind="mergesort")
            .head(top_n)
        )
        return [
            LearningGoal(
                rule_id=row.rule_id,
                label=row.label,
                category=row.category,
                stage=row.stage,
                count=int(row.occurrences),
            )
            for row in counts.itertuples(index=False)
        ]

    def __repr__(self) -> str:
        """String representation."""
        return f"RuleRegistry(rules={len(self._rules)})"


def default_registry() -> RuleRegistry:
    """Build the built-in table: grammar point rules followed by role rules."""
    return RuleRegistry(build_grammar_rules() + build_role_rules())
