"""Grammar rules and the rule registry."""

from .base import Category, GrammarRule, RegexRule, Role, Stage
from .grammar_rules import build_grammar_rules
from .role_rules import build_role_rules
from .registry import RuleRegistry, default_registry, extract_all_text

__all__ = [
    "Category",
    "GrammarRule",
    "RegexRule",
    "Role",
    "Stage",
    "RuleRegistry",
    "build_grammar_rules",
    "build_role_rules",
    "default_registry",
    "extract_all_text",
]
