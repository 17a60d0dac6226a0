"""Heuristic S/V/O/C role rules.

Each rule keeps only its first hit inside a sentence: the subject is the
first pronoun or capitalised noun phrase, the verb is the first known verb,
and the object/complement is the first noun phrase right after a transitive
verb or a copula.
"""

import re

from .base import Category, GrammarRule, RegexRule, Role, Stage

COPULAS = r"is|am|are|was|were"
TRANSITIVE_VERBS = r"run|runs|like|likes|play|plays|see|sees|gave|give|gives|have|has"
_NOUN_PHRASE = r"(?:a|an|the|my|your|his|her|our|their)\s+[A-Za-z]+|[A-Za-z]+"


def build_role_rules() -> tuple[GrammarRule, ...]:
    """Build the role rule table."""
    return (
        RegexRule(
            "role-subject",
            "Subject",
            Stage.JH,
            Category.ROLE,
            "First pronoun or capitalised noun phrase of the sentence.",
            r"\b(?:I|You|He|She|We|They)\b"
            r"|\b(?:The|A|An|My|Your|His|Her|Our|Their)\s+[a-z]+\b"
            r"|\b[A-Z][a-z]+\b",
            flags=0,
            role=Role.S,
            once_per_sentence=True,
        ),
        RegexRule(
            "role-verb",
            "Verb",
            Stage.JH,
            Category.ROLE,
            "First linking or transitive verb of the sentence.",
            rf"\b(?:{COPULAS}|{TRANSITIVE_VERBS})\b",
            role=Role.V,
            once_per_sentence=True,
        ),
        RegexRule(
            "role-object",
            "Object",
            Stage.JH,
            Category.ROLE,
            "Noun phrase following a transitive verb.",
            rf"\b(?:{TRANSITIVE_VERBS})\s+({_NOUN_PHRASE})\b",
            group=1,
            role=Role.O,
            once_per_sentence=True,
        ),
        RegexRule(
            "role-complement",
            "Complement",
            Stage.JH,
            Category.ROLE,
            "Noun phrase or adjective following a copula.",
            re.compile(rf"\b(?:{COPULAS})\s+({_NOUN_PHRASE})\b", re.IGNORECASE),
            group=1,
            role=Role.C,
            once_per_sentence=True,
        ),
    )
