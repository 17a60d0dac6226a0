"""
Checker result ingestion.

Raw records from a grammar checker (or a language model asked to act as
one) are validated here, one record at a time. Bad records are dropped and
logged so that a single malformed item never blanks the whole rendering.
"""

import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .merger import merge_matches
from .models import CheckerMatch, TextChunk

logger = logging.getLogger(__name__)

# Issue category -> display group
ISSUE_GROUPS = {
    "TYPOS": "spelling",
    "MISSPELLINGS": "spelling",
    "PUNCTUATION": "punctuation",
}


class ReplacementPayload(BaseModel):
    """One suggested replacement."""

    value: str


class RuleCategoryPayload(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None


class RulePayload(BaseModel):
    """Checker rule metadata attached to a match."""

    id: Optional[str] = None
    description: Optional[str] = None
    issueType: Optional[str] = None
    category: Optional[RuleCategoryPayload] = None


class CheckerMatchPayload(BaseModel):
    """A single match record as sent by the checker."""

    offset: int = Field(..., ge=0, description="Character offset in the unchunked text")
    length: int = Field(..., gt=0, description="Length of the flagged range")
    message: str = Field(default="", description="Error message")
    replacements: list[ReplacementPayload] = Field(default_factory=list)
    rule: Optional[RulePayload] = Field(default=None, description="Rule metadata, if sent")

    @field_validator("message", mode="before")
    @classmethod
    def null_message(cls, v):
        """Treat an explicit null message as empty."""
        return "" if v is None else v

    @field_validator("replacements", mode="before")
    @classmethod
    def null_replacements(cls, v):
        """Treat null replacements as none."""
        return [] if v is None else v

    def to_match(self) -> CheckerMatch:
        rule = self.rule or RulePayload()
        match = CheckerMatch(
            offset=self.offset,
            length=self.length,
            message=self.message,
            replacements=[r.value for r in self.replacements],
            rule_id=rule.id,
            issue_type=rule.issueType,
        )
        match.category = classify_issue(match, self.rule)
        return match


class IssuePayload(BaseModel):
    """An issue record produced by a language model."""

    charStart: Optional[int] = None
    charEnd: Optional[int] = None
    message: Optional[str] = ""
    suggestion: Optional[str] = None
    ruleId: Optional[str] = None
    issueType: Optional[str] = None


def classify_issue(match: CheckerMatch, rule: Optional[RulePayload] = None) -> str:
    """
    Guess the issue category of a match.

    An explicit category id from the checker wins. Otherwise the issue type,
    rule id and rule description are searched for spelling and punctuation
    hints; everything else is grammar.

    Returns:
        "TYPOS", "MISSPELLINGS", "PUNCTUATION", "GRAMMAR" or the checker's id
    """
    if rule is not None and rule.category is not None and rule.category.id:
        return rule.category.id

    issue = (match.issue_type or "").upper()
    rule_id = (match.rule_id or "").upper()
    desc = ((rule.description if rule is not None else None) or match.message or "").upper()

    if "TYPO" in issue or "SPELL" in rule_id or "SPELL" in desc:
        return "TYPOS"
    if "MISSPELL" in desc:
        return "MISSPELLINGS"
    if "PUNCT" in issue or "PUNCT" in rule_id or "PUNCT" in desc:
        return "PUNCTUATION"
    if "COMMA" in desc or "PERIOD" in desc or "QUOTE" in desc:
        return "PUNCTUATION"
    return "GRAMMAR"


def issue_group(category: Optional[str]) -> str:
    """Map an issue category to spelling, punctuation or grammar."""
    return ISSUE_GROUPS.get((category or "").upper(), "grammar")


def ingest_matches(records: Iterable[Any], text_length: Optional[int] = None) -> list[CheckerMatch]:
    """
    Validate raw checker records.

    Args:
        records: JSON-shaped match records
        text_length: Length of the checked text; matches ending past it are dropped

    Returns:
        Valid matches in input order (not merged)
    """
    matches = []
    for i, record in enumerate(records or []):
        try:
            payload = CheckerMatchPayload.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Dropping checker record {i}: {e.error_count()} validation errors")
            continue

        if text_length is not None and payload.offset + payload.length > text_length:
            logger.warning(
                f"Dropping checker record {i}: range "
                f"[{payload.offset}, {payload.offset + payload.length}) exceeds text length {text_length}"
            )
            continue

        matches.append(payload.to_match())
    return matches


def chunk_text(text: str, max_chars: int = 380) -> list[TextChunk]:
    """
    Split text into chunks small enough for the checker.

    A chunk ends at the last paragraph break in the window when that lies in
    its second half; otherwise at the last ". " or newline, whichever is
    later. Without any boundary the window is cut at max_chars.

    Args:
        text: Full text
        max_chars: Maximum characters per chunk

    Returns:
        Chunks in order with their offsets into text
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    chunks = []
    i = 0
    n = len(text)
    while i < n:
        end = min(i + max_chars, n)
        if end < n:
            window = text[i:end]
            pivot = window.rfind("\n\n")
            if pivot < max_chars * 0.5:
                pivot = max(pivot, window.rfind(". "), window.rfind("\n"))
            if pivot > 0:
                end = i + pivot + 1
        chunks.append(TextChunk(text=text[i:end], origin_offset=i))
        i = end

    if not chunks:
        chunks.append(TextChunk(text=text, origin_offset=0))
    return chunks


def shift_matches(matches: Iterable[CheckerMatch], origin_offset: int) -> list[CheckerMatch]:
    """Move chunk-relative matches into the offset space of the full text."""
    return [m.shifted(origin_offset) for m in matches]


def collect_chunk_matches(
    chunk_results: Iterable[tuple[TextChunk, Iterable[Any]]],
) -> list[CheckerMatch]:
    """
    Combine per-chunk checker output into one merged list.

    Args:
        chunk_results: (chunk, raw records) pairs; record offsets are relative
            to their chunk

    Returns:
        Merged matches over the full text
    """
    combined = []
    for chunk, records in chunk_results:
        found = ingest_matches(records, text_length=len(chunk.text))
        combined.extend(shift_matches(found, chunk.origin_offset))
    return merge_matches(combined)


def issues_to_matches(issues: Iterable[Any], text_length: int) -> list[CheckerMatch]:
    """
    Convert language-model issues to merged checker matches.

    Ranges are clamped into [0, text_length]; empty ranges are dropped.
    """
    matches = []
    for i, record in enumerate(issues or []):
        try:
            issue = IssuePayload.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Dropping issue {i}: {e.error_count()} validation errors")
            continue

        start = max(0, min(issue.charStart or 0, text_length))
        end = max(0, min(issue.charEnd or 0, text_length))
        if end <= start:
            continue

        match = CheckerMatch(
            offset=start,
            length=end - start,
            message=issue.message or "",
            replacements=[issue.suggestion] if issue.suggestion else [],
            rule_id=issue.ruleId,
            issue_type=issue.issueType or "grammar",
        )
        match.category = classify_issue(match)
        matches.append(match)
    return merge_matches(matches)
