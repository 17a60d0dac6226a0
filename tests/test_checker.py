"""Tests for checker result ingestion."""

import logging

import pytest

from annotator.checker import (
    CheckerMatchPayload,
    chunk_text,
    classify_issue,
    collect_chunk_matches,
    ingest_matches,
    issue_group,
    issues_to_matches,
    shift_matches,
)
from annotator.models import CheckerMatch, TextChunk


def record(offset, length, **extra):
    data = {"offset": offset, "length": length, "message": "msg"}
    data.update(extra)
    return data


class TestIngestMatches:
    """Tests for validating raw checker records."""

    def test_valid_record(self):
        """A well-formed record becomes a CheckerMatch."""
        raw = record(
            0, 4,
            replacements=[{"value": "That"}, {"value": "This"}],
            rule={"id": "UPPERCASE_SENTENCE_START", "issueType": "typographical"},
        )
        (m,) = ingest_matches([raw])

        assert (m.offset, m.length, m.message) == (0, 4, "msg")
        assert m.replacements == ["That", "This"]
        assert m.suggestion == "That"
        assert m.rule_id == "UPPERCASE_SENTENCE_START"
        assert m.category == "TYPOS"

    def test_malformed_records_dropped(self, caplog):
        """Bad records are dropped one by one and logged."""
        records = [
            record(-1, 2),
            record(0, 0),
            {"length": 3},
            "garbage",
            record(10, 5),
            record(2, 3),
        ]
        with caplog.at_level(logging.WARNING):
            matches = ingest_matches(records, text_length=12)

        assert [(m.offset, m.length) for m in matches] == [(2, 3)]
        assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 5

    def test_no_length_check_without_text_length(self):
        """Without a text length any positive range is accepted."""
        assert len(ingest_matches([record(100, 5)])) == 1

    def test_empty(self):
        """None and empty lists give no matches."""
        assert ingest_matches(None) == []
        assert ingest_matches([]) == []

    def test_payload_defaults(self):
        """Optional fields default sensibly."""
        payload = CheckerMatchPayload.model_validate({"offset": 1, "length": 2})
        m = payload.to_match()
        assert m.message == ""
        assert m.replacements == []
        assert m.suggestion is None

    def test_null_fields_accepted(self):
        """Explicit nulls for rule, message and replacements keep the record."""
        raw = {"offset": 0, "length": 2, "message": None, "rule": None, "replacements": None}
        (m,) = ingest_matches([raw], text_length=5)

        assert (m.offset, m.length, m.message) == (0, 2, "")
        assert m.replacements == []
        assert m.rule_id is None
        assert m.category == "GRAMMAR"

    def test_null_rule_fields_accepted(self):
        """A rule object with null members still classifies."""
        raw = record(0, 2, rule={"id": None, "issueType": None, "category": None})
        (m,) = ingest_matches([raw])
        assert m.rule_id is None
        assert m.category == "GRAMMAR"


class TestClassifyIssue:
    """Tests for issue classification."""

    def test_checker_category_wins(self):
        """An explicit category id is used as is."""
        (m,) = ingest_matches([record(0, 1, rule={"id": "X", "category": {"id": "PUNCTUATION"}})])
        assert m.category == "PUNCTUATION"

    @pytest.mark.parametrize(
        "rule_id, issue_type, message, expected",
        [
            ("MORFOLOGIK_SPELLER", None, "", "TYPOS"),
            (None, "typo", "", "TYPOS"),
            (None, None, "Possible misspelling found", "TYPOS"),
            (None, "punctuation", "", "PUNCTUATION"),
            (None, None, "Missing comma", "PUNCTUATION"),
            ("AGREEMENT_SENT_START", "grammar", "Use a plural verb", "GRAMMAR"),
        ],
    )
    def test_heuristics(self, rule_id, issue_type, message, expected):
        """Rule id, issue type and description decide the category."""
        m = CheckerMatch(offset=0, length=1, message=message, rule_id=rule_id, issue_type=issue_type)
        assert classify_issue(m) == expected

    def test_issue_group(self):
        """Categories collapse into three display groups."""
        assert issue_group("TYPOS") == "spelling"
        assert issue_group("MISSPELLINGS") == "spelling"
        assert issue_group("PUNCTUATION") == "punctuation"
        assert issue_group("GRAMMAR") == "grammar"
        assert issue_group(None) == "grammar"


class TestChunking:
    """Tests for chunking and offset correction."""

    def test_short_text_single_chunk(self):
        """Text under the limit is one chunk."""
        assert chunk_text("Short text.") == [TextChunk(text="Short text.", origin_offset=0)]

    def test_split_at_sentence_end(self):
        """Chunks end after the last period in the window."""
        text = "A" * 10 + ". " + "B" * 10
        chunks = chunk_text(text, max_chars=15)

        assert chunks[0] == TextChunk(text="A" * 10 + ".", origin_offset=0)
        assert chunks[1].origin_offset == 11
        assert "".join(c.text for c in chunks) == text

    def test_prefers_paragraph_break(self):
        """A paragraph break in the second half of the window wins."""
        text = "one. two three\n\nfour five six"
        chunks = chunk_text(text, max_chars=20)
        assert chunks[0].text == "one. two three\n"
        assert "".join(c.text for c in chunks) == text

    def test_hard_cut_without_boundary(self):
        """Without a boundary the window is cut at the limit."""
        chunks = chunk_text("x" * 25, max_chars=10)
        assert [(len(c.text), c.origin_offset) for c in chunks] == [(10, 0), (10, 10), (5, 20)]

    def test_empty_text(self):
        """Empty text still yields one empty chunk."""
        assert chunk_text("") == [TextChunk(text="", origin_offset=0)]

    def test_invalid_limit(self):
        """The limit must be positive."""
        with pytest.raises(ValueError):
            chunk_text("abc", max_chars=0)

    def test_shift_matches(self):
        """Shifting copies matches with corrected offsets."""
        original = CheckerMatch(offset=2, length=3, message="m")
        (shifted,) = shift_matches([original], 40)
        assert shifted.offset == 42
        assert original.offset == 2

    def test_collect_chunk_matches(self):
        """Per-chunk results are shifted, validated and merged."""
        text = "A" * 10 + ". " + "B" * 10
        chunks = chunk_text(text, max_chars=15)
        results = [
            (chunks[0], [record(0, 3), record(1, 1), record(8, 9)]),
            (chunks[1], [record(1, 2)]),
        ]
        merged = collect_chunk_matches(results)

        assert [(m.offset, m.length, m.index) for m in merged] == [(0, 3, 0), (12, 2, 1)]


class TestIssuesToMatches:
    """Tests for converting language-model issues."""

    def test_clamp_and_drop(self):
        """Ranges are clamped and empty ones dropped."""
        issues = [
            {"charStart": -5, "charEnd": 3, "message": "a", "suggestion": "x"},
            {"charStart": 8, "charEnd": 100, "message": "b"},
            {"charStart": 4, "charEnd": 4, "message": "empty"},
            {"charEnd": 2, "message": "overlaps the first"},
        ]
        matches = issues_to_matches(issues, text_length=10)

        assert [(m.offset, m.length, m.message) for m in matches] == [(0, 2, "overlaps the first"), (8, 2, "b")]
        assert matches[1].replacements == []
        assert matches[0].issue_type == "grammar"

    def test_invalid_issue_dropped(self):
        """Non-object issues are skipped."""
        assert issues_to_matches(["nope", {"charStart": 0, "charEnd": 1}], text_length=5)[0].offset == 0

    def test_null_message(self):
        """A null message becomes empty instead of dropping the issue."""
        (m,) = issues_to_matches([{"charStart": 1, "charEnd": 3, "message": None}], text_length=5)
        assert (m.offset, m.length, m.message) == (1, 2, "")
