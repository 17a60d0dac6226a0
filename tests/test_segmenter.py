"""Tests for the sentence splitting engines."""

import pytest

from annotator.engines import (
    AbbreviationSplitter,
    LookbehindSplitter,
    collapse_whitespace,
    create_splitter,
    split_sentences,
)


class TestAbbreviationSplitter:
    """Tests for the abbreviation-aware splitter."""

    def test_abbreviation_does_not_split(self):
        """A title abbreviation keeps the sentence whole."""
        assert split_sentences("Dr. Lee arrived.") == ["Dr. Lee arrived."]

    def test_basic_split(self):
        """Sentences split after terminal punctuation."""
        assert split_sentences("Hello there. How are you? Fine!") == [
            "Hello there.",
            "How are you?",
            "Fine!",
        ]

    def test_punctuation_run_is_one_boundary(self):
        """Ellipses and ?! produce a single boundary."""
        assert split_sentences("Wait... What?! Really.") == ["Wait...", "What?!", "Really."]

    def test_closing_quote_absorbed(self):
        """Closing quotes stay with the sentence they end."""
        text = 'He said "Stop." Then he left.'
        assert split_sentences(text) == ['He said "Stop."', "Then he left."]

    def test_decimal_and_inner_periods(self):
        """Marks followed by a lowercase letter or digit are not boundaries."""
        assert split_sentences("Pi is 3.14 today. Use e.g. this.") == [
            "Pi is 3.14 today.",
            "Use e.g. this.",
        ]

    def test_glued_capital_splits(self):
        """A missing space before a capital still ends the sentence."""
        assert split_sentences("It rained.Then it stopped.") == ["It rained.", "Then it stopped."]
        assert split_sentences("Really?!Yes.") == ["Really?!", "Yes."]

    def test_no_terminal_punctuation(self):
        """Text without boundaries comes back as one sentence."""
        assert split_sentences("no punctuation here") == ["no punctuation here"]

    def test_empty_input(self):
        """Empty and whitespace-only input give no sentences."""
        assert split_sentences("") == []
        assert split_sentences("   \n\t ") == []

    def test_whitespace_collapsed(self):
        """Whitespace runs become single spaces."""
        assert split_sentences("One.\n\n   Two   words.") == ["One.", "Two words."]

    def test_indices_match_collapsed_text(self):
        """Returned offsets slice the collapsed text exactly."""
        text = "Mr.  Smith  came.\nHe sat down.   It was late!"
        collapsed = collapse_whitespace(text)
        segments = AbbreviationSplitter().segment_with_indices(text)

        assert len(segments) == 3
        for sentence, start, end in segments:
            assert collapsed[start:end] == sentence

    def test_round_trip_keeps_all_characters(self):
        """Joined sentences contain every non-space character once, in order."""
        text = "It works. Does it?!  Yes... \"Great.\" (Done.) Mrs. Park agrees"
        sentences = split_sentences(text)
        assert "".join(sentences).replace(" ", "") == "".join(text.split())

    def test_custom_abbreviations(self):
        """Abbreviations can be replaced."""
        splitter = AbbreviationSplitter(["etc."])
        assert splitter.split("Bring pens etc. and paper.") == ["Bring pens etc. and paper."]
        assert splitter.split("Dr. Lee arrived.") == ["Dr.", "Lee arrived."]

    def test_abbreviations_are_case_sensitive(self):
        """Only the listed spelling suppresses a boundary."""
        assert split_sentences("I saw DR. Lee.") == ["I saw DR.", "Lee."]


class TestLookbehindSplitter:
    """Tests for the simple look-behind splitter."""

    def test_splits_after_every_mark(self):
        """No abbreviation handling."""
        assert LookbehindSplitter().split("Dr. Lee arrived.") == ["Dr.", "Lee arrived."]

    def test_indices(self):
        """Offsets refer to the collapsed text."""
        text = "A cat.  A dog!\nA bird?"
        collapsed = collapse_whitespace(text)
        for sentence, start, end in LookbehindSplitter().segment_with_indices(text):
            assert collapsed[start:end] == sentence

    def test_empty_input(self):
        """Whitespace-only input gives no sentences."""
        assert LookbehindSplitter().split("  ") == []


class TestCreateSplitter:
    """Tests for engine selection."""

    def test_known_engines(self):
        """Engine names map to splitter classes."""
        assert isinstance(create_splitter("abbrev"), AbbreviationSplitter)
        assert isinstance(create_splitter("lookbehind"), LookbehindSplitter)

    def test_unknown_engine(self):
        """Unknown engine names are rejected."""
        with pytest.raises(ValueError):
            create_splitter("nltk")
