"""Tests for the sentence annotator."""

from annotator.annotate import UNCLASSIFIED, Annotator, annotate_text, classify_pattern
from annotator.config import Config, HighlightFilters
from annotator.engines import LookbehindSplitter
from annotator.models import RoleSpan, SentenceAnno
from annotator.rules import Category, RegexRule, Role, RuleRegistry, Stage


def role_rule(rule_id, pattern, role, once=False):
    return RegexRule(
        rule_id, rule_id, Stage.JH, Category.ROLE, "", pattern,
        role=role, once_per_sentence=once,
    )


def category_rule(rule_id, pattern, category=Category.OTHER, stage=Stage.JH):
    return RegexRule(rule_id, rule_id, stage, category, "", pattern)


def toy_registry():
    """Tags "cat" as subject and "sat" as verb."""
    return RuleRegistry([
        role_rule("toy-subject", r"\bcat\b", Role.S),
        role_rule("toy-verb", r"\bsat\b", Role.V),
    ])


class TestAnnotator:
    """Tests for sentence annotation."""

    def test_toy_scenario(self):
        """Subject and verb spans land on "cat" and "sat"."""
        (anno,) = annotate_text("The cat sat on the mat.", registry=toy_registry())

        assert anno.text == "The cat sat on the mat."
        assert [(sp.start, sp.end, sp.text, sp.tags) for sp in anno.spans] == [
            (4, 7, "cat", ["S"]),
            (8, 11, "sat", ["V"]),
        ]
        assert anno.tags == ["sv", "L1"]
        assert classify_pattern(anno) == "S + V"

    def test_sentence_offsets(self):
        """Sentence offsets slice the original text, whitespace runs included."""
        text = "The  cat sat.\nThe cat sat."
        annos = annotate_text(text, registry=toy_registry())

        assert [(a.start, a.end) for a in annos] == [(0, 13), (14, 26)]
        for anno in annos:
            assert text[anno.start:anno.end] == anno.text
            assert [sp.text for sp in anno.spans] == ["cat", "sat"]
            for sp in anno.spans:
                assert anno.text[sp.start:sp.end] == sp.text

    def test_offsets_after_paragraph_break(self):
        """Blank lines and leading space do not shift later offsets."""
        text = "  Hello there.\n\nThe   cat\nsat."
        first, second = annotate_text(text, registry=toy_registry())

        assert (first.start, first.end, first.text) == (2, 14, "Hello there.")
        assert (second.start, second.end) == (16, 30)
        assert second.text == "The   cat\nsat."
        cat, sat = second.spans
        assert text[second.start + cat.start:second.start + cat.end] == "cat"
        assert text[second.start + sat.start:second.start + sat.end] == "sat"

    def test_match_across_whitespace_run(self):
        """A rule hit spanning a collapsed run covers the original run."""
        registry = RuleRegistry([category_rule("pair", r"cat sat")])
        (anno,) = annotate_text("A cat \n sat.", registry=registry)

        (span,) = anno.spans
        assert (span.start, span.end, span.text) == (2, 11, "cat \n sat")

    def test_match_clipped_to_sentences(self):
        """A match spanning a boundary is split between sentences."""
        registry = RuleRegistry([category_rule("cross", r"end\. Next")])
        first, second = annotate_text("The end. Next one.", registry=registry)

        assert [(sp.start, sp.end, sp.text) for sp in first.spans] == [(4, 8, "end.")]
        assert [(sp.start, sp.end, sp.text) for sp in second.spans] == [(0, 4, "Next")]
        assert first.spans[0].tags == ["Other"]

    def test_identical_ranges_merge(self):
        """Rules hitting the same range share one span."""
        registry = RuleRegistry([
            category_rule("tense-x", r"\bcat\b", Category.TENSE),
            role_rule("subj", r"\bcat\b", Role.S),
        ])
        (anno,) = annotate_text("A cat.", registry=registry)

        (span,) = anno.spans
        assert span.tags == ["Tense", "S"]
        assert span.rule_ids == ["tense-x", "subj"]

    def test_once_per_sentence(self):
        """Role rules keep their first hit in each sentence."""
        registry = RuleRegistry([role_rule("subj", r"\bcat\b", Role.S, once=True)])
        first, second = annotate_text("cat cat. cat.", registry=registry)

        assert [(sp.start, sp.end) for sp in first.spans] == [(0, 3)]
        assert [(sp.start, sp.end) for sp in second.spans] == [(0, 3)]

    def test_two_objects_tag_svio(self):
        """Two object spans mark a ditransitive sentence."""
        registry = RuleRegistry([
            role_rule("s", r"\bShe\b", Role.S),
            role_rule("v", r"\bgave\b", Role.V),
            role_rule("o", r"\bme\b|\ba book\b", Role.O),
        ])
        (anno,) = annotate_text("She gave me a book.", registry=registry)

        assert anno.tags == ["svio", "L3"]
        assert len(anno.spans_with("O")) == 2

    def test_stage_tags(self):
        """Stages of category rules become sentence tags."""
        registry = RuleRegistry([
            category_rule("sh", r"\bwere\b", stage=Stage.SH),
            category_rule("jh", r"\bIf\b"),
        ])
        (anno,) = annotate_text("If I were you.", registry=registry)
        assert anno.tags == ["L1", "JH", "SH"]

    def test_default_registry_roles(self):
        """The built-in role rules tag common patterns."""
        (anno,) = annotate_text("He is tall.")
        assert classify_pattern(anno) == "S + V + C"
        assert anno.tags[:2] == ["svc", "L2"]

        (anno,) = annotate_text("I like apples.")
        assert classify_pattern(anno) == "S + V + O"
        assert [sp.text for sp in anno.spans_with("O")] == ["apples"]

    def test_filters_narrow_rules(self):
        """Only the filtered categories (plus roles) appear."""
        filters = HighlightFilters(categories=["Comparison"])
        (anno,) = annotate_text("She is taller than me.", filters=filters)

        tags = {tag for sp in anno.spans for tag in sp.tags}
        assert "Comparison" in tags
        assert tags <= {"Comparison", "S", "V", "O", "C"}

    def test_degenerate_input(self):
        """Empty input yields no sentences."""
        assert annotate_text("") == []
        assert annotate_text("   ") == []
        assert Annotator(registry=RuleRegistry([])).annotate("No rules here.")[0].spans == []

    def test_custom_splitter(self):
        """The splitter can be swapped."""
        annotator = Annotator(registry=toy_registry(), splitter=LookbehindSplitter())
        assert [a.text for a in annotator.annotate("Dr. cat sat.")] == ["Dr.", "cat sat."]

    def test_from_config(self):
        """Config selects the engine and filters."""
        config = Config()
        config.segmentation.engine = "lookbehind"
        annotator = Annotator.from_config(config, registry=toy_registry())

        assert isinstance(annotator.splitter, LookbehindSplitter)
        assert len(annotator.registry) == 2


class TestClassifyPattern:
    """Tests for sentence pattern classification."""

    def make(self, *tags):
        spans = [RoleSpan(start=i, end=i + 1, text="x", tags=[t]) for i, t in enumerate(tags)]
        return SentenceAnno(text="x" * len(tags), spans=spans)

    def test_canonical_patterns(self):
        """S+V with O or C gets a canonical label."""
        assert classify_pattern(self.make("S", "V", "O")) == "S + V + O"
        assert classify_pattern(self.make("S", "V", "C")) == "S + V + C"
        assert classify_pattern(self.make("S", "V")) == "S + V"

    def test_partial_patterns(self):
        """Other role sets are joined in S/V/O/C order."""
        assert classify_pattern(self.make("O", "V")) == "V + O"
        assert classify_pattern(self.make("S")) == "S"

    def test_unclassified(self):
        """No role spans means no pattern."""
        assert classify_pattern(SentenceAnno(text="Hello.")) == UNCLASSIFIED
