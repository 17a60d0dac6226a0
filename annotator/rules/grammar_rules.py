"""Built-in grammar point rules covering junior and senior high syllabi."""

from .base import Category, GrammarRule, RegexRule, Stage

# Past-participle endings shared by perfect, passive and conditional rules
_VPP = r"[a-z]+(?:ed|en|wn|lt|pt|nt)"


def build_grammar_rules() -> tuple[GrammarRule, ...]:
    """Build the category rule table.

    Returns:
        Rules in display order; a fresh tuple on every call.
    """
    return (
        # --- Tense ---
        RegexRule(
            "tense-present-simple-3s",
            "Present simple, third person -s",
            Stage.JH,
            Category.TENSE,
            "Third-person singular subject + verb with -s/-es.",
            r"\b(he|she|it|[A-Z][a-z]+)\s+(?:never\s+|often\s+|usually\s+|sometimes\s+)?\b([a-z]+?)(?:s|es)\b(?!\s+to)",
            explain=lambda m: f'Third-person singular verb: "{m.group(2)}+s/es"',
        ),
        RegexRule(
            "tense-present-continuous",
            "Present continuous be V-ing",
            Stage.JH,
            Category.TENSE,
            "am/is/are + V-ing.",
            r"\b(am|is|are)\s+[a-z]+ing\b",
        ),
        RegexRule(
            "tense-past-simple",
            "Past simple (-ed / irregular)",
            Stage.JH,
            Category.TENSE,
            "Past tense verbs, regular and common irregular.",
            r"\b(went|saw|took|made|had|did|said|got|came|knew|thought|told|gave|found|became|left"
            r"|worked|played|watched|visited|studied|lived|liked|wanted|helped|called|used)\b",
        ),
        RegexRule(
            "tense-present-perfect",
            "Present perfect have/has + Vpp",
            Stage.JH,
            Category.TENSE,
            "have/has + past participle, often with since/for/ever/never/yet/already.",
            rf"\b(?:have|has)\s+(?:already\s+|ever\s+|never\s+)?\b{_VPP}\b(?:\s+(?:since|for)\b[\w\s,.-]+)?",
        ),
        RegexRule(
            "tense-future-will",
            "Future will + base verb",
            Stage.JH,
            Category.TENSE,
            "will + base form.",
            r"\bwill\s+[a-z]+\b",
        ),
        RegexRule(
            "tense-future-be-going-to",
            "be going to + base verb",
            Stage.JH,
            Category.TENSE,
            "am/is/are going to + base form.",
            r"\b(am|is|are)\s+going\s+to\s+[a-z]+\b",
        ),
        # --- Modal ---
        RegexRule(
            "modal-ability-permission",
            "can/could/may/might/should/must/have to",
            Stage.JH,
            Category.MODAL,
            "Modal verbs for ability, possibility, advice and necessity.",
            r"\b(can|could|may|might|should|must|have\s+to|has\s+to|had\s+to)\s+[a-z]+\b",
        ),
        # --- Voice ---
        RegexRule(
            "voice-passive",
            "Passive be + Vpp (+ by ...)",
            Stage.JH,
            Category.VOICE,
            "be + past participle, optionally followed by a by-phrase.",
            rf"\b(am|is|are|was|were|be|been|being)\s+{_VPP}\b(?:\s+by\b[\w\s,.-]+)?",
        ),
        # --- Relative clauses ---
        RegexRule(
            "rc-defining-who-which-that",
            "Defining who/which/that",
            Stage.JH,
            Category.RELATIVE_CLAUSE,
            "Defining relative clause introduced by who/which/that.",
            r"\b(who|which|that)\b\s+[a-z]+",
        ),
        RegexRule(
            "rc-nonrestrictive",
            "Non-defining (comma) who/which",
            Stage.SH,
            Category.RELATIVE_CLAUSE,
            "Comma + who/which non-defining relative clause.",
            r",\s*(who|which)\b[\s\S]*?,",
        ),
        RegexRule(
            "rc-whose-whom-where-when",
            "whose/whom/where/when",
            Stage.SH,
            Category.RELATIVE_CLAUSE,
            "Advanced relative pronouns and adverbs.",
            r"\b(whose|whom|where|when)\b\s+[a-z]+",
        ),
        # --- Noun / adverb clauses ---
        RegexRule(
            "nc-that-clause",
            "that noun clause",
            Stage.JH,
            Category.NOUN_CLAUSE,
            "Verb followed by a that-clause.",
            r"\b(say|think|believe|know|hope|suggest|insist|argue|claim|report|explain|announce"
            r"|notice|mean|agree|admit|decide|doubt)\b\s+that\b[\s\S]+?[.!?]",
        ),
        RegexRule(
            "ac-adv-subordinators",
            "Adverb clause when/while/because/if/although/since",
            Stage.JH,
            Category.ADVERB_CLAUSE,
            "Adverb clause introduced by a common subordinator.",
            r"\b(when|while|because|if|although|though|since|before|after|until)\b\s+[\w\s,'-]+?[,!?.]?",
        ),
        # --- Conditionals ---
        RegexRule(
            "cond-type0",
            "Zero conditional: If + present, present",
            Stage.JH,
            Category.CONDITIONAL,
            "General truths.",
            r"\bif\b\s+[^,.!?]+?\b(?:,\s*)?(?:[a-z]+s\b|[a-z]+\b)\s?(?:\.|,|;)",
        ),
        RegexRule(
            "cond-type1",
            "First conditional: If + present, will",
            Stage.JH,
            Category.CONDITIONAL,
            "Possible future conditions.",
            r"\bif\b\s+[^,.!?]+?\b(?:,\s*)?\bwill\s+[a-z]+\b",
        ),
        RegexRule(
            "cond-type2",
            "Second conditional: If + past, would",
            Stage.SH,
            Category.CONDITIONAL,
            "Hypothesis contrary to present fact.",
            r"\bif\b\s+[^,.!?]+?\b(?:,\s*)?\bwould\s+[a-z]+\b",
        ),
        RegexRule(
            "cond-type3",
            "Third conditional: If + had Vpp, would have Vpp",
            Stage.SH,
            Category.CONDITIONAL,
            "Hypothesis contrary to past fact.",
            rf"\bif\b\s+[^,.!?]+?\bhad\s+{_VPP}\b[^,.!?]*\bwould\s+have\s+{_VPP}\b",
        ),
        # --- Comparison ---
        RegexRule(
            "cmp-er-than",
            "Comparative -er than",
            Stage.JH,
            Category.COMPARISON,
            "Comparative adjective + than.",
            r"\b[a-z]{3,}er\s+than\b",
        ),
        RegexRule(
            "cmp-more-than",
            "more ... than",
            Stage.JH,
            Category.COMPARISON,
            "Comparative of long adjectives.",
            r"\bmore\s+[a-z-]+\s+than\b",
        ),
        RegexRule(
            "cmp-as-as",
            "as ... as",
            Stage.JH,
            Category.COMPARISON,
            "Equal comparison.",
            r"\bas\s+[^\s]+\s+as\b",
        ),
        RegexRule(
            "cmp-superlative",
            "Superlative the -est / the most",
            Stage.JH,
            Category.COMPARISON,
            "the + superlative adjective.",
            r"\bthe\s+(?:most\s+[a-z-]+|[a-z]{3,}est)\b",
        ),
        # --- Gerund / infinitive ---
        RegexRule(
            "gi-enjoy-like-ing",
            "Verbs taking V-ing (enjoy/avoid/finish/practice)",
            Stage.JH,
            Category.GERUND_INFINITIVE,
            "Verbs usually followed by V-ing.",
            r"\b(enjoy|avoid|finish|practice|consider|mind|suggest)\b\s+[a-z]+ing\b",
        ),
        RegexRule(
            "gi-to-infinitive",
            "Verbs taking to-infinitive (decide/plan/hope/agree)",
            Stage.JH,
            Category.GERUND_INFINITIVE,
            "Verbs usually followed by to + base form.",
            r"\b(decide|plan|hope|agree|refuse|pretend|learn)\b\s+to\s+[a-z]+\b",
        ),
        RegexRule(
            "gi-stop-try-remember",
            "stop/try/remember + V-ing vs to-infinitive",
            Stage.SH,
            Category.GERUND_INFINITIVE,
            "Same verb, different meaning depending on the complement.",
            r"\b(stop|try|remember|forget)\b\s+(?:to\s+[a-z]+|[a-z]+ing)\b",
        ),
        # --- Participle ---
        RegexRule(
            "participle-ed-ing",
            "-ed / -ing adjectives",
            Stage.SH,
            Category.PARTICIPLE,
            "bored/boring, interested/interesting and similar pairs.",
            r"\b([a-z]+ed|[a-z]+ing)\s+(person|people|movie|story|class|lesson|book|news|experience"
            r"|thing|event|problem)\b",
        ),
        # --- Inversion / subjunctive ---
        RegexRule(
            "inv-negative-adverb",
            "Inversion after negative adverbs (Never/Hardly/Seldom)",
            Stage.SH,
            Category.INVERSION,
            "Fronted negative adverb + inverted auxiliary or be.",
            r"\b(Never|Hardly|Seldom|Rarely|Little)\b\s+(?:do|does|did|had|have|has|am|is|are|was|were"
            r"|should|could|would|can|will)\b",
        ),
        RegexRule(
            "subjunctive-it-is-important-that",
            "Subjunctive: It is important/essential that S (should) VR",
            Stage.SH,
            Category.SUBJUNCTIVE,
            "Base form in that-clauses after words of advice or necessity.",
            r"\bIt\s+is\s+(important|essential|vital|suggested|recommended|required|demanded)\s+that\s+\w+"
            r"\s+(?:should\s+)?\b[a-z]+\b",
        ),
        RegexRule(
            "subjunctive-if-i-were",
            "If I were / If he were",
            Stage.SH,
            Category.SUBJUNCTIVE,
            "were in conditions contrary to fact.",
            r"\bIf\s+(?:I|he|she|it)\s+were\b",
        ),
        # --- Articles, quantifiers, prepositions ---
        RegexRule(
            "art-quantifiers",
            "many/much/a lot of/some/any/few/little",
            Stage.JH,
            Category.ARTICLE_QUANTIFIER,
            "Common quantifiers.",
            r"\b(many|much|a\s+lot\s+of|lots\s+of|some|any|few|a\s+few|little|a\s+little)\b",
        ),
        RegexRule(
            "prep-time",
            "Time prepositions in/on/at/for/since/by/until",
            Stage.JH,
            Category.PREPOSITION,
            "Common prepositional phrases of time.",
            r"\b(in|on|at|for|since|by|until)\b\s+(?:\d{4}|Monday|Tuesday|Wednesday|Thursday|Friday"
            r"|Saturday|Sunday|January|February|March|April|May|June|July|August|September|October"
            r"|November|December|the\s+morning|the\s+afternoon|the\s+evening|night|noon)\b",
        ),
        # --- Sentence patterns and phrasal verbs ---
        RegexRule(
            "pattern-there-be",
            "There is/are/was/were",
            Stage.JH,
            Category.LINKING_PATTERNS,
            "Existential sentences.",
            r"\bThere\s+(?:is|are|was|were)\b",
        ),
        RegexRule(
            "pattern-too-to-so-that",
            "too ... to / so ... that",
            Stage.JH,
            Category.LINKING_PATTERNS,
            "Common result patterns.",
            r"\btoo\s+[^\s]+\s+to\s+[a-z]+\b|\bso\s+[^\s]+\s+that\b",
        ),
        RegexRule(
            "pv-common",
            "Common phrasal verbs (look for / give up / take off ...)",
            Stage.JH,
            Category.PHRASAL_VERB,
            "Introductory phrasal verbs.",
            r"\b(look\s+for|look\s+after|give\s+up|take\s+off|turn\s+on|turn\s+off|put\s+on|put\s+off"
            r"|pick\s+up|set\s+up|carry\s+out|come\s+up\s+with)\b",
        ),
    )
