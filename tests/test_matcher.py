"""Tests for fuzzy product name matching."""

import dataclasses

import pytest

from restock.matcher import (
    DUTCH_RULES,
    MatchRules,
    decide_match,
    is_acceptable_match,
    is_singular_plural_match,
    match_level,
    normalize_name,
    token_overlap,
    tokenize,
)
from restock.models import MatchCandidate, MatchLevel


class TestNormalizeName:
    """Tests for name normalization."""

    def test_lowercase_and_whitespace(self):
        """Case and repeated whitespace are normalized."""
        assert normalize_name("  Volle   MELK ") == "volle melk"

    def test_keeps_hyphens(self):
        """Hyphens survive, other punctuation does not."""
        assert normalize_name("Kip-filet, (vers)!") == "kip-filet vers"

    def test_apostrophe_plural(self):
        """Apostrophes are stripped."""
        assert normalize_name("Avocado's") == "avocados"


class TestTokenize:
    """Tests for word extraction."""

    def test_drops_stopwords(self):
        """Dutch stopwords are not significant."""
        assert tokenize("Pak van de melk") == ["pak", "melk"]

    def test_drops_short_tokens(self):
        """Single characters are dropped."""
        assert tokenize("a b kaas") == ["kaas"]

    def test_overlap_ratio(self):
        """Overlap divides by the longer word count."""
        assert token_overlap("halfvolle melk", "melk") == pytest.approx(0.5)
        assert token_overlap("melk halfvolle", "halfvolle melk") == 1.0

    def test_overlap_counts_repeated_words(self):
        """Repeated words still count towards the word total."""
        assert token_overlap("melk melk", "melk") == pytest.approx(0.5)

    def test_overlap_empty(self):
        """No significant words means no overlap."""
        assert token_overlap("de", "het") == 0.0


class TestSingularPlural:
    """Tests for Dutch singular/plural heuristics."""

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("banaan", "bananen"),
            ("ei", "eieren"),
            ("kip", "kippen"),
            ("appel", "appels"),
            ("avocado", "avocados"),
            ("citroen", "citroenen"),
            ("tomaat", "tomaten"),
            ("peer", "peren"),
        ],
    )
    def test_pairs(self, a, b):
        """Known singular/plural pairs match in both directions."""
        assert is_singular_plural_match(a, b)
        assert is_singular_plural_match(b, a)

    def test_unrelated(self):
        """Different words do not match."""
        assert not is_singular_plural_match("melk", "kaas")

    def test_en_rule_requires_length(self):
        """Candidates shorter than four letters are not stripped."""
        assert not is_singular_plural_match("b", "ben")

    def test_custom_rules(self):
        """Tables are data, not code."""
        rules = MatchRules(irregular_plurals=(("muis", "muizen"),))
        assert is_singular_plural_match("muis", "muizen", rules)
        assert not is_singular_plural_match("muis", "muizen", MatchRules())


class TestIsAcceptableMatch:
    """Tests for the attach-vs-create decision."""

    def test_exact(self):
        """Exact matches after normalization are accepted."""
        assert is_acceptable_match("melk", "Melk", score=None)

    def test_irregular_plural(self):
        """banaan refers to Bananen."""
        assert is_acceptable_match("banaan", "Bananen", score=None)

    def test_s_plural(self):
        """appel refers to Appels."""
        assert is_acceptable_match("appel", "Appels", score=None)

    def test_partial_word_rejected(self):
        """A prefix is not the same product."""
        assert not is_acceptable_match("melk", "Melkchocolade", score=0.4)

    def test_good_score_needs_overlap(self):
        """A good score alone is not enough for short words."""
        assert not is_acceptable_match("appel", "adder", score=0.2)

    def test_score_and_overlap(self):
        """Low score with high overlap is accepted."""
        assert is_acceptable_match("halfvolle melk", "Melk halfvolle", score=0.2)

    def test_score_too_high(self):
        """Full overlap with a poor score is rejected."""
        assert not is_acceptable_match("halfvolle melk", "Melk halfvolle", score=0.3)

    def test_overlap_without_score(self):
        """Without a score the overlap bar is higher."""
        assert is_acceptable_match("melk de halfvolle", "halfvolle melk", score=None)
        assert not is_acceptable_match("halfvolle melk", "melk", score=None)

    def test_thresholds_configurable(self):
        """Acceptance thresholds come from the rules."""
        lenient = dataclasses.replace(DUTCH_RULES, accept_min_overlap_without_score=0.5)
        assert is_acceptable_match("halfvolle melk", "melk", score=None, rules=lenient)


class TestMatchLevel:
    """Tests for the three-level classification."""

    def test_no_candidates(self):
        """Nothing found means no match."""
        assert match_level("melk", []) == MatchLevel.NONE

    def test_plural_is_confident(self):
        """Singular/plural matches are confident."""
        candidates = [MatchCandidate(name="Bananen", score=0.3)]
        assert match_level("banaan", candidates) == MatchLevel.CONFIDENT

    def test_low_score_full_overlap_is_confident(self):
        """Near-identical score with full overlap is confident."""
        candidates = [MatchCandidate(name="Melk halfvolle", score=0.05)]
        assert match_level("halfvolle melk", candidates) == MatchLevel.CONFIDENT

    def test_score_plausible(self):
        """A reasonable score is plausible."""
        candidates = [MatchCandidate(name="Melkchocolade", score=0.3)]
        assert match_level("melk", candidates) == MatchLevel.PLAUSIBLE

    def test_overlap_plausible(self):
        """Half the words in common is plausible."""
        candidates = [MatchCandidate(name="Volle melk", score=None)]
        assert match_level("halfvolle melk", candidates) == MatchLevel.PLAUSIBLE

    def test_substring_plausible(self):
        """A product named inside the query is plausible."""
        candidates = [MatchCandidate(name="Spinazie", score=0.6)]
        assert match_level("grote zak spinazie", candidates) == MatchLevel.PLAUSIBLE

    def test_no_good_match(self):
        """Poor score and no shared words is no match."""
        candidates = [MatchCandidate(name="Wasmiddel", score=0.6)]
        assert match_level("tandpasta", candidates) == MatchLevel.NONE

    def test_best_candidate_wins(self):
        """Any candidate can lift the level."""
        candidates = [
            MatchCandidate(name="Wasmiddel", score=0.6),
            MatchCandidate(name="Appels", score=0.7),
        ]
        assert match_level("appel", candidates) == MatchLevel.CONFIDENT


class TestDecideMatch:
    """Tests for the combined decision."""

    def test_empty(self):
        """No candidates cannot be accepted."""
        decision = decide_match("melk", [])
        assert decision.accepted is False
        assert decision.level == MatchLevel.NONE
        assert decision.candidate is None

    def test_only_top_candidate_accepted(self):
        """Acceptance looks at the top candidate only."""
        candidates = [
            MatchCandidate(name="Melkchocolade", score=0.2),
            MatchCandidate(name="Melk", score=0.25),
        ]
        decision = decide_match("melk", candidates)
        assert decision.accepted is False
        assert decision.level == MatchLevel.CONFIDENT
        assert decision.candidate.name == "Melkchocolade"

    def test_accepts_top(self):
        """A good top candidate is accepted."""
        decision = decide_match("bananen", [MatchCandidate(name="Banaan", score=0.1)])
        assert decision.accepted is True
        assert decision.level == MatchLevel.CONFIDENT
