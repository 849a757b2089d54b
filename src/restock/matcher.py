"""Fuzzy product name matching for catalog deduplication.

Decides whether a typed product name refers to an existing catalog product.
Locale knowledge (irregular plurals, stopwords) lives in ``MatchRules`` tables
so it can be swapped or extended without touching the algorithm.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from .models import MatchCandidate, MatchDecision, MatchLevel

_PUNCTUATION = re.compile(r"[^\w\s-]+")
_WHITESPACE = re.compile(r"\s+")

ACCEPT_MAX_SCORE = 0.25
ACCEPT_MIN_OVERLAP = 0.70
ACCEPT_MIN_OVERLAP_WITHOUT_SCORE = 0.85
CONFIDENT_MAX_SCORE = 0.1
PLAUSIBLE_MAX_SCORE = 0.35
PLAUSIBLE_MIN_OVERLAP = 0.5

DUTCH_IRREGULAR_PLURALS: tuple[tuple[str, str], ...] = (
    ("banaan", "bananen"),
    ("appel", "appels"),
    ("aardappel", "aardappelen"),
    ("ei", "eieren"),
    ("ui", "uien"),
    ("prei", "preien"),
    ("kip", "kippen"),
    ("druif", "druiven"),
    ("framboos", "frambozen"),
    ("radijs", "radijzen"),
    ("kaas", "kazen"),
    ("noot", "noten"),
    ("boon", "bonen"),
    ("brood", "broden"),
    ("tomaat", "tomaten"),
    ("peer", "peren"),
    ("braam", "bramen"),
    ("abrikoos", "abrikozen"),
    ("wortel", "wortels"),
    ("courgette", "courgettes"),
)

DUTCH_STOPWORDS = frozenset(
    {"de", "het", "een", "van", "met", "en", "in", "op", "aan", "bij", "naar", "te", "om", "voor"}
)


@dataclass(frozen=True)
class MatchRules:
    """Locale tables and acceptance thresholds used by the matcher."""

    irregular_plurals: tuple[tuple[str, str], ...] = ()
    stopwords: frozenset[str] = frozenset()
    min_token_length: int = 2
    accept_max_score: float = ACCEPT_MAX_SCORE
    accept_min_overlap: float = ACCEPT_MIN_OVERLAP
    accept_min_overlap_without_score: float = ACCEPT_MIN_OVERLAP_WITHOUT_SCORE
    _pairs: frozenset[tuple[str, str]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pairs = set()
        for singular, plural in self.irregular_plurals:
            pairs.add((singular, plural))
            pairs.add((plural, singular))
        object.__setattr__(self, "_pairs", frozenset(pairs))

    def is_irregular_pair(self, a: str, b: str) -> bool:
        """Check the irregular plural table in either direction."""
        return (a, b) in self._pairs


DUTCH_RULES = MatchRules(
    irregular_plurals=DUTCH_IRREGULAR_PLURALS,
    stopwords=DUTCH_STOPWORDS,
)


def normalize_name(text: str) -> str:
    """Lower-case, strip punctuation except hyphens and collapse whitespace."""
    cleaned = _PUNCTUATION.sub("", text.lower())
    return _WHITESPACE.sub(" ", cleaned).strip()


def tokenize(text: str, rules: MatchRules = DUTCH_RULES) -> list[str]:
    """Split a name into significant words."""
    return [
        token
        for token in normalize_name(text).split()
        if len(token) >= rules.min_token_length and token not in rules.stopwords
    ]


def token_overlap(query: str, candidate: str, rules: MatchRules = DUTCH_RULES) -> float:
    """Share of words the two names have in common.

    Returns:
        Distinct common words divided by the larger word count, repeats
        included in the count, 0.0 if either is empty
    """
    query_tokens = tokenize(query, rules)
    candidate_tokens = tokenize(candidate, rules)
    longest = max(len(query_tokens), len(candidate_tokens))
    if longest == 0:
        return 0.0
    return len(set(query_tokens) & set(candidate_tokens)) / longest


def _is_en_plural(word: str, plural: str) -> bool:
    if not plural.endswith("en") or len(plural) < 4:
        return False
    stem = plural[:-2]
    if word == stem:
        return True
    # Vowel doubling: "banaan" is "banan" with one extra letter
    if len(word) != len(stem) + 1:
        return False
    return any(word[:i] + word[i + 1 :] == stem for i in range(len(word)))


def is_singular_plural_match(
    query: str,
    candidate: str,
    rules: MatchRules = DUTCH_RULES,
) -> bool:
    """Check whether two names differ only by singular/plural form.

    Both arguments must already be normalized.
    """
    if rules.is_irregular_pair(query, candidate):
        return True
    if query + "s" == candidate or candidate + "s" == query:
        return True
    return _is_en_plural(query, candidate) or _is_en_plural(candidate, query)


def _is_same_product(query: str, candidate: str, rules: MatchRules) -> bool:
    return query == candidate or is_singular_plural_match(query, candidate, rules)


def is_acceptable_match(
    query: str,
    candidate_name: str,
    score: float | None = None,
    rules: MatchRules = DUTCH_RULES,
) -> bool:
    """Decide whether typed text refers to a candidate product.

    Args:
        query: Text the user typed
        candidate_name: Name of the best catalog candidate
        score: Search index score in [0, 1], 0 meaning identical
        rules: Locale tables

    Returns:
        True to attach to the existing product, False to create a new one
    """
    normalized_query = normalize_name(query)
    normalized_candidate = normalize_name(candidate_name)
    if _is_same_product(normalized_query, normalized_candidate, rules):
        return True

    overlap = token_overlap(normalized_query, normalized_candidate, rules)
    if score is not None:
        return score <= rules.accept_max_score and overlap >= rules.accept_min_overlap
    return overlap >= rules.accept_min_overlap_without_score


def _candidate_level(query: str, candidate: MatchCandidate, rules: MatchRules) -> MatchLevel:
    name = normalize_name(candidate.name)
    if _is_same_product(query, name, rules):
        return MatchLevel.CONFIDENT

    overlap = token_overlap(query, name, rules)
    score = candidate.score
    if score is not None and score <= CONFIDENT_MAX_SCORE and overlap == 1.0:
        return MatchLevel.CONFIDENT
    if score is not None and score <= PLAUSIBLE_MAX_SCORE:
        return MatchLevel.PLAUSIBLE
    if overlap >= PLAUSIBLE_MIN_OVERLAP:
        return MatchLevel.PLAUSIBLE
    # "grote zak spinazie" -> "Spinazie"
    if name and name in query:
        return MatchLevel.PLAUSIBLE
    return MatchLevel.NONE


def match_level(
    query: str,
    ranked_candidates: Sequence[MatchCandidate],
    rules: MatchRules = DUTCH_RULES,
) -> MatchLevel:
    """Classify how well the search results match the typed text.

    The best level over all candidates wins; no candidates means no match.
    """
    normalized_query = normalize_name(query)
    levels = [_candidate_level(normalized_query, c, rules) for c in ranked_candidates]
    return min(levels, default=MatchLevel.NONE)


def decide_match(
    query: str,
    ranked_candidates: Sequence[MatchCandidate],
    rules: MatchRules = DUTCH_RULES,
) -> MatchDecision:
    """Accept or reject the top candidate and classify the result list."""
    if not ranked_candidates:
        return MatchDecision(accepted=False, level=MatchLevel.NONE)

    top = ranked_candidates[0]
    return MatchDecision(
        accepted=is_acceptable_match(query, top.name, top.score, rules),
        level=match_level(query, ranked_candidates, rules),
        candidate=top,
    )
