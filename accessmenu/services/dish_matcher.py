"""
Fuzzy dish-name matching for catalog ingestion.

Similarity is the larger of a character-level score (normalized
Levenshtein distance) and a word-level score (best match per candidate
word). A candidate at or above the duplicate threshold against any
existing name is treated as already present.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein

from accessmenu.config.settings import MatcherSettings

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r'[.,!?;:"()\[\]{}]')
_WHITESPACE = re.compile(r"\s+")


def normalize_name(text: Optional[str]) -> str:
    """Trim, lowercase, strip punctuation and collapse whitespace."""
    text = (text or "").strip().lower()
    text = _PUNCTUATION.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs."""
    return Levenshtein.distance(a, b)


@dataclass(frozen=True)
class CatalogSimilarityResult:
    candidate: str
    existing: str
    score: float
    is_duplicate: bool


class DishMatcher:
    """Decides whether a proposed dish name is already in the catalog"""

    def __init__(self, settings: Optional[MatcherSettings] = None):
        self.settings = settings or MatcherSettings()

    def direct_similarity(self, a: str, b: str) -> float:
        """
        Character-level similarity in [0, 1].
        
        Very short strings (length <= short_name_length) score 0 unless they
        are nearly identical, since one edit dominates their score.
        """
        clean_a, clean_b = normalize_name(a), normalize_name(b)
        if clean_a == clean_b:
            return 1.0
        max_length = max(len(clean_a), len(clean_b))
        if max_length == 0:
            return 1.0
        score = 1.0 - edit_distance(clean_a, clean_b) / max_length
        score = min(1.0, max(0.0, score))
        if max_length <= self.settings.short_name_length and score < self.settings.short_name_min_similarity:
            return 0.0
        return score

    def word_similarity(self, candidate: str, target: str) -> float:
        candidate_words = normalize_name(candidate).split()
        target_words = normalize_name(target).split()
        if not candidate_words or not target_words:
            return 0.0

        total_similarity = 0.0
        match_count = 0
        for word in candidate_words:
            best = max(self.direct_similarity(word, other) for other in target_words)
            if best > self.settings.word_match_threshold:
                total_similarity += best
                match_count += 1

        if match_count == 0:
            return 0.0
        return (total_similarity / match_count) * (
            match_count / max(len(candidate_words), len(target_words))
        )

    def similarity(self, candidate: str, target: str) -> float:
        return max(self.direct_similarity(candidate, target), self.word_similarity(candidate, target))

    def compare(self, candidate: str, existing: str) -> CatalogSimilarityResult:
        score = self.similarity(candidate, existing)
        return CatalogSimilarityResult(
            candidate=candidate,
            existing=existing,
            score=score,
            is_duplicate=score >= self.settings.duplicate_threshold,
        )

    def is_duplicate(self, candidate: str, existing: str) -> bool:
        return self.compare(candidate, existing).is_duplicate

    def find_duplicate(self, candidate: str, existing_names: Iterable[str]) -> Optional[CatalogSimilarityResult]:
        """
        Best-scoring existing name at or above the duplicate threshold.
        
        Linear in the number of names; an exact normalized match ends the scan.
        """
        best: Optional[CatalogSimilarityResult] = None
        for name in existing_names:
            if not name:
                continue
            result = self.compare(candidate, name)
            if result.is_duplicate and (best is None or result.score > best.score):
                best = result
                if result.score >= 1.0:
                    break
        if best is not None:
            logger.debug(f"'{candidate}' matches '{best.existing}' ({best.score:.3f})")
        return best


_default_matcher = DishMatcher()


def similarity(candidate: str, target: str) -> float:
    """Similarity with the default thresholds"""
    return _default_matcher.similarity(candidate, target)


def direct_similarity(a: str, b: str) -> float:
    return _default_matcher.direct_similarity(a, b)


def word_similarity(candidate: str, target: str) -> float:
    return _default_matcher.word_similarity(candidate, target)
