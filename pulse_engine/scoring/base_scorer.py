"""
Base importance scoring for Pulse Engine.

Provides pure, side-effect-free functions to compute an item's base score:

    score = round(keyword_score * quality_multiplier * time_decay)

All functions are deterministic for a fixed `now` and do not mutate input data.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from pulse_engine.models.items import TextItem
from pulse_engine.scoring.lexicon import KeywordLexicon


# =============================================================================
# Scoring Configuration
# =============================================================================

# Freshness table: (maximum age in days, decay factor). Ages beyond the last
# row get MIN_TIME_DECAY. Factors must be non-increasing down the table.
TIME_DECAY_STEPS: tuple[tuple[float, float], ...] = (
    (0.125, 1.0),   # last 3 hours
    (0.25, 0.93),   # last 6 hours
    (0.5, 0.9),     # last 12 hours
    (1.0, 0.87),    # last 24 hours
    (2.0, 0.8),
    (3.0, 0.73),
    (4.0, 0.67),
    (7.0, 0.53),    # last week
    (10.0, 0.4),
    (14.0, 0.27),   # two weeks
    (21.0, 0.13),   # three weeks
)

# Factor for very old items and items without a publication date
MIN_TIME_DECAY: float = 0.07


# =============================================================================
# Result Data Structures
# =============================================================================

@dataclass
class BaseScoreResult:
    """
    Breakdown of a base score, for transparency and debugging.

    Attributes:
        score: Final rounded base score.
        keyword_score: Highest matched phrase weight (or the default score).
        matched_phrase: Phrase that produced keyword_score, None if no match.
        quality_multiplier: Source quality factor.
        time_decay: Freshness factor in (0, 1].
    """
    score: int
    keyword_score: float
    matched_phrase: Optional[str]
    quality_multiplier: float
    time_decay: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negatives."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Component Functions
# =============================================================================

def find_best_phrase(text: str, lexicon: KeywordLexicon) -> tuple[Optional[str], float]:
    """
    Find the highest-weighted lexicon phrase occurring in text.

    Matching is a case-insensitive substring test. On equal weights the
    phrase listed first in the lexicon wins.

    Returns:
        (phrase, weight), or (None, lexicon.default_score) when nothing matches.
    """
    haystack = (text or "").lower()
    best_phrase = None
    best_weight = None

    for phrase, weight in lexicon.weights.items():
        if phrase in haystack and (best_weight is None or weight > best_weight):
            best_phrase, best_weight = phrase, weight

    if best_phrase is None:
        return None, lexicon.default_score
    return best_phrase, best_weight


def compute_keyword_score(text: str, lexicon: KeywordLexicon) -> float:
    """
    Keyword component: maximum weight of matched phrases (not the sum).

    Example:
        >>> compute_keyword_score("GPT-5 launches today", lexicon)
        160.0
    """
    return find_best_phrase(text, lexicon)[1]


def compute_quality_multiplier(source_name: Optional[str], lexicon: KeywordLexicon) -> float:
    """Quality component: lexicon.quality_multiplier for allow-listed sources, else 1.0."""
    if lexicon.is_quality_source(source_name):
        return lexicon.quality_multiplier
    return 1.0


def _age_days(published_at: datetime, now: datetime) -> float:
    # Mixed naive/aware inputs: naive values are taken to be UTC
    if (published_at.tzinfo is None) != (now.tzinfo is None):
        if published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)
        else:
            now = now.replace(tzinfo=timezone.utc)
    return (now - published_at).total_seconds() / (24 * 60 * 60)


def compute_time_decay(published_at: Optional[datetime], now: Optional[datetime] = None) -> float:
    """
    Freshness component.

    Step curve over TIME_DECAY_STEPS:
    - Non-increasing in age, bounded in (0, 1]
    - Future dates get the full factor
    - Missing dates are treated as maximally stale (MIN_TIME_DECAY)

    Args:
        published_at: Publication time of the item.
        now: Reference time. Defaults to datetime.now().

    Returns:
        Decay factor.
    """
    if published_at is None:
        return MIN_TIME_DECAY

    if now is None:
        now = datetime.now(published_at.tzinfo)

    age_days = _age_days(published_at, now)

    if age_days < 0:
        return 1.0

    for max_age, factor in TIME_DECAY_STEPS:
        if age_days <= max_age:
            return factor

    return MIN_TIME_DECAY


# =============================================================================
# Main Scoring Functions
# =============================================================================

def compute_base_score(
    item: TextItem,
    lexicon: KeywordLexicon,
    now: Optional[datetime] = None,
) -> BaseScoreResult:
    """
    Compute the base score of a text item with its component breakdown.

    Formula:
        score = round(keyword_score * quality_multiplier * time_decay)

    Where:
        - keyword_score: max weight of lexicon phrases in title + body
        - quality_multiplier: bonus for allow-listed sources
        - time_decay: freshness factor

    An empty lexicon always yields default_score * decay (times quality).

    This is a pure function - it does not modify the input item.
    """
    haystack = f"{item.title} {item.body or ''}"
    phrase, keyword_score = find_best_phrase(haystack, lexicon)
    quality = compute_quality_multiplier(item.source_name, lexicon)
    decay = compute_time_decay(item.published_at, now)

    return BaseScoreResult(
        score=round_half_up(keyword_score * quality * decay),
        keyword_score=keyword_score,
        matched_phrase=phrase,
        quality_multiplier=quality,
        time_decay=decay,
    )


def score(item: TextItem, lexicon: KeywordLexicon, now: Optional[datetime] = None) -> int:
    """Return only the rounded base score of an item."""
    return compute_base_score(item, lexicon, now).score


def score_text_item(
    item: TextItem,
    lexicon: KeywordLexicon,
    now: Optional[datetime] = None,
) -> TextItem:
    """
    Score a text item and return a new copy with base_score set.

    Use this when you want the scored item directly.
    Use compute_base_score() when you want the detailed breakdown.

    This is a pure function - it does not modify the input item.
    """
    return replace(item, base_score=float(score(item, lexicon, now)))
