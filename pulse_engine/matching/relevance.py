"""
Keyword-overlap relevance matching for Pulse Engine.

One algorithm backs topic->post, topic->tag and article->post matching:

1. Extract keywords from the target text
2. Count how many of them occur as substrings of each candidate's text
3. Sort by match count, then by the candidate's impact score (both
   descending); equal candidates keep their input order
4. Keep only candidates with at least one match, capped at top_n

Zero-match candidates are never used as padding: a short result means
there was little relevant evidence.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from pulse_engine.errors import EmptyPoolWarning, ValidationError
from pulse_engine.models.digest import Topic
from pulse_engine.models.items import SocialPost, Tag, TextItem
from pulse_engine.scoring.engagement import post_impact, tag_impact
from pulse_engine.scoring.lexicon import DEFAULT_STOP_WORDS
from pulse_engine.scoring.text import extract_keywords

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelevanceMatch:
    """
    A candidate paired with its overlap with the target text.

    Attributes:
        candidate: The matched post, tag or text item.
        match_count: Number of target keywords found in the candidate.
        matched_keywords: The keywords that were found.
        impact_score: Tie-break value (recomputed impact or base score).
    """
    candidate: Any
    match_count: int
    matched_keywords: frozenset
    impact_score: float


def candidate_text(candidate) -> str:
    """
    Text that target keywords are searched in.

    Raises:
        ValidationError: If the candidate has no text to match against.
        TypeError: If the candidate type is not supported.
    """
    if isinstance(candidate, SocialPost):
        text = candidate.content
    elif isinstance(candidate, Tag):
        text = candidate.name
    elif isinstance(candidate, (TextItem, Topic)):
        text = candidate.text
    else:
        raise TypeError(f"unsupported candidate type: {type(candidate).__name__}")

    if not text or not text.strip():
        raise ValidationError(f"candidate {_describe(candidate)} has empty text")
    return text


def candidate_impact(candidate) -> float:
    """Secondary sort key: engagement impact for posts/tags, base score for items."""
    if isinstance(candidate, SocialPost):
        return post_impact(candidate)
    if isinstance(candidate, Tag):
        return tag_impact(candidate)
    if isinstance(candidate, TextItem):
        return candidate.base_score
    if isinstance(candidate, Topic):
        return candidate.social_impact_score
    raise TypeError(f"unsupported candidate type: {type(candidate).__name__}")


def _describe(candidate) -> str:
    for attr in ("id", "name", "title"):
        value = getattr(candidate, attr, None)
        if value:
            return repr(value)
    return type(candidate).__name__


def find_relevant(
    target_text: str,
    candidates: Sequence,
    top_n: int,
    stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
) -> list[RelevanceMatch]:
    """
    Rank candidates by keyword overlap with target_text.

    Args:
        target_text: Topic or article text.
        candidates: Posts, tags or text items. Not modified.
        top_n: Maximum number of matches to return.
        stop_words: Stop words for keyword extraction.

    Returns:
        Up to top_n matches with match_count > 0, best first.

    Raises:
        ValidationError: If a candidate has empty text.
    """
    if not candidates:
        logger.info("Relevance pool is empty; no matches for %r", (target_text or "")[:60])
        warnings.warn("relevance candidate pool is empty", EmptyPoolWarning, stacklevel=2)
        return []

    if top_n <= 0:
        return []

    keys = extract_keywords(target_text, stop_words)
    if not keys:
        return []

    scored = []
    for candidate in candidates:
        haystack = candidate_text(candidate).lower()
        matched = frozenset(k for k in keys if k in haystack)
        if not matched:
            continue
        scored.append(
            RelevanceMatch(
                candidate=candidate,
                match_count=len(matched),
                matched_keywords=matched,
                impact_score=candidate_impact(candidate),
            )
        )

    # sorted() is stable, so input order breaks remaining ties
    scored.sort(key=lambda m: (-m.match_count, -m.impact_score))
    return scored[:top_n]


def find_relevant_items(
    target_text: str,
    candidates: Sequence,
    top_n: int,
    stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
) -> list:
    """Same as find_relevant() but returns the bare candidates."""
    return [m.candidate for m in find_relevant(target_text, candidates, top_n, stop_words)]


def matched_keywords(matches: Iterable[RelevanceMatch]) -> frozenset:
    """Union of the keywords evidenced by a set of matches."""
    keys: set = set()
    for match in matches:
        keys.update(match.matched_keywords)
    return frozenset(keys)
