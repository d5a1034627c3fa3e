"""
Impact aggregation for Pulse Engine.

Folds matched social evidence into scores:
1. A per-topic social impact score (mean impact of related posts and tags)
2. A boosted final score for an item (base score plus a capped boost)

All functions are deterministic and do not mutate input data.
"""

from datetime import datetime
from typing import Optional, Sequence

from pulse_engine.matching.relevance import find_relevant, matched_keywords
from pulse_engine.models.digest import ScoredItem
from pulse_engine.models.items import SocialPost, Tag, TextItem
from pulse_engine.scoring.base_scorer import round_half_up, score_text_item
from pulse_engine.scoring.engagement import post_impact, tag_impact
from pulse_engine.scoring.lexicon import KeywordLexicon


# =============================================================================
# Boost Configuration
# =============================================================================

# Percentage points of boost per matched keyword
BOOST_PER_MATCH: float = 5.0

# Boost never exceeds this percentage
MAX_BOOST_PERCENTAGE: float = 50.0


def social_impact_score(
    related_posts: Sequence[SocialPost],
    related_tags: Sequence[Tag],
) -> float:
    """
    Mean impact of related posts and tags.

    Impact scores are recomputed from counts. Returns 0.0 when both lists
    are empty; rounded to 2 decimals.
    """
    impacts = [post_impact(p) for p in related_posts] + [tag_impact(t) for t in related_tags]
    if not impacts:
        return 0.0
    return round(sum(impacts) / len(impacts), 2)


def compute_boost_percentage(match_count: int) -> float:
    """min(match_count * 5, 50); negative counts give no boost."""
    return float(min(max(match_count, 0) * BOOST_PER_MATCH, MAX_BOOST_PERCENTAGE))


def compute_boost(base_score: float, match_count: int) -> tuple[float, int]:
    """
    Apply the social boost to a base score.

    Returns:
        (boost_percentage, final_score) where
        final_score = round(base_score * (1 + boost_percentage / 100)).

    Example:
        >>> compute_boost(184, 6)
        (30.0, 239)
    """
    boost_percentage = compute_boost_percentage(match_count)
    final_score = round_half_up(base_score * (1 + boost_percentage / 100))
    return boost_percentage, final_score


def boost(item: TextItem, match_count: int) -> tuple[float, int]:
    """compute_boost() using the item's base_score."""
    return compute_boost(item.base_score, match_count)


def score_article(
    item: TextItem,
    lexicon: KeywordLexicon,
    posts: Sequence[SocialPost],
    tags: Sequence[Tag] = (),
    now: Optional[datetime] = None,
    related_posts_limit: int = 5,
    related_tags_limit: int = 5,
) -> ScoredItem:
    """
    Compute the full score of an article against a candidate pool.

    Steps:
    1. Base score from keywords, source quality and recency
    2. Relevant posts and tags by keyword overlap
    3. match_count = distinct article keywords evidenced by the matched posts
    4. Boost and final score
    5. Social impact contribution of the matched evidence

    Raises:
        ValidationError: If the item or a candidate is invalid.
    """
    scored = score_text_item(item, lexicon, now)

    post_matches = find_relevant(scored.text, posts, related_posts_limit, lexicon.stop_words)
    tag_matches = []
    if tags:
        tag_matches = find_relevant(scored.text, tags, related_tags_limit, lexicon.stop_words)

    match_count = len(matched_keywords(post_matches))
    boost_percentage, final_score = compute_boost(scored.base_score, match_count)

    related_posts = [m.candidate for m in post_matches]
    related_tags = [m.candidate for m in tag_matches]

    return ScoredItem(
        item=scored,
        match_count=match_count,
        social_impact_contribution=social_impact_score(related_posts, related_tags),
        boost_percentage=boost_percentage,
        final_score=final_score,
        related_posts=related_posts,
        related_tags=related_tags,
    )
