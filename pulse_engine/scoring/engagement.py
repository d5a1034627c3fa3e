"""
Engagement impact scoring for Pulse Engine.

Impact scores are always recomputed from raw counts; a stored impact value
is never trusted as input. Negative counts are rejected, never clamped.
"""

import logging
import math
from dataclasses import replace
from typing import Iterable

from pulse_engine.errors import ValidationError
from pulse_engine.models.items import SocialPost, Tag, normalize_tag_name

logger = logging.getLogger(__name__)


# =============================================================================
# Scoring Configuration
# =============================================================================

# Engagement weights: likes + 2*reposts + 3*quotes + replies
LIKE_WEIGHT: int = 1
REPOST_WEIGHT: int = 2
QUOTE_WEIGHT: int = 3
REPLY_WEIGHT: int = 1

# log10(followers) is divided by this to land roughly in 0..1 (1M followers = 1.0)
FOLLOWER_LOG_DIVISOR: float = 6.0

# Flat bonus added for verified authors
VERIFIED_BONUS: float = 50.0

# Tag formula: (likes + 2*reposts) / TAG_IMPACT_DIVISOR
TAG_IMPACT_DIVISOR: float = 10.0


def _require_non_negative(owner: str, counts: dict) -> None:
    for name, value in counts.items():
        if value is None or value < 0:
            raise ValidationError(f"{owner}: {name} cannot be negative, got {value!r}")


def compute_engagement(post: SocialPost) -> int:
    """Weighted engagement count of a post."""
    _require_non_negative(f"post {post.id}", post.engagement_counts())
    return (
        LIKE_WEIGHT * post.like_count
        + REPOST_WEIGHT * post.repost_count
        + QUOTE_WEIGHT * post.quote_count
        + REPLY_WEIGHT * post.reply_count
    )


def compute_follower_factor(follower_count: int) -> float:
    """log10(max(followers, 1)) / 6 - zero for accounts with 0 or 1 followers."""
    if follower_count is None or follower_count < 0:
        raise ValidationError(f"follower count cannot be negative, got {follower_count!r}")
    return math.log10(max(follower_count, 1)) / FOLLOWER_LOG_DIVISOR


def post_impact(post: SocialPost) -> float:
    """
    Compute the impact score of a social post.

    Formula:
        engagement = likes + 2*reposts + 3*quotes + replies
        raw = engagement * (1 + log10(max(followers, 1)) / 6)
        impact = round(raw + (VERIFIED_BONUS if verified), 2)

    Raises:
        ValidationError: If any count is negative.
    """
    engagement = compute_engagement(post)
    follower_factor = compute_follower_factor(post.author_follower_count)
    raw = engagement * (1 + follower_factor)
    if post.verified:
        raw += VERIFIED_BONUS
    return round(raw, 2)


def tag_impact(tag: Tag) -> float:
    """
    Compute the aggregate impact score of a tag.

    Per-post breakdowns are not available at the tag level, so this uses
    the cheaper (total_likes + 2*total_reposts) / 10.

    Raises:
        ValidationError: If any count is negative.
    """
    _require_non_negative(f"tag #{tag.name}", tag.counts())
    return round((tag.total_likes + tag.total_reposts * 2) / TAG_IMPACT_DIVISOR, 2)


def with_post_impact(post: SocialPost) -> SocialPost:
    """Return a copy of the post with impact_score recomputed."""
    return replace(post, impact_score=post_impact(post))


def with_tag_impact(tag: Tag) -> Tag:
    """Return a copy of the tag with impact_score recomputed."""
    return replace(tag, impact_score=tag_impact(tag))


# =============================================================================
# Tag Aggregation
# =============================================================================

def merge_tags(tags: Iterable[Tag]) -> list[Tag]:
    """
    Collapse repeated observations of the same tag into one aggregate.

    Counts are summed per normalized name; first-seen order is kept and
    impact scores are recomputed on the merged records.
    """
    merged: dict[str, Tag] = {}
    for tag in tags:
        existing = merged.get(tag.name)
        if existing is None:
            merged[tag.name] = replace(tag)
            continue
        merged[tag.name] = replace(
            existing,
            post_count=existing.post_count + tag.post_count,
            total_likes=existing.total_likes + tag.total_likes,
            total_reposts=existing.total_reposts + tag.total_reposts,
            total_replies=existing.total_replies + tag.total_replies,
        )
    return [with_tag_impact(tag) for tag in merged.values()]


def tags_from_posts(posts: Iterable[SocialPost]) -> list[Tag]:
    """
    Build hashtag aggregates from the hashtags carried by posts.

    Each post adds one observation (its likes, reposts and replies) to every
    distinct hashtag it mentions.
    """
    observations = []
    for post in posts:
        seen = set()
        for raw_name in post.hashtags:
            name = normalize_tag_name(raw_name)
            if not name or name in seen:
                continue
            seen.add(name)
            observations.append(
                Tag(
                    name=name,
                    post_count=1,
                    total_likes=post.like_count,
                    total_reposts=post.repost_count,
                    total_replies=post.reply_count,
                )
            )
    tags = merge_tags(observations)
    logger.debug("Aggregated %d hashtag observations into %d tags", len(observations), len(tags))
    return tags
