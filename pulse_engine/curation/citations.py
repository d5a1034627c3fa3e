"""
Citation curation for Pulse Engine.

Rebuilds a topic's citation list from verified, relevance-ranked evidence:

    valid existing article citations + up to N social-post citations

Every emitted citation passes URL and placeholder checks first. A citation
that fails is dropped, never replaced by a placeholder. Topics are never
mutated; curation returns a new Topic, so independent topics can be curated
concurrently against the same read-only pool.
"""

import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from pulse_engine.aggregation.aggregator import social_impact_score
from pulse_engine.curation.synthetic import check_citation, check_post, find_synthetic_marker, is_synthetic_post
from pulse_engine.errors import SyntheticDataError, ValidationError
from pulse_engine.matching.relevance import find_relevant, find_relevant_items
from pulse_engine.models.digest import Citation, CitationKind, Topic
from pulse_engine.models.items import SocialPost, Tag, is_absolute_url
from pulse_engine.scoring.engagement import with_post_impact, with_tag_impact
from pulse_engine.scoring.lexicon import DEFAULT_STOP_WORDS
from pulse_engine.scoring.text import clean

logger = logging.getLogger(__name__)


# Citation titles built from post content are cut to this length
MAX_CITATION_TITLE_LENGTH: int = 280

# Default number of social-post citations per topic
DEFAULT_CITATION_LIMIT: int = 5


def validate_url(url: Optional[str]) -> str:
    """
    Ensure url is a well-formed absolute http(s) URL.

    Raises:
        ValidationError: Otherwise.
    """
    if not is_absolute_url(url):
        raise ValidationError(f"not a well-formed absolute URL: {url!r}")
    return url


def validate_citation(citation: Citation) -> Citation:
    """
    Run all checks a citation must pass before it is attached to a topic.

    Raises:
        ValidationError: Missing title or malformed URL.
        SyntheticDataError: Placeholder marker in URL or title.
    """
    if not citation.title or not citation.title.strip():
        raise ValidationError(f"citation for {citation.url!r} has no title")
    validate_url(citation.url)
    check_citation(citation)
    return citation


def citation_from_post(post: SocialPost) -> Citation:
    """Build a social-post citation whose title is the post's cleaned content."""
    title = clean(post.content)
    if len(title) > MAX_CITATION_TITLE_LENGTH:
        title = title[: MAX_CITATION_TITLE_LENGTH - 1].rstrip() + "…"
    return Citation(title=title, url=post.url, kind=CitationKind.SOCIAL_POST)


def _kept_article_citations(topic: Topic) -> list[Citation]:
    kept = []
    seen_urls = set()
    for citation in topic.citations:
        if citation.kind is not CitationKind.ARTICLE:
            continue
        try:
            validate_citation(citation)
        except (ValidationError, SyntheticDataError) as e:
            logger.warning("Dropping article citation from topic %r: %s", topic.key, e)
            continue
        if citation.url in seen_urls:
            continue
        seen_urls.add(citation.url)
        kept.append(citation)
    return kept


def curate(
    topic: Topic,
    candidate_posts: Sequence[SocialPost],
    limit: int = DEFAULT_CITATION_LIMIT,
    stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
) -> Topic:
    """
    Recompute a topic's citations.

    Existing article citations that pass validation are kept in order.
    Existing social-post citations are discarded and rebuilt from the
    top `limit` relevance-ranked candidate posts (title + summary as the
    target text). A post in that window that fails validation is dropped;
    lower-ranked posts are never pulled in to replace it.

    Args:
        topic: Topic to curate. Not modified.
        candidate_posts: Read-only pool of posts.
        limit: Maximum social-post citations.
        stop_words: Stop words for keyword extraction.

    Returns:
        New Topic with the rebuilt citation list.

    Raises:
        SyntheticDataError: If relevant posts existed but every one of them
            in the top `limit` was rejected as synthetic.
    """
    citations = _kept_article_citations(topic)
    seen_urls = {c.url for c in citations}

    matches = find_relevant(topic.text, candidate_posts, limit, stop_words)

    social: list[Citation] = []
    synthetic_rejections = 0
    for match in matches:
        post = match.candidate
        try:
            check_post(post)
            citation = validate_citation(citation_from_post(post))
        except SyntheticDataError as e:
            synthetic_rejections += 1
            logger.warning("Rejected synthetic post for topic %r: %s", topic.key, e)
            continue
        except ValidationError as e:
            logger.warning("Skipping post %s for topic %r: %s", post.id, topic.key, e)
            continue
        if citation.url in seen_urls:
            continue
        seen_urls.add(citation.url)
        social.append(citation)

    if matches and not social and synthetic_rejections and limit > 0:
        raise SyntheticDataError(
            f"topic {topic.key!r}: all {synthetic_rejections} relevant posts were synthetic",
            marker="synthetic-evidence",
            value=topic.key,
        )

    logger.debug(
        "Curated topic %r: %d article + %d social citations",
        topic.key, len(citations), len(social),
    )
    return replace(topic, citations=citations + social)


def enrich_topic(
    topic: Topic,
    posts: Sequence[SocialPost],
    tags: Sequence[Tag] = (),
    post_limit: int = 5,
    tag_limit: int = 5,
    citation_limit: int = DEFAULT_CITATION_LIMIT,
    stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
) -> Topic:
    """
    Curate citations and attach related posts, tags and the social impact score.

    Synthetic posts and tags are excluded from the related lists. Derived
    impact scores are filled in on the attached copies.

    Raises:
        ValidationError: If a candidate is invalid.
        SyntheticDataError: See curate().
    """
    curated = curate(topic, posts, citation_limit, stop_words)

    related_posts = []
    real_posts = [p for p in posts if not is_synthetic_post(p)]
    if real_posts:
        related_posts = [
            with_post_impact(p)
            for p in find_relevant_items(topic.text, real_posts, post_limit, stop_words)
        ]

    related_tags = []
    real_tags = [t for t in tags if not find_synthetic_marker(t.name)]
    if real_tags:
        related_tags = [
            with_tag_impact(t)
            for t in find_relevant_items(topic.text, real_tags, tag_limit, stop_words)
        ]

    return replace(
        curated,
        related_posts=related_posts,
        related_tags=related_tags,
        social_impact_score=social_impact_score(related_posts, related_tags),
    )
