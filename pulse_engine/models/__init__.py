"""
Data models module.

Defines input records (text items, posts, tags) and engine outputs
(topics, citations, scored items, score updates).
"""

from pulse_engine.models.items import (
    TextItem,
    SocialPost,
    Tag,
    tag_from_name,
    normalize_tag_name,
    is_absolute_url,
    parse_datetime,
)
from pulse_engine.models.digest import (
    Citation,
    CitationKind,
    Topic,
    ScoredItem,
    ScoreUpdate,
)

__all__ = [
    "TextItem",
    "SocialPost",
    "Tag",
    "tag_from_name",
    "normalize_tag_name",
    "is_absolute_url",
    "parse_datetime",
    "Citation",
    "CitationKind",
    "Topic",
    "ScoredItem",
    "ScoreUpdate",
]
