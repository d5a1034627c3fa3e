"""
Scoring module.

Base importance scores from keywords, source quality and recency, and
engagement impact scores for posts and tags.
"""

from pulse_engine.scoring.lexicon import (
    KeywordLexicon,
    DEFAULT_KEYWORD_WEIGHTS,
    DEFAULT_STOP_WORDS,
    DEFAULT_QUALITY_SOURCES,
    default_lexicon,
    lexicon_from_dict,
    load_lexicon,
)

from pulse_engine.scoring.text import (
    clean,
    tokenize,
    extract_keywords,
)

from pulse_engine.scoring.base_scorer import (
    BaseScoreResult,
    compute_keyword_score,
    compute_quality_multiplier,
    compute_time_decay,
    compute_base_score,
    round_half_up,
    score,
    score_text_item,
)

from pulse_engine.scoring.engagement import (
    post_impact,
    tag_impact,
    with_post_impact,
    with_tag_impact,
    merge_tags,
    tags_from_posts,
)

__all__ = [
    # Lexicon
    "KeywordLexicon",
    "DEFAULT_KEYWORD_WEIGHTS",
    "DEFAULT_STOP_WORDS",
    "DEFAULT_QUALITY_SOURCES",
    "default_lexicon",
    "lexicon_from_dict",
    "load_lexicon",
    # Text normalization
    "clean",
    "tokenize",
    "extract_keywords",
    # Base scoring
    "BaseScoreResult",
    "compute_keyword_score",
    "compute_quality_multiplier",
    "compute_time_decay",
    "compute_base_score",
    "round_half_up",
    "score",
    "score_text_item",
    # Engagement scoring
    "post_impact",
    "tag_impact",
    "with_post_impact",
    "with_tag_impact",
    "merge_tags",
    "tags_from_posts",
]
