"""
Matching module.

Links topics and articles to supporting social evidence by keyword overlap.
"""

from pulse_engine.matching.relevance import (
    RelevanceMatch,
    candidate_text,
    candidate_impact,
    find_relevant,
    find_relevant_items,
    matched_keywords,
)

__all__ = [
    "RelevanceMatch",
    "candidate_text",
    "candidate_impact",
    "find_relevant",
    "find_relevant_items",
    "matched_keywords",
]
