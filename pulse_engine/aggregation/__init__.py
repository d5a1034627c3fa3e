"""
Aggregation module.

Combines base scores with matched social evidence into final scores.
"""

from pulse_engine.aggregation.aggregator import (
    BOOST_PER_MATCH,
    MAX_BOOST_PERCENTAGE,
    social_impact_score,
    compute_boost_percentage,
    compute_boost,
    boost,
    score_article,
)

__all__ = [
    "BOOST_PER_MATCH",
    "MAX_BOOST_PERCENTAGE",
    "social_impact_score",
    "compute_boost_percentage",
    "compute_boost",
    "boost",
    "score_article",
]
