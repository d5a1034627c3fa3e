"""
Ranking module.

Orders scored items and topics and reports rank movement.
"""

from pulse_engine.ranking.reranker import (
    RankChange,
    default_sort_key,
    item_key,
    rerank,
    rank_delta,
    rank_changes,
    deduplicate,
)

__all__ = [
    "RankChange",
    "default_sort_key",
    "item_key",
    "rerank",
    "rank_delta",
    "rank_changes",
    "deduplicate",
]
