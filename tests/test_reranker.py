"""
Tests for reranking, rank deltas and deduplication.
"""

import pytest

from pulse_engine.models import ScoredItem, TextItem, Topic
from pulse_engine.ranking.reranker import (
    RankChange,
    deduplicate,
    item_key,
    rank_changes,
    rank_delta,
    rerank,
)


def scored(id, final_score, title=None):
    return ScoredItem(item=TextItem(id=id, title=title or f"Article {id}"), final_score=final_score)


@pytest.fixture
def items():
    return [scored("a", 120), scored("b", 200), scored("c", 120), scored("d", 90)]


class TestRerank:
    """Tests for rerank()."""

    def test_sorts_descending_by_final_score(self, items):
        assert [i.id for i in rerank(items)] == ["b", "a", "c", "d"]

    def test_ties_keep_input_order(self, items):
        ranked = rerank(items)
        assert [i.id for i in ranked if i.final_score == 120] == ["a", "c"]

    def test_fixed_point(self, items):
        once = rerank(items)
        assert rerank(once) == once

    def test_input_not_modified(self, items):
        before = list(items)
        rerank(items)
        assert items == before

    def test_topics_sort_by_social_impact(self):
        topics = [Topic(title="Low", social_impact_score=1.0), Topic(title="High", social_impact_score=9.5)]
        assert [t.title for t in rerank(topics)] == ["High", "Low"]

    def test_custom_key(self, items):
        ranked = rerank(items, key=lambda i: -i.final_score)
        assert [i.id for i in ranked] == ["d", "a", "c", "b"]

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            rerank([1, 2])

    def test_empty(self):
        assert rerank([]) == []


class TestRankDelta:
    """Tests for rank_delta() and rank_changes()."""

    def test_moved_up(self, items):
        assert rank_delta(items, rerank(items), "b") == 1

    def test_moved_down(self, items):
        assert rank_delta(items, rerank(items), "a") == -1

    def test_unchanged(self, items):
        assert rank_delta(items, rerank(items), "d") == 0

    def test_unknown_id(self, items):
        with pytest.raises(ValueError):
            rank_delta(items, rerank(items), "zzz")

    def test_rank_changes(self, items):
        changes = rank_changes(items, rerank(items))
        assert changes[0] == RankChange(key="b", before=1, after=0)
        assert changes[0].delta == 1
        assert str(changes[0]) == "b: 1 -> 0 (+1)"
        assert [c.key for c in changes] == ["b", "a", "c", "d"]


class TestDeduplicate:
    """Tests for item_key() and deduplicate()."""

    def test_by_id_keeps_first(self):
        first, second = scored("a", 10), scored("a", 99)
        assert deduplicate([first, scored("b", 5), second]) == [first, scored("b", 5)]

    def test_topics_without_id_use_normalized_title(self):
        topics = [Topic(title="OpenAI  Model Release"), Topic(title="openai model release"), Topic(title="Other")]
        assert [t.title for t in deduplicate(topics)] == ["OpenAI  Model Release", "Other"]

    def test_item_key(self):
        assert item_key(Topic(title=" Big   News ")) == "big news"
        assert item_key(Topic(title="Big News", id="t-1")) == "t-1"
        assert item_key(scored("x", 1)) == "x"
