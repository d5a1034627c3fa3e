"""
Reranking for Pulse Engine.

Orders scored items and topics for display and reports how positions moved
after boosting. Sorting is stable: ties keep their input order, so running
rerank() on its own output changes nothing.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Sequence

from pulse_engine.models.digest import ScoredItem, Topic


@dataclass(frozen=True)
class RankChange:
    """Position of one item before and after reranking (0-based)."""
    key: str
    before: int
    after: int

    @property
    def delta(self) -> int:
        """Positive when the item moved up."""
        return self.before - self.after

    def __str__(self) -> str:
        return f"{self.key}: {self.before} -> {self.after} ({self.delta:+d})"


def default_sort_key(item: Any) -> float:
    """final_score for scored items, social_impact_score for topics."""
    if isinstance(item, ScoredItem):
        return item.final_score
    if isinstance(item, Topic):
        return item.social_impact_score
    raise TypeError(f"no default rank key for {type(item).__name__}")


def item_key(item: Any) -> str:
    """Identity of a ranked item: its id, else its normalized title or URL."""
    identifier = getattr(item, "id", "") or ""
    if identifier:
        return str(identifier)

    inner = getattr(item, "item", None)
    title = getattr(item, "title", None) or getattr(inner, "title", "") or ""
    url = getattr(item, "url", None) or getattr(inner, "url", "") or ""
    normalized = re.sub(r"\s+", " ", title).strip().lower()
    return normalized or url.strip().lower()


def rerank(
    items: Sequence[Any],
    key: Optional[Callable[[Any], float]] = None,
) -> list:
    """
    Sort items by descending score.

    Args:
        items: ScoredItem or Topic values (or anything `key` accepts).
        key: Score function. Defaults to default_sort_key().

    Returns:
        New list; the input is not modified.
    """
    score_of = key or default_sort_key
    return sorted(items, key=score_of, reverse=True)


def rank_delta(before: Sequence[Any], after: Sequence[Any], item_id: str) -> int:
    """
    index_before - index_after for the item with the given key.

    Raises:
        ValueError: If item_id is missing from either ordering.
    """
    before_keys = [item_key(i) for i in before]
    after_keys = [item_key(i) for i in after]
    if item_id not in before_keys or item_id not in after_keys:
        raise ValueError(f"unknown item id: {item_id!r}")
    return before_keys.index(item_id) - after_keys.index(item_id)


def rank_changes(before: Sequence[Any], after: Sequence[Any]) -> list[RankChange]:
    """Position changes for every item present in both orderings, in `after` order."""
    before_index: dict[Hashable, int] = {}
    for index, item in enumerate(before):
        before_index.setdefault(item_key(item), index)

    changes = []
    for index, item in enumerate(after):
        k = item_key(item)
        if k in before_index:
            changes.append(RankChange(key=k, before=before_index[k], after=index))
    return changes


def deduplicate(items: Sequence[Any]) -> list:
    """Keep the first occurrence of each item key."""
    seen = set()
    unique = []
    for item in items:
        k = item_key(item)
        if k in seen:
            continue
        seen.add(k)
        unique.append(item)
    return unique
