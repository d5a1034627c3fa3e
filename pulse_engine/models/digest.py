"""
Output data models for Pulse Engine.

Topics and scored items are rebuilt from scratch on every scoring pass;
nothing here is updated incrementally.
"""

from dataclasses import dataclass, field
from enum import Enum

from pulse_engine.errors import ValidationError
from pulse_engine.models.items import SocialPost, Tag, TextItem


class CitationKind(str, Enum):
    """Kind of evidence a citation points to."""

    ARTICLE = "article"
    SOCIAL_POST = "social-post"

    @classmethod
    def parse(cls, value) -> "CitationKind":
        """Parse a kind string; "x-post" and "tweet" are social-post aliases."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text in ("x-post", "tweet", "social", "social_post"):
            return cls.SOCIAL_POST
        try:
            return cls(text)
        except ValueError as e:
            raise ValidationError(f"unknown citation kind {value!r}") from e


@dataclass
class Citation:
    """
    A reference attached to a topic.

    The URL is checked by the citation curator, not here, so that topics
    carrying a malformed citation can still be loaded and repaired.
    """

    title: str
    url: str
    kind: CitationKind = CitationKind.ARTICLE

    def __post_init__(self) -> None:
        self.kind = CitationKind.parse(self.kind)

    def to_dict(self) -> dict:
        return {"title": self.title, "url": self.url, "kind": self.kind.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Citation":
        return cls(
            title=data.get("title") or "",
            url=data.get("url") or "",
            kind=data.get("kind") or data.get("type") or CitationKind.ARTICLE,
        )


@dataclass
class Topic:
    """
    A digest entry enriched with social evidence.

    Attributes:
        title: Topic headline.
        summary: Short description.
        citations: Ordered citations (articles first, then social posts).
        related_posts: Top-N relevant posts.
        related_tags: Top-N relevant tags.
        social_impact_score: Mean impact of related posts and tags.
        id: Optional identifier; the title is used as the key when empty.
    """

    title: str
    summary: str = ""
    citations: list[Citation] = field(default_factory=list)
    related_posts: list[SocialPost] = field(default_factory=list)
    related_tags: list[Tag] = field(default_factory=list)
    social_impact_score: float = 0.0
    id: str = ""

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValidationError("Topic validation failed: title is required and cannot be empty")

    @property
    def key(self) -> str:
        return self.id or self.title

    @property
    def text(self) -> str:
        return f"{self.title} {self.summary or ''}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "citations": [c.to_dict() for c in self.citations],
            "related_posts": [p.to_dict() for p in self.related_posts],
            "related_tags": [t.to_dict() for t in self.related_tags],
            "social_impact_score": self.social_impact_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Topic":
        """Create a Topic from a digest dictionary; derived fields are not read."""
        return cls(
            id=str(data.get("id") or ""),
            title=data.get("title") or "",
            summary=data.get("summary") or "",
            citations=[Citation.from_dict(c) for c in data.get("citations") or []],
        )

    def __str__(self) -> str:
        return f"{self.title} (social impact: {self.social_impact_score:g})"


@dataclass(frozen=True)
class ScoreUpdate:
    """Write-back record for the external store."""

    id: str
    final_score: int
    boost_percentage: float
    match_count: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "final_score": self.final_score,
            "boost_percentage": self.boost_percentage,
            "match_count": self.match_count,
        }


@dataclass
class ScoredItem:
    """
    A text item with its social boost applied.

    Attributes:
        item: Copy of the input item carrying its recomputed base_score.
        match_count: Distinct keywords of the item evidenced by matched posts.
        social_impact_contribution: Mean impact of the matched posts and tags.
        boost_percentage: min(match_count * 5, 50).
        final_score: round(base_score * (1 + boost_percentage / 100)).
        related_posts: Matched posts, most relevant first.
    """

    item: TextItem
    match_count: int = 0
    social_impact_contribution: float = 0.0
    boost_percentage: float = 0.0
    final_score: int = 0
    related_posts: list[SocialPost] = field(default_factory=list)
    related_tags: list[Tag] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def key(self) -> str:
        return self.item.id

    @property
    def base_score(self) -> float:
        return self.item.base_score

    def to_update(self) -> ScoreUpdate:
        return ScoreUpdate(
            id=self.item.id,
            final_score=self.final_score,
            boost_percentage=self.boost_percentage,
            match_count=self.match_count,
        )

    def to_dict(self) -> dict:
        data = self.item.to_dict()
        data.update(
            {
                "match_count": self.match_count,
                "social_impact_contribution": self.social_impact_contribution,
                "boost_percentage": self.boost_percentage,
                "final_score": self.final_score,
                "related_posts": [p.id for p in self.related_posts],
                "related_tags": [t.name for t in self.related_tags],
            }
        )
        return data

    def __str__(self) -> str:
        return (
            f"{self.item.title} (base: {self.item.base_score:g}, "
            f"boost: {self.boost_percentage:g}%, final: {self.final_score})"
        )
