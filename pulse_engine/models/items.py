"""
Input data models for Pulse Engine.

Defines the records handed to the engine by the retrieval layer for a single
scoring pass: text items (articles and topic texts), social posts, and
hashtag aggregates. All three are treated as immutable inputs; the engine
returns new copies whenever a derived field is filled in.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from pulse_engine.errors import ValidationError


def is_absolute_url(url: Optional[str]) -> bool:
    """Return True for a well-formed absolute http(s) URL."""
    if not url or not isinstance(url, str) or url != url.strip():
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def parse_datetime(value) -> Optional[datetime]:
    """
    Parse an ISO timestamp (accepting a trailing "Z") or pass a datetime through.

    Raises:
        ValidationError: If the value cannot be parsed.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"invalid timestamp {value!r}: {e}") from e


def _check_counts(counts: dict[str, int]) -> list[str]:
    errors = []
    for name, value in counts.items():
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{name} must be an integer, got {value!r}")
        elif value < 0:
            errors.append(f"{name} cannot be negative, got {value}")
    return errors


@dataclass
class TextItem:
    """
    An article or any other titled text that receives a base score.

    Attributes:
        id: Unique identifier of the item in the external store.
        title: Headline.
        body: Summary and/or content concatenation.
        source_name: Publisher name (e.g. "TechCrunch").
        published_at: Publication timestamp; None is treated as maximally stale.
        url: Link to the original article (optional).
        base_score: Importance score computed by the base scorer. This is a
            pure function of (title, body, source_name, published_at, now)
            and is only ever set on copies returned by the scorer.
    """

    id: str
    title: str
    body: str = ""
    source_name: str = ""
    published_at: Optional[datetime] = None
    url: str = ""
    base_score: float = 0.0

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate that required fields are present and valid.

        Raises:
            ValidationError: If validation fails.
        """
        errors = []

        if not self.id or not str(self.id).strip():
            errors.append("id is required and cannot be empty")

        if not self.title or not self.title.strip():
            errors.append("title is required and cannot be empty")

        if self.base_score < 0:
            errors.append(f"base_score cannot be negative, got {self.base_score}")

        if self.url and not is_absolute_url(self.url):
            errors.append(f"url must be an absolute http(s) URL, got {self.url!r}")

        if errors:
            raise ValidationError(f"TextItem validation failed: {'; '.join(errors)}")

    @property
    def text(self) -> str:
        """Title and body joined for matching."""
        return f"{self.title} {self.body or ''}".strip()

    @property
    def keywords(self) -> set[str]:
        """Normalized keywords, recomputed on every access."""
        from pulse_engine.scoring.text import extract_keywords

        return extract_keywords(self.text)

    def to_dict(self) -> dict:
        """Convert to a plain dictionary with ISO timestamps."""
        data = asdict(self)
        if self.published_at:
            data["published_at"] = self.published_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TextItem":
        """
        Create a TextItem from a snapshot dictionary.

        Accepts "summary"/"content" as aliases for body and "source" for
        source_name, as produced by the news store.
        """
        body = data.get("body")
        if body is None:
            parts = [data.get("summary") or "", data.get("content") or ""]
            body = " ".join(p for p in parts if p)

        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            body=body,
            source_name=data.get("source_name") or data.get("source") or "",
            published_at=parse_datetime(data.get("published_at") or data.get("published_date")),
            url=data.get("url") or "",
            base_score=float(data.get("base_score", 0.0) or 0.0),
        )

    def __str__(self) -> str:
        return f"[{self.source_name or 'unknown'}] {self.title} (base: {self.base_score:g})"


@dataclass
class SocialPost:
    """
    A social media post used as engagement evidence.

    impact_score is derived from the engagement counts and follower count by
    the engagement scorer; any incoming value is ignored.
    """

    id: str
    content: str = ""
    author_handle: str = ""
    author_follower_count: int = 0
    like_count: int = 0
    repost_count: int = 0
    reply_count: int = 0
    quote_count: int = 0
    url: str = ""
    created_at: Optional[datetime] = None
    verified: bool = False
    hashtags: list[str] = field(default_factory=list)
    impact_score: float = 0.0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Validate identifiers, counts and URL.

        Raises:
            ValidationError: If validation fails.
        """
        errors = []

        if not self.id or not str(self.id).strip():
            errors.append("id is required and cannot be empty")

        errors.extend(_check_counts(self.engagement_counts()))

        if self.url and not is_absolute_url(self.url):
            errors.append(f"url must be an absolute http(s) URL, got {self.url!r}")

        if errors:
            raise ValidationError(f"SocialPost validation failed: {'; '.join(errors)}")

    def engagement_counts(self) -> dict[str, int]:
        """All non-negative integer fields by name."""
        return {
            "author_follower_count": self.author_follower_count,
            "like_count": self.like_count,
            "repost_count": self.repost_count,
            "reply_count": self.reply_count,
            "quote_count": self.quote_count,
        }

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.created_at:
            data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SocialPost":
        """
        Create a SocialPost from a snapshot dictionary.

        Both snake_case store columns (likes_count, retweets_count, ...) and
        the engine's own field names are accepted.
        """

        def pick(*names, default=0):
            for name in names:
                if data.get(name) is not None:
                    return data[name]
            return default

        return cls(
            id=str(pick("id", default="")),
            content=pick("content", "text", default="") or "",
            author_handle=pick("author_handle", "author_username", "authorUsername", default="") or "",
            author_follower_count=pick("author_follower_count", "author_followers_count", "authorFollowersCount"),
            like_count=pick("like_count", "likes_count", "likesCount"),
            repost_count=pick("repost_count", "retweets_count", "retweetsCount"),
            reply_count=pick("reply_count", "replies_count", "repliesCount"),
            quote_count=pick("quote_count", "quoteCount"),
            url=pick("url", default="") or "",
            created_at=parse_datetime(pick("created_at", "createdAt", default=None)),
            verified=bool(pick("verified", "is_verified", "isVerified", default=False)),
            hashtags=list(pick("hashtags", default=[]) or []),
        )

    def __str__(self) -> str:
        return f"@{self.author_handle or '?'}: {self.content[:60]} (impact: {self.impact_score:g})"


def normalize_tag_name(name: str) -> str:
    """Strip whitespace and leading '#', lowercase."""
    return (name or "").strip().lstrip("#").strip().lower()


@dataclass
class Tag:
    """
    Hashtag aggregate keyed by its normalized name.

    One Tag exists per normalized name; repeated observations are merged by
    summing counts (see scoring.engagement.merge_tags).
    """

    name: str
    post_count: int = 0
    total_likes: int = 0
    total_reposts: int = 0
    total_replies: int = 0
    impact_score: float = 0.0

    def __post_init__(self) -> None:
        self.name = normalize_tag_name(self.name)
        self.validate()

    def validate(self) -> None:
        errors = []

        if not self.name:
            errors.append("name is required and cannot be empty")

        errors.extend(_check_counts(self.counts()))

        if errors:
            raise ValidationError(f"Tag validation failed: {'; '.join(errors)}")

    def counts(self) -> dict[str, int]:
        return {
            "post_count": self.post_count,
            "total_likes": self.total_likes,
            "total_reposts": self.total_reposts,
            "total_replies": self.total_replies,
        }

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> "Tag":
        """
        Create a Tag from a dictionary or a bare name.

        A bare string becomes a single observation with zero engagement.
        """
        if isinstance(data, str):
            return tag_from_name(data)
        return cls(
            name=data.get("name") or data.get("hashtag") or "",
            post_count=data.get("post_count", data.get("tweet_count", data.get("tweetCount", 0))) or 0,
            total_likes=data.get("total_likes", data.get("totalLikes", 0)) or 0,
            total_reposts=data.get("total_reposts", data.get("total_retweets", data.get("totalRetweets", 0))) or 0,
            total_replies=data.get("total_replies", data.get("totalReplies", 0)) or 0,
        )

    def __str__(self) -> str:
        return f"#{self.name} ({self.post_count} posts, impact: {self.impact_score:g})"


def tag_from_name(name: str) -> Tag:
    """Normalize a bare hashtag name into a single-observation Tag."""
    return Tag(name=name, post_count=1)
