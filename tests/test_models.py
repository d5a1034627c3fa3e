"""
Tests for input and output records.

Validates required fields, alias handling in from_dict, tag normalization,
citation kinds, and serialization.
"""

from datetime import datetime, timezone

import pytest

from pulse_engine.errors import PulseEngineError, SyntheticDataError, ValidationError
from pulse_engine.models import (
    Citation,
    CitationKind,
    ScoredItem,
    ScoreUpdate,
    SocialPost,
    Tag,
    TextItem,
    Topic,
    is_absolute_url,
    normalize_tag_name,
    parse_datetime,
    tag_from_name,
)


# =============================================================================
# Test TextItem
# =============================================================================

class TestTextItem:
    """Tests for TextItem."""

    def test_requires_id_and_title(self):
        with pytest.raises(ValidationError):
            TextItem(id="", title="Title")
        with pytest.raises(ValidationError):
            TextItem(id="a1", title="   ")

    def test_rejects_negative_base_score(self):
        with pytest.raises(ValidationError):
            TextItem(id="a1", title="T", base_score=-1)

    def test_rejects_relative_url(self):
        with pytest.raises(ValidationError):
            TextItem(id="a1", title="T", url="/news/1")

    def test_text_and_keywords(self):
        item = TextItem(id="a1", title="OpenAI ships", body="a reasoning model")
        assert item.text == "OpenAI ships a reasoning model"
        assert item.keywords == {"openai", "ships", "reasoning", "model"}

    def test_from_dict_aliases(self):
        item = TextItem.from_dict({
            "id": 42,
            "title": "Headline",
            "summary": "Short",
            "content": "Long body",
            "source": "Wired",
            "published_date": "2025-01-15T12:00:00Z",
        })
        assert item.id == "42"
        assert item.body == "Short Long body"
        assert item.source_name == "Wired"
        assert item.published_at == datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_round_trip(self, make_article):
        item = make_article()
        assert TextItem.from_dict(item.to_dict()) == item


# =============================================================================
# Test SocialPost
# =============================================================================

class TestSocialPost:
    """Tests for SocialPost."""

    def test_requires_id(self):
        with pytest.raises(ValidationError):
            SocialPost(id=" ")

    @pytest.mark.parametrize("field_name", ["like_count", "repost_count", "reply_count", "quote_count", "author_follower_count"])
    def test_rejects_negative_counts(self, field_name):
        with pytest.raises(ValidationError):
            SocialPost(id="1", **{field_name: -1})

    def test_rejects_non_integer_counts(self):
        with pytest.raises(ValidationError):
            SocialPost(id="1", like_count=1.5)

    def test_from_dict_store_columns(self):
        post = SocialPost.from_dict({
            "id": 1790000000000000001,
            "text": "hello",
            "author_username": "ainewsdaily",
            "author_followers_count": 50000,
            "likes_count": 890,
            "retweets_count": 320,
            "replies_count": 75,
            "quote_count": 45,
            "isVerified": True,
            "url": "https://x.com/ainewsdaily/status/1790000000000000001",
            "createdAt": "2025-01-15T10:00:00Z",
            "impact_score": 99999,
        })
        assert post.id == "1790000000000000001"
        assert post.content == "hello"
        assert post.author_handle == "ainewsdaily"
        assert (post.like_count, post.repost_count, post.reply_count, post.quote_count) == (890, 320, 75, 45)
        assert post.verified
        assert post.impact_score == 0.0
        assert post.created_at.tzinfo is not None

    def test_to_dict_serializes_timestamp(self):
        post = SocialPost(id="1", created_at=datetime(2025, 1, 15, tzinfo=timezone.utc))
        assert post.to_dict()["created_at"] == "2025-01-15T00:00:00+00:00"


# =============================================================================
# Test Tag
# =============================================================================

class TestTag:
    """Tests for Tag and tag helpers."""

    @pytest.mark.parametrize("raw,expected", [("#AI", "ai"), ("  #GPT5 ", "gpt5"), ("ml", "ml")])
    def test_name_is_normalized(self, raw, expected):
        assert normalize_tag_name(raw) == expected
        assert Tag(name=raw).name == expected

    def test_requires_name(self):
        with pytest.raises(ValidationError):
            Tag(name="#")

    def test_tag_from_name(self):
        tag = tag_from_name("#AI")
        assert tag == Tag(name="ai", post_count=1)

    def test_from_dict_bare_string(self):
        assert Tag.from_dict("Robotics") == Tag(name="robotics", post_count=1)

    def test_from_dict_aliases(self):
        tag = Tag.from_dict({"hashtag": "#AI", "tweetCount": 3, "totalLikes": 10, "totalRetweets": 2})
        assert (tag.name, tag.post_count, tag.total_likes, tag.total_reposts) == ("ai", 3, 10, 2)


# =============================================================================
# Test Digest Records
# =============================================================================

class TestCitationKind:
    """Tests for CitationKind.parse()."""

    @pytest.mark.parametrize("value", ["x-post", "tweet", "social-post", "SOCIAL_POST"])
    def test_social_aliases(self, value):
        assert CitationKind.parse(value) is CitationKind.SOCIAL_POST

    def test_article(self):
        assert CitationKind.parse("article") is CitationKind.ARTICLE

    def test_unknown(self):
        with pytest.raises(ValidationError):
            CitationKind.parse("podcast")

    def test_citation_from_dict_type_key(self):
        citation = Citation.from_dict({"title": "T", "url": "https://x.com/a/status/1", "type": "x-post"})
        assert citation.kind is CitationKind.SOCIAL_POST
        assert citation.to_dict()["kind"] == "social-post"


class TestTopic:
    """Tests for Topic."""

    def test_requires_title(self):
        with pytest.raises(ValidationError):
            Topic(title="")

    def test_key_prefers_id(self):
        assert Topic(title="T", id="t-1").key == "t-1"
        assert Topic(title="T").key == "T"

    def test_from_dict_ignores_derived_fields(self):
        topic = Topic.from_dict({
            "title": "T",
            "summary": "S",
            "citations": [{"title": "C", "url": "https://news.site/c"}],
            "social_impact_score": 500,
        })
        assert topic.social_impact_score == 0.0
        assert topic.citations == [Citation(title="C", url="https://news.site/c")]


class TestScoredItem:
    """Tests for ScoredItem and ScoreUpdate."""

    def test_to_update(self):
        scored = ScoredItem(
            item=TextItem(id="a1", title="T", base_score=184.0),
            match_count=6,
            boost_percentage=30.0,
            final_score=239,
        )
        assert scored.to_update() == ScoreUpdate(id="a1", final_score=239, boost_percentage=30.0, match_count=6)
        assert scored.base_score == 184.0

    def test_to_dict(self):
        post = SocialPost(id="p1", content="x")
        scored = ScoredItem(item=TextItem(id="a1", title="T"), related_posts=[post], related_tags=[Tag(name="ai")])
        data = scored.to_dict()
        assert data["related_posts"] == ["p1"]
        assert data["related_tags"] == ["ai"]


# =============================================================================
# Test Helpers and Errors
# =============================================================================

class TestHelpers:
    """Tests for parse_datetime(), is_absolute_url() and the error taxonomy."""

    def test_parse_datetime(self):
        assert parse_datetime(None) is None
        assert parse_datetime("2025-01-15T12:00:00Z").tzinfo is not None

    def test_parse_datetime_invalid(self):
        with pytest.raises(ValidationError):
            parse_datetime("yesterday")

    @pytest.mark.parametrize("url,expected", [
        ("https://x.com/a/status/1", True),
        ("http://news.site", True),
        ("x.com/a", False),
        ("mailto:someone@news.site", False),
        (None, False),
    ])
    def test_is_absolute_url(self, url, expected):
        assert is_absolute_url(url) is expected

    def test_error_hierarchy(self):
        assert issubclass(ValidationError, PulseEngineError)
        assert issubclass(SyntheticDataError, ValueError)
        error = SyntheticDataError("bad", marker="test", value="test_user")
        assert (error.marker, error.value, str(error)) == ("test", "test_user", "bad")
