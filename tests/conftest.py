"""
Pytest Configuration and Fixtures

Shared fixtures for all tests: a fixed clock, the stock lexicon, and small
factories for articles, posts and topics.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pulse_engine.models import SocialPost, TextItem, Topic
from pulse_engine.scoring.lexicon import default_lexicon


# =============================================================================
# SHARED FIXTURES
# =============================================================================

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time for decay calculations."""
    return NOW


@pytest.fixture
def lexicon():
    """The built-in lexicon."""
    return default_lexicon()


@pytest.fixture
def make_article():
    """Factory for TextItem articles published at NOW unless overridden."""
    def _make(id="a1", title="GPT-5 launches today", body="", source_name="TechCrunch", **kwargs):
        kwargs.setdefault("published_at", NOW)
        return TextItem(id=id, title=title, body=body, source_name=source_name, **kwargs)
    return _make


@pytest.fixture
def make_post():
    """Factory for real-looking social posts."""
    def _make(id="1790000000000000001", content="GPT-5 launches today", handle="ainewsdaily", **kwargs):
        kwargs.setdefault("url", f"https://x.com/{handle}/status/{id}")
        return SocialPost(id=id, content=content, author_handle=handle, **kwargs)
    return _make


@pytest.fixture
def make_topic():
    """Factory for topics."""
    def _make(title="OpenAI model release", summary="OpenAI released a new reasoning model", **kwargs):
        return Topic(title=title, summary=summary, **kwargs)
    return _make
