"""
Tests for score write-back.

Tests the ScoreStore contract, batch writing and abort behavior, and the
Supabase request format (with requests mocked).
"""

import threading
from unittest.mock import Mock, patch

import pytest
import requests

from pulse_engine.models import ScoreUpdate
from pulse_engine.storage import (
    MockScoreStore,
    ScoreStore,
    SupabaseScoreStore,
    UpdateResult,
    write_in_batches,
)


# =============================================================================
# Test Fixtures
# =============================================================================

def make_updates(count):
    return [
        ScoreUpdate(id=f"a{i}", final_score=100 + i, boost_percentage=10.0, match_count=2)
        for i in range(count)
    ]


@pytest.fixture
def mock_store():
    return MockScoreStore()


@pytest.fixture
def supabase_store():
    store = SupabaseScoreStore(
        url="https://project.supabase.co/",
        api_key="service-role-key",
        table="news_items",
        timeout=5,
    )
    store.REQUEST_DELAY = 0
    return store


class StoppingStore(MockScoreStore):
    """Sets the stop signal after its first batch."""

    def __init__(self, stop_event):
        super().__init__()
        self.stop_event = stop_event

    def apply_updates(self, updates):
        result = super().apply_updates(updates)
        self.stop_event.set()
        return result


# =============================================================================
# Test UpdateResult and ScoreStore
# =============================================================================

class TestUpdateResult:
    """Tests for UpdateResult."""

    def test_defaults(self):
        result = UpdateResult()
        assert result.errors == []
        assert result.ok

    def test_merge(self):
        result = UpdateResult(updated=1)
        result.merge(UpdateResult(updated=2, failed=1, errors=["x"]))
        assert (result.updated, result.failed, result.errors) == (3, 1, ["x"])
        assert result.total_processed == 4
        assert not result.ok

    def test_str(self):
        assert "updated=3" in str(UpdateResult(updated=3))


class TestMockScoreStore:
    """Tests for MockScoreStore and the ScoreStore contract."""

    def test_is_score_store(self, mock_store):
        assert isinstance(mock_store, ScoreStore)
        assert mock_store.name == "mock"

    def test_applies_updates(self, mock_store):
        result = mock_store.apply_updates(make_updates(3))
        assert result.updated == 3
        assert mock_store.get("a1").final_score == 101

    def test_idempotent(self, mock_store):
        mock_store.apply_updates(make_updates(3))
        mock_store.apply_updates(make_updates(3))
        assert mock_store.count() == 3

    def test_failures_are_isolated(self):
        store = MockScoreStore(failing_ids={"a1"})
        result = store.apply_updates(make_updates(3))
        assert result.updated == 2
        assert result.failed == 1
        assert "a1" in result.errors[0]
        assert store.get("a2") is not None


# =============================================================================
# Test Batch Writing
# =============================================================================

class TestWriteInBatches:
    """Tests for write_in_batches()."""

    def test_bounded_batches(self, mock_store):
        result = write_in_batches(mock_store, make_updates(120), batch_size=50, delay=0)
        assert result.batches == 3
        assert result.updated == 120
        assert mock_store.count() == 120

    def test_empty(self, mock_store):
        result = write_in_batches(mock_store, [], batch_size=50, delay=0)
        assert result.batches == 0
        assert result.ok

    def test_failures_do_not_abort_batch(self):
        store = MockScoreStore(failing_ids={"a0", "a60"})
        result = write_in_batches(store, make_updates(100), batch_size=50, delay=0)
        assert result.updated == 98
        assert result.failed == 2
        assert result.batches == 2
        assert not result.aborted

    def test_abort_between_batches(self):
        stop_event = threading.Event()
        store = StoppingStore(stop_event)
        result = write_in_batches(store, make_updates(120), batch_size=50, delay=0, stop_event=stop_event)
        assert result.aborted
        assert result.batches == 1
        assert result.updated == 50
        assert not result.ok

    def test_abort_before_first_batch(self, mock_store):
        stop_event = threading.Event()
        stop_event.set()
        result = write_in_batches(mock_store, make_updates(10), stop_event=stop_event)
        assert result.aborted
        assert mock_store.count() == 0

    def test_delay_between_batches(self, mock_store):
        with patch("pulse_engine.storage.base.time.sleep") as mock_sleep:
            write_in_batches(mock_store, make_updates(120), batch_size=50, delay=0.5)
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(0.5)

    def test_invalid_batch_size(self, mock_store):
        with pytest.raises(ValueError):
            write_in_batches(mock_store, make_updates(1), batch_size=0)


# =============================================================================
# Test Supabase Store
# =============================================================================

class TestSupabaseScoreStore:
    """Tests for SupabaseScoreStore."""

    def test_update_to_fields(self):
        update = ScoreUpdate(id="a1", final_score=239, boost_percentage=30.0, match_count=6)
        assert SupabaseScoreStore.update_to_fields(update) == {
            "importance_score": 239,
            "social_boost_percentage": 30.0,
            "social_match_count": 6,
        }

    @patch("pulse_engine.storage.supabase.requests.patch")
    def test_patch_request(self, mock_patch, supabase_store):
        mock_patch.return_value = Mock(status_code=204)

        supabase_store.apply_update(ScoreUpdate(id="a1", final_score=239, boost_percentage=30.0, match_count=6))

        mock_patch.assert_called_once()
        args, kwargs = mock_patch.call_args
        assert args[0] == "https://project.supabase.co/rest/v1/news_items"
        assert kwargs["params"] == {"id": "eq.a1"}
        assert kwargs["json"]["importance_score"] == 239
        assert kwargs["headers"]["apikey"] == "service-role-key"
        assert kwargs["headers"]["Authorization"] == "Bearer service-role-key"
        assert kwargs["timeout"] == 5

    @patch("pulse_engine.storage.supabase.requests.patch")
    def test_http_error_is_recorded(self, mock_patch, supabase_store):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        mock_patch.return_value = response

        result = supabase_store.apply_updates(make_updates(2))

        assert result.failed == 2
        assert "500" in result.errors[0]

    @patch("pulse_engine.storage.supabase.requests.patch")
    def test_partial_failure(self, mock_patch, supabase_store):
        ok = Mock()
        bad = Mock()
        bad.raise_for_status.side_effect = requests.ConnectionError("reset")
        mock_patch.side_effect = [ok, bad, ok]

        result = supabase_store.apply_updates(make_updates(3))

        assert result.updated == 2
        assert result.failed == 1

    @patch("pulse_engine.storage.supabase.requests.patch")
    def test_unconfigured_store_fails_without_request(self, mock_patch):
        store = SupabaseScoreStore(url="", api_key="")
        result = store.apply_updates(make_updates(1))
        assert result.failed == 1
        assert "SUPABASE_URL" in result.errors[0]
        mock_patch.assert_not_called()
