"""
Supabase score store for Pulse Engine.

Writes final scores back to the articles table through the PostgREST API
that Supabase exposes.

=============================================================================
SUPABASE SCHEMA
=============================================================================

Columns updated on the scored table (default "news_items"):

| Column Name             | Type    | Description                          |
|-------------------------|---------|--------------------------------------|
| id                      | text    | Article id (row filter)              |
| importance_score        | integer | Final boosted score                  |
| social_boost_percentage | numeric | Boost applied, 0 to 50               |
| social_match_count      | integer | Keywords evidenced by social posts   |

Each update is a single PATCH filtered on id, so re-sending an update
overwrites the same values.

=============================================================================
"""

import time
from typing import Any, Dict, Iterable, Optional

import requests

from pulse_engine.config import (
    REQUEST_TIMEOUT,
    SUPABASE_SERVICE_ROLE_KEY,
    SUPABASE_TABLE,
    SUPABASE_URL,
)
from pulse_engine.models.digest import ScoreUpdate
from pulse_engine.storage.base import ScoreStore


class SupabaseScoreStore(ScoreStore):
    """
    Supabase-backed score store.

    Configuration is pulled from environment variables via pulse_engine.config:
    - SUPABASE_URL: Project URL
    - SUPABASE_SERVICE_ROLE_KEY: Key with update rights on the table
    - SUPABASE_TABLE: Table to update
    """

    # Minimum pause between requests
    REQUEST_DELAY = 0.1

    def __init__(
        self,
        url: str = None,
        api_key: str = None,
        table: str = None,
        timeout: int = None,
    ):
        """
        Initialize SupabaseScoreStore.

        Args:
            url: Project URL. Defaults to config.SUPABASE_URL.
            api_key: Service role key. Defaults to config.SUPABASE_SERVICE_ROLE_KEY.
            table: Table name. Defaults to config.SUPABASE_TABLE.
            timeout: Request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
        """
        self.url = (url if url is not None else SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SUPABASE_SERVICE_ROLE_KEY
        self.table = table if table is not None else SUPABASE_TABLE
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT

        self._last_request_time = 0.0

    @property
    def name(self) -> str:
        return "supabase"

    @property
    def _base_url(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    def _rate_limit(self) -> None:
        """Enforce the minimum delay between requests."""
        now = time.time()
        elapsed = now - self._last_request_time
        if elapsed < self.REQUEST_DELAY:
            time.sleep(self.REQUEST_DELAY - elapsed)
        self._last_request_time = time.time()

    def _validate_config(self) -> None:
        if not self.url:
            raise ValueError("SUPABASE_URL is not configured")
        if not self.api_key:
            raise ValueError("SUPABASE_SERVICE_ROLE_KEY is not configured")
        if not self.table:
            raise ValueError("SUPABASE_TABLE is not configured")

    @staticmethod
    def update_to_fields(update: ScoreUpdate) -> Dict[str, Any]:
        """Map a ScoreUpdate to the table's column names."""
        return {
            "importance_score": update.final_score,
            "social_boost_percentage": update.boost_percentage,
            "social_match_count": update.match_count,
        }

    def apply_update(self, update: ScoreUpdate) -> None:
        """
        PATCH one row.

        Raises:
            ValueError: If the store is not configured.
            requests.RequestException: On transport or HTTP errors.
        """
        self._validate_config()
        self._rate_limit()

        response = requests.patch(
            self._base_url,
            params={"id": f"eq.{update.id}"},
            headers=self._headers,
            json=self.update_to_fields(update),
            timeout=self.timeout,
        )
        response.raise_for_status()


class MockScoreStore(ScoreStore):
    """
    In-memory score store for dry runs and tests.

    Updates are kept by id; ids in `failing_ids` raise on write.
    """

    def __init__(self, failing_ids: Optional[Iterable[str]] = None):
        self._records: Dict[str, ScoreUpdate] = {}
        self.failing_ids = set(failing_ids or ())
        self.calls = 0

    @property
    def name(self) -> str:
        return "mock"

    def apply_update(self, update: ScoreUpdate) -> None:
        self.calls += 1
        if update.id in self.failing_ids:
            raise RuntimeError(f"simulated failure for {update.id}")
        self._records[update.id] = update

    def get(self, item_id: str) -> Optional[ScoreUpdate]:
        return self._records.get(item_id)

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()

    def count(self) -> int:
        """Return number of stored records (for testing)."""
        return len(self._records)
