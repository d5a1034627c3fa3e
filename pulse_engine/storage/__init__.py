"""
Storage module.

Score write-back backends and the batch writer.
"""

from pulse_engine.storage.base import ScoreStore, UpdateResult, write_in_batches
from pulse_engine.storage.supabase import SupabaseScoreStore, MockScoreStore

__all__ = [
    "ScoreStore",
    "UpdateResult",
    "write_in_batches",
    "SupabaseScoreStore",
    "MockScoreStore",
]
