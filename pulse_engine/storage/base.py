"""
Base storage abstraction for Pulse Engine.

Defines the interface score write-back backends must implement, and the
batch writer that pushes a pass's updates through any backend.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from pulse_engine.models.digest import ScoreUpdate

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    """
    Result of a write-back operation.

    Attributes:
        updated: Number of records updated.
        failed: Number of updates that failed.
        errors: Error messages for failed updates.
        batches: Number of batches sent.
        aborted: True if a stop signal ended the write early.
    """
    updated: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    batches: int = 0
    aborted: bool = False

    @property
    def total_processed(self) -> int:
        """Updates attempted, successful or not."""
        return self.updated + self.failed

    @property
    def ok(self) -> bool:
        return self.failed == 0 and not self.aborted

    def merge(self, other: "UpdateResult") -> None:
        """Add another result's counts into this one."""
        self.updated += other.updated
        self.failed += other.failed
        self.errors.extend(other.errors)

    def __str__(self) -> str:
        return (
            f"UpdateResult(updated={self.updated}, failed={self.failed}, "
            f"batches={self.batches}, aborted={self.aborted})"
        )


class ScoreStore(ABC):
    """
    Abstract base class for score write-back backends.

    Updates are keyed by item id and overwrite the stored score fields,
    so applying the same update twice leaves the store unchanged.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this backend, used in logs."""
        pass

    @abstractmethod
    def apply_update(self, update: ScoreUpdate) -> None:
        """
        Write one update.

        Raises:
            Exception: Any backend failure. apply_updates() records it.
        """
        pass

    def apply_updates(self, updates: Iterable[ScoreUpdate]) -> UpdateResult:
        """
        Write each update independently.

        A failing update is counted and logged; the rest still go through.
        """
        result = UpdateResult()
        for update in updates:
            try:
                self.apply_update(update)
                result.updated += 1
            except Exception as e:
                result.failed += 1
                result.errors.append(f"Update failed for {update.id}: {e}")
                logger.warning("%s: update failed for %s: %s", self.name, update.id, e)
        return result

    def __str__(self) -> str:
        return f"ScoreStore({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


def write_in_batches(
    store: ScoreStore,
    updates: Iterable[ScoreUpdate],
    batch_size: int = 50,
    delay: float = 0.5,
    stop_event: Optional[threading.Event] = None,
) -> UpdateResult:
    """
    Push updates to a store in bounded batches.

    The stop signal is checked before each batch, and the wait between
    batches returns early when it is set. A batch already in flight always
    finishes.

    Args:
        store: Target backend.
        updates: Updates to write.
        batch_size: Maximum updates per batch.
        delay: Seconds to wait between batches.
        stop_event: Optional abort signal.

    Returns:
        Aggregated UpdateResult.

    Raises:
        ValueError: If batch_size is not positive.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    pending = list(updates)
    result = UpdateResult()

    for start in range(0, len(pending), batch_size):
        if start > 0 and delay > 0:
            if stop_event is not None:
                stop_event.wait(delay)
            else:
                time.sleep(delay)

        if stop_event is not None and stop_event.is_set():
            result.aborted = True
            logger.warning(
                "Write-back to %s aborted after %d of %d updates",
                store.name, result.total_processed, len(pending),
            )
            break

        batch = pending[start:start + batch_size]
        result.merge(store.apply_updates(batch))
        result.batches += 1
        logger.info(
            "Batch %d: wrote %d updates to %s (%d failed so far)",
            result.batches, len(batch), store.name, result.failed,
        )

    return result
