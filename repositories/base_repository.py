"""
Base repository with common in-memory store operations.
"""

import copy
import itertools
import logging
import threading
from abc import ABC
from contextlib import contextmanager

logger = logging.getLogger("grit_core.repositories")


class BaseRepository(ABC):
    """
    Base class for all repositories.

    Each repository owns one in-memory store for a single game session.
    Nothing is shared between instances, so separate sessions and tests
    run in isolation.
    """

    id_prefix = "rec"

    def __init__(self):
        self._records: dict[str, object] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def next_id(self) -> str:
        """Generate the next record id, e.g. ``bet_3``."""
        return f"{self.id_prefix}_{next(self._ids)}"

    def count(self) -> int:
        return len(self._records)

    def snapshot(self) -> dict:
        """Deep copy of the mutable state, restorable with ``restore``."""
        return {"records": copy.deepcopy(self._records)}

    def restore(self, state: dict) -> None:
        """
        Restore a snapshot in place.

        Records that still exist are updated field by field so references
        held by callers stay valid.
        """
        saved = state["records"]
        for key in list(self._records):
            if key not in saved:
                del self._records[key]
        for key, value in saved.items():
            current = self._records.get(key)
            if current is not None and type(current) is type(value) and hasattr(value, "__dict__"):
                current.__dict__.update(value.__dict__)
            else:
                self._records[key] = value

    @contextmanager
    def atomic_transaction(self, *others: "BaseRepository"):
        """
        Context manager for all-or-nothing mutations.

        Snapshots this repository and every repository in ``others``; if an
        exception escapes the block, all of them are restored and the
        exception propagates. The re-entrant lock serializes writers that
        share this repository.

        Usage:
            with player_repo.atomic_transaction(bet_repo):
                ledger.credit(...)
                bet.settle(...)
        """
        repos = (self, *others)
        with self._lock:
            snapshots = [repo.snapshot() for repo in repos]
            try:
                yield self
            except Exception:
                for repo, state in zip(repos, snapshots):
                    repo.restore(state)
                logger.debug(f"Rolled back transaction on {type(self).__name__}")
                raise
