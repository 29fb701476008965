"""
Repository for activity baselines (one active baseline per target).
"""

from domain.models.activity import ActivityBaseline
from repositories.base_repository import BaseRepository
from repositories.interfaces import IActivityRepository


class ActivityRepository(BaseRepository, IActivityRepository):
    id_prefix = "baseline"

    def set_baseline(self, baseline: ActivityBaseline) -> None:
        """Store a baseline, replacing any earlier one for the same target."""
        self._records[baseline.target_id] = baseline

    def get_baseline(self, target_id: str) -> ActivityBaseline | None:
        return self._records.get(target_id)

    def delete_baseline(self, target_id: str) -> bool:
        return self._records.pop(target_id, None) is not None

    def clear(self) -> None:
        self._records.clear()
