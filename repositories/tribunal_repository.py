"""
Repository for Tribunal superlatives.
"""

from domain.models.tribunal import Superlative
from repositories.base_repository import BaseRepository
from repositories.interfaces import ISuperlativeRepository
from services.errors import NotFound


class SuperlativeRepository(BaseRepository, ISuperlativeRepository):
    id_prefix = "superlative"

    def add(self, superlative: Superlative) -> Superlative:
        self._records[superlative.superlative_id] = superlative
        return superlative

    def get_by_id(self, superlative_id: str) -> Superlative:
        superlative = self._records.get(superlative_id)
        if superlative is None:
            raise NotFound(f"Superlative {superlative_id} not found.")
        return superlative

    def get_all(self) -> list[Superlative]:
        return list(self._records.values())

    def get_open(self) -> list[Superlative]:
        return [s for s in self._records.values() if not s.resolved]
