"""
Repository for Squad Ride parlays.
"""

from domain.models.squad_ride import SquadRideParlay
from repositories.base_repository import BaseRepository
from repositories.interfaces import IParlayRepository
from services.errors import NotFound


class ParlayRepository(BaseRepository, IParlayRepository):
    id_prefix = "parlay"

    def add(self, parlay: SquadRideParlay) -> SquadRideParlay:
        self._records[parlay.parlay_id] = parlay
        return parlay

    def get_by_id(self, parlay_id: str) -> SquadRideParlay:
        parlay = self._records.get(parlay_id)
        if parlay is None:
            raise NotFound(f"Parlay {parlay_id} not found.")
        return parlay

    def get_open(self) -> list[SquadRideParlay]:
        return [p for p in self._records.values() if p.is_open]
