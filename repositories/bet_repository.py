"""
Repository for bets of every kind.
"""

from domain.models.bet import Bet, BetKind
from repositories.base_repository import BaseRepository
from repositories.interfaces import IBetRepository
from services.errors import NotFound


class BetRepository(BaseRepository, IBetRepository):
    """Bets keyed by id, in placement order."""

    id_prefix = "bet"

    def add(self, bet: Bet) -> Bet:
        self._records[bet.bet_id] = bet
        return bet

    def get_by_id(self, bet_id: str) -> Bet:
        bet = self._records.get(bet_id)
        if bet is None:
            raise NotFound(f"Bet {bet_id} not found.")
        return bet

    def get_many(self, bet_ids: list[str]) -> list[Bet]:
        return [self.get_by_id(bet_id) for bet_id in bet_ids]

    def get_all(self, kind: BetKind | None = None) -> list[Bet]:
        bets = list(self._records.values())
        if kind is None:
            return bets
        return [bet for bet in bets if bet.kind == kind]

    def get_by_bettor(self, bettor_id: str, kind: BetKind | None = None) -> list[Bet]:
        return [bet for bet in self.get_all(kind) if bet.bettor_id == bettor_id]

    def get_for_target(self, target_id: str) -> list[Bet]:
        """All Ambush bets naming this target, open or resolved."""
        return [bet for bet in self.get_all(BetKind.AMBUSH) if bet.target_id == target_id]

    def get_open_for_target(self, target_id: str) -> list[Bet]:
        return [bet for bet in self.get_for_target(target_id) if bet.is_open]
