"""
Repository for player accounts and the house account.
"""

import copy

from domain.models.player import PlayerAccount
from repositories.base_repository import BaseRepository
from repositories.interfaces import IPlayerRepository
from services.errors import NotFound


class PlayerRepository(BaseRepository, IPlayerRepository):
    """
    In-memory account store for one game session.

    Besides player accounts it tracks house revenue (commish cuts and
    trading tax), which is restored together with balances on rollback.
    """

    id_prefix = "player"

    def __init__(self):
        super().__init__()
        self._house_revenue = 0

    def add(self, account: PlayerAccount) -> PlayerAccount:
        if account.player_id in self._records:
            raise ValueError(f"Player {account.player_id} already has an account.")
        self._records[account.player_id] = account
        return account

    def get_by_id(self, player_id: str) -> PlayerAccount:
        account = self._records.get(player_id)
        if account is None:
            raise NotFound(f"No account for player {player_id}.")
        return account

    def get_all(self) -> list[PlayerAccount]:
        return list(self._records.values())

    def exists(self, player_id: str) -> bool:
        return player_id in self._records

    def get_balance(self, player_id: str) -> int:
        return self.get_by_id(player_id).balance

    def update_balance(self, player_id: str, amount: int) -> None:
        """Set a player's balance to an absolute value."""
        self.get_by_id(player_id).balance = amount

    def add_balance(self, player_id: str, amount: int) -> None:
        """Add (or subtract, if negative) from a player's balance."""
        self.get_by_id(player_id).balance += amount

    def get_house_revenue(self) -> int:
        return self._house_revenue

    def add_house_revenue(self, amount: int) -> None:
        self._house_revenue += amount

    def snapshot(self) -> dict:
        return {
            "records": copy.deepcopy(self._records),
            "house_revenue": self._house_revenue,
        }

    def restore(self, state: dict) -> None:
        super().restore(state)
        self._house_revenue = state["house_revenue"]
