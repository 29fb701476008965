"""
Player account domain model.
"""

from dataclasses import dataclass, field

from domain.models.bet import BetKind
from domain.models.gulag import GulagState
from domain.models.item import LoreItem


@dataclass
class WeeklyStats:
    """Aggregate betting statistics for the current weekly cycle."""

    grit_wagered: int = 0
    grit_won: int = 0
    grit_lost: int = 0
    bets_placed: int = 0
    bets_won: int = 0
    bets_lost: int = 0

    def net(self) -> int:
        """Get Grit won minus Grit lost."""
        return self.grit_won - self.grit_lost

    def get_win_rate(self) -> float | None:
        """Get win rate as a percentage, or None if nothing has settled."""
        settled = self.bets_won + self.bets_lost
        if settled == 0:
            return None
        return (self.bets_won / settled) * 100


@dataclass
class PlayerAccount:
    """
    Represents a player's wallet in one game session.

    This is a pure domain model with no infrastructure dependencies.
    Balances are mutated only through LedgerService.
    """

    player_id: str
    name: str
    balance: int = 0
    owned_items: list[LoreItem] = field(default_factory=list)
    bet_history: dict[BetKind, list[str]] = field(
        default_factory=lambda: {kind: [] for kind in BetKind}
    )
    weekly_stats: WeeklyStats = field(default_factory=WeeklyStats)
    # Exists only once the player has gone bankrupt
    gulag: GulagState | None = None

    def find_item(self, instance_id: str) -> LoreItem | None:
        """Return the owned item copy with this instance id, if any."""
        for item in self.owned_items:
            if item.instance_id == instance_id:
                return item
        return None

    def equipped_items(self) -> list[LoreItem]:
        return [item for item in self.owned_items if item.is_equipped]

    def is_locked_out(self) -> bool:
        """Check if the player is currently Locked or Banned."""
        return self.gulag is not None and self.gulag.is_locked

    def __str__(self) -> str:
        return f"{self.name} ({self.balance} Grit)"
