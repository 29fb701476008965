"""
Gulag (bankruptcy lockout) domain models.
"""

from dataclasses import dataclass, field
from enum import Enum


class GulagPhase(str, Enum):
    FREE = "free"
    LOCKED = "locked"
    BANNED = "banned"


@dataclass
class RedemptionBet:
    """The single high-variance wager offered to a locked player."""

    description: str
    odds: int
    stake: int
    reward: int
    created_at: int
    resolved: bool = False
    won: bool | None = None


@dataclass
class GulagState:
    """
    Bankruptcy state for a player.

    Created on the first bankruptcy and kept after release so the
    bankruptcy counter survives for punishment escalation.
    """

    is_locked: bool = False
    bankruptcy_count: int = 0
    locked_at: int | None = None
    redemption_bet: RedemptionBet | None = None
    ban_expires_at: int | None = None  # Unix timestamp
    rap_sheet: list[str] = field(default_factory=list)

    @property
    def phase(self) -> GulagPhase:
        if not self.is_locked:
            return GulagPhase.FREE
        if self.ban_expires_at is not None:
            return GulagPhase.BANNED
        return GulagPhase.LOCKED


@dataclass(frozen=True)
class Punishment:
    """Escalating penalty applied when a redemption bet is lost."""

    ban_seconds: int
    description: str
    real_world_penalty: str | None = None


@dataclass(frozen=True)
class LockoutStatus:
    """Read-only summary of a player's Gulag situation."""

    player_id: str
    phase: GulagPhase
    prisoner_number: int
    bankruptcy_count: int
    ban_expires_at: int | None
    remaining_ban_hours: int
    redemption_bet: RedemptionBet | None
    rap_sheet: tuple[str, ...]
