"""
Bet domain model.

Every bet kind shares one shape (stake, odds, status, evidence, timestamps)
and carries a kind-specific payload in ``details``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from domain.services.odds_calculator import payout
from services.errors import AlreadyResolved


class BetKind(str, Enum):
    AMBUSH = "ambush"
    TRIBUNAL = "tribunal"
    SQUAD_RIDE = "squad_ride"
    SINGLE = "single"


class BetStatus(str, Enum):
    OPEN = "open"
    WON = "won"
    LOST = "lost"
    VOIDED = "voided"


class AmbushCategory(str, Enum):
    SOCIAL = "social"
    BEHAVIOR = "behavior"
    PROP = "prop"


@dataclass(frozen=True)
class AmbushDetails:
    target_id: str
    category: AmbushCategory
    description: str


@dataclass(frozen=True)
class TribunalDetails:
    superlative_id: str
    nominee_id: str


@dataclass(frozen=True)
class SquadRideDetails:
    parlay_id: str


@dataclass(frozen=True)
class SingleDetails:
    market: str  # e.g. "moneyline", "spread", "prop"
    description: str
    pick: str


BetDetails = AmbushDetails | TribunalDetails | SquadRideDetails | SingleDetails


@dataclass
class Bet:
    """
    A single wager of any kind.

    The potential payout is always derived from (stake, odds, multiplier)
    and never stored.
    """

    bet_id: str
    kind: BetKind
    bettor_id: str
    stake: int
    odds: int
    details: BetDetails
    created_at: int
    status: BetStatus = BetStatus.OPEN
    evidence: list[str] = field(default_factory=list)
    resolved_at: int | None = None
    multiplier: float = 1.0

    @property
    def potential_payout(self) -> int:
        base = payout(self.stake, self.odds)
        if self.multiplier == 1.0:
            return base
        # Round away float noise (1.1 * 250) before flooring
        return int(round(base * self.multiplier, 6))

    @property
    def is_open(self) -> bool:
        return self.status == BetStatus.OPEN

    @property
    def target_id(self) -> str | None:
        """Target of an Ambush bet, None for every other kind."""
        if isinstance(self.details, AmbushDetails):
            return self.details.target_id
        return None

    def settle(self, status: BetStatus, at: int, evidence: list[str] | None = None) -> None:
        """
        Move the bet from open to a resolved status.

        Raises:
            AlreadyResolved: If the bet was already resolved.
            ValueError: If status is OPEN.
        """
        if self.status != BetStatus.OPEN:
            raise AlreadyResolved(f"Bet {self.bet_id} is already {self.status.value}.")
        if status == BetStatus.OPEN:
            raise ValueError("Cannot settle a bet back to open.")
        self.status = status
        self.resolved_at = at
        if evidence:
            self.evidence.extend(evidence)


@dataclass(frozen=True)
class AmbushTargetView:
    """
    What a target may see about one bet placed against them: its status.

    ``bet_id`` is an opaque handle for following the status between views.
    """

    bet_id: str
    status: BetStatus


@dataclass
class AmbushView:
    """
    A player's view of the Ambush board.

    ``placed`` holds the player's own bets in full; ``against`` holds only
    the redacted projection of bets targeting them. The aggregate total and
    count cover bets still open.
    """

    placed: list[Bet]
    against: list[AmbushTargetView]
    total_staked_against: int
    open_count: int
