"""
Squad Ride (co-op parlay) domain models.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ParlayLeg:
    description: str
    odds: int


@dataclass
class SquadRideParlay:
    """A creator-proposed parlay that other players ride by staking into it."""

    parlay_id: str
    creator_id: str
    legs: list[ParlayLeg]
    total_odds: int
    created_at: int
    rider_bet_ids: list[str] = field(default_factory=list)
    rider_ids: list[str] = field(default_factory=list)
    leg_results: list[bool] | None = None
    resolved: bool = False
    resolved_at: int | None = None

    @property
    def is_open(self) -> bool:
        return not self.resolved

    @property
    def succeeded(self) -> bool | None:
        if self.leg_results is None:
            return None
        return all(self.leg_results)
