"""
Squad Ride: cooperative parlays that several players ride together.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from config import (
    SQUAD_RIDE_MAX_ODDS,
    SQUAD_RIDE_MIN_LEGS,
    SQUAD_RIDE_MIN_ODDS,
    SQUAD_RIDE_RIDER_BONUS,
)
from domain.models.bet import Bet, BetKind, BetStatus, SquadRideDetails
from domain.models.squad_ride import ParlayLeg, SquadRideParlay
from domain.services.odds_calculator import combine_parlay_odds
from repositories.bet_repository import BetRepository
from repositories.player_repository import PlayerRepository
from repositories.squad_ride_repository import ParlayRepository
from services.errors import AlreadyJoined, AlreadyResolved, OutOfRange, WindowClosed
from services.inventory_service import InventoryService
from services.ledger_service import LedgerService

logger = logging.getLogger("grit_core.services.squad_ride")


@dataclass(frozen=True)
class ParlayProgress:
    legs_total: int
    legs_won: int
    legs_lost: int
    riders: int
    total_staked: int


class SquadRideService:
    """
    Creates, rides and resolves Squad Ride parlays.

    Each rider's multiplier is 1 + bonus * (riders already aboard), so
    later riders earn a bigger multiplier on the same parlay odds.
    """

    def __init__(
        self,
        parlay_repo: ParlayRepository,
        bet_repo: BetRepository,
        player_repo: PlayerRepository,
        ledger: LedgerService,
        min_odds: int | None = None,
        max_odds: int | None = None,
        rider_bonus: float | None = None,
        min_legs: int | None = None,
        inventory_service: InventoryService | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.parlay_repo = parlay_repo
        self.bet_repo = bet_repo
        self.player_repo = player_repo
        self.ledger = ledger
        self.min_odds = min_odds if min_odds is not None else SQUAD_RIDE_MIN_ODDS
        self.max_odds = max_odds if max_odds is not None else SQUAD_RIDE_MAX_ODDS
        self.rider_bonus = rider_bonus if rider_bonus is not None else SQUAD_RIDE_RIDER_BONUS
        self.min_legs = min_legs if min_legs is not None else SQUAD_RIDE_MIN_LEGS
        self.inventory_service = inventory_service
        self.clock = clock or time.time

    def _winnings(self, bet: Bet) -> int:
        """Potential payout plus the bettor's equipped-item bonus for this kind of bet."""
        if self.inventory_service is None:
            return bet.potential_payout
        return self.inventory_service.boosted_payout(bet.bettor_id, bet.kind.value, bet.potential_payout)

    def create_parlay(
        self,
        creator_id: str,
        legs: list[ParlayLeg],
        min_odds: int | None = None,
        max_odds: int | None = None,
    ) -> SquadRideParlay:
        """
        Propose a parlay. The creator does not ride automatically.

        Raises:
            OutOfRange: If there are too few legs or the combined odds fall
                outside [min_odds, max_odds].
        """
        min_odds = self.min_odds if min_odds is None else min_odds
        max_odds = self.max_odds if max_odds is None else max_odds
        if len(legs) < self.min_legs:
            raise OutOfRange(f"A Squad Ride needs at least {self.min_legs} legs.")
        self.player_repo.get_by_id(creator_id)

        total_odds = combine_parlay_odds([leg.odds for leg in legs])
        if total_odds < min_odds:
            raise OutOfRange(f"Total odds must be at least +{min_odds} (got {total_odds:+d}).")
        if total_odds > max_odds:
            raise OutOfRange(f"Total odds cannot exceed +{max_odds} (got {total_odds:+d}).")

        parlay = SquadRideParlay(
            parlay_id=self.parlay_repo.next_id(),
            creator_id=creator_id,
            legs=list(legs),
            total_odds=total_odds,
            created_at=int(self.clock()),
        )
        self.parlay_repo.add(parlay)
        logger.info(f"Squad Ride {parlay.parlay_id} created by {creator_id} at {total_odds:+d}")
        return parlay

    def rider_multiplier(self, riders_already_joined: int) -> float:
        return round(1 + self.rider_bonus * riders_already_joined, 6)

    def ride(self, player_id: str, parlay_id: str, stake: int) -> Bet:
        """
        Stake into an open parlay.

        Raises:
            WindowClosed: If the parlay is already resolved.
            AlreadyJoined: If the player is already riding it.
        """
        parlay = self.parlay_repo.get_by_id(parlay_id)
        if not parlay.is_open:
            raise WindowClosed(f"Squad Ride {parlay_id} is no longer open.")
        if player_id in parlay.rider_ids:
            raise AlreadyJoined(f"{player_id} is already riding {parlay_id}.")

        bet = Bet(
            bet_id=self.bet_repo.next_id(),
            kind=BetKind.SQUAD_RIDE,
            bettor_id=player_id,
            stake=stake,
            odds=parlay.total_odds,
            details=SquadRideDetails(parlay_id=parlay_id),
            created_at=int(self.clock()),
            multiplier=self.rider_multiplier(len(parlay.rider_ids)),
        )
        with self.player_repo.atomic_transaction(self.bet_repo, self.parlay_repo):
            self.ledger.escrow_stake(player_id, stake, BetKind.SQUAD_RIDE, bet.bet_id)
            self.bet_repo.add(bet)
            parlay.rider_ids.append(player_id)
            parlay.rider_bet_ids.append(bet.bet_id)
        return bet

    def resolve(self, parlay_id: str, results: list[bool]) -> dict[str, int]:
        """
        Settle a parlay given one result per leg.

        The parlay succeeds only if every leg won; each rider then receives
        floor(payout(stake, total_odds) * multiplier).

        Returns:
            Grit credited per rider bet id (empty if the parlay lost).

        Raises:
            AlreadyResolved: If the parlay was already resolved.
            ValueError: If the number of results does not match the legs.
        """
        parlay = self.parlay_repo.get_by_id(parlay_id)
        if parlay.resolved:
            raise AlreadyResolved(f"Squad Ride {parlay_id} has already been resolved.")
        if len(results) != len(parlay.legs):
            raise ValueError(
                f"Expected {len(parlay.legs)} leg results, got {len(results)}."
            )

        now = int(self.clock())
        payouts: dict[str, int] = {}
        with self.player_repo.atomic_transaction(self.bet_repo, self.parlay_repo):
            parlay.leg_results = list(results)
            parlay.resolved = True
            parlay.resolved_at = now
            won = all(results)
            for bet in self.bet_repo.get_many(parlay.rider_bet_ids):
                if won:
                    bet.settle(BetStatus.WON, now)
                    amount = self._winnings(bet)
                    self.ledger.credit_winnings(bet.bettor_id, amount)
                    payouts[bet.bet_id] = amount
                else:
                    bet.settle(BetStatus.LOST, now)
                    self.ledger.record_loss(bet.bettor_id, bet.stake)

        logger.info(f"Squad Ride {parlay_id} {'hit' if won else 'busted'} ({len(parlay.rider_ids)} riders)")
        return payouts

    def progress(self, parlay_id: str) -> ParlayProgress:
        parlay = self.parlay_repo.get_by_id(parlay_id)
        results = parlay.leg_results or []
        return ParlayProgress(
            legs_total=len(parlay.legs),
            legs_won=sum(1 for r in results if r),
            legs_lost=sum(1 for r in results if not r),
            riders=len(parlay.rider_ids),
            total_staked=sum(bet.stake for bet in self.bet_repo.get_many(parlay.rider_bet_ids)),
        )

    def open_parlays(self) -> list[SquadRideParlay]:
        return self.parlay_repo.get_open()
