"""
Handles standard single (sportsbook) bets.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from domain.models.bet import Bet, BetKind, BetStatus, SingleDetails
from domain.services.odds_calculator import validate_odds
from repositories.bet_repository import BetRepository
from repositories.player_repository import PlayerRepository
from services.errors import OutOfRange
from services.inventory_service import InventoryService
from services.ledger_service import LedgerService

logger = logging.getLogger("grit_core.services.betting")

VALID_MARKETS = ("moneyline", "spread", "over_under", "prop")


@dataclass(frozen=True)
class WeeklySummary:
    """A player's betting activity for the current cycle."""

    player_id: str
    grit_wagered: int
    grit_won: int
    grit_lost: int
    bets_placed: int
    bets_won: int
    bets_lost: int
    open_bets: int
    win_rate: float | None


class BettingService:
    """Encapsulates single-bet wagering and settlement."""

    def __init__(
        self,
        bet_repo: BetRepository,
        player_repo: PlayerRepository,
        ledger: LedgerService,
        inventory_service: InventoryService | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.bet_repo = bet_repo
        self.player_repo = player_repo
        self.ledger = ledger
        self.inventory_service = inventory_service
        self.clock = clock or time.time

    def place_single_bet(
        self,
        player_id: str,
        market: str,
        description: str,
        pick: str,
        odds: int,
        stake: int,
    ) -> Bet:
        """Place a single bet, escrowing the stake."""
        if market not in VALID_MARKETS:
            raise OutOfRange(f"Unknown market: {market}. Valid: {', '.join(VALID_MARKETS)}")
        validate_odds(odds)

        bet = Bet(
            bet_id=self.bet_repo.next_id(),
            kind=BetKind.SINGLE,
            bettor_id=player_id,
            stake=stake,
            odds=odds,
            details=SingleDetails(market=market, description=description, pick=pick),
            created_at=int(self.clock()),
        )
        with self.player_repo.atomic_transaction(self.bet_repo):
            self.ledger.escrow_stake(player_id, stake, BetKind.SINGLE, bet.bet_id)
            self.bet_repo.add(bet)
        return bet

    def resolve_single_bet(self, bet_id: str, won: bool, evidence: list[str] | None = None) -> int:
        """
        Settle a single bet.

        Winning payouts are multiplied by the bettor's equipped-item bonus
        for single bets.

        Returns:
            The Grit credited (0 for a loss).

        Raises:
            NotFound: If the bet does not exist.
            OutOfRange: If the bet is not a single bet.
            AlreadyResolved: If the bet was already settled.
        """
        bet = self.bet_repo.get_by_id(bet_id)
        if bet.kind != BetKind.SINGLE:
            raise OutOfRange(f"Bet {bet_id} is a {bet.kind.value} bet, not a single bet.")

        now = int(self.clock())
        with self.player_repo.atomic_transaction(self.bet_repo):
            if not won:
                bet.settle(BetStatus.LOST, now, evidence)
                self.ledger.record_loss(bet.bettor_id, bet.stake)
                return 0

            bet.settle(BetStatus.WON, now, evidence)
            payout = bet.potential_payout
            if self.inventory_service is not None:
                payout = self.inventory_service.boosted_payout(bet.bettor_id, BetKind.SINGLE.value, payout)
            self.ledger.credit_winnings(bet.bettor_id, payout)

        logger.info(f"Single bet {bet_id} won: {bet.bettor_id} paid {payout}")
        return payout

    def open_bets(self, player_id: str) -> list[Bet]:
        """Every unresolved bet of any kind placed by the player."""
        return [bet for bet in self.bet_repo.get_by_bettor(player_id) if bet.is_open]

    def weekly_summary(self, player_id: str) -> WeeklySummary:
        stats = self.ledger.weekly_stats(player_id)
        return WeeklySummary(
            player_id=player_id,
            grit_wagered=stats.grit_wagered,
            grit_won=stats.grit_won,
            grit_lost=stats.grit_lost,
            bets_placed=stats.bets_placed,
            bets_won=stats.bets_won,
            bets_lost=stats.bets_lost,
            open_bets=len(self.open_bets(player_id)),
            win_rate=stats.get_win_rate(),
        )
