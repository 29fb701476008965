"""
The Tribunal: voted superlative awards that players can also bet on.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from config import PROP_MAX_ODDS, PROP_MIN_ODDS, TRIBUNAL_BASE_ODDS, TRIBUNAL_DEFAULT_ODDS
from domain.models.bet import Bet, BetKind, BetStatus, TribunalDetails
from domain.models.tribunal import Nominee, Superlative, SuperlativeSuggestion
from domain.services.odds_calculator import clamp_american_odds, validate_odds
from repositories.bet_repository import BetRepository
from repositories.player_repository import PlayerRepository
from repositories.tribunal_repository import SuperlativeRepository
from services.errors import AlreadyResolved, NotFound, WindowClosed
from services.inventory_service import InventoryService
from services.ledger_service import LedgerService

logger = logging.getLogger("grit_core.services.tribunal")


@dataclass
class TribunalResult:
    superlative_id: str
    winner_id: str | None
    vote_counts: dict[str, int]
    payouts: dict[str, int]  # bet_id -> Grit credited
    voided: bool


class TribunalService:
    """
    Voting and wagering on superlatives are independent: votes decide the
    winner, wagers are paid on that winner at the nominee's odds.
    """

    def __init__(
        self,
        superlative_repo: SuperlativeRepository,
        bet_repo: BetRepository,
        player_repo: PlayerRepository,
        ledger: LedgerService,
        base_odds: list[int] | None = None,
        default_odds: int | None = None,
        inventory_service: InventoryService | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.superlative_repo = superlative_repo
        self.bet_repo = bet_repo
        self.player_repo = player_repo
        self.ledger = ledger
        self.base_odds = base_odds if base_odds is not None else TRIBUNAL_BASE_ODDS
        self.default_odds = default_odds if default_odds is not None else TRIBUNAL_DEFAULT_ODDS
        self.inventory_service = inventory_service
        self.clock = clock or time.time

    def _winnings(self, bet: Bet) -> int:
        """Potential payout plus the bettor's equipped-item bonus for this kind of bet."""
        if self.inventory_service is None:
            return bet.potential_payout
        return self.inventory_service.boosted_payout(bet.bettor_id, bet.kind.value, bet.potential_payout)

    def nominee_odds(self, position: int) -> int:
        """Odds for the nominee at this listing position (0-based)."""
        odds = self.base_odds[position] if position < len(self.base_odds) else self.default_odds
        return clamp_american_odds(odds, PROP_MIN_ODDS, PROP_MAX_ODDS)

    def create_superlative(
        self,
        title: str,
        nominees: list[Nominee],
        voting_closes_at: int,
        description: str = "",
    ) -> Superlative:
        if not nominees:
            raise ValueError("A superlative needs at least one nominee.")
        for nominee in nominees:
            self.player_repo.get_by_id(nominee.player_id)
            validate_odds(nominee.odds)
        superlative = Superlative(
            superlative_id=self.superlative_repo.next_id(),
            title=title,
            description=description,
            nominees=list(nominees),
            voting_closes_at=voting_closes_at,
            created_at=int(self.clock()),
        )
        self.superlative_repo.add(superlative)
        logger.info(f"Superlative opened: {title} ({len(nominees)} nominees)")
        return superlative

    def open_from_suggestions(
        self, suggestions: list[SuperlativeSuggestion], voting_closes_at: int
    ) -> list[Superlative]:
        """
        Turn AI-suggested superlatives into open superlatives.

        Nominee names are matched to accounts by player id or display name
        (case-insensitive); unknown or repeated names are skipped, as are
        suggestions left without nominees. Odds follow listing order.
        """
        by_name = {}
        for account in self.player_repo.get_all():
            by_name[account.player_id.lower()] = account.player_id
            by_name.setdefault(account.name.lower(), account.player_id)

        opened = []
        for suggestion in suggestions:
            nominees: list[Nominee] = []
            for nominee in suggestion.nominees:
                player_id = by_name.get(nominee.player_name.strip().lower())
                if player_id is None or any(n.player_id == player_id for n in nominees):
                    continue
                nominees.append(
                    Nominee(
                        player_id=player_id,
                        odds=self.nominee_odds(len(nominees)),
                        evidence=[nominee.evidence] if nominee.evidence else [],
                    )
                )
            if not nominees:
                logger.debug(f"Skipping superlative with no known nominees: {suggestion.title}")
                continue
            opened.append(
                self.create_superlative(
                    suggestion.title, nominees, voting_closes_at, suggestion.description
                )
            )
        return opened

    def vote(self, superlative_id: str, voter_id: str, nominee_id: str, now: int | None = None) -> None:
        """
        Cast or change a vote.

        Raises:
            WindowClosed: If voting has closed or the superlative is resolved.
            NotFound: If the nominee is not on the ballot.
        """
        superlative = self.superlative_repo.get_by_id(superlative_id)
        now = int(self.clock()) if now is None else now
        if not superlative.is_voting_open(now):
            raise WindowClosed(f"Voting on '{superlative.title}' has closed.")
        if superlative.nominee(nominee_id) is None:
            raise NotFound(f"{nominee_id} is not nominated for '{superlative.title}'.")
        self.player_repo.get_by_id(voter_id)
        superlative.votes[voter_id] = nominee_id

    def place_bet(self, player_id: str, superlative_id: str, nominee_id: str, stake: int) -> Bet:
        """Wager on a nominee at the nominee's listed odds."""
        superlative = self.superlative_repo.get_by_id(superlative_id)
        if superlative.resolved:
            raise AlreadyResolved(f"'{superlative.title}' has already been decided.")
        nominee = superlative.nominee(nominee_id)
        if nominee is None:
            raise NotFound(f"{nominee_id} is not nominated for '{superlative.title}'.")

        bet = Bet(
            bet_id=self.bet_repo.next_id(),
            kind=BetKind.TRIBUNAL,
            bettor_id=player_id,
            stake=stake,
            odds=nominee.odds,
            details=TribunalDetails(superlative_id=superlative_id, nominee_id=nominee_id),
            created_at=int(self.clock()),
        )
        with self.player_repo.atomic_transaction(self.bet_repo):
            self.ledger.escrow_stake(player_id, stake, BetKind.TRIBUNAL, bet.bet_id)
            self.bet_repo.add(bet)
            superlative.bet_ids.append(bet.bet_id)
        return bet

    def tally(self, superlative_id: str) -> dict[str, int]:
        """Vote counts per nominee, in nominee listing order."""
        superlative = self.superlative_repo.get_by_id(superlative_id)
        counts = {nominee.player_id: 0 for nominee in superlative.nominees}
        for nominee_id in superlative.votes.values():
            if nominee_id in counts:
                counts[nominee_id] += 1
        return counts

    def winner(self, superlative_id: str) -> str | None:
        """
        Nominee with the most votes.

        Ties go to the nominee listed first. None when nobody voted.
        """
        counts = self.tally(superlative_id)
        best_id, best_count = None, 0
        for nominee_id, count in counts.items():
            if count > best_count:
                best_id, best_count = nominee_id, count
        return best_id

    def resolve(self, superlative_id: str, evidence: list[str] | None = None) -> TribunalResult:
        """
        Decide the superlative and settle its wagers.

        With no votes at all the superlative closes without a winner and
        every wager is voided and refunded.

        Raises:
            AlreadyResolved: If the superlative was already resolved.
        """
        superlative = self.superlative_repo.get_by_id(superlative_id)
        if superlative.resolved:
            raise AlreadyResolved(f"'{superlative.title}' has already been decided.")

        counts = self.tally(superlative_id)
        winner_id = self.winner(superlative_id)
        now = int(self.clock())
        payouts: dict[str, int] = {}

        with self.player_repo.atomic_transaction(self.bet_repo, self.superlative_repo):
            for bet in self.bet_repo.get_many(superlative.bet_ids):
                if not bet.is_open:
                    continue
                if winner_id is None:
                    bet.settle(BetStatus.VOIDED, now, ["No votes cast; wager refunded"])
                    self.ledger.credit(bet.bettor_id, bet.stake)
                    payouts[bet.bet_id] = bet.stake
                elif bet.details.nominee_id == winner_id:
                    bet.settle(BetStatus.WON, now, evidence)
                    amount = self._winnings(bet)
                    self.ledger.credit_winnings(bet.bettor_id, amount)
                    payouts[bet.bet_id] = amount
                else:
                    bet.settle(BetStatus.LOST, now, evidence)
                    self.ledger.record_loss(bet.bettor_id, bet.stake)
            superlative.resolved = True
            superlative.winner_id = winner_id
            superlative.resolved_at = now

        logger.info(f"Superlative '{superlative.title}' resolved, winner: {winner_id}")
        return TribunalResult(
            superlative_id=superlative_id,
            winner_id=winner_id,
            vote_counts=counts,
            payouts=payouts,
            voided=winner_id is None,
        )

    def open_superlatives(self) -> list[Superlative]:
        return self.superlative_repo.get_open()
