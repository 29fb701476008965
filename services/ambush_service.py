"""
Ambush bets: wagers on another player's chat behavior.

Bettors see their own bets in full; the target only ever sees how much is
staked against them. At the end of the weekly cycle every open bet on a
target is settled together under the Subject-Takes-All rule.
"""

import logging
import math
import time
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from config import AMBUSH_COMMISH_CUT, AMBUSH_GHOSTING_REFUND_RATE
from domain.models.activity import ActivityCheck, ChatMessage
from domain.models.bet import (
    AmbushCategory,
    AmbushDetails,
    AmbushTargetView,
    AmbushView,
    Bet,
    BetKind,
    BetStatus,
)
from domain.services.odds_calculator import validate_odds
from repositories.bet_repository import BetRepository
from repositories.player_repository import PlayerRepository
from services.activity_monitor_service import ActivityMonitorService
from services.errors import InvalidTarget, NoActiveBets, OutOfRange
from services.inventory_service import InventoryService
from services.ledger_service import LedgerService
from utils.debug_logging import debug_log

logger = logging.getLogger("grit_core.services.ambush")


class AmbushOutcome(str, Enum):
    GHOSTED = "ghosted"
    BETTORS_WIN = "bettors_win"
    SUBJECT_WINS = "subject_wins"


@dataclass(frozen=True)
class BetPayout:
    bet_id: str
    bettor_id: str
    amount: int


@dataclass
class AmbushResolution:
    """Outcome of settling every open bet against one target."""

    target_id: str
    outcome: AmbushOutcome
    total_pot: int
    commish_cut: int
    net_payout: int
    payouts: list[BetPayout]
    subject_payout: int
    penalty_applied: int
    activity_check: ActivityCheck | None
    evidence: list[str]
    resolved_at: int
    losses: list[BetPayout] = field(default_factory=list)

    @property
    def bettors_won(self) -> bool:
        return self.outcome == AmbushOutcome.BETTORS_WIN

    @property
    def ghosting_detected(self) -> bool:
        return self.outcome == AmbushOutcome.GHOSTED


@dataclass(frozen=True)
class PaydayNotice:
    recipient_id: str
    amount: int
    message: str
    timestamp: int


@dataclass(frozen=True)
class BankruptNotice:
    loser_id: str
    amount: int
    subject_id: str
    message: str
    timestamp: int


def allocate_pro_rata(total: int, weights: list[int]) -> list[int]:
    """
    Split an integer total proportionally to weights.

    Uses largest-remainder rounding so the shares always sum to total.
    Ties on the remainder go to the earlier weight.
    """
    weight_sum = sum(weights)
    if weight_sum <= 0 or total <= 0:
        return [0] * len(weights)
    shares = [total * w // weight_sum for w in weights]
    remainders = [total * w % weight_sum for w in weights]
    leftover = total - sum(shares)
    order = sorted(range(len(weights)), key=lambda i: (-remainders[i], i))
    for i in order[:leftover]:
        shares[i] += 1
    return shares


class AmbushService:
    """
    Places, views and resolves Ambush bets.

    Resolution outcomes are mutually exclusive:
    1. Ghosting override: the target went quiet, bets are voided, half the
       pot is refunded pro-rata and the other half is taken from the target
    2. Bettors win: each bet pays its potential payout plus any equipped
       ambush bonus, no cut
    3. Subject wins: the house takes its cut and the target gets the rest
    """

    def __init__(
        self,
        bet_repo: BetRepository,
        player_repo: PlayerRepository,
        ledger: LedgerService,
        activity_monitor: ActivityMonitorService,
        commish_cut: float | None = None,
        ghosting_refund_rate: float | None = None,
        inventory_service: InventoryService | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.bet_repo = bet_repo
        self.player_repo = player_repo
        self.ledger = ledger
        self.activity_monitor = activity_monitor
        self.commish_cut = commish_cut if commish_cut is not None else AMBUSH_COMMISH_CUT
        self.ghosting_refund_rate = (
            ghosting_refund_rate if ghosting_refund_rate is not None else AMBUSH_GHOSTING_REFUND_RATE
        )
        self.inventory_service = inventory_service
        self.clock = clock or time.time

    def _winnings(self, bet: Bet) -> int:
        """Potential payout plus the bettor's equipped-item bonus for this kind of bet."""
        if self.inventory_service is None:
            return bet.potential_payout
        return self.inventory_service.boosted_payout(bet.bettor_id, bet.kind.value, bet.potential_payout)

    def place_bet(
        self,
        bettor_id: str,
        target_id: str,
        description: str,
        category: str | AmbushCategory,
        odds: int,
        stake: int,
    ) -> Bet:
        """
        Place an Ambush bet and escrow the stake.

        Raises:
            InvalidTarget: If the bettor targets themselves.
            NotFound: If either player has no account.
            OutOfRange: If odds are 0 or the category is unknown.
            InsufficientFunds: If the bettor cannot cover the stake.
        """
        if bettor_id == target_id:
            raise InvalidTarget("Cannot place an ambush bet on yourself.")
        self.player_repo.get_by_id(target_id)
        try:
            category = AmbushCategory(category)
        except ValueError:
            raise OutOfRange(f"Unknown ambush category: {category}") from None
        validate_odds(odds)

        bet = Bet(
            bet_id=self.bet_repo.next_id(),
            kind=BetKind.AMBUSH,
            bettor_id=bettor_id,
            stake=stake,
            odds=odds,
            details=AmbushDetails(target_id=target_id, category=category, description=description),
            created_at=int(self.clock()),
        )
        with self.player_repo.atomic_transaction(self.bet_repo):
            self.ledger.escrow_stake(bettor_id, stake, BetKind.AMBUSH, bet.bet_id)
            self.bet_repo.add(bet)
        logger.debug(f"Ambush bet {bet.bet_id}: {bettor_id} -> {target_id} ({stake} @ {odds})")
        return bet

    def view_for(self, user_id: str, bets: Iterable[Bet] | None = None) -> AmbushView:
        """
        Partition Ambush bets into the user's own bets and a redacted view
        of bets targeting them.
        """
        if bets is None:
            bets = self.bet_repo.get_all(BetKind.AMBUSH)
        placed: list[Bet] = []
        against: list[Bet] = []
        for bet in bets:
            if bet.kind != BetKind.AMBUSH:
                continue
            if bet.bettor_id == user_id:
                placed.append(bet)
            elif bet.target_id == user_id:
                against.append(bet)

        open_against = [bet for bet in against if bet.is_open]
        return AmbushView(
            placed=placed,
            against=[
                AmbushTargetView(
                    bet_id=bet.bet_id,
                    status=bet.status,
                )
                for bet in against
            ],
            total_staked_against=sum(bet.stake for bet in open_against),
            open_count=len(open_against),
        )

    def total_staked_against(self, target_id: str) -> int:
        """Live sum of open stakes against a target."""
        return sum(bet.stake for bet in self.bet_repo.get_open_for_target(target_id))

    def resolve_target(
        self,
        target_id: str,
        behavior_confirmed: bool,
        evidence: list[str] | None = None,
        activity_check: ActivityCheck | None = None,
        messages: Iterable[ChatMessage] | None = None,
        betting_window: tuple[int, int] | None = None,
    ) -> AmbushResolution:
        """
        Settle every open Ambush bet against a target in one atomic step.

        The ghosting check comes from ``activity_check`` if given, otherwise
        it is run against ``messages`` in ``betting_window`` when the target
        has a baseline.

        Raises:
            NoActiveBets: If nothing is open against the target, including a
                second resolution of the same target.
        """
        open_bets = self.bet_repo.get_open_for_target(target_id)
        if not open_bets:
            raise NoActiveBets(f"No open ambush bets against {target_id}.")
        self.player_repo.get_by_id(target_id)

        if (
            activity_check is None
            and messages is not None
            and betting_window is not None
            and self.activity_monitor.has_baseline(target_id)
        ):
            activity_check = self.activity_monitor.check_for_ghosting(
                target_id, messages, betting_window[0], betting_window[1]
            )

        evidence = list(evidence or [])
        now = int(self.clock())
        with self.player_repo.atomic_transaction(self.bet_repo):
            if activity_check is not None and activity_check.is_ghosting:
                resolution = self._resolve_ghosting(target_id, open_bets, activity_check, evidence, now)
            elif behavior_confirmed:
                resolution = self._resolve_bettors_win(target_id, open_bets, evidence, now)
            else:
                resolution = self._resolve_subject_wins(target_id, open_bets, evidence, now)
            resolution.activity_check = activity_check

        logger.info(
            f"Ambush on {target_id} resolved: {resolution.outcome.value} "
            f"(pot={resolution.total_pot}, cut={resolution.commish_cut})"
        )
        debug_log(
            "ambush_resolution",
            "services/ambush_service.py:resolve_target",
            resolution.outcome.value,
            {
                "target_id": target_id,
                "bet_ids": [bet.bet_id for bet in open_bets],
                "total_pot": resolution.total_pot,
                "commish_cut": resolution.commish_cut,
                "subject_payout": resolution.subject_payout,
                "penalty_applied": resolution.penalty_applied,
                "drop_percentage": activity_check.drop_percentage if activity_check else None,
            },
        )
        return resolution

    def _resolve_ghosting(
        self,
        target_id: str,
        bets: list[Bet],
        check: ActivityCheck,
        evidence: list[str],
        now: int,
    ) -> AmbushResolution:
        total_pot = sum(bet.stake for bet in bets)
        refund_pool = math.floor(total_pot * self.ghosting_refund_rate)
        penalty = total_pot - refund_pool

        refunds = allocate_pro_rata(refund_pool, [bet.stake for bet in bets])
        note = f"Voided: target ghosted. {check.as_evidence()}"
        payouts = []
        for bet, refund in zip(bets, refunds):
            self.ledger.credit(bet.bettor_id, refund)
            bet.settle(BetStatus.VOIDED, now, evidence + [note])
            payouts.append(BetPayout(bet.bet_id, bet.bettor_id, refund))

        taken = self.ledger.debit_floored(target_id, penalty)
        self.ledger.collect_house_revenue(taken, "ghosting penalty")
        return AmbushResolution(
            target_id=target_id,
            outcome=AmbushOutcome.GHOSTED,
            total_pot=total_pot,
            commish_cut=0,
            net_payout=refund_pool,
            payouts=payouts,
            subject_payout=0,
            penalty_applied=taken,
            activity_check=check,
            evidence=evidence + [note],
            resolved_at=now,
        )

    def _resolve_bettors_win(
        self, target_id: str, bets: list[Bet], evidence: list[str], now: int
    ) -> AmbushResolution:
        payouts = []
        for bet in bets:
            amount = self._winnings(bet)
            self.ledger.credit_winnings(bet.bettor_id, amount)
            bet.settle(BetStatus.WON, now, evidence)
            payouts.append(BetPayout(bet.bet_id, bet.bettor_id, amount))

        return AmbushResolution(
            target_id=target_id,
            outcome=AmbushOutcome.BETTORS_WIN,
            total_pot=sum(bet.stake for bet in bets),
            commish_cut=0,
            net_payout=sum(p.amount for p in payouts),
            payouts=payouts,
            subject_payout=0,
            penalty_applied=0,
            activity_check=None,
            evidence=evidence,
            resolved_at=now,
        )

    def _resolve_subject_wins(
        self, target_id: str, bets: list[Bet], evidence: list[str], now: int
    ) -> AmbushResolution:
        total_pot = sum(bet.stake for bet in bets)
        commish_cut = math.floor(total_pot * self.commish_cut)
        net_payout = total_pot - commish_cut

        losses = []
        for bet in bets:
            self.ledger.record_loss(bet.bettor_id, bet.stake)
            bet.settle(BetStatus.LOST, now, evidence)
            losses.append(BetPayout(bet.bet_id, bet.bettor_id, bet.stake))

        self.ledger.credit(target_id, net_payout)
        self.ledger.collect_house_revenue(commish_cut, "commish cut")
        return AmbushResolution(
            target_id=target_id,
            outcome=AmbushOutcome.SUBJECT_WINS,
            total_pot=total_pot,
            commish_cut=commish_cut,
            net_payout=net_payout,
            payouts=[],
            subject_payout=net_payout,
            penalty_applied=0,
            activity_check=None,
            evidence=evidence,
            resolved_at=now,
            losses=losses,
        )

    def payday_notice(self, resolution: AmbushResolution) -> PaydayNotice | None:
        """Notice for the target after a Subject-Takes-All win."""
        if resolution.outcome != AmbushOutcome.SUBJECT_WINS:
            return None
        target = self.player_repo.get_by_id(resolution.target_id)
        return PaydayNotice(
            recipient_id=target.player_id,
            amount=resolution.subject_payout,
            message=f"{target.name} just taxed the boys for {resolution.subject_payout} Grit",
            timestamp=resolution.resolved_at,
        )

    def bankrupt_notices(self, resolution: AmbushResolution) -> list[BankruptNotice]:
        """One notice per losing bettor, with their stakes summed."""
        if resolution.outcome != AmbushOutcome.SUBJECT_WINS:
            return []
        target = self.player_repo.get_by_id(resolution.target_id)
        lost_by_bettor: dict[str, int] = defaultdict(int)
        for loss in resolution.losses:
            lost_by_bettor[loss.bettor_id] += loss.amount
        return [
            BankruptNotice(
                loser_id=bettor_id,
                amount=amount,
                subject_id=target.player_id,
                message=f"You got ambushed. {target.name} took your {amount} Grit",
                timestamp=resolution.resolved_at,
            )
            for bettor_id, amount in lost_by_bettor.items()
        ]
