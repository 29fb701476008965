"""
Service for the Gulag: bankruptcy lockout, redemption and bans.

A player whose balance reaches zero is Locked. They get one redemption bet:
winning frees them with the reward, losing bans them for a while with a
punishment that escalates with their bankruptcy count. Bans expire lazily
when the player's status is next read.
"""

import logging
import math
import time
from typing import Callable

from config import (
    GULAG_BAILOUT_MIN,
    GULAG_BAILOUT_PRISONER_SHARE,
    GULAG_BAN_SECONDS,
    GULAG_REDEMPTION_MAX_ODDS,
    GULAG_REDEMPTION_MIN_ODDS,
    GULAG_REDEMPTION_REWARD,
    GULAG_REDEMPTION_STAKE,
    GULAG_RELEASE_BALANCE,
)
from domain.models.gulag import GulagPhase, GulagState, LockoutStatus, Punishment, RedemptionBet
from domain.models.player import PlayerAccount
from domain.services.odds_calculator import clamp_american_odds
from repositories.player_repository import PlayerRepository
from services import error_codes
from services.errors import (
    AlreadyResolved,
    GritError,
    InsufficientFunds,
    InvalidTarget,
    NotFound,
    OutOfRange,
)
from services.interfaces import IOverseer
from services.ledger_service import LedgerService
from services.overseer_service import FALLBACK_REDEMPTION_BET

logger = logging.getLogger("grit_core.services.gulag")


def punishment_for(prior_bankruptcies: int, ban_seconds: int) -> Punishment:
    """Escalating punishment for a lost redemption bet."""
    days = ban_seconds // 86400
    if prior_bankruptcies <= 0:
        return Punishment(ban_seconds, f"{days}-day ban from the game")
    if prior_bankruptcies == 1:
        return Punishment(ban_seconds, f"{days}-day ban + buy a round of drinks", "buy a round of drinks")
    return Punishment(
        ban_seconds * 2,
        f"{days * 2}-day ban + wear a dunce cap to the next game",
        "wear a dunce cap to the next game",
    )


class GulagService:
    """
    Drives the Free -> Locked -> (Free | Banned -> Free) state machine.

    The bankruptcy counter increments on every release (redemption win,
    ban expiry, bailout) and survives release for escalation.
    """

    def __init__(
        self,
        player_repo: PlayerRepository,
        ledger: LedgerService,
        overseer: IOverseer | None = None,
        ban_seconds: int | None = None,
        redemption_stake: int | None = None,
        redemption_reward: int | None = None,
        release_balance: int | None = None,
        bailout_min: int | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.player_repo = player_repo
        self.ledger = ledger
        self.overseer = overseer
        self.ban_seconds = ban_seconds if ban_seconds is not None else GULAG_BAN_SECONDS
        self.redemption_stake = (
            redemption_stake if redemption_stake is not None else GULAG_REDEMPTION_STAKE
        )
        self.redemption_reward = (
            redemption_reward if redemption_reward is not None else GULAG_REDEMPTION_REWARD
        )
        self.release_balance = release_balance if release_balance is not None else GULAG_RELEASE_BALANCE
        self.bailout_min = bailout_min if bailout_min is not None else GULAG_BAILOUT_MIN
        self.clock = clock or time.time

    def _now(self, now: int | None) -> int:
        return int(self.clock()) if now is None else now

    def _require_locked(self, account: PlayerAccount) -> GulagState:
        if not account.is_locked_out():
            raise GritError(f"{account.name} is not in the Gulag.", code=error_codes.NOT_IN_GULAG)
        return account.gulag

    def _release(self, account: PlayerAccount, balance: int, note: str) -> None:
        gulag = account.gulag
        gulag.is_locked = False
        gulag.ban_expires_at = None
        gulag.locked_at = None
        gulag.bankruptcy_count += 1
        self.ledger.set_balance(account.player_id, balance)
        gulag.rap_sheet.append(note)
        logger.info(f"{account.name} released from the Gulag ({note})")

    def check_bankruptcy(self, player_id: str, now: int | None = None) -> bool:
        """
        Lock the player up if their balance has hit zero.

        Returns:
            True if the player was just sent to the Gulag.
        """
        account = self.player_repo.get_by_id(player_id)
        if account.balance > 0 or account.is_locked_out():
            return False
        if account.gulag is None:
            account.gulag = GulagState()
        account.gulag.is_locked = True
        account.gulag.locked_at = self._now(now)
        account.gulag.redemption_bet = None
        account.gulag.ban_expires_at = None
        logger.info(f"{account.name} has been sent to the Gulag for bankruptcy")
        return True

    async def generate_redemption_bet(self, player_id: str, now: int | None = None) -> RedemptionBet:
        """
        Offer the locked player their redemption bet.

        The Overseer writes the bet; any failure falls back to a fixed
        long-shot parlay. Odds are clamped into the redemption band.
        """
        account = self.player_repo.get_by_id(player_id)
        gulag = self._require_locked(account)
        if gulag.ban_expires_at is not None:
            raise GritError(f"{account.name} is banned, not awaiting redemption.", code=error_codes.LOCKED_OUT)
        if gulag.redemption_bet is not None and not gulag.redemption_bet.resolved:
            return gulag.redemption_bet

        suggestion = FALLBACK_REDEMPTION_BET
        if self.overseer is not None:
            result = await self.overseer.generate_redemption_bet(
                account, GULAG_REDEMPTION_MIN_ODDS, GULAG_REDEMPTION_MAX_ODDS
            )
            suggestion = result.or_fallback(FALLBACK_REDEMPTION_BET, logger, "Redemption bet")

        bet = RedemptionBet(
            description=suggestion.description,
            odds=clamp_american_odds(suggestion.odds, GULAG_REDEMPTION_MIN_ODDS, GULAG_REDEMPTION_MAX_ODDS),
            stake=self.redemption_stake,
            reward=self.redemption_reward,
            created_at=self._now(now),
        )
        gulag.redemption_bet = bet
        return bet

    def resolve_redemption(self, player_id: str, won: bool, now: int | None = None) -> Punishment | None:
        """
        Settle the redemption bet.

        Returns:
            None on a win, otherwise the punishment applied.

        Raises:
            NotFound: If no redemption bet has been offered.
            AlreadyResolved: If the redemption bet was already settled.
        """
        account = self.player_repo.get_by_id(player_id)
        gulag = self._require_locked(account)
        bet = gulag.redemption_bet
        if bet is None:
            raise NotFound(f"{account.name} has no redemption bet.")
        if bet.resolved:
            raise AlreadyResolved(f"{account.name}'s redemption bet was already settled.")

        bet.resolved = True
        bet.won = won
        now = self._now(now)
        if won:
            self._release(account, bet.reward, f"Won redemption bet: {bet.description}")
            return None

        punishment = punishment_for(gulag.bankruptcy_count, self.ban_seconds)
        gulag.ban_expires_at = now + punishment.ban_seconds
        gulag.rap_sheet.append(f"Lost redemption bet: {punishment.description}")
        logger.info(f"{account.name} lost their redemption bet: {punishment.description}")
        return punishment

    def check_ban_expiry(self, player_id: str, now: int | None = None) -> bool:
        """
        Release a banned player whose ban has run out.

        Returns:
            True if the player was released by this call.
        """
        account = self.player_repo.get_by_id(player_id)
        gulag = account.gulag
        if gulag is None or not gulag.is_locked or gulag.ban_expires_at is None:
            return False
        if self._now(now) < gulag.ban_expires_at:
            return False
        self._release(account, self.release_balance, "Served ban")
        return True

    def status(self, player_id: str, now: int | None = None) -> GulagPhase:
        """Current phase, expiring an elapsed ban first."""
        self.check_ban_expiry(player_id, now)
        gulag = self.player_repo.get_by_id(player_id).gulag
        return gulag.phase if gulag is not None else GulagPhase.FREE

    def remaining_ban_hours(self, player_id: str, now: int | None = None) -> int:
        gulag = self.player_repo.get_by_id(player_id).gulag
        if gulag is None or gulag.ban_expires_at is None:
            return 0
        return max(0, math.floor((gulag.ban_expires_at - self._now(now)) / 3600))

    def lockout_status(self, player_id: str, now: int | None = None) -> LockoutStatus:
        phase = self.status(player_id, now)
        gulag = self.player_repo.get_by_id(player_id).gulag or GulagState()
        return LockoutStatus(
            player_id=player_id,
            phase=phase,
            prisoner_number=gulag.bankruptcy_count + 1,
            bankruptcy_count=gulag.bankruptcy_count,
            ban_expires_at=gulag.ban_expires_at,
            remaining_ban_hours=self.remaining_ban_hours(player_id, now),
            redemption_bet=gulag.redemption_bet,
            rap_sheet=tuple(gulag.rap_sheet),
        )

    def bailout(self, prisoner_id: str, bailer_id: str, amount: int) -> int:
        """
        Another player pays to free a prisoner.

        The prisoner is released with a share of the bail; the rest goes
        to the house.

        Returns:
            The prisoner's new balance.
        """
        if prisoner_id == bailer_id:
            raise InvalidTarget("You cannot bail yourself out.")
        prisoner = self.player_repo.get_by_id(prisoner_id)
        bailer = self.player_repo.get_by_id(bailer_id)
        self._require_locked(prisoner)
        if amount < self.bailout_min:
            raise OutOfRange(f"Bailout requires at least {self.bailout_min} Grit.")
        if bailer.balance < amount:
            raise InsufficientFunds(f"{bailer.name} cannot cover a {amount} Grit bailout.")

        share = math.floor(amount * GULAG_BAILOUT_PRISONER_SHARE)
        with self.player_repo.atomic_transaction():
            self.ledger.debit(bailer_id, amount)
            self._release(prisoner, share, f"Bailed out by {bailer.name} for {amount} Grit")
            self.ledger.collect_house_revenue(amount - share, "bailout")
        return share

    def force_release(self, player_id: str, starting_grit: int | None = None) -> None:
        """Admin release. Does not count as a bankruptcy."""
        account = self.player_repo.get_by_id(player_id)
        if account.gulag is not None:
            account.gulag.is_locked = False
            account.gulag.ban_expires_at = None
            account.gulag.locked_at = None
        balance = self.release_balance if starting_grit is None else starting_grit
        self.ledger.set_balance(player_id, balance)
        logger.info(f"{account.name} force-released from the Gulag with {balance} Grit")

    def add_to_rap_sheet(self, player_id: str, entry: str) -> None:
        account = self.player_repo.get_by_id(player_id)
        if account.gulag is None:
            account.gulag = GulagState()
        account.gulag.rap_sheet.append(entry)

    def inmates(self, now: int | None = None) -> list[str]:
        """Ids of players currently Locked or Banned, after lazy expiry."""
        inmates = []
        for account in self.player_repo.get_all():
            if account.is_locked_out():
                self.check_ban_expiry(account.player_id, now)
                if account.is_locked_out():
                    inmates.append(account.player_id)
        return inmates
