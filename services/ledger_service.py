"""
Grit ledger: the only place player balances change.
"""

import logging
from typing import TYPE_CHECKING, Optional

from config import STARTING_GRIT
from domain.models.bet import BetKind
from domain.models.player import PlayerAccount, WeeklyStats
from repositories.player_repository import PlayerRepository
from services.errors import InsufficientFunds, PlayerLockedOut

if TYPE_CHECKING:
    from services.gulag_service import GulagService

logger = logging.getLogger("grit_core.services.ledger")


class LedgerService:
    """
    Owns every balance mutation in a game session.

    Stakes are escrowed (debited) when a bet is placed; settlement credits
    winnings back. Weekly statistics are updated alongside each mutation.
    """

    def __init__(
        self,
        player_repo: PlayerRepository,
        starting_grit: int | None = None,
        gulag_service: Optional["GulagService"] = None,
    ):
        self.player_repo = player_repo
        self.starting_grit = starting_grit if starting_grit is not None else STARTING_GRIT
        # Set after construction when wired into a GameSession; used to
        # expire elapsed bans before a stake is refused.
        self.gulag_service = gulag_service

    def open_account(self, player_id: str, name: str, balance: int | None = None) -> PlayerAccount:
        """Create a player account with the starting balance (or an explicit one)."""
        account = PlayerAccount(
            player_id=player_id,
            name=name,
            balance=self.starting_grit if balance is None else balance,
        )
        self.player_repo.add(account)
        logger.debug(f"Opened account {player_id} with {account.balance} Grit")
        return account

    def get_account(self, player_id: str) -> PlayerAccount:
        return self.player_repo.get_by_id(player_id)

    def balance(self, player_id: str) -> int:
        return self.player_repo.get_balance(player_id)

    def escrow_stake(self, player_id: str, amount: int, kind: BetKind, bet_id: str) -> None:
        """
        Debit a stake when a bet is placed.

        Raises:
            ValueError: If amount is not positive.
            PlayerLockedOut: If the player is in the Gulag.
            InsufficientFunds: If the balance is below the stake.
        """
        if amount <= 0:
            raise ValueError("Stake must be positive.")
        account = self.player_repo.get_by_id(player_id)
        if account.is_locked_out() and self.gulag_service is not None:
            self.gulag_service.check_ban_expiry(player_id)
        if account.is_locked_out():
            raise PlayerLockedOut(f"{account.name} is in the Gulag and cannot place bets.")
        if account.balance < amount:
            raise InsufficientFunds(
                f"{account.name} has {account.balance} Grit but tried to stake {amount}."
            )
        account.balance -= amount
        account.weekly_stats.grit_wagered += amount
        account.weekly_stats.bets_placed += 1
        account.bet_history[kind].append(bet_id)

    def credit_winnings(self, player_id: str, amount: int) -> None:
        """Credit a winning bet's payout and count the win."""
        account = self.player_repo.get_by_id(player_id)
        account.balance += amount
        account.weekly_stats.grit_won += amount
        account.weekly_stats.bets_won += 1

    def record_loss(self, player_id: str, stake: int) -> None:
        """Count a losing bet. The stake was already taken at escrow."""
        stats = self.player_repo.get_by_id(player_id).weekly_stats
        stats.grit_lost += stake
        stats.bets_lost += 1

    def credit(self, player_id: str, amount: int) -> None:
        """Credit Grit outside bet settlement (refunds, pot transfers, sales)."""
        if amount < 0:
            raise ValueError("Credit amount cannot be negative.")
        self.player_repo.add_balance(player_id, amount)

    def debit(self, player_id: str, amount: int) -> None:
        """
        Debit Grit, all or nothing.

        Raises:
            InsufficientFunds: If the balance is below amount.
        """
        if amount < 0:
            raise ValueError("Debit amount cannot be negative.")
        balance = self.player_repo.get_balance(player_id)
        if balance < amount:
            raise InsufficientFunds(f"Balance {balance} is below the required {amount} Grit.")
        self.player_repo.add_balance(player_id, -amount)

    def debit_floored(self, player_id: str, amount: int) -> int:
        """
        Debit up to amount without taking the balance below zero.

        Returns:
            The amount actually taken.
        """
        balance = self.player_repo.get_balance(player_id)
        taken = min(max(balance, 0), amount)
        self.player_repo.add_balance(player_id, -taken)
        return taken

    def set_balance(self, player_id: str, amount: int) -> None:
        self.player_repo.update_balance(player_id, amount)

    def collect_house_revenue(self, amount: int, source: str) -> None:
        if amount <= 0:
            return
        self.player_repo.add_house_revenue(amount)
        logger.debug(f"House collected {amount} Grit ({source})")

    def house_revenue(self) -> int:
        return self.player_repo.get_house_revenue()

    def weekly_stats(self, player_id: str) -> WeeklyStats:
        return self.player_repo.get_by_id(player_id).weekly_stats

    def reset_weekly_stats(self) -> None:
        """Start a new weekly cycle for every player."""
        for account in self.player_repo.get_all():
            account.weekly_stats = WeeklyStats()
        logger.info("Weekly stats reset")

    def bankrupt_player_ids(self) -> list[str]:
        """Players whose balance has hit zero and who are not already locked up."""
        return [
            account.player_id
            for account in self.player_repo.get_all()
            if account.balance <= 0 and not account.is_locked_out()
        ]
