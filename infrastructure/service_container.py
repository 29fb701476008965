"""
Game session container: wires one set of stores and services per game.

Nothing here is a process-wide singleton. Each GameSession owns its own
repositories, so concurrent sessions and tests never share state.

Usage:
    session = GameSession()
    session.ledger.open_account("alice", "Alice")
    session.ambush.place_bet("alice", "bob", "Leaves the chat on read", "behavior", 200, 100)
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable

from config import (
    AI_API_KEY,
    AI_FEATURES_ENABLED,
    AI_MAX_TOKENS,
    AI_MODEL,
    AI_TIMEOUT_SECONDS,
)
from repositories.activity_repository import ActivityRepository
from repositories.bet_repository import BetRepository
from repositories.item_repository import ItemRepository
from repositories.player_repository import PlayerRepository
from repositories.squad_ride_repository import ParlayRepository
from repositories.trade_repository import TradeRepository
from repositories.tribunal_repository import SuperlativeRepository
from services.activity_monitor_service import ActivityMonitorService
from services.ai_service import AIService
from services.ambush_service import AmbushService
from services.betting_service import BettingService
from services.gulag_service import GulagService
from services.interfaces import IOverseer
from services.inventory_service import InventoryService
from services.ledger_service import LedgerService
from services.mystery_box_service import MysteryBoxService
from services.overseer_service import OverseerService
from services.squad_ride_service import SquadRideService
from services.trading_floor_service import TradingFloorService
from services.tribunal_service import TribunalService

logger = logging.getLogger("grit_core.infrastructure.session")


@dataclass
class RepositoryContainer:
    """Container for all repositories of one session."""

    player: PlayerRepository = field(default_factory=PlayerRepository)
    bet: BetRepository = field(default_factory=BetRepository)
    activity: ActivityRepository = field(default_factory=ActivityRepository)
    item: ItemRepository = field(default_factory=ItemRepository)
    trade: TradeRepository = field(default_factory=TradeRepository)
    superlative: SuperlativeRepository = field(default_factory=SuperlativeRepository)
    parlay: ParlayRepository = field(default_factory=ParlayRepository)


def build_overseer() -> OverseerService:
    """Overseer backed by LiteLLM when AI is enabled and keyed, fallbacks otherwise."""
    if AI_FEATURES_ENABLED and AI_API_KEY:
        ai_service = AIService(
            model=AI_MODEL,
            api_key=AI_API_KEY,
            timeout=AI_TIMEOUT_SECONDS,
            max_tokens=AI_MAX_TOKENS,
        )
        return OverseerService(ai_service)
    logger.info("AI features disabled, Overseer will use fallbacks")
    return OverseerService(None)


class GameSession:
    """
    All stores and services for a single game instance.

    Args:
        clock: Time source in epoch seconds, shared by every service
        rng: Random source for Mystery Box draws
        overseer: AI collaborator; built from config when omitted
        repos: Pre-populated repositories, mostly for tests
    """

    def __init__(
        self,
        clock: Callable[[], float] | None = None,
        rng: random.Random | None = None,
        overseer: IOverseer | None = None,
        repos: RepositoryContainer | None = None,
    ):
        self.clock = clock or time.time
        self.repos = repos or RepositoryContainer()
        self.overseer = overseer if overseer is not None else build_overseer()

        r = self.repos
        self.ledger = LedgerService(r.player)
        self.activity_monitor = ActivityMonitorService(r.activity, clock=self.clock)
        self.inventory = InventoryService(r.player)
        self.ambush = AmbushService(
            r.bet,
            r.player,
            self.ledger,
            self.activity_monitor,
            inventory_service=self.inventory,
            clock=self.clock,
        )
        self.betting = BettingService(
            r.bet, r.player, self.ledger, inventory_service=self.inventory, clock=self.clock
        )
        self.tribunal = TribunalService(
            r.superlative, r.bet, r.player, self.ledger, inventory_service=self.inventory, clock=self.clock
        )
        self.squad_ride = SquadRideService(
            r.parlay, r.bet, r.player, self.ledger, inventory_service=self.inventory, clock=self.clock
        )
        self.gulag = GulagService(r.player, self.ledger, overseer=self.overseer, clock=self.clock)
        self.mystery_box = MysteryBoxService(r.item, r.player, self.ledger, rng=rng)
        self.trading_floor = TradingFloorService(r.trade, r.player, self.ledger, clock=self.clock)

        # Staking expires elapsed bans before refusing a locked player
        self.ledger.gulag_service = self.gulag

    def sweep_bankruptcies(self, now: int | None = None) -> list[str]:
        """Send every zero-balance player to the Gulag. Returns newly locked ids."""
        locked = [
            player_id
            for player_id in self.ledger.bankrupt_player_ids()
            if self.gulag.check_bankruptcy(player_id, now)
        ]
        if locked:
            logger.info(f"Bankruptcy sweep locked up {len(locked)} players")
        return locked
