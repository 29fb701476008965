"""
Repository layer for data access abstraction.
"""

from repositories.activity_repository import ActivityRepository
from repositories.base_repository import BaseRepository
from repositories.bet_repository import BetRepository
from repositories.interfaces import (
    IActivityRepository,
    IBetRepository,
    IItemRepository,
    IParlayRepository,
    IPlayerRepository,
    ISuperlativeRepository,
    ITradeRepository,
)
from repositories.item_repository import ItemRepository
from repositories.player_repository import PlayerRepository
from repositories.squad_ride_repository import ParlayRepository
from repositories.trade_repository import TradeRepository
from repositories.tribunal_repository import SuperlativeRepository

__all__ = [
    "BaseRepository",
    "PlayerRepository",
    "BetRepository",
    "ActivityRepository",
    "ItemRepository",
    "TradeRepository",
    "SuperlativeRepository",
    "ParlayRepository",
    "IPlayerRepository",
    "IBetRepository",
    "IActivityRepository",
    "IItemRepository",
    "ITradeRepository",
    "ISuperlativeRepository",
    "IParlayRepository",
]
