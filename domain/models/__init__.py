"""
Domain models - pure data structures representing business entities.
"""

from domain.models.activity import ActivityBaseline, ActivityCheck, ChatMessage
from domain.models.bet import (
    AmbushCategory,
    AmbushDetails,
    AmbushTargetView,
    AmbushView,
    Bet,
    BetKind,
    BetStatus,
    SingleDetails,
    SquadRideDetails,
    TribunalDetails,
)
from domain.models.gulag import GulagPhase, GulagState, LockoutStatus, Punishment, RedemptionBet
from domain.models.item import LoreItem, MysteryBox, PassiveBonus, Rarity, RarityTier
from domain.models.player import PlayerAccount, WeeklyStats
from domain.models.squad_ride import ParlayLeg, SquadRideParlay
from domain.models.trade import OfferStatus, PurchaseReceipt, TradeOffer
from domain.models.tribunal import Nominee, NomineeSuggestion, Superlative, SuperlativeSuggestion

__all__ = [
    "ActivityBaseline",
    "ActivityCheck",
    "ChatMessage",
    "AmbushCategory",
    "AmbushDetails",
    "AmbushTargetView",
    "AmbushView",
    "Bet",
    "BetKind",
    "BetStatus",
    "SingleDetails",
    "SquadRideDetails",
    "TribunalDetails",
    "GulagPhase",
    "GulagState",
    "LockoutStatus",
    "Punishment",
    "RedemptionBet",
    "LoreItem",
    "MysteryBox",
    "PassiveBonus",
    "Rarity",
    "RarityTier",
    "PlayerAccount",
    "WeeklyStats",
    "ParlayLeg",
    "SquadRideParlay",
    "OfferStatus",
    "PurchaseReceipt",
    "TradeOffer",
    "Nominee",
    "NomineeSuggestion",
    "Superlative",
    "SuperlativeSuggestion",
]
