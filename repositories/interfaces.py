"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod

from domain.models.activity import ActivityBaseline
from domain.models.bet import Bet, BetKind
from domain.models.item import LoreItem, MysteryBox
from domain.models.player import PlayerAccount
from domain.models.squad_ride import SquadRideParlay
from domain.models.trade import TradeOffer
from domain.models.tribunal import Superlative


class IPlayerRepository(ABC):
    @abstractmethod
    def add(self, account: PlayerAccount) -> PlayerAccount: ...

    @abstractmethod
    def get_by_id(self, player_id: str) -> PlayerAccount: ...

    @abstractmethod
    def get_all(self) -> list[PlayerAccount]: ...

    @abstractmethod
    def exists(self, player_id: str) -> bool: ...

    @abstractmethod
    def get_balance(self, player_id: str) -> int: ...

    @abstractmethod
    def update_balance(self, player_id: str, amount: int) -> None: ...

    @abstractmethod
    def add_balance(self, player_id: str, amount: int) -> None: ...

    @abstractmethod
    def get_house_revenue(self) -> int: ...

    @abstractmethod
    def add_house_revenue(self, amount: int) -> None: ...


class IBetRepository(ABC):
    @abstractmethod
    def add(self, bet: Bet) -> Bet: ...

    @abstractmethod
    def get_by_id(self, bet_id: str) -> Bet: ...

    @abstractmethod
    def get_all(self, kind: BetKind | None = None) -> list[Bet]: ...

    @abstractmethod
    def get_by_bettor(self, bettor_id: str, kind: BetKind | None = None) -> list[Bet]: ...

    @abstractmethod
    def get_for_target(self, target_id: str) -> list[Bet]: ...

    @abstractmethod
    def get_open_for_target(self, target_id: str) -> list[Bet]: ...


class IActivityRepository(ABC):
    @abstractmethod
    def set_baseline(self, baseline: ActivityBaseline) -> None: ...

    @abstractmethod
    def get_baseline(self, target_id: str) -> ActivityBaseline | None: ...

    @abstractmethod
    def delete_baseline(self, target_id: str) -> bool: ...

    @abstractmethod
    def clear(self) -> None: ...


class IItemRepository(ABC):
    @abstractmethod
    def add_item(self, item: LoreItem) -> LoreItem: ...

    @abstractmethod
    def get_item(self, item_id: str) -> LoreItem: ...

    @abstractmethod
    def get_items(self, item_ids: list[str]) -> list[LoreItem]: ...

    @abstractmethod
    def add_box(self, box: MysteryBox) -> MysteryBox: ...

    @abstractmethod
    def get_box(self, box_id: str) -> MysteryBox: ...

    @abstractmethod
    def decrement_supply(self, item_id: str) -> int: ...


class ITradeRepository(ABC):
    @abstractmethod
    def add(self, offer: TradeOffer) -> TradeOffer: ...

    @abstractmethod
    def get_by_id(self, offer_id: str) -> TradeOffer: ...

    @abstractmethod
    def get_active(self) -> list[TradeOffer]: ...

    @abstractmethod
    def get_by_seller(self, seller_id: str) -> list[TradeOffer]: ...


class ISuperlativeRepository(ABC):
    @abstractmethod
    def add(self, superlative: Superlative) -> Superlative: ...

    @abstractmethod
    def get_by_id(self, superlative_id: str) -> Superlative: ...

    @abstractmethod
    def get_open(self) -> list[Superlative]: ...


class IParlayRepository(ABC):
    @abstractmethod
    def add(self, parlay: SquadRideParlay) -> SquadRideParlay: ...

    @abstractmethod
    def get_by_id(self, parlay_id: str) -> SquadRideParlay: ...

    @abstractmethod
    def get_open(self) -> list[SquadRideParlay]: ...
