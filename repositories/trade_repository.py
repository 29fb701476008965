"""
Repository for trading floor offers.
"""

from domain.models.trade import TradeOffer
from repositories.base_repository import BaseRepository
from repositories.interfaces import ITradeRepository
from services.errors import NotFound


class TradeRepository(BaseRepository, ITradeRepository):
    id_prefix = "offer"

    def add(self, offer: TradeOffer) -> TradeOffer:
        self._records[offer.offer_id] = offer
        return offer

    def get_by_id(self, offer_id: str) -> TradeOffer:
        offer = self._records.get(offer_id)
        if offer is None:
            raise NotFound(f"Offer {offer_id} not found.")
        return offer

    def get_all(self) -> list[TradeOffer]:
        return list(self._records.values())

    def get_active(self) -> list[TradeOffer]:
        return [offer for offer in self._records.values() if offer.is_active]

    def get_by_seller(self, seller_id: str) -> list[TradeOffer]:
        return [offer for offer in self._records.values() if offer.seller_id == seller_id]
