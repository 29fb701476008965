"""
Trading floor domain models.
"""

from dataclasses import dataclass
from enum import Enum

from domain.models.item import LoreItem


class OfferStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


@dataclass
class TradeOffer:
    """An item listed for sale. The item is held by the offer while active."""

    offer_id: str
    seller_id: str
    item: LoreItem
    price: int
    listed_at: int
    status: OfferStatus = OfferStatus.ACTIVE
    buyer_id: str | None = None
    closed_at: int | None = None

    @property
    def is_active(self) -> bool:
        return self.status == OfferStatus.ACTIVE


@dataclass(frozen=True)
class PurchaseReceipt:
    """Amounts produced by a purchase for the caller to apply."""

    offer_id: str
    buyer_id: str
    seller_id: str
    price: int
    tax: int
    seller_proceeds: int

    @property
    def total_cost(self) -> int:
        return self.price + self.tax
