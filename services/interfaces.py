"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts for collaborators that
the settlement core depends on but does not implement itself.

Usage:
    class MyOverseer(IOverseer):
        async def generate_prop_line(self, transcript) -> Result[PropLine]:
            ...

Every method returns a Result instead of raising: callers fold in the
module-level fallbacks from services.overseer_service on failure.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models.activity import ChatMessage
    from domain.models.player import PlayerAccount
    from domain.models.tribunal import SuperlativeSuggestion
    from services.overseer_service import PropLine, RedemptionSuggestion, Trend
    from services.result import Result


class IOverseer(ABC):
    """Interface for the AI game master that reads the group chat."""

    @abstractmethod
    async def analyze_trends(self, transcript: list["ChatMessage"]) -> "Result[list[Trend]]":
        """Detect recurring arguments, jokes, behaviors and rivalries."""
        ...

    @abstractmethod
    async def generate_superlatives(
        self, transcript: list["ChatMessage"]
    ) -> "Result[list[SuperlativeSuggestion]]":
        """Propose superlative awards with nominees and evidence quotes."""
        ...

    @abstractmethod
    async def generate_prop_line(
        self, transcript: list["ChatMessage"], target_name: str | None = None
    ) -> "Result[PropLine]":
        """Propose a single prop bet with odds clamped into the prop band."""
        ...

    @abstractmethod
    async def generate_redemption_bet(
        self, player: "PlayerAccount", min_odds: int, max_odds: int
    ) -> "Result[RedemptionSuggestion]":
        """Propose a Gulag redemption bet with odds clamped into [min_odds, max_odds]."""
        ...
