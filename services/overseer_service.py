"""
The Overseer: AI game master that reads the group chat.

Each call sends an instruction plus a transcript excerpt to the model and
validates the JSON reply against a fixed schema. Nothing here touches the
ledger. On any failure a Result.fail comes back, and callers fold in the
FALLBACK_* values defined below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from config import AI_TRANSCRIPT_LIMIT, PROP_MAX_ODDS, PROP_MIN_ODDS
from domain.models.activity import ChatMessage
from domain.models.player import PlayerAccount
from domain.models.tribunal import NomineeSuggestion, SuperlativeSuggestion
from domain.services.odds_calculator import clamp_american_odds
from services import error_codes
from services.ai_service import AIService
from services.interfaces import IOverseer
from services.result import Result

logger = logging.getLogger("grit_core.services.overseer")

TREND_TYPES = ("argument", "joke", "behavior", "rivalry")
FREQUENCY_SCORES = {"high": 10, "medium": 5, "low": 1}


@dataclass(frozen=True)
class Trend:
    type: str
    description: str
    participants: tuple[str, ...]
    frequency: int  # 10 high, 5 medium, 1 low


@dataclass(frozen=True)
class PropLine:
    description: str
    odds: int


@dataclass(frozen=True)
class RedemptionSuggestion:
    description: str
    odds: int


FALLBACK_TRENDS: list[Trend] = []
FALLBACK_SUPERLATIVES: list[SuperlativeSuggestion] = []
FALLBACK_PROP_LINE = PropLine("Someone brings up their fantasy team unprompted", 150)
FALLBACK_REDEMPTION_BET = RedemptionSuggestion(
    "Pick a 3-leg parlay of underdogs and win all three", 500
)

SYSTEM_PROMPT = """You are the Overseer, the game master of a private betting league's group chat.
You are sharp, a little mean, and always specific. Reply with JSON only, no commentary."""


def _parse_failure(message: str) -> Result:
    logger.warning(f"Overseer reply rejected: {message}")
    return Result.fail(message, code=error_codes.AI_PARSE_ERROR)


class OverseerService(IOverseer):
    """
    LiteLLM-backed implementation of the Overseer capability.

    With no AIService configured every call fails with AI_UNAVAILABLE, so
    the game runs entirely on fallbacks.
    """

    def __init__(
        self,
        ai_service: AIService | None,
        transcript_limit: int | None = None,
        prop_min_odds: int | None = None,
        prop_max_odds: int | None = None,
    ):
        self.ai_service = ai_service
        self.transcript_limit = transcript_limit if transcript_limit is not None else AI_TRANSCRIPT_LIMIT
        self.prop_min_odds = prop_min_odds if prop_min_odds is not None else PROP_MIN_ODDS
        self.prop_max_odds = prop_max_odds if prop_max_odds is not None else PROP_MAX_ODDS

    def _format_transcript(self, transcript: list[ChatMessage]) -> str:
        recent = transcript[-self.transcript_limit:] if self.transcript_limit > 0 else []
        return "\n".join(f"{m.display_name}: {m.text}" for m in recent)

    async def _ask(self, prompt: str) -> Result[dict[str, Any]]:
        if self.ai_service is None:
            return Result.fail("AI features are disabled", code=error_codes.AI_UNAVAILABLE)
        return await self.ai_service.complete_json(prompt, system_prompt=SYSTEM_PROMPT)

    async def analyze_trends(self, transcript: list[ChatMessage]) -> Result[list[Trend]]:
        prompt = f"""Analyze this group chat history and identify recurring patterns:

{self._format_transcript(transcript)}

Identify recurring arguments, inside jokes, repetitive behaviors and rivalries.

Format your response as JSON:
{{"trends": [{{"type": "argument|joke|behavior|rivalry", "description": "...", "participants": ["name"], "frequency": "high|medium|low"}}]}}"""

        reply = await self._ask(prompt)
        if not reply:
            return reply
        try:
            trends = [
                Trend(
                    type=t["type"] if t["type"] in TREND_TYPES else "behavior",
                    description=str(t["description"]),
                    participants=tuple(str(p) for p in t.get("participants", [])),
                    frequency=FREQUENCY_SCORES.get(t.get("frequency"), 1),
                )
                for t in reply.value["trends"]
            ]
        except (KeyError, TypeError) as e:
            return _parse_failure(f"Bad trend payload: {e}")
        return Result.ok(trends)

    async def generate_superlatives(
        self, transcript: list[ChatMessage]
    ) -> Result[list[SuperlativeSuggestion]]:
        prompt = f"""Based on this week's group chat, generate 5 superlative awards the group can vote and bet on:

{self._format_transcript(transcript)}

Think "Most Delusional Take", "Biggest L of the Week". For each, suggest 3-4 nominees with a quote from the chat as evidence.

Format as JSON:
{{"superlatives": [{{"title": "...", "description": "...", "nominees": [{{"playerName": "...", "evidence": "..."}}]}}]}}"""

        reply = await self._ask(prompt)
        if not reply:
            return reply
        try:
            suggestions = [
                SuperlativeSuggestion(
                    title=str(s["title"]),
                    description=str(s.get("description", "")),
                    nominees=tuple(
                        NomineeSuggestion(str(n["playerName"]), str(n.get("evidence", "")))
                        for n in s["nominees"]
                    ),
                )
                for s in reply.value["superlatives"]
            ]
        except (KeyError, TypeError) as e:
            return _parse_failure(f"Bad superlative payload: {e}")
        return Result.ok(suggestions)

    async def generate_prop_line(
        self, transcript: list[ChatMessage], target_name: str | None = None
    ) -> Result[PropLine]:
        subject = f"about {target_name}" if target_name else "about someone in the chat"
        prompt = f"""Based on this group chat, write one measurable prop bet {subject} for the coming weekend:

{self._format_transcript(transcript)}

Format as JSON:
{{"description": "The bet proposition", "odds": 150}}"""

        reply = await self._ask(prompt)
        if not reply:
            return reply
        line = self._parse_description_odds(reply.value, self.prop_min_odds, self.prop_max_odds)
        return line.map(lambda parsed: PropLine(*parsed))

    async def generate_redemption_bet(
        self, player: PlayerAccount, min_odds: int, max_odds: int
    ) -> Result[RedemptionSuggestion]:
        bankruptcies = player.gulag.bankruptcy_count if player.gulag else 0
        prompt = f"""{player.name} just went bankrupt and is in the Gulag.
Previous bankruptcies: {bankruptcies}

Write ONE redemption bet that is extremely hard but not impossible (+{min_odds} to +{max_odds}),
funny given their situation, and specific enough to settle.

Format as JSON:
{{"description": "The bet description", "odds": 600}}"""

        reply = await self._ask(prompt)
        if not reply:
            return reply
        parsed = self._parse_description_odds(reply.value, min_odds, max_odds)
        return parsed.map(lambda p: RedemptionSuggestion(*p))

    @staticmethod
    def _parse_description_odds(
        data: dict[str, Any], min_odds: int, max_odds: int
    ) -> Result[tuple[str, int]]:
        description = data.get("description")
        if not isinstance(description, str) or not description.strip():
            return _parse_failure("Missing description")
        try:
            odds = int(data["odds"])
        except (KeyError, TypeError, ValueError) as e:
            return _parse_failure(f"Bad odds: {e}")
        return Result.ok((description.strip(), clamp_american_odds(odds, min_odds, max_odds)))
