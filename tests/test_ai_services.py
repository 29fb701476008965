"""
Tests for AI services: AIService (LiteLLM wrapper) and the Overseer.
"""

import asyncio
import json
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from domain.models.activity import ChatMessage
from domain.models.gulag import GulagState
from domain.models.player import PlayerAccount
from services import error_codes
from services.ai_service import AIService, strip_code_fences
from services.overseer_service import FALLBACK_PROP_LINE, OverseerService
from services.result import Result


def completion_response(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def ai_service():
    return AIService(
        model="gemini/gemini-2.5-flash",
        api_key="test-api-key",
        timeout=5.0,
        max_tokens=500,
    )


TRANSCRIPT = [
    ChatMessage("bob", 1, "my fantasy team is cooked again", "Bob"),
    ChatMessage("carol", 2, "you say that every week", "Carol"),
]


class TestStripCodeFences:
    """Cleaning model output before JSON parsing."""

    def test_strips_json_fence(self):
        """A ```json fence is removed."""
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_text_unchanged(self):
        """Unfenced text passes through trimmed."""
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestAIService:
    """Tests for the LiteLLM wrapper."""

    @pytest.mark.asyncio
    async def test_complete_returns_content(self, ai_service):
        """The message content is returned and the call fails fast."""
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_response("hello")
            result = await ai_service.complete("hi", system_prompt="be brief")

        assert result == "hello"
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["api_key"] == "test-api-key"
        assert kwargs["num_retries"] == 0
        assert kwargs["messages"][0] == {"role": "system", "content": "be brief"}

    @pytest.mark.asyncio
    async def test_complete_returns_none_on_error(self, ai_service):
        """Provider errors come back as None instead of raising."""
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = RuntimeError("provider down")
            assert await ai_service.complete("hi") is None

    @pytest.mark.asyncio
    async def test_complete_returns_none_on_hard_timeout(self, ai_service):
        """The asyncio hard timeout is treated as a failure."""
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = asyncio.TimeoutError()
            assert await ai_service.complete("hi") is None

    @pytest.mark.asyncio
    async def test_complete_json_parses_fenced_object(self, ai_service):
        """Fenced JSON objects are parsed into a successful Result."""
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_response('```json\n{"odds": 150}\n```')
            result = await ai_service.complete_json("prop?")

        assert result.success
        assert result.value == {"odds": 150}

    @pytest.mark.asyncio
    async def test_complete_json_malformed(self, ai_service):
        """Non-JSON text is a parse error."""
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_response("sure! here you go")
            result = await ai_service.complete_json("prop?")

        assert result.error_code == error_codes.AI_PARSE_ERROR

    @pytest.mark.asyncio
    async def test_complete_json_requires_object(self, ai_service):
        """A JSON array is not an acceptable reply."""
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_response("[1, 2]")
            result = await ai_service.complete_json("prop?")

        assert result.error_code == error_codes.AI_PARSE_ERROR

    @pytest.mark.asyncio
    async def test_complete_json_no_content(self, ai_service):
        """An empty reply means the AI is unavailable."""
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_response(None)
            result = await ai_service.complete_json("prop?")

        assert result.error_code == error_codes.AI_UNAVAILABLE


class TestOverseer:
    """Tests for the Overseer's prompts and reply validation."""

    @pytest.fixture
    def ai(self):
        ai = MagicMock()
        ai.complete_json = AsyncMock()
        return ai

    @pytest.mark.asyncio
    async def test_disabled_overseer_fails_every_call(self):
        """Without an AIService every call fails with AI_UNAVAILABLE."""
        overseer = OverseerService(None)
        result = await overseer.generate_prop_line(TRANSCRIPT)
        assert result.error_code == error_codes.AI_UNAVAILABLE
        assert result.or_fallback(FALLBACK_PROP_LINE, logging.getLogger("test"), "Prop line") == FALLBACK_PROP_LINE

    @pytest.mark.asyncio
    async def test_prop_line_clamped(self, ai):
        """Prop odds are clamped into the prop band."""
        ai.complete_json.return_value = Result.ok({"description": "Bob mentions fantasy", "odds": 5000})
        result = await OverseerService(ai).generate_prop_line(TRANSCRIPT, target_name="Bob")

        assert result.value.description == "Bob mentions fantasy"
        assert result.value.odds == 1000
        prompt = ai.complete_json.call_args.args[0]
        assert "about Bob" in prompt
        assert "Bob: my fantasy team is cooked again" in prompt

    @pytest.mark.asyncio
    async def test_prop_line_bad_odds(self, ai):
        """Non-numeric odds are a parse error."""
        ai.complete_json.return_value = Result.ok({"description": "x", "odds": "long"})
        result = await OverseerService(ai).generate_prop_line(TRANSCRIPT)
        assert result.error_code == error_codes.AI_PARSE_ERROR

    @pytest.mark.asyncio
    async def test_prop_line_missing_description(self, ai):
        """A blank description is rejected."""
        ai.complete_json.return_value = Result.ok({"description": "  ", "odds": 150})
        result = await OverseerService(ai).generate_prop_line(TRANSCRIPT)
        assert result.error_code == error_codes.AI_PARSE_ERROR

    @pytest.mark.asyncio
    async def test_upstream_failure_passes_through(self, ai):
        """AIService failures reach the caller unchanged."""
        ai.complete_json.return_value = Result.fail("down", code=error_codes.AI_UNAVAILABLE)
        result = await OverseerService(ai).analyze_trends(TRANSCRIPT)
        assert result.error_code == error_codes.AI_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_trends_parsed(self, ai):
        """Trend frequency words map to scores; unknown types become behavior."""
        ai.complete_json.return_value = Result.ok(
            {
                "trends": [
                    {"type": "joke", "description": "fantasy woes", "participants": ["Bob"], "frequency": "high"},
                    {"type": "meme", "description": "???", "frequency": "rare"},
                ]
            }
        )
        trends = (await OverseerService(ai).analyze_trends(TRANSCRIPT)).value

        assert trends[0].frequency == 10
        assert trends[0].participants == ("Bob",)
        assert trends[1].type == "behavior"
        assert trends[1].frequency == 1

    @pytest.mark.asyncio
    async def test_superlatives_parsed(self, ai):
        """Superlatives keep nominee names and evidence quotes."""
        ai.complete_json.return_value = Result.ok(
            {
                "superlatives": [
                    {
                        "title": "Most Delusional Take",
                        "description": "Bold claims only",
                        "nominees": [{"playerName": "Bob", "evidence": "we're winning it all"}],
                    }
                ]
            }
        )
        suggestions = (await OverseerService(ai).generate_superlatives(TRANSCRIPT)).value

        assert suggestions[0].title == "Most Delusional Take"
        assert suggestions[0].nominees[0].player_name == "Bob"
        assert suggestions[0].nominees[0].evidence == "we're winning it all"

    @pytest.mark.asyncio
    async def test_superlatives_schema_violation(self, ai):
        """Missing keys are reported as parse errors."""
        ai.complete_json.return_value = Result.ok({"superlatives": [{"description": "no title"}]})
        result = await OverseerService(ai).generate_superlatives(TRANSCRIPT)
        assert result.error_code == error_codes.AI_PARSE_ERROR

    @pytest.mark.asyncio
    async def test_redemption_bet_uses_player_history(self, ai):
        """The prompt mentions prior bankruptcies and odds are clamped."""
        ai.complete_json.return_value = Result.ok({"description": "Win a 4-leg parlay", "odds": 100})
        player = PlayerAccount("bob", "Bob", gulag=GulagState(is_locked=True, bankruptcy_count=2))

        result = await OverseerService(ai).generate_redemption_bet(player, 300, 1000)

        assert result.value.odds == 300
        assert "Previous bankruptcies: 2" in ai.complete_json.call_args.args[0]

    @pytest.mark.asyncio
    async def test_transcript_limit(self, ai):
        """Only the most recent messages are sent."""
        ai.complete_json.return_value = Result.ok({"trends": []})
        transcript = [ChatMessage("bob", i, f"line {i}") for i in range(10)]

        await OverseerService(ai, transcript_limit=3).analyze_trends(transcript)

        prompt = ai.complete_json.call_args.args[0]
        assert "line 9" in prompt
        assert "line 6" not in prompt

    @pytest.mark.asyncio
    async def test_end_to_end_through_litellm(self, ai_service):
        """A real AIService with a patched completion feeds the Overseer."""
        payload = json.dumps({"description": "Carol says 'every week'", "odds": 120})
        with patch("services.ai_service.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_response(payload)
            result = await OverseerService(ai_service).generate_prop_line(TRANSCRIPT)

        assert result.value.odds == 120
