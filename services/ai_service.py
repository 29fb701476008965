"""
LiteLLM client backing the Overseer.

Provides a fail-fast interface to the model that writes prop lines,
superlatives and redemption bets. Callers never see an exception from here:
failures come back as None or a failed Result.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

import litellm
from litellm import acompletion

from services import error_codes
from services.result import Result

logger = logging.getLogger("grit_core.services.ai")

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    return _FENCE_RE.sub("", text.strip()).strip()


class AIService:
    """
    Thin async client over LiteLLM for the Overseer.

    One attempt per call, bounded by ``timeout``; text replies come back
    from ``complete`` and structured replies from ``complete_json``.
    """

    def __init__(
        self,
        model: str,
        api_key: str | None,
        timeout: float = 15.0,
        max_tokens: int = 800,
    ):
        """
        Args:
            model: LiteLLM model string, provider-prefixed ("gemini/gemini-2.5-flash")
            api_key: Provider key passed through on every request
            timeout: Seconds before a request is abandoned
            max_tokens: Reply length cap unless a call overrides it
        """
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.max_tokens = max_tokens

        # One attempt per request
        litellm.num_retries = 0

        logger.info(f"Overseer backend ready: {model}")

    def _messages(self, prompt: str, system_prompt: str | None) -> list[dict[str, str]]:
        head = [{"role": "system", "content": system_prompt}] if system_prompt else []
        return head + [{"role": "user", "content": prompt}]

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> str | None:
        """Text of the model's reply, or None when the provider fails or stalls."""
        request = acompletion(
            model=self.model,
            messages=self._messages(prompt, system_prompt),
            api_key=self.api_key,
            temperature=temperature,
            timeout=self.timeout,
            max_tokens=max_tokens or self.max_tokens,
            num_retries=0,
        )
        try:
            response = await asyncio.wait_for(request, timeout=self.timeout)
        except (asyncio.TimeoutError, litellm.Timeout):
            logger.warning(f"Overseer request exceeded {self.timeout}s")
            return None
        except litellm.RateLimitError as e:
            logger.warning(f"Overseer rate limited: {e}")
            return None
        except Exception as e:
            logger.error(f"Overseer request failed: {e}")
            return None
        return response.choices[0].message.content

    async def complete_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
    ) -> Result[dict[str, Any]]:
        """
        Completion whose text must be a JSON object.

        Returns:
            Result with the parsed dict, or a failure coded AI_UNAVAILABLE
            (no response) or AI_PARSE_ERROR (not a JSON object).
        """
        text = await self.complete(prompt, system_prompt=system_prompt, temperature=temperature)
        if not text:
            return Result.fail("AI returned no content", code=error_codes.AI_UNAVAILABLE)

        try:
            data = json.loads(strip_code_fences(text))
        except json.JSONDecodeError as e:
            logger.warning(f"AI returned malformed JSON: {e}")
            return Result.fail(f"Malformed JSON: {e}", code=error_codes.AI_PARSE_ERROR)

        if not isinstance(data, dict):
            return Result.fail("Expected a JSON object", code=error_codes.AI_PARSE_ERROR)
        return Result.ok(data)
