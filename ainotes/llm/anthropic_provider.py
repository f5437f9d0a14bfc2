"""
Anthropic LLM provider implementation.
Calls the Messages API directly over httpx.
"""

import logging
from typing import Dict, List, Optional

import httpx

from ainotes.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API provider."""

    provider_name = "anthropic"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: float = 120.0):
        super().__init__(api_key, base_url)
        # Strip any path suffix users may have pasted (e.g. /v1/messages)
        raw = base_url or "https://api.anthropic.com"
        self.base_url = raw.split("/v1")[0] if "/v1" in raw else raw.rstrip("/")
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers with authentication."""
        return {
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
            "anthropic-version": "2023-06-01",
        }

    async def generate(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a complete response from Anthropic."""
        if not self.api_key:
            raise ValueError("Anthropic API key is required but not set")

        # System messages travel in a separate field
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        chat_messages = [m for m in messages if m["role"] != "system"]

        payload = {
            "model": model,
            "messages": chat_messages,
            "temperature": temperature,
            "max_tokens": max_tokens or 4096,
        }
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            url = f"{self.base_url}/v1/messages"
            logger.debug(f"Anthropic request to {url} with model {model}")
            response = await client.post(url, headers=self._get_headers(), json=payload)
            if response.status_code != 200:
                logger.error(f"Anthropic API error {response.status_code}: {response.text}")
                response.raise_for_status()
            data = response.json()

        text_blocks = [block.get("text", "") for block in data.get("content", []) if block.get("type") == "text"]
        if not text_blocks:
            raise ValueError("No text content in Anthropic response")

        usage = data.get("usage", {})
        return LLMResponse(
            content="".join(text_blocks),
            model=data.get("model", model),
            provider=self.provider_name,
            usage={
                "input_tokens": usage.get("input_tokens", 0),
                "output_tokens": usage.get("output_tokens", 0),
            },
            finish_reason=data.get("stop_reason"),
        )

    async def test_connection(self) -> bool:
        """Test Anthropic API connectivity via the models endpoint."""
        if not self.api_key:
            return False
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(f"{self.base_url}/v1/models", headers=self._get_headers())
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Anthropic connection test failed: {e}")
            return False
