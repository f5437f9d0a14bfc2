"""
Ollama LLM provider implementation.
Supports local models running via Ollama.
"""

import logging
from typing import Dict, List, Optional

import httpx

from ainotes.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """Ollama provider for local models."""

    provider_name = "ollama"

    # Local inference is free
    INPUT_COST_PER_MILLION = 0.0
    OUTPUT_COST_PER_MILLION = 0.0

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: float = 300.0):
        super().__init__(api_key, base_url)
        # Ollama default port is 11434
        self.base_url = (base_url or "http://localhost:11434").rstrip("/")
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers."""
        return {"Content-Type": "application/json"}

    async def generate(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a complete response from Ollama."""
        payload = {
            "model": model,
            "messages": messages,
            "stream": False,
            "options": {
                "temperature": temperature
            }
        }
        if max_tokens:
            payload["options"]["num_predict"] = max_tokens

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/api/chat",
                headers=self._get_headers(),
                json=payload
            )
            response.raise_for_status()
            data = response.json()

        return LLMResponse(
            content=data.get("message", {}).get("content", ""),
            model=model,
            provider=self.provider_name,
            usage={
                "prompt_tokens": data.get("prompt_eval_count", 0),
                "completion_tokens": data.get("eval_count", 0)
            },
            finish_reason="stop" if data.get("done") else None
        )

    async def test_connection(self) -> bool:
        """Test that the Ollama daemon answers."""
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(f"{self.base_url}/api/tags")
            return response.status_code == 200
        except httpx.HTTPError:
            logger.warning("Ollama not running or not reachable")
            return False
