"""
Abstract base class for LLM providers.
All providers must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from pydantic import BaseModel


class LLMResponse(BaseModel):
    """Complete response from LLM."""
    content: str
    model: str
    provider: str
    usage: Dict[str, int] = {}
    finish_reason: Optional[str] = None

    @property
    def input_tokens(self) -> int:
        return self.usage.get("input_tokens", self.usage.get("prompt_tokens", 0))

    @property
    def output_tokens(self) -> int:
        return self.usage.get("output_tokens", self.usage.get("completion_tokens", 0))


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Each provider implementation must:
    1. Implement generate() for non-streaming responses
    2. Implement test_connection() to verify API connectivity
    """

    provider_name: str = "base"

    # Approximate pricing per million tokens, for cost logging only
    INPUT_COST_PER_MILLION = 3.0
    OUTPUT_COST_PER_MILLION = 15.0

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        """
        Initialize provider with credentials.

        Args:
            api_key: API key for authentication (if required)
            base_url: Base URL for API requests
        """
        self.api_key = api_key
        self.base_url = base_url

    @abstractmethod
    async def generate(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate a complete response (non-streaming).

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model identifier to use
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum tokens in response
            **kwargs: Provider-specific options

        Returns:
            LLMResponse with complete generated text
        """
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        """
        Test if the provider is reachable and credentials are valid.

        Returns:
            True if connection successful, False otherwise
        """
        pass

    async def complete(
        self,
        prompt: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Single-turn text to text generation."""
        return await self.generate(
            [{"role": "user", "content": prompt}],
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    # ── Approximate token estimation ──────────────────────────────────
    # ~4 chars per token is a safe heuristic across models.

    @staticmethod
    def _estimate_tokens(text: str) -> int:
        """Rough token count from character length (~4 chars/token)."""
        return len(text) // 4 if text else 0

    @classmethod
    def estimate_cost(cls, input_tokens: int, output_tokens: int) -> float:
        """Estimated dollar cost of one call."""
        return (
            input_tokens / 1_000_000 * cls.INPUT_COST_PER_MILLION
            + output_tokens / 1_000_000 * cls.OUTPUT_COST_PER_MILLION
        )
