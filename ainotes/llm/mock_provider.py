"""
Mock LLM provider for offline development and tests.

Produces deterministic markdown derived from the prompt, covering every
construct the document converter understands (heading, paragraph, bullet
list, numbered list). An optional delay stands in for network latency.
"""

import asyncio
import logging
import re
from typing import Dict, List, Optional

from ainotes.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class MockProvider(LLMProvider):
    """Canned, prompt-dependent responses with no network access."""

    provider_name = "mock"

    INPUT_COST_PER_MILLION = 0.0
    OUTPUT_COST_PER_MILLION = 0.0

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, delay_seconds: float = 0.0):
        super().__init__(api_key, base_url)
        self.delay_seconds = delay_seconds
        self.calls: List[str] = []

    async def generate(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Return a markdown document built from the last user message."""
        prompt = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")
        self.calls.append(prompt)

        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        content = self._render(prompt)
        return LLMResponse(
            content=content,
            model=model or "mock",
            provider=self.provider_name,
            usage={
                "input_tokens": self._estimate_tokens(prompt),
                "output_tokens": self._estimate_tokens(content),
            },
            finish_reason="stop",
        )

    async def test_connection(self) -> bool:
        return True

    @staticmethod
    def _render(prompt: str) -> str:
        words = re.findall(r"[A-Za-z][A-Za-z'-]+", prompt)
        keywords: List[str] = []
        for word in words:
            lowered = word.lower()
            if len(lowered) > 4 and lowered not in keywords:
                keywords.append(lowered)
            if len(keywords) == 3:
                break

        lines = [
            "# Mock Response",
            "",
            f"This is a mock response to a prompt of {len(words)} words.",
            "",
            "## Key Points",
        ]
        lines.extend(f"- {keyword}" for keyword in keywords or ["nothing to report"])
        lines.extend([
            "",
            "## Next Steps",
            "1. Review the generated content",
            "2. Refine the original note",
        ])
        return "\n".join(lines)
