"""
LLM Provider factory module.
Creates provider instances based on configuration.
"""

import logging
from typing import Dict, List, Optional

from ainotes.config import Settings
from ainotes.llm.anthropic_provider import AnthropicProvider
from ainotes.llm.base import LLMProvider
from ainotes.llm.mock_provider import MockProvider
from ainotes.llm.ollama_provider import OllamaProvider
from ainotes.llm.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

# ============================================================
# Provider Registry
# ============================================================
PROVIDERS: Dict[str, type] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "ollama": OllamaProvider,
    "mock": MockProvider,
}


def create_provider(
    provider_name: str,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    **kwargs
) -> Optional[LLMProvider]:
    """
    Create an LLM provider instance.

    Args:
        provider_name: Name of the provider (anthropic, openai, ollama, mock)
        api_key: API key for authentication
        base_url: Custom base URL for the API
        **kwargs: Provider-specific options (timeout, delay_seconds)

    Returns:
        LLMProvider instance or None if provider not found
    """
    provider_class = PROVIDERS.get(provider_name.lower())

    if not provider_class:
        logger.error(f"Unknown provider: {provider_name} (available: {', '.join(get_available_providers())})")
        return None

    return provider_class(api_key=api_key, base_url=base_url, **kwargs)


def create_provider_from_settings(settings: Settings) -> Optional[LLMProvider]:
    """Build the configured text-generation provider."""
    name = settings.effective_llm_provider

    if name == "mock":
        logger.info("Using mock LLM provider")
        return create_provider("mock", delay_seconds=settings.mock_llm_delay_seconds)
    if name == "anthropic":
        return create_provider(
            "anthropic",
            api_key=settings.anthropic_api_key,
            base_url=settings.anthropic_base_url,
            timeout=settings.llm_timeout_seconds,
        )
    if name == "openai":
        return create_provider(
            "openai",
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.llm_timeout_seconds,
        )
    if name == "ollama":
        return create_provider(
            "ollama",
            base_url=settings.ollama_base_url,
            timeout=settings.llm_timeout_seconds,
        )

    logger.error(f"Unknown provider: {name} (available: {', '.join(get_available_providers())})")
    return None


def get_available_providers() -> List[str]:
    """Get list of all supported provider names."""
    return list(PROVIDERS.keys())
