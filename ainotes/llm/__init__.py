"""
LLM providers package.
Unified interface for the text-generation backends.
"""

from ainotes.llm.base import LLMProvider, LLMResponse
from ainotes.llm.factory import create_provider, create_provider_from_settings, get_available_providers

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "create_provider",
    "create_provider_from_settings",
    "get_available_providers",
]
