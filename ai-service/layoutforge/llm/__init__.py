"""
layoutforge/llm/__init__.py
Generative backend module exports
"""
from functools import lru_cache

from layoutforge.config import settings
from .base import (
    BaseLLMProvider,
    LLMResponse,
    LLMMessage,
    LLMProvider
)
from .openai_provider import OpenAICompatibleProvider


@lru_cache(maxsize=1)
def get_default_provider() -> BaseLLMProvider:
    """
    Shared provider built from settings.

    Raises:
        GenerationError: no API key configured
    """
    return OpenAICompatibleProvider(settings.llm_config)


__all__ = [
    "BaseLLMProvider",
    "LLMResponse",
    "LLMMessage",
    "LLMProvider",
    "OpenAICompatibleProvider",
    "get_default_provider",
]
