"""
layoutforge/llm/base.py
Abstract base class for generative backend providers
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum
import json
import re


class LLMProvider(str, Enum):
    """Supported backend providers"""
    OPENAI_COMPATIBLE = "openai_compatible"
    MOCK = "mock"


_FENCED_JSON_RE = re.compile(r'```(?:json)?\s*(.*?)\s*```', re.DOTALL)


@dataclass
class LLMResponse:
    """Standardized backend response"""
    content: str
    provider: LLMProvider
    tokens_used: Optional[int] = None
    finish_reason: Optional[str] = None
    model: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    is_valid_json: bool = False
    extracted_json: Optional[Any] = None
    json_candidate: Optional[str] = None
    json_error: Optional[str] = None

    def __post_init__(self):
        """Extract JSON from content if present"""
        self._extract_json()

    def _extract_json(self):
        """
        Extract JSON from plain text, a fenced block, or the outermost braces.

        ``json_candidate`` holds the text that was tried last, ``json_error`` the
        decode error when no candidate parsed. ``content`` is left untouched.
        """
        content = self.content.strip()
        candidates: List[str] = []

        if content:
            candidates.append(content)

        for match in _FENCED_JSON_RE.findall(content):
            candidates.append(match)

        json_start = content.find('{')
        json_end = content.rfind('}')
        if json_start != -1 and json_end > json_start:
            candidates.append(content[json_start:json_end + 1])

        for candidate in candidates:
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError as e:
                self.json_error = str(e)
                continue
            self.extracted_json = parsed
            self.json_candidate = candidate
            self.is_valid_json = True
            self.json_error = None
            return

        # Report the brace span when one exists, it is what a reader expects to see
        if json_start != -1 and json_end > json_start:
            self.json_candidate = content[json_start:json_end + 1]


@dataclass
class LLMMessage:
    """Standardized message format"""
    role: str  # "system", "user", "assistant"
    content: str


class BaseLLMProvider(ABC):
    """Abstract base class for backend providers"""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.provider_name: Optional[LLMProvider] = None
        self.max_tokens_default = config.get("max_tokens", 8192)
        self.min_response_length = config.get("min_response_length", 0)

    @abstractmethod
    async def generate(
        self,
        messages: List[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate one response. Exactly one backend round-trip, no retries.

        Args:
            messages: List of conversation messages
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse object

        Raises:
            GenerationError: backend unavailable or response unusable
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if provider is available

        Returns:
            True if provider is healthy
        """
        pass

    @abstractmethod
    def get_provider_type(self) -> LLMProvider:
        """Return provider type"""
        pass

    def format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, str]]:
        """Convert LLMMessage to provider-specific format"""
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    def validate_messages(self, messages: List[LLMMessage]) -> bool:
        """Validate message format"""
        if not messages:
            return False

        valid_roles = {"system", "user", "assistant"}
        for msg in messages:
            if msg.role not in valid_roles:
                return False
            if not isinstance(msg.content, str):
                return False

        return True
