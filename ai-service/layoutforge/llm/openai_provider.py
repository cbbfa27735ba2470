"""
layoutforge/llm/openai_provider.py
Generative backend provider using the OpenAI-compatible SDK (Gemini endpoint by default)
"""
import logging
from typing import List, Optional, Dict, Any
from datetime import datetime

from openai import AsyncOpenAI, APIError, APITimeoutError, AuthenticationError

from layoutforge.core.errors import GenerationError
from .base import BaseLLMProvider, LLMResponse, LLMMessage, LLMProvider

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(BaseLLMProvider):
    """
    One awaited chat completion per request.

    No retries, no backoff, no circuit breaker: the client is built with
    ``max_retries=0`` and every failure surfaces as GenerationError.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.provider_name = LLMProvider.OPENAI_COMPATIBLE

        self.api_url = config.get("api_url")
        self.model = config.get("model", "gemini-2.5-flash")
        self.api_key = config.get("api_key")
        self.temperature = config.get("temperature", 0.7)

        if not self.api_key:
            raise GenerationError("Generative backend API key (APP_LLM_API_KEY) is not configured")

        base_url = (self.api_url or "").rstrip("/")
        if base_url.endswith("/chat/completions"):
            base_url = base_url[: -len("/chat/completions")]

        self._client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=base_url or None,
            max_retries=0,
        )

        logger.info(
            f"OpenAI-compatible provider initialized: model={self.model}, base_url={base_url}"
        )

    async def generate(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs,
    ) -> LLMResponse:
        if not self.validate_messages(messages):
            raise GenerationError("Invalid messages format")

        temperature = self.temperature if temperature is None else temperature
        temperature = max(0.0, min(2.0, temperature))
        min_length = kwargs.pop("min_response_length", self.min_response_length)

        start = datetime.now()
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=self.format_messages(messages),
                temperature=temperature,
                max_tokens=max_tokens or self.max_tokens_default,
            )
        except AuthenticationError as e:
            raise GenerationError("Generative backend authentication failed: check APP_LLM_API_KEY") from e
        except APITimeoutError as e:
            raise GenerationError("Generative backend timed out") from e
        except APIError as e:
            raise GenerationError(f"Generative backend error: {e.message}") from e

        response_time = (datetime.now() - start).total_seconds()

        if not completion.choices:
            raise GenerationError("Generative backend returned no choices")

        choice = completion.choices[0]
        content = choice.message.content or ""
        usage = completion.usage

        if not content.strip() or len(content) < min_length:
            raise GenerationError("Generative backend response too short or empty")

        llm_response = LLMResponse(
            content=content,
            provider=self.provider_name,
            tokens_used=usage.total_tokens if usage else None,
            finish_reason=choice.finish_reason,
            model=completion.model,
            metadata={
                "response_time": response_time,
                "prompt_tokens": usage.prompt_tokens if usage else None,
                "completion_tokens": usage.completion_tokens if usage else None,
                "id": completion.id,
            },
        )

        logger.info(
            f"Backend response: tokens={usage.total_tokens if usage else '?'}, "
            f"time={response_time:.2f}s, chars={len(content)}"
        )
        return llm_response

    async def health_check(self) -> bool:
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a helpful assistant."},
                    {"role": "user", "content": "Respond with 'OK'"},
                ],
                max_tokens=5,
                temperature=0.0,
            )
            result = completion.choices[0].message.content or ""
            healthy = "OK" in result.upper()
            logger.info(f"Backend health check: {'PASSED' if healthy else 'UNEXPECTED RESPONSE'}")
            return healthy
        except APIError as e:
            logger.warning(f"Backend health check FAILED: {e}")
            return False

    def get_provider_type(self) -> LLMProvider:
        return self.provider_name
