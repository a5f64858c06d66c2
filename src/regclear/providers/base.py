"""
Text-generation provider contract.

A provider exposes one completion operation. Transient failures (HTTP 429
and 5xx) are retried here with exponential backoff; everything else is
raised immediately as ProviderError.
"""

from abc import ABC, abstractmethod
from typing import Literal

import structlog
from pydantic import BaseModel, Field
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from regclear.config import Settings, get_settings
from regclear.errors import ProviderError

logger = structlog.get_logger(__name__)


class LLMMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class LLMRequest(BaseModel):
    system_prompt: str
    messages: list[LLMMessage]
    max_tokens: int = 8000
    temperature: float = 0.2


class Usage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class LLMResponse(BaseModel):
    content: str
    model: str
    usage: Usage = Field(default_factory=Usage)


class ProviderInfo(BaseModel):
    id: str
    name: str
    configured: bool


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, ProviderError) and error.retryable


class LLMProvider(ABC):
    """Base class for text-generation providers."""

    id: str = ""
    name: str = ""

    retry_wait = wait_exponential(multiplier=1, min=2, max=10)

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    @classmethod
    @abstractmethod
    def is_configured(cls, settings: Settings) -> bool:
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        ...

    @abstractmethod
    async def _complete(self, request: LLMRequest) -> LLMResponse:
        """Single attempt. Raise ProviderError with the HTTP status when known."""

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """
        Run a completion, retrying rate-limit and server errors.

        Raises:
            ProviderError: On a non-retryable failure or once retries run out
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.settings.llm_max_retries),
            wait=self.retry_wait,
            retry=retry_if_exception(_is_retryable),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._complete(request)
        logger.debug(
            "llm_completion_finished",
            provider=self.id,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        return response

    def _log_retry(self, retry_state) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "llm_completion_retry",
            provider=self.id,
            attempt=retry_state.attempt_number,
            error=str(error),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} model={self.model!r}>"
