"""Anthropic Claude provider."""

from anthropic import APIConnectionError, APIStatusError, AsyncAnthropic

from regclear.config import Settings
from regclear.errors import ProviderError
from regclear.providers.base import LLMProvider, LLMRequest, LLMResponse, Usage


class AnthropicProvider(LLMProvider):
    id = "anthropic"
    name = "Anthropic Claude"

    def __init__(self, settings: Settings | None = None, client: AsyncAnthropic | None = None):
        super().__init__(settings)
        self._client = client

    @classmethod
    def is_configured(cls, settings: Settings) -> bool:
        return bool(settings.anthropic_api_key)

    @property
    def model(self) -> str:
        return self.settings.anthropic_model

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            if not self.settings.anthropic_api_key:
                raise ProviderError(self.id, "Anthropic client not configured. Set ANTHROPIC_API_KEY.")
            # Retries are handled by LLMProvider.complete
            self._client = AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.llm_timeout,
                max_retries=0,
            )
        return self._client

    async def _complete(self, request: LLMRequest) -> LLMResponse:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                system=request.system_prompt,
                messages=[m.model_dump() for m in request.messages],
            )
        except APIStatusError as e:
            raise ProviderError(self.id, str(e), status=e.status_code) from e
        except APIConnectionError as e:
            raise ProviderError(self.id, f"Connection failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return LLMResponse(
            content=text,
            model=response.model,
            usage=Usage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            ),
        )
