"""OpenAI chat completions provider."""

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from regclear.config import Settings
from regclear.errors import ProviderError
from regclear.providers.base import LLMProvider, LLMRequest, LLMResponse, Usage


class OpenAIProvider(LLMProvider):
    id = "openai"
    name = "OpenAI"

    def __init__(self, settings: Settings | None = None, client: AsyncOpenAI | None = None):
        super().__init__(settings)
        self._client = client

    @classmethod
    def is_configured(cls, settings: Settings) -> bool:
        return bool(settings.openai_api_key)

    @property
    def model(self) -> str:
        return self.settings.openai_model

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.openai_api_key:
                raise ProviderError(self.id, "OpenAI client not configured. Set OPENAI_API_KEY.")
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.llm_timeout,
                max_retries=0,
            )
        return self._client

    async def _complete(self, request: LLMRequest) -> LLMResponse:
        messages = [{"role": "system", "content": request.system_prompt}]
        messages.extend(m.model_dump() for m in request.messages)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                messages=messages,
            )
        except APIStatusError as e:
            raise ProviderError(self.id, str(e), status=e.status_code) from e
        except APIConnectionError as e:
            raise ProviderError(self.id, f"Connection failed: {e}") from e

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=response.model,
            usage=Usage(
                input_tokens=usage.prompt_tokens if usage else 0,
                output_tokens=usage.completion_tokens if usage else 0,
            ),
        )
