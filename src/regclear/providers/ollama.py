"""Local Ollama provider over its HTTP chat API."""

import httpx

from regclear.config import Settings
from regclear.errors import ProviderError
from regclear.providers.base import LLMProvider, LLMRequest, LLMResponse, Usage


class OllamaProvider(LLMProvider):
    id = "ollama"
    name = "Ollama (local)"

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        super().__init__(settings)
        self._client = client

    @classmethod
    def is_configured(cls, settings: Settings) -> bool:
        return bool(settings.ollama_base_url)

    @property
    def model(self) -> str:
        return self.settings.ollama_model

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.resolved_ollama_url,
                timeout=self.settings.llm_timeout,
            )
        return self._client

    async def _complete(self, request: LLMRequest) -> LLMResponse:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                *(m.model_dump() for m in request.messages),
            ],
            "stream": False,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }

        try:
            response = await self.client.post("/api/chat", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.id, f"Ollama API error: {e.response.text}", status=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(self.id, f"Connection failed: {e}") from e

        data = response.json()
        return LLMResponse(
            content=data.get("message", {}).get("content", ""),
            model=data.get("model", self.model),
            usage=Usage(
                input_tokens=data.get("prompt_eval_count", 0),
                output_tokens=data.get("eval_count", 0),
            ),
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
