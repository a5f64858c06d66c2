"""
Text-generation providers for RegClear.

Provides Anthropic, OpenAI and local Ollama backends behind one interface.
"""

from regclear.config import Settings, get_settings
from regclear.errors import ProviderError
from regclear.providers.anthropic import AnthropicProvider
from regclear.providers.base import (
    LLMMessage,
    LLMProvider,
    LLMRequest,
    LLMResponse,
    ProviderInfo,
    Usage,
)
from regclear.providers.ollama import OllamaProvider
from regclear.providers.openai import OpenAIProvider

PROVIDERS: dict[str, type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "ollama": OllamaProvider,
}


def create_provider(provider_id: str, settings: Settings | None = None) -> LLMProvider:
    """
    Create a provider by id.

    Raises:
        ProviderError: If the id is unknown
    """
    provider_cls = PROVIDERS.get(provider_id)
    if provider_cls is None:
        raise ProviderError(
            "registry",
            f'Unknown provider "{provider_id}". Available: {", ".join(PROVIDERS)}',
        )
    return provider_cls(settings)


def get_default_provider(settings: Settings | None = None) -> LLMProvider:
    """
    Resolve the provider to use when none is requested.

    An explicit DEFAULT_PROVIDER wins; otherwise the first configured of
    anthropic, openai and ollama.
    """
    settings = settings or get_settings()

    if settings.default_provider:
        return create_provider(settings.default_provider, settings)

    for provider_id, provider_cls in PROVIDERS.items():
        if provider_cls.is_configured(settings):
            return provider_cls(settings)

    raise ProviderError(
        "registry",
        "No LLM provider configured. Set one of: ANTHROPIC_API_KEY, OPENAI_API_KEY, "
        "or OLLAMA_BASE_URL.",
    )


def list_providers(settings: Settings | None = None) -> list[ProviderInfo]:
    settings = settings or get_settings()
    return [
        ProviderInfo(id=provider_id, name=cls.name, configured=cls.is_configured(settings))
        for provider_id, cls in PROVIDERS.items()
    ]


__all__ = [
    "AnthropicProvider",
    "LLMMessage",
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
    "OllamaProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "ProviderInfo",
    "Usage",
    "create_provider",
    "get_default_provider",
    "list_providers",
]
