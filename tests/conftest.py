"""Shared pytest fixtures and stubs for the RegClear test suite."""

import re

import pytest

from regclear.errors import ProviderError
from regclear.models.context import (
    AutomationLevel,
    DataCategory,
    DecisionImpact,
    GenerativeAiContext,
    GpaiInfo,
    GpaiRole,
    ProductContext,
    ProductType,
    UserPopulation,
)
from regclear.providers.base import LLMProvider, LLMRequest, LLMResponse, Usage


# ---------------------------------------------------------------------------
# Singleton cache clearing (autouse)
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clear_singletons(monkeypatch):
    """Clear all @lru_cache singletons between tests and isolate from local env."""
    from regclear.config import get_settings
    from regclear.jurisdictions.registry import get_registry

    for var in ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "OLLAMA_BASE_URL", "DEFAULT_PROVIDER"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    get_settings.cache_clear()
    get_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_registry.cache_clear()


# ---------------------------------------------------------------------------
# Stub provider
# ---------------------------------------------------------------------------

class StubProvider(LLMProvider):
    """
    Deterministic provider.

    Echoes the template section of the prompt with every placeholder
    replaced, or raises for templates listed in `fail_for`.
    """

    id = "stub"
    name = "Stub"

    def __init__(self, fail_for=(), error=None, response=None):
        super().__init__()
        self.fail_for = set(fail_for)
        self.error = error or ProviderError("stub", "429 rate limit exceeded", status=429)
        self.response = response
        self.requests: list[LLMRequest] = []

    @classmethod
    def is_configured(cls, settings) -> bool:
        return True

    @property
    def model(self) -> str:
        return "stub-model"

    async def _complete(self, request: LLMRequest) -> LLMResponse:
        raise NotImplementedError

    async def complete(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        prompt = request.messages[0].content
        for template_name in self.fail_for:
            if f"Template: {template_name}\n" in prompt:
                raise self.error

        if self.response is not None:
            content = self.response
        else:
            body = prompt.split("## Template\n\n", 1)[-1]
            content = re.sub(r"\{\{(\w+)\}\}", lambda m: f"[{m.group(1)} filled]", body)

        return LLMResponse(content=content, model=self.model, usage=Usage(input_tokens=10, output_tokens=20))


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def make_provider():
    """Factory for stub providers with custom failures or responses."""
    return StubProvider


# ---------------------------------------------------------------------------
# Product contexts
# ---------------------------------------------------------------------------

@pytest.fixture
def social_scoring_ctx():
    return ProductContext(
        description="Citizen social scoring system that ranks residents by trustworthiness",
        product_type=ProductType.CLASSIFIER,
        data_processed=(DataCategory.PERSONAL, DataCategory.BEHAVIORAL),
        user_populations=(UserPopulation.GENERAL_PUBLIC,),
        decision_impact=DecisionImpact.DETERMINATIVE,
        automation_level=AutomationLevel.FULLY_AUTOMATED,
        target_jurisdictions=("eu-ai-act",),
    )


@pytest.fixture
def resume_screening_ctx():
    return ProductContext(
        description="AI resume screening tool that ranks job applicants for hiring managers",
        product_type=ProductType.CLASSIFIER,
        data_processed=(DataCategory.PERSONAL, DataCategory.EMPLOYMENT),
        user_populations=(UserPopulation.JOB_APPLICANTS,),
        decision_impact=DecisionImpact.MATERIAL,
        automation_level=AutomationLevel.HUMAN_IN_THE_LOOP,
        target_jurisdictions=("eu-ai-act", "eu-gdpr", "us-ny"),
    )


@pytest.fixture
def chatbot_ctx():
    return ProductContext(
        description="Customer support chatbot answering product questions",
        product_type=ProductType.GENERATOR,
        data_processed=(DataCategory.PERSONAL,),
        user_populations=(UserPopulation.CONSUMERS,),
        decision_impact=DecisionImpact.ADVISORY,
        automation_level=AutomationLevel.FULLY_AUTOMATED,
        target_jurisdictions=("eu-ai-act", "eu-gdpr"),
        generative_ai_context=GenerativeAiContext(
            uses_foundation_model=True,
            foundation_model_source="third-party-api",
            generates_content=True,
            output_modalities=("text",),
        ),
    )


@pytest.fixture
def minimal_ctx():
    return ProductContext(
        description="Spreadsheet formula autocomplete for internal analysts",
        product_type=ProductType.RECOMMENDER,
        data_processed=(DataCategory.ANONYMIZED,),
        user_populations=(UserPopulation.BUSINESSES,),
        decision_impact=DecisionImpact.ADVISORY,
        automation_level=AutomationLevel.HUMAN_IN_THE_LOOP,
        target_jurisdictions=("eu-ai-act", "eu-gdpr"),
    )


@pytest.fixture
def gpai_provider_ctx():
    return ProductContext(
        description="Foundation model for text generation offered to downstream developers",
        product_type=ProductType.FOUNDATION_MODEL,
        data_processed=(DataCategory.PUBLIC,),
        user_populations=(UserPopulation.BUSINESSES,),
        target_jurisdictions=("eu-ai-act",),
        gpai_info=GpaiInfo(
            is_gpai_model=True,
            gpai_role=GpaiRole.PROVIDER,
            model_name="Atlas-1",
            exceeds_systemic_risk_threshold=True,
        ),
    )


@pytest.fixture
def credit_ctx():
    return ProductContext(
        description="Credit scoring model for consumer loan approvals",
        product_type=ProductType.PREDICTOR,
        data_processed=(DataCategory.PERSONAL, DataCategory.FINANCIAL),
        user_populations=(UserPopulation.CREDIT_APPLICANTS,),
        decision_impact=DecisionImpact.DETERMINATIVE,
        automation_level=AutomationLevel.FULLY_AUTOMATED,
        target_jurisdictions=("us-federal", "us-co"),
    )
