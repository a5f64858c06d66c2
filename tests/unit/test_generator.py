"""Tests for artifact generation: template grouping, batch errors, concurrency."""

import pytest

from regclear.artifacts.generator import (
    ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE,
    ArtifactGenerator,
    deduplicate_requirements,
    generate_filename,
    resolve_template_id,
)
from regclear.artifacts.templates import TemplateStore
from regclear.jurisdictions.mapper import RequirementMapper
from regclear.jurisdictions.registry import build_default_registry
from regclear.models import ArtifactRequirement, ArtifactType


def map_results(ctx):
    return RequirementMapper(build_default_registry()).map_all_jurisdictions(ctx).results


class TestResolveTemplateId:

    def test_own_template_wins(self):
        requirement = ArtifactRequirement(
            type=ArtifactType.RISK_ASSESSMENT,
            name="x",
            legal_basis="y",
            description="z",
            template_id="model-card",
        )
        assert resolve_template_id(requirement) == "model-card"

    def test_default_for_type(self):
        requirement = ArtifactRequirement(
            type=ArtifactType.ALGORITHMIC_IMPACT, name="x", legal_basis="y", description="z"
        )
        assert resolve_template_id(requirement) == "ai-act-risk-assessment"

    def test_every_type_has_a_default(self):
        assert set(ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE) == set(ArtifactType)


class TestGenerateFilename:

    def test_single(self):
        assert generate_filename("dpia-gdpr", ["eu-gdpr"]) == "dpia-gdpr-eu-gdpr.md"

    def test_multi(self):
        assert generate_filename("dpia-gdpr", ["eu-gdpr", "eu-ai-act"]) == (
            "dpia-gdpr-multi-jurisdiction.md"
        )


class TestDeduplicateRequirements:

    def test_merges_shared_templates(self, resume_screening_ctx):
        groups = deduplicate_requirements(map_results(resume_screening_ctx))
        by_template = {g.template_id: g for g in groups}

        assert [g.template_id for g in groups] == [
            "ai-act-risk-assessment",
            "ai-act-conformity",
            "model-card",
            "transparency-notice",
            "bias-audit-nyc",
        ]
        assert by_template["transparency-notice"].jurisdictions == ["eu-gdpr", "us-ny"]
        assert by_template["transparency-notice"].filename == (
            "transparency-notice-multi-jurisdiction.md"
        )
        assert by_template["ai-act-risk-assessment"].artifact_type == ArtifactType.RISK_CLASSIFICATION

    def test_optional_requirements_skipped(self, chatbot_ctx):
        results = [r for r in map_results(chatbot_ctx) if r.jurisdiction == "eu-gdpr"]
        federal = RequirementMapper(build_default_registry()).map_jurisdiction(
            chatbot_ctx, "us-federal"
        )
        assert federal.required_artifacts
        groups = deduplicate_requirements([*results, federal])
        assert [g.jurisdictions for g in groups] == [["eu-gdpr"]]

    def test_no_template_skipped(self, credit_ctx, monkeypatch):
        monkeypatch.delitem(ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE, ArtifactType.ALGORITHMIC_IMPACT)
        monkeypatch.delitem(ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE, ArtifactType.RISK_ASSESSMENT)
        results = [r for r in map_results(credit_ctx) if r.jurisdiction == "us-co"]
        groups = deduplicate_requirements(results)
        assert [g.template_id for g in groups] == ["transparency-notice"]


class TestArtifactGenerator:

    async def test_generates_one_document_per_template(self, resume_screening_ctx, stub_provider):
        generator = ArtifactGenerator(stub_provider)
        result = await generator.generate_artifacts(resume_screening_ctx, map_results(resume_screening_ctx))

        assert result.errors == []
        assert len(result.artifacts) == 5
        assert len(stub_provider.requests) == 5

        notice = next(a for a in result.artifacts if a.template_id == "transparency-notice")
        assert notice.jurisdictions == ("eu-gdpr", "us-ny")
        assert notice.is_multi_jurisdiction
        assert notice.name == "AI Transparency Notice"
        assert notice.type == ArtifactType.TRANSPARENCY_NOTICE
        assert "NYC Automated Employment Decision Tool Notice" in [s.title for s in notice.sections]
        assert "Colorado Consumer Notice" not in [s.title for s in notice.sections]

    async def test_failure_isolated(self, resume_screening_ctx, make_provider):
        provider = make_provider(fail_for=["Model Card"])
        result = await ArtifactGenerator(provider).generate_artifacts(
            resume_screening_ctx, map_results(resume_screening_ctx)
        )

        assert len(result.artifacts) == 4
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.template_id == "model-card"
        assert error.artifact_type == ArtifactType.MODEL_CARD
        assert error.jurisdictions == ("eu-ai-act",)
        assert "429 rate limit exceeded" in error.error

    async def test_unexpected_exception_recorded(self, resume_screening_ctx, make_provider):
        provider = make_provider(fail_for=["Bias Audit Report"], error=RuntimeError("boom"))
        result = await ArtifactGenerator(provider).generate_artifacts(
            resume_screening_ctx, map_results(resume_screening_ctx)
        )
        assert [e.error for e in result.errors] == ["boom"]

    async def test_missing_template_file(self, resume_screening_ctx, stub_provider, tmp_path):
        generator = ArtifactGenerator(stub_provider, store=TemplateStore(tmp_path))
        result = await generator.generate_artifacts(resume_screening_ctx, map_results(resume_screening_ctx))

        assert result.artifacts == []
        assert len(result.errors) == 5
        assert 'Template "ai-act-risk-assessment" not found' in result.errors[0].error
        assert stub_provider.requests == []

    async def test_concurrent_keeps_order(self, resume_screening_ctx, stub_provider):
        results = map_results(resume_screening_ctx)
        sequential = await ArtifactGenerator(stub_provider).generate_artifacts(resume_screening_ctx, results)
        concurrent = await ArtifactGenerator(stub_provider, concurrency=3).generate_artifacts(
            resume_screening_ctx, results
        )
        assert [a.template_id for a in concurrent.artifacts] == [
            a.template_id for a in sequential.artifacts
        ]

    def test_concurrency_defaults_to_settings(self, stub_provider, monkeypatch):
        from regclear.config import get_settings

        monkeypatch.setenv("GENERATION_CONCURRENCY", "4")
        get_settings.cache_clear()
        assert ArtifactGenerator(stub_provider).concurrency == 4
        assert ArtifactGenerator(stub_provider, concurrency=2).concurrency == 2

    async def test_no_results(self, minimal_ctx, stub_provider):
        result = await ArtifactGenerator(stub_provider).generate_artifacts(minimal_ctx, [])
        assert result.artifacts == []
        assert result.errors == []


@pytest.mark.parametrize("template_id", [
    "dpia-gdpr", "model-card", "bias-audit-nyc", "gpai-technical-doc",
])
def test_template_types_mapped(template_id):
    from regclear.artifacts.generator import TEMPLATE_ID_TO_ARTIFACT_TYPE

    assert ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE[TEMPLATE_ID_TO_ARTIFACT_TYPE[template_id]] == template_id
