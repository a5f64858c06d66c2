"""Tests for template filling: prompt, review notes, post-processing, failures."""

import pytest

from regclear.artifacts.filler import (
    DEFAULT_REVIEW_NOTES,
    DRAFT_NOTE,
    SYSTEM_PROMPT,
    build_prompt,
    build_review_notes,
    fill_template,
)
from regclear.artifacts.templates import TemplateStore
from regclear.errors import ProviderError, TemplateFillError
from regclear.models import AgenticAiContext, ProductContext


@pytest.fixture
def dpia():
    return TemplateStore().load_template("dpia-gdpr")


class TestBuildPrompt:

    def test_contains_context_and_template(self, dpia, credit_ctx):
        prompt = build_prompt(dpia, credit_ctx, ["eu-gdpr"])
        assert "## Product Context" in prompt
        assert "Product description: Credit scoring model for consumer loan approvals" in prompt
        assert "## Applicable Jurisdictions\n\neu-gdpr" in prompt
        assert "Template: Data Protection Impact Assessment\n" in prompt
        assert "Required sections: description-of-processing, necessity-and-proportionality" in prompt
        assert prompt.rstrip().endswith("{{sign_off}}")

    def test_lists_placeholders_once(self, dpia, credit_ctx):
        prompt = build_prompt(dpia, credit_ctx, ["eu-gdpr"])
        placeholders_block = prompt.split("## Placeholders to Fill\n\n", 1)[1].split("\n\n", 1)[0]
        names = placeholders_block.split(", ")
        assert names[0] == "product_name"
        assert len(names) == len(set(names))

    def test_uses_resolved_body(self, dpia, credit_ctx):
        prompt = build_prompt(dpia, credit_ctx, ["eu-gdpr"], body="## 1. Only\n{{x}}")
        assert prompt.endswith("## Template\n\n## 1. Only\n{{x}}")
        assert "## Placeholders to Fill\n\nx" in prompt


class TestReviewNotes:

    def test_defaults(self, minimal_ctx):
        notes = build_review_notes(minimal_ctx, "model-card")
        assert notes == [DRAFT_NOTE, *DEFAULT_REVIEW_NOTES]

    def test_fully_automated(self, credit_ctx):
        notes = build_review_notes(credit_ctx, "model-card")
        assert any("Article 22 GDPR" in note for note in notes)

    def test_template_specific(self, minimal_ctx):
        notes = build_review_notes(minimal_ctx, "dpia-gdpr")
        assert notes[-1].startswith("Consider whether prior consultation")

    def test_systemic_risk(self, gpai_provider_ctx):
        notes = build_review_notes(gpai_provider_ctx, "gpai-technical-doc")
        assert any("10^25 FLOPs" in note for note in notes)

    def test_agentic(self):
        ctx = ProductContext(
            description="Procurement agent",
            agentic_ai_context=AgenticAiContext(is_agentic=True),
        )
        assert any("Agentic AI" in note for note in build_review_notes(ctx, "model-card"))


class TestFillTemplate:

    async def test_single_jurisdiction(self, dpia, credit_ctx, stub_provider):
        result = await fill_template(dpia, credit_ctx, ["eu-gdpr"], stub_provider)

        assert result.validation.valid is True
        titles = [s.title for s in result.sections]
        assert titles[0] == "Description of Processing"
        assert "Interaction with the EU AI Act" not in titles
        assert "{{" not in result.filled_content
        assert result.review_notes[0] == DRAFT_NOTE
        assert not any(note.startswith("WARNING") for note in result.review_notes)
        assert ("GDPR (EU) 2016/679", "Article 6") in [(c.law, c.article) for c in result.citations]

    async def test_conditional_kept_for_attributed_jurisdiction(self, dpia, credit_ctx, stub_provider):
        result = await fill_template(dpia, credit_ctx, ["eu-gdpr", "eu-ai-act"], stub_provider)
        assert "Interaction with the EU AI Act" in [s.title for s in result.sections]

    async def test_request_settings(self, dpia, credit_ctx, stub_provider):
        await fill_template(dpia, credit_ctx, ["eu-gdpr"], stub_provider, max_tokens=1234)
        request = stub_provider.requests[0]
        assert request.system_prompt == SYSTEM_PROMPT
        assert request.temperature == 0.2
        assert request.max_tokens == 1234
        assert len(request.messages) == 1

    async def test_warnings_for_bad_output(self, dpia, credit_ctx, make_provider):
        provider = make_provider(response=(
            "## 1. Description of Processing\n{{processing_description}}\n"
            "## 3. Risk Assessment\nSee Article 150 GDPR.\n"
        ))
        result = await fill_template(dpia, credit_ctx, ["eu-gdpr"], provider)

        assert result.validation.valid is False
        warnings = [note for note in result.review_notes if note.startswith("WARNING")]
        assert warnings[0] == "WARNING: 1 placeholder(s) were not filled: processing_description"
        assert warnings[1].startswith("WARNING: 2 required section(s) may be missing")
        assert warnings[2].startswith("WARNING: 1 citation(s) could not be verified")
        assert result.review_notes[-1] == (
            "  - GDPR (EU) 2016/679 Article 150: UNVERIFIED - article number out of known range"
        )

    async def test_echoed_conditionals_stripped(self, dpia, credit_ctx, make_provider):
        provider = make_provider(response=(
            "## 1. Description of Processing\ntext\n"
            "{{#if_jurisdiction us-co}}\nColorado only\n{{/if_jurisdiction}}\n"
        ))
        result = await fill_template(dpia, credit_ctx, ["eu-gdpr"], provider)
        assert "Colorado only" not in result.filled_content
        assert "if_jurisdiction" not in result.filled_content

    async def test_provider_failure(self, dpia, credit_ctx, make_provider):
        provider = make_provider(fail_for=["Data Protection Impact Assessment"])
        with pytest.raises(TemplateFillError) as exc_info:
            await fill_template(dpia, credit_ctx, ["eu-gdpr"], provider)

        assert exc_info.value.template_id == "dpia-gdpr"
        assert "429 rate limit exceeded" in exc_info.value.message
        assert isinstance(exc_info.value.cause, ProviderError)
        assert len(provider.requests) == 1
