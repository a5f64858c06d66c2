"""Tests for template loading and the template text utilities."""

import pytest

from regclear.artifacts.templates import (
    TemplateStore,
    apply_jurisdiction_conditionals,
    extract_citations,
    extract_placeholders,
    extract_sections,
    parse_frontmatter,
    validate_filled_template,
)
from regclear.errors import TemplateFormatError, TemplateNotFoundError

VALID_TEMPLATE = """---
id: sample
name: Sample Document
jurisdiction: eu-gdpr
legalBasis: Article 35 GDPR
requiredSections:
  - overview
  - risk-assessment
---
## 1. Overview

{{product_name}}
"""


class TestParseFrontmatter:

    def test_valid(self):
        metadata, body = parse_frontmatter(VALID_TEMPLATE)
        assert metadata.id == "sample"
        assert metadata.legal_basis == "Article 35 GDPR"
        assert metadata.required_sections == ("overview", "risk-assessment")
        assert body.startswith("## 1. Overview")

    def test_missing_delimiters(self):
        with pytest.raises(TemplateFormatError, match="delimiters"):
            parse_frontmatter("## 1. Overview\n")

    def test_missing_required_fields(self):
        with pytest.raises(TemplateFormatError) as exc_info:
            parse_frontmatter("---\nid: x\nname: X\n---\nbody\n")
        assert "jurisdiction=None" in exc_info.value.message
        assert "legalBasis=None" in exc_info.value.message

    def test_invalid_yaml(self):
        with pytest.raises(TemplateFormatError, match="not valid YAML"):
            parse_frontmatter("---\nid: [unclosed\n---\nbody\n")

    def test_not_a_mapping(self):
        with pytest.raises(TemplateFormatError, match="mapping"):
            parse_frontmatter("---\n- a\n- b\n---\nbody\n")

    def test_required_sections_optional(self):
        metadata, _ = parse_frontmatter(
            "---\nid: x\nname: X\njurisdiction: us-ny\nlegalBasis: LL144\n---\nbody\n"
        )
        assert metadata.required_sections == ()


class TestTemplateStore:

    def test_load_and_cache(self, tmp_path):
        (tmp_path / "sample.md").write_text(VALID_TEMPLATE, encoding="utf-8")
        store = TemplateStore(tmp_path)
        template = store.load_template("sample")
        assert template.id == "sample"
        assert template.metadata.name == "Sample Document"
        assert store.load_template("sample") is template

    def test_missing_template(self, tmp_path):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            TemplateStore(tmp_path).load_template("nope")
        assert exc_info.value.template_id == "nope"

    def test_list_excludes_readme(self, tmp_path):
        (tmp_path / "b.md").write_text(VALID_TEMPLATE, encoding="utf-8")
        (tmp_path / "a.md").write_text(VALID_TEMPLATE, encoding="utf-8")
        (tmp_path / "README.md").write_text("# Templates\n", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
        assert TemplateStore(tmp_path).list_available_templates() == ["a", "b"]

    def test_list_missing_dir(self, tmp_path):
        assert TemplateStore(tmp_path / "absent").list_available_templates() == []


@pytest.fixture(scope="module")
def bundled_store():
    return TemplateStore()


class TestBundledTemplates:

    def test_all_bundled(self, bundled_store):
        assert bundled_store.list_available_templates() == [
            "ai-act-conformity",
            "ai-act-risk-assessment",
            "bias-audit-nyc",
            "dpia-gdpr",
            "genai-content-policy",
            "genai-training-disclosure",
            "gpai-systemic-risk",
            "gpai-technical-doc",
            "model-card",
            "transparency-notice",
        ]

    def test_ids_match_filenames(self, bundled_store):
        for template_id in bundled_store.list_available_templates():
            assert bundled_store.load_template(template_id).id == template_id

    def test_required_sections_have_headings(self, bundled_store):
        for template_id in bundled_store.list_available_templates():
            template = bundled_store.load_template(template_id)
            result = validate_filled_template(template.content, template.metadata.required_sections)
            assert result.missing_sections == (), template_id


class TestPlaceholders:

    def test_distinct_in_order(self):
        content = "{{b}} and {{a}} then {{b}} again, {{not a placeholder}} {{#if_jurisdiction x}}"
        assert extract_placeholders(content) == ["b", "a"]

    def test_none(self):
        assert extract_placeholders("plain text") == []


class TestConditionals:

    CONTENT = (
        "Intro\n"
        "{{#if_jurisdiction eu-ai-act}}\n"
        "AI Act text\n"
        "{{/if_jurisdiction}}\n"
        "### {{#if_jurisdiction us-co}}\n"
        "Colorado text\n"
        "### {{/if_jurisdiction}}\n"
        "Outro\n"
    )

    def test_keeps_attributed_regions(self):
        result = apply_jurisdiction_conditionals(self.CONTENT, ["eu-ai-act"])
        assert result == "Intro\nAI Act text\nOutro\n"

    def test_drops_everything_unattributed(self):
        assert apply_jurisdiction_conditionals(self.CONTENT, []) == "Intro\nOutro\n"

    def test_heading_prefixed_markers(self):
        result = apply_jurisdiction_conditionals(self.CONTENT, ["us-co", "eu-ai-act"])
        assert "Colorado text" in result
        assert "if_jurisdiction" not in result

    def test_text_after_open_marker_kept(self):
        content = "Intro\n{{#if_jurisdiction eu-gdpr}} GDPR note\nmore\n{{/if_jurisdiction}}\nOutro\n"
        assert apply_jurisdiction_conditionals(content, ["eu-gdpr"]) == "Intro\nGDPR note\nmore\nOutro\n"
        assert apply_jurisdiction_conditionals(content, []) == "Intro\nOutro\n"

    def test_heading_prefix_with_text(self):
        content = "### {{#if_jurisdiction us-co}} Colorado duties\nBody\n### {{/if_jurisdiction}}\n"
        result = apply_jurisdiction_conditionals(content, ["us-co"])
        assert result == "### Colorado duties\nBody\n"

    def test_single_line_region(self):
        content = "Notice: {{#if_jurisdiction us-ny}}NY only{{/if_jurisdiction}} end\n"
        assert apply_jurisdiction_conditionals(content, ["us-ny"]) == "Notice: NY only end\n"
        assert apply_jurisdiction_conditionals(content, ["eu-gdpr"]) == "Notice:  end\n"

    def test_single_line_region_beside_block(self):
        content = (
            "{{#if_jurisdiction us-ny}}NY only{{/if_jurisdiction}}\n"
            "{{#if_jurisdiction eu-gdpr}}\n"
            "GDPR text\n"
            "{{/if_jurisdiction}}\n"
        )
        assert apply_jurisdiction_conditionals(content, ["eu-gdpr"]) == "\nGDPR text\n"

    def test_no_conditionals_unchanged(self):
        assert apply_jurisdiction_conditionals("## 1. Overview\n", ["eu-gdpr"]) == "## 1. Overview\n"


class TestExtractSections:

    def test_numbered_sections(self):
        content = (
            "# Report\n\n"
            "## 1. Overview\nIntro\n### 1.1 Scope\nDetail\n"
            "## 2. Risks\nRisk text\n"
        )
        sections = extract_sections(content)
        assert [s.title for s in sections] == ["Overview", "Risks"]
        assert sections[0].content == "Intro\n### 1.1 Scope\nDetail"
        assert sections[1].content == "Risk text"
        assert all(s.required for s in sections)

    def test_unnumbered_headings_ignored(self):
        assert extract_sections("## Overview\ntext\n") == []

    def test_level_one_section(self):
        sections = extract_sections("# 1. Summary\nAll good\n")
        assert sections[0].title == "Summary"
        assert sections[0].content == "All good"


class TestExtractCitations:

    def test_tags_law_and_dedupes(self):
        content = (
            "Processing is lawful under Article 6 GDPR.\n"
            "We again rely on Article 6 GDPR.\n"
            "See Annex III for the employment category.\n"
            "Section 5 of the FTC Act prohibits deceptive practices.\n"
            "No references here.\n"
        )
        citations = extract_citations(content)
        assert [(c.law, c.article) for c in citations] == [
            ("GDPR (EU) 2016/679", "Article 6"),
            ("EU AI Act (EU) 2024/1689", "Annex III"),
            ("FTC Act", "Section 5"),
        ]
        assert citations[0].text == "Processing is lawful under Article 6 GDPR."

    def test_spacing_and_dash_variants_dedupe(self):
        content = (
            "Article 35 GDPR requires a DPIA.\n"
            "See Article  35 GDPR.\n"
            "Articles 13 - 14 GDPR cover notices.\n"
            "Articles 13–14 GDPR again.\n"
        )
        citations = extract_citations(content)
        assert [c.article for c in citations] == ["Article 35", "Articles 13-14"]

    def test_unknown_law(self):
        citations = extract_citations("Per Article 12 of the statute.")
        assert citations[0].law == "Unknown"


class TestValidateFilledTemplate:

    def test_valid(self):
        content = "## 1. Overview\ntext\n## 2. Risk Assessment\ntext\n"
        result = validate_filled_template(content, ["overview", "risk-assessment"])
        assert result.valid is True

    def test_leftover_placeholder_invalid(self):
        content = "## 1. Overview\n{{owner}}\n## 2. Risk Assessment\n"
        result = validate_filled_template(content, ["overview", "risk-assessment"])
        assert result.valid is False
        assert result.unfilled_placeholders == ("owner",)

    def test_missing_section(self):
        result = validate_filled_template("## 1. Overview\ntext\n", ["overview", "risk-assessment"])
        assert result.valid is False
        assert result.missing_sections == ("risk-assessment",)

    def test_slug_matches_hyphenated_heading(self):
        result = validate_filled_template("## 4. Copyright and Opt-outs\n", ["copyright-and-opt-outs"])
        assert result.missing_sections == ()

    def test_unnumbered_heading_does_not_count(self):
        result = validate_filled_template("## Overview\n", ["overview"])
        assert result.missing_sections == ("overview",)
