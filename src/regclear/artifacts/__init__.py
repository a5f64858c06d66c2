"""
Compliance document drafting.

Templates are loaded from markdown files, filled by a text-generation
provider, and post-processed into sections, citations and review notes.
"""

from regclear.artifacts.citations import (
    KNOWN_ARTICLES,
    detect_law,
    flag_unverified_citations,
    validate_citation,
    validate_citations,
)
from regclear.artifacts.filler import build_prompt, build_review_notes, fill_template
from regclear.artifacts.generator import (
    ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE,
    TEMPLATE_ID_TO_ARTIFACT_TYPE,
    ArtifactGenerator,
    ArtifactGroup,
    deduplicate_requirements,
    generate_filename,
    resolve_template_id,
)
from regclear.artifacts.templates import (
    TemplateStore,
    apply_jurisdiction_conditionals,
    extract_citations,
    extract_placeholders,
    extract_sections,
    parse_frontmatter,
    validate_filled_template,
)

__all__ = [
    # Templates
    "TemplateStore",
    "apply_jurisdiction_conditionals",
    "extract_citations",
    "extract_placeholders",
    "extract_sections",
    "parse_frontmatter",
    "validate_filled_template",
    # Citations
    "KNOWN_ARTICLES",
    "detect_law",
    "flag_unverified_citations",
    "validate_citation",
    "validate_citations",
    # Filling
    "build_prompt",
    "build_review_notes",
    "fill_template",
    # Generation
    "ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE",
    "TEMPLATE_ID_TO_ARTIFACT_TYPE",
    "ArtifactGenerator",
    "ArtifactGroup",
    "deduplicate_requirements",
    "generate_filename",
    "resolve_template_id",
]
