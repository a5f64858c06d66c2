"""
Template loading and text utilities.

Templates are markdown files with a YAML frontmatter block:

    ---
    id: dpia-gdpr
    name: Data Protection Impact Assessment
    jurisdiction: eu-gdpr
    legalBasis: Article 35 GDPR
    requiredSections:
      - risk-assessment
    ---
    ## 1. Overview
    {{product_description}}

Bodies may contain `{{#if_jurisdiction <id>}} ... {{/if_jurisdiction}}`
regions that are kept only when the document is attributed to that
jurisdiction.
"""

import re
from pathlib import Path

import structlog
import yaml

from regclear.artifacts.citations import detect_law, find_references
from regclear.config import get_settings
from regclear.errors import TemplateFormatError, TemplateNotFoundError
from regclear.models.artifacts import (
    ArtifactSection,
    Citation,
    LoadedTemplate,
    TemplateMetadata,
    ValidationResult,
)

logger = structlog.get_logger(__name__)

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.DOTALL)
PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")
INLINE_CONDITIONAL_PATTERN = re.compile(
    r"\{\{#if_jurisdiction[ \t]+([\w-]+)\}\}([^\n]*?)\{\{/if_jurisdiction\}\}"
)
CONDITIONAL_PATTERN = re.compile(
    r"^([ \t]*(?:#{1,3}[ \t]*)?)\{\{#if_jurisdiction[ \t]+([\w-]+)\}\}[ \t]*([^\n]*)\n"
    r"(.*?)"
    r"^[ \t]*(?:#{1,3}[ \t]*)?\{\{/if_jurisdiction\}\}[^\n]*(?:\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)\s*$", re.MULTILINE)
NUMBERED_TITLE_PATTERN = re.compile(r"^\d+\.\s+(.+)$")

REQUIRED_FIELDS = ("id", "name", "jurisdiction", "legalBasis")


# =============================================================================
# Frontmatter
# =============================================================================

def parse_frontmatter(raw: str) -> tuple[TemplateMetadata, str]:
    """
    Split a template into metadata and body.

    Raises:
        TemplateFormatError: If the frontmatter block is absent or incomplete
    """
    match = FRONTMATTER_PATTERN.match(raw)
    if not match:
        raise TemplateFormatError("Template missing YAML frontmatter delimiters (---)")

    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise TemplateFormatError(f"Template frontmatter is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise TemplateFormatError("Template frontmatter must be a mapping")

    values = {key: data.get(key) for key in REQUIRED_FIELDS}
    if not all(values.values()):
        found = ", ".join(f"{key}={values[key]}" for key in REQUIRED_FIELDS)
        raise TemplateFormatError(
            f"Template frontmatter missing required fields. Found: {found}"
        )

    metadata = TemplateMetadata(
        id=str(values["id"]),
        name=str(values["name"]),
        jurisdiction=str(values["jurisdiction"]),
        legalBasis=str(values["legalBasis"]),
        requiredSections=tuple(str(s) for s in data.get("requiredSections") or ()),
    )
    return metadata, match.group(2)


# =============================================================================
# Template Store
# =============================================================================

class TemplateStore:
    """Reads templates from a directory and caches them by id."""

    def __init__(self, templates_dir: Path | str | None = None):
        if templates_dir is None:
            templates_dir = get_settings().resolved_templates_dir
        self.templates_dir = Path(templates_dir)
        self._cache: dict[str, LoadedTemplate] = {}

    def load_template(self, template_id: str) -> LoadedTemplate:
        """
        Load a template by id.

        Raises:
            TemplateNotFoundError: If no `<id>.md` exists
            TemplateFormatError: If its frontmatter is malformed
        """
        if template_id in self._cache:
            return self._cache[template_id]

        path = self.templates_dir / f"{template_id}.md"
        if not path.is_file():
            raise TemplateNotFoundError(template_id, f"no file at {path}")

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateNotFoundError(template_id, str(e)) from e

        metadata, content = parse_frontmatter(raw)
        template = LoadedTemplate(metadata=metadata, content=content)
        self._cache[template_id] = template
        logger.debug("template_loaded", template_id=template_id, path=str(path))
        return template

    def list_available_templates(self) -> list[str]:
        if not self.templates_dir.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.templates_dir.glob("*.md")
            if path.name != "README.md"
        )


# =============================================================================
# Text utilities
# =============================================================================

def extract_placeholders(content: str) -> list[str]:
    """Distinct `{{name}}` placeholders in first-seen order."""
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(content)))


def apply_jurisdiction_conditionals(content: str, jurisdictions: list[str] | tuple[str, ...]) -> str:
    """
    Keep conditional regions for the given jurisdictions and drop the rest, markers included.

    Regions either sit on one line (`{{#if_jurisdiction x}}text{{/if_jurisdiction}}`)
    or span lines, with the markers starting their own lines. Text after an
    opening marker stays with the region, behind any heading prefix the
    marker had.
    """
    attributed = set(jurisdictions)

    def _resolve_inline(match: re.Match) -> str:
        return match.group(2) if match.group(1) in attributed else ""

    def _resolve_block(match: re.Match) -> str:
        prefix, jurisdiction, first_line, rest = match.groups()
        if jurisdiction not in attributed:
            return ""
        return f"{prefix}{first_line}\n{rest}" if first_line.strip() else rest

    content = INLINE_CONDITIONAL_PATTERN.sub(_resolve_inline, content)
    return CONDITIONAL_PATTERN.sub(_resolve_block, content)


def extract_sections(content: str) -> list[ArtifactSection]:
    """
    Top-level numbered sections (`# 1. Title` or `## 1. Title`).

    A section runs until the next heading of the same or a higher level.
    Sub-numbered headings such as `## 1.1 Scope` are not sections.
    """
    headings = [
        (m.start(), m.end(), len(m.group(1)), m.group(2))
        for m in HEADING_PATTERN.finditer(content)
    ]

    sections = []
    for index, (_, end, level, text) in enumerate(headings):
        if level > 2:
            continue
        title_match = NUMBERED_TITLE_PATTERN.match(text)
        if not title_match:
            continue

        stop = len(content)
        for next_start, _, next_level, _ in headings[index + 1:]:
            if next_level <= level:
                stop = next_start
                break

        sections.append(
            ArtifactSection(
                title=title_match.group(1).strip(),
                content=content[end:stop].strip(),
                required=True,
            )
        )
    return sections


def extract_citations(content: str) -> list[Citation]:
    """Legal references, tagged by law and deduplicated in first-seen order."""
    citations: dict[tuple[str, str], Citation] = {}
    for line in content.splitlines():
        references = find_references(line)
        if not references:
            continue
        law = detect_law(line)
        for reference in references:
            key = (law, reference)
            if key not in citations:
                citations[key] = Citation(law=law, article=reference, text=line.strip())
    return list(citations.values())


def validate_filled_template(
    content: str, required_sections: list[str] | tuple[str, ...]
) -> ValidationResult:
    """Report leftover placeholders and required sections with no numbered heading."""
    unfilled = extract_placeholders(content)

    missing = []
    for slug in required_sections:
        words = r"[\s-]+".join(re.escape(word) for word in slug.split("-"))
        pattern = re.compile(rf"^#{{1,2}}\s+\d+\.\s+.*{words}", re.IGNORECASE | re.MULTILINE)
        if not pattern.search(content):
            missing.append(slug)

    return ValidationResult(
        valid=not unfilled and not missing,
        unfilled_placeholders=tuple(unfilled),
        missing_sections=tuple(missing),
    )
