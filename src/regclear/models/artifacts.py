"""
Template and generated-document models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from regclear.models.requirements import ArtifactType


class TemplateMetadata(BaseModel):
    """Frontmatter of a document template."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    jurisdiction: str
    legal_basis: str = Field(..., alias="legalBasis")
    required_sections: tuple[str, ...] = Field(default=(), alias="requiredSections")


class LoadedTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    metadata: TemplateMetadata
    content: str

    @property
    def id(self) -> str:
        return self.metadata.id


class ArtifactSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    required: bool = True


class Citation(BaseModel):
    model_config = ConfigDict(frozen=True)

    law: str
    article: str
    text: str
    url: str | None = None


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    unfilled_placeholders: tuple[str, ...] = ()
    missing_sections: tuple[str, ...] = ()


class FillResult(BaseModel):
    """Output of filling one template."""

    model_config = ConfigDict(frozen=True)

    filled_content: str
    sections: tuple[ArtifactSection, ...] = ()
    citations: tuple[Citation, ...] = ()
    review_notes: tuple[str, ...] = ()
    validation: ValidationResult | None = None


class GeneratedArtifact(BaseModel):
    """A drafted compliance document, attributed to every jurisdiction that required it."""

    model_config = ConfigDict(frozen=True)

    type: ArtifactType
    template_id: str
    name: str
    jurisdictions: tuple[str, ...]
    filename: str
    content: str
    sections: tuple[ArtifactSection, ...] = ()
    review_notes: tuple[str, ...] = ()
    citations: tuple[Citation, ...] = ()

    @property
    def is_multi_jurisdiction(self) -> bool:
        return len(self.jurisdictions) > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "template_id": self.template_id,
            "name": self.name,
            "jurisdictions": list(self.jurisdictions),
            "filename": self.filename,
            "sections": [s.title for s in self.sections],
            "citations": [c.model_dump() for c in self.citations],
            "review_notes": list(self.review_notes),
        }


class GenerationError(BaseModel):
    """One failed document. Never raised past the batch boundary."""

    model_config = ConfigDict(frozen=True)

    template_id: str
    artifact_type: ArtifactType | None = None
    jurisdictions: tuple[str, ...] = ()
    error: str


class GenerationResult(BaseModel):
    artifacts: list[GeneratedArtifact] = Field(default_factory=list)
    errors: list[GenerationError] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "artifacts": [a.to_dict() for a in self.artifacts],
            "errors": [e.model_dump(mode="json") for e in self.errors],
        }
