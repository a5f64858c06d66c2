"""
Pydantic models for RegClear.

This module contains all data models used throughout the application:
- Context models describing the product under assessment
- Requirement models produced by jurisdiction modules
- Artifact models for templates and drafted documents
"""

from regclear.models.context import (
    AgenticAiContext,
    AISector,
    AutomationLevel,
    DataCategory,
    DecisionImpact,
    ExistingMeasure,
    FinancialServicesContext,
    GenerativeAiContext,
    GpaiInfo,
    GpaiRole,
    ProductContext,
    ProductType,
    SectorContext,
    TrainingDataInfo,
    UserPopulation,
)
from regclear.models.requirements import (
    ActionPlan,
    ActionPriority,
    ActionRequirement,
    ApplicableProvision,
    ArtifactRequirement,
    ArtifactType,
    ComplianceDeadline,
    ComplianceTimeline,
    ConflictTension,
    JurisdictionResult,
    RiskClassification,
    RiskLevel,
    SecondaryClassification,
)
from regclear.models.artifacts import (
    ArtifactSection,
    Citation,
    FillResult,
    GeneratedArtifact,
    GenerationError,
    GenerationResult,
    LoadedTemplate,
    TemplateMetadata,
    ValidationResult,
)

__all__ = [
    # Context models
    "AgenticAiContext",
    "AISector",
    "AutomationLevel",
    "DataCategory",
    "DecisionImpact",
    "ExistingMeasure",
    "FinancialServicesContext",
    "GenerativeAiContext",
    "GpaiInfo",
    "GpaiRole",
    "ProductContext",
    "ProductType",
    "SectorContext",
    "TrainingDataInfo",
    "UserPopulation",
    # Requirement models
    "ActionPlan",
    "ActionPriority",
    "ActionRequirement",
    "ApplicableProvision",
    "ArtifactRequirement",
    "ArtifactType",
    "ComplianceDeadline",
    "ComplianceTimeline",
    "ConflictTension",
    "JurisdictionResult",
    "RiskClassification",
    "RiskLevel",
    "SecondaryClassification",
    # Artifact models
    "ArtifactSection",
    "Citation",
    "FillResult",
    "GeneratedArtifact",
    "GenerationError",
    "GenerationResult",
    "LoadedTemplate",
    "TemplateMetadata",
    "ValidationResult",
]
