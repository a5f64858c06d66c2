"""
Jurisdiction modules for RegClear.

Each module classifies a product context within one legal regime and
reports the provisions, documents, actions and timeline that follow.
"""

from regclear.jurisdictions.actions import (
    bucket_by_priority,
    merge_actions,
    prioritize_actions,
)
from regclear.jurisdictions.base import (
    JurisdictionModule,
    Tier,
    TieredJurisdiction,
    TierException,
    Trigger,
    classify,
)
from regclear.jurisdictions.conflicts import CONFLICT_RULES, ConflictRule, detect_conflicts
from regclear.jurisdictions.eu_ai_act import EuAiActJurisdiction
from regclear.jurisdictions.eu_gdpr import EuGdprJurisdiction
from regclear.jurisdictions.mapper import (
    AggregatedRequirements,
    MappingError,
    MappingResult,
    RequirementMapper,
)
from regclear.jurisdictions.registry import (
    JurisdictionRegistry,
    RegistryEntry,
    build_default_registry,
    get_registry,
)
from regclear.jurisdictions.us_co import UsColoradoJurisdiction
from regclear.jurisdictions.us_federal import UsFederalJurisdiction
from regclear.jurisdictions.us_ny import UsNewYorkJurisdiction

__all__ = [
    # Contract
    "JurisdictionModule",
    "Tier",
    "TieredJurisdiction",
    "TierException",
    "Trigger",
    "classify",
    # Built-in jurisdictions
    "EuAiActJurisdiction",
    "EuGdprJurisdiction",
    "UsColoradoJurisdiction",
    "UsFederalJurisdiction",
    "UsNewYorkJurisdiction",
    # Registry and mapping
    "JurisdictionRegistry",
    "RegistryEntry",
    "build_default_registry",
    "get_registry",
    "RequirementMapper",
    "MappingError",
    "MappingResult",
    "AggregatedRequirements",
    # Cross-jurisdiction planning
    "merge_actions",
    "bucket_by_priority",
    "prioritize_actions",
    "ConflictRule",
    "CONFLICT_RULES",
    "detect_conflicts",
]
