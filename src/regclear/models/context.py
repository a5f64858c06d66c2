"""
Product context models.

A ProductContext is the immutable snapshot of a described AI product that
every jurisdiction module reads. It is produced by an external interview or
codebase scan and accepted here as JSON (snake_case or camelCase keys).
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContextModel(BaseModel):
    """Frozen base accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=False,
    )


class ProductType(str, Enum):
    CLASSIFIER = "classifier"
    RECOMMENDER = "recommender"
    GENERATOR = "generator"
    PREDICTOR = "predictor"
    DETECTOR = "detector"
    RANKER = "ranker"
    AGENT = "agent"
    FOUNDATION_MODEL = "foundation-model"
    OTHER = "other"


class DataCategory(str, Enum):
    PERSONAL = "personal"
    SENSITIVE = "sensitive"
    BIOMETRIC = "biometric"
    HEALTH = "health"
    FINANCIAL = "financial"
    LOCATION = "location"
    BEHAVIORAL = "behavioral"
    MINOR = "minor"
    EMPLOYMENT = "employment"
    CRIMINAL = "criminal"
    POLITICAL = "political"
    GENETIC = "genetic"
    PUBLIC = "public"
    ANONYMIZED = "anonymized"
    PSEUDONYMIZED = "pseudonymized"
    OTHER = "other"


class UserPopulation(str, Enum):
    CONSUMERS = "consumers"
    BUSINESSES = "businesses"
    MINORS = "minors"
    EMPLOYEES = "employees"
    PATIENTS = "patients"
    STUDENTS = "students"
    JOB_APPLICANTS = "job-applicants"
    CREDIT_APPLICANTS = "credit-applicants"
    TENANTS = "tenants"
    GENERAL_PUBLIC = "general-public"
    OTHER = "other"


class DecisionImpact(str, Enum):
    ADVISORY = "advisory"
    MATERIAL = "material"
    DETERMINATIVE = "determinative"


class AutomationLevel(str, Enum):
    FULLY_AUTOMATED = "fully-automated"
    HUMAN_IN_THE_LOOP = "human-in-the-loop"
    HUMAN_ON_THE_LOOP = "human-on-the-loop"


class GpaiRole(str, Enum):
    PROVIDER = "provider"
    DEPLOYER = "deployer"
    BOTH = "both"


class AISector(str, Enum):
    FINANCIAL_SERVICES = "financial-services"
    HEALTHCARE = "healthcare"
    EMPLOYMENT = "employment"
    EDUCATION = "education"
    LAW_ENFORCEMENT = "law-enforcement"
    CRITICAL_INFRASTRUCTURE = "critical-infrastructure"
    GENERAL = "general"


class TrainingDataInfo(ContextModel):
    """What the model was trained on. Defaults describe a product with no training data."""

    uses_training_data: bool = False
    sources: tuple[str, ...] = ()
    contains_personal_data: bool = False
    consent_obtained: bool | None = None
    opt_out_mechanism: bool = False
    synthetic_data: bool = False


class ExistingMeasure(ContextModel):
    type: str
    description: str
    implemented: bool = False


class GpaiInfo(ContextModel):
    """General-purpose AI model details."""

    is_gpai_model: bool = False
    gpai_role: GpaiRole = GpaiRole.DEPLOYER
    model_name: str | None = None
    is_open_source: bool = False
    compute_flops: float | None = None
    exceeds_systemic_risk_threshold: bool = False
    commission_designated: bool = False
    provides_downstream_documentation: bool = False
    has_acceptable_use_policy: bool = False
    copyright_compliance_mechanism: str | None = None


class GenerativeAiContext(ContextModel):
    uses_foundation_model: bool = False
    foundation_model_source: str | None = Field(
        default=None, description="self-trained, third-party-api, fine-tuned or open-source"
    )
    model_identifier: str | None = None
    generates_content: bool = False
    output_modalities: tuple[str, ...] = ()
    can_generate_deepfakes: bool = False
    can_generate_synthetic_voice: bool = False
    has_output_watermarking: bool = False
    has_output_filtering: bool = False
    training_data_includes: tuple[str, ...] = ()
    finetuning_performed: bool = False
    uses_rag: bool = Field(default=False, validation_alias=AliasChoices("uses_rag", "usesRAG", "usesRag"))
    uses_agentic_capabilities: bool = False


class AgenticAiContext(ContextModel):
    is_agentic: bool = False
    autonomy_level: str = Field(default="narrow", description="narrow, bounded or broad")
    tool_access: tuple[str, ...] = ()
    action_scope: tuple[str, ...] = ()
    has_human_checkpoints: bool = False
    is_multi_agent: bool = False
    can_access_external_systems: bool = False
    can_modify_data: bool = False
    can_make_financial_transactions: bool = False
    has_failsafe_mechanisms: bool = False
    has_action_logging: bool = False


class FinancialServicesContext(ContextModel):
    sub_sector: str | None = None
    involves_credit: bool = False
    involves_insurance_pricing: bool = False
    involves_trading: bool = False
    involves_aml_kyc: bool = False
    involves_regulatory_reporting: bool = False
    regulatory_bodies: tuple[str, ...] = ()
    has_materiality_assessment: bool = False
    has_model_risk_governance: bool | None = None


class SectorContext(ContextModel):
    sector: AISector = AISector.GENERAL
    financial_services: FinancialServicesContext | None = None


class ProductContext(ContextModel):
    """
    Immutable description of the product under assessment.

    Built once and consumed read-only by every jurisdiction module.
    """

    description: str = Field(..., description="Free-text description of the product")
    product_type: ProductType = ProductType.OTHER
    data_processed: tuple[DataCategory, ...] = ()
    user_populations: tuple[UserPopulation, ...] = ()
    decision_impact: DecisionImpact = DecisionImpact.ADVISORY
    automation_level: AutomationLevel = AutomationLevel.HUMAN_IN_THE_LOOP
    training_data: TrainingDataInfo = Field(default_factory=TrainingDataInfo)
    target_jurisdictions: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices(
            "target_jurisdictions", "targetJurisdictions", "target_markets", "targetMarkets"
        ),
    )
    existing_measures: tuple[ExistingMeasure, ...] = ()
    answers: dict[str, Any] = Field(default_factory=dict, description="Raw interview answers")
    launch_date: str | None = None

    # Optional sub-contexts
    gpai_info: GpaiInfo | None = None
    generative_ai_context: GenerativeAiContext | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "generative_ai_context", "generativeAiContext", "genai_context"
        ),
    )
    agentic_ai_context: AgenticAiContext | None = None
    sector_context: SectorContext | None = None

    @property
    def lower_description(self) -> str:
        return self.description.lower()

    def summary_lines(self) -> list[str]:
        """Human-readable lines describing the context, used in drafting prompts."""
        lines = [
            f"Product description: {self.description}",
            f"Product type: {self.product_type.value}",
            f"Data processed: {', '.join(d.value for d in self.data_processed)}",
            f"User populations: {', '.join(p.value for p in self.user_populations)}",
            f"Decision impact: {self.decision_impact.value}",
            f"Automation level: {self.automation_level.value}",
            f"Target markets: {', '.join(self.target_jurisdictions)}",
        ]

        training = self.training_data
        if training.uses_training_data:
            lines.append(f"Training data sources: {', '.join(training.sources)}")
            lines.append(f"Training data contains personal data: {training.contains_personal_data}")
            lines.append(f"Consent obtained: {training.consent_obtained}")
            lines.append(f"Opt-out mechanism: {training.opt_out_mechanism}")

        if self.gpai_info:
            gpai = self.gpai_info
            lines.append(f"GPAI model: {gpai.is_gpai_model}")
            lines.append(f"GPAI role: {gpai.gpai_role.value}")
            if gpai.model_name:
                lines.append(f"Model name: {gpai.model_name}")
            lines.append(f"Open source: {gpai.is_open_source}")
            lines.append(f"Exceeds systemic risk threshold: {gpai.exceeds_systemic_risk_threshold}")
            if gpai.copyright_compliance_mechanism:
                lines.append(f"Copyright compliance mechanism: {gpai.copyright_compliance_mechanism}")

        if self.generative_ai_context:
            genai = self.generative_ai_context
            lines.append(f"Uses foundation model: {genai.uses_foundation_model}")
            if genai.foundation_model_source:
                lines.append(f"Model source: {genai.foundation_model_source}")
            if genai.model_identifier:
                lines.append(f"Model identifier: {genai.model_identifier}")
            lines.append(f"Output modalities: {', '.join(genai.output_modalities)}")
            lines.append(f"Can generate deepfakes: {genai.can_generate_deepfakes}")
            lines.append(f"Has output watermarking: {genai.has_output_watermarking}")
            lines.append(f"Has output filtering: {genai.has_output_filtering}")
            lines.append(f"Training data includes: {', '.join(genai.training_data_includes)}")
            lines.append(f"Uses RAG: {genai.uses_rag}")
            lines.append(f"Uses agentic capabilities: {genai.uses_agentic_capabilities}")

        if self.agentic_ai_context:
            agentic = self.agentic_ai_context
            lines.append(f"Agentic AI: {agentic.is_agentic}")
            lines.append(f"Autonomy level: {agentic.autonomy_level}")
            lines.append(f"Tool access: {', '.join(agentic.tool_access)}")
            lines.append(f"Has human checkpoints: {agentic.has_human_checkpoints}")
            lines.append(f"Has failsafe mechanisms: {agentic.has_failsafe_mechanisms}")
            lines.append(f"Has action logging: {agentic.has_action_logging}")

        if self.sector_context:
            lines.append(f"Sector: {self.sector_context.sector.value}")
            fin = self.sector_context.financial_services
            if fin:
                lines.append(f"Financial sub-sector: {fin.sub_sector}")
                lines.append(f"Involves credit: {fin.involves_credit}")
                lines.append(f"Involves insurance pricing: {fin.involves_insurance_pricing}")
                lines.append(f"Has model risk governance: {fin.has_model_risk_governance}")

        if self.existing_measures:
            measures = "; ".join(
                f"{m.type}: {m.description} ({'implemented' if m.implemented else 'planned'})"
                for m in self.existing_measures
            )
            lines.append(f"Existing measures: {measures}")

        return lines
