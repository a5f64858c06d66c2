"""Shared predicates over ProductContext.

All predicates are pure. A missing optional sub-context never satisfies a
predicate.
"""

from regclear.models.context import (
    AISector,
    AutomationLevel,
    DataCategory,
    DecisionImpact,
    ProductContext,
    ProductType,
    UserPopulation,
)

PERSONAL_DATA_CATEGORIES = frozenset({
    DataCategory.PERSONAL,
    DataCategory.SENSITIVE,
    DataCategory.BIOMETRIC,
    DataCategory.HEALTH,
    DataCategory.FINANCIAL,
    DataCategory.LOCATION,
    DataCategory.BEHAVIORAL,
    DataCategory.MINOR,
    DataCategory.EMPLOYMENT,
    DataCategory.CRIMINAL,
    DataCategory.POLITICAL,
    DataCategory.GENETIC,
})

SPECIAL_CATEGORY_DATA = frozenset({
    DataCategory.SENSITIVE,
    DataCategory.BIOMETRIC,
    DataCategory.HEALTH,
    DataCategory.GENETIC,
    DataCategory.POLITICAL,
    DataCategory.CRIMINAL,
})

CONSUMER_POPULATIONS = frozenset({
    UserPopulation.CONSUMERS,
    UserPopulation.CREDIT_APPLICANTS,
    UserPopulation.TENANTS,
    UserPopulation.JOB_APPLICANTS,
})


def description_has(ctx: ProductContext, *keywords: str) -> bool:
    """True if the lower-cased description contains any keyword."""
    desc = ctx.lower_description
    return any(kw in desc for kw in keywords)


def processes_personal_data(ctx: ProductContext) -> bool:
    return any(d in PERSONAL_DATA_CATEGORIES for d in ctx.data_processed)


def processes_special_category_data(ctx: ProductContext) -> bool:
    return any(d in SPECIAL_CATEGORY_DATA for d in ctx.data_processed)


def processes_biometric_data(ctx: ProductContext) -> bool:
    return DataCategory.BIOMETRIC in ctx.data_processed


def involves_minors(ctx: ProductContext) -> bool:
    return (
        DataCategory.MINOR in ctx.data_processed
        or UserPopulation.MINORS in ctx.user_populations
    )


def makes_material_decisions(ctx: ProductContext) -> bool:
    return ctx.decision_impact in (DecisionImpact.MATERIAL, DecisionImpact.DETERMINATIVE)


def is_fully_automated(ctx: ProductContext) -> bool:
    return ctx.automation_level == AutomationLevel.FULLY_AUTOMATED


def is_automated_decision_making(ctx: ProductContext) -> bool:
    """Solely automated decisions with legal or similarly significant effect."""
    return is_fully_automated(ctx) and makes_material_decisions(ctx)


def is_consumer_facing(ctx: ProductContext) -> bool:
    return (
        UserPopulation.CONSUMERS in ctx.user_populations
        or UserPopulation.GENERAL_PUBLIC in ctx.user_populations
    )


def affects_consumers(ctx: ProductContext) -> bool:
    return any(p in CONSUMER_POPULATIONS for p in ctx.user_populations)


def is_employment_context(ctx: ProductContext) -> bool:
    return (
        UserPopulation.JOB_APPLICANTS in ctx.user_populations
        or UserPopulation.EMPLOYEES in ctx.user_populations
    )


def uses_foundation_model(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    return genai is not None and genai.uses_foundation_model


def is_genai_product(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    return (
        (genai is not None and (genai.generates_content or genai.uses_foundation_model))
        or ctx.product_type in (ProductType.GENERATOR, ProductType.FOUNDATION_MODEL)
    )


def can_generate_deepfakes(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    return genai is not None and (genai.can_generate_deepfakes or genai.can_generate_synthetic_voice)


def has_agentic_capabilities(ctx: ProductContext) -> bool:
    agentic = ctx.agentic_ai_context
    genai = ctx.generative_ai_context
    return (
        (agentic is not None and agentic.is_agentic)
        or (genai is not None and genai.uses_agentic_capabilities)
        or ctx.product_type == ProductType.AGENT
    )


def is_financial_services_ai(ctx: ProductContext) -> bool:
    sector = ctx.sector_context
    return sector is not None and sector.sector == AISector.FINANCIAL_SERVICES


def involves_credit(ctx: ProductContext) -> bool:
    sector = ctx.sector_context
    fin = sector.financial_services if sector else None
    return (
        (fin is not None and fin.involves_credit)
        or UserPopulation.CREDIT_APPLICANTS in ctx.user_populations
        or description_has(ctx, "credit scor", "creditworth")
    )


def involves_insurance_pricing(ctx: ProductContext) -> bool:
    sector = ctx.sector_context
    fin = sector.financial_services if sector else None
    return fin is not None and fin.involves_insurance_pricing


def training_data_includes_personal_data(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    from_genai = genai is not None and (
        "personal-data" in genai.training_data_includes
        or "user-generated-content" in genai.training_data_includes
    )
    return ctx.training_data.uses_training_data and (
        ctx.training_data.contains_personal_data or from_genai
    )
