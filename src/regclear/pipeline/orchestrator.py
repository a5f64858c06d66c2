"""
Pipeline Orchestrator

Coordinates mapping, aggregation, document generation and output.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable
from uuid import UUID, uuid4

import structlog

from regclear.artifacts.generator import ArtifactGenerator
from regclear.artifacts.templates import TemplateStore
from regclear.config import Settings, get_settings
from regclear.jurisdictions.mapper import (
    AggregatedRequirements,
    MappingResult,
    RequirementMapper,
)
from regclear.jurisdictions.registry import JurisdictionRegistry, get_registry
from regclear.models.artifacts import GenerationResult
from regclear.models.context import ProductContext
from regclear.pipeline.output import build_report, write_artifacts, write_report
from regclear.providers import get_default_provider
from regclear.providers.base import LLMProvider

logger = structlog.get_logger(__name__)


class PipelineStatus(str, Enum):
    """Pipeline execution status."""
    PENDING = "pending"
    MAPPING = "mapping"
    GENERATING = "generating"
    WRITING = "writing"
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineResult:
    """Result of a pipeline execution."""

    def __init__(
        self,
        pipeline_id: UUID,
        status: PipelineStatus,
        mapping: MappingResult | None = None,
        aggregate: AggregatedRequirements | None = None,
        generation: GenerationResult | None = None,
        written: list[Path] | None = None,
        report: dict[str, Any] | None = None,
        error: str | None = None,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
    ):
        self.pipeline_id = pipeline_id
        self.status = status
        self.mapping = mapping
        self.aggregate = aggregate
        self.generation = generation
        self.written = written or []
        self.report = report
        self.error = error
        self.started_at = started_at
        self.completed_at = completed_at

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "pipeline_id": str(self.pipeline_id),
            "status": self.status.value,
            "jurisdictions": len(self.mapping.results) if self.mapping else 0,
            "mapping_errors": len(self.mapping.errors) if self.mapping else 0,
            "highest_risk": (
                self.aggregate.highest_risk.level.value
                if self.aggregate and self.aggregate.highest_risk
                else None
            ),
            "artifacts": len(self.generation.artifacts) if self.generation else 0,
            "generation_errors": len(self.generation.errors) if self.generation else 0,
            "files": [str(p) for p in self.written],
            "error": self.error,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


class ComplianceOrchestrator:
    """
    Orchestrates a compliance run for one product context.

    Coordinates:
    1. Jurisdiction mapping
    2. Requirement aggregation
    3. Document generation (optional)
    4. Output writing (optional)
    """

    def __init__(
        self,
        registry: JurisdictionRegistry | None = None,
        provider: LLMProvider | None = None,
        store: TemplateStore | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()

        self._registry = registry
        self._provider = provider
        self._store = store
        self._mapper: RequirementMapper | None = None

        # Callbacks
        self._progress_callback: Callable[[PipelineStatus, float], None] | None = None

    @property
    def registry(self) -> JurisdictionRegistry:
        if self._registry is None:
            self._registry = get_registry()
        return self._registry

    @property
    def mapper(self) -> RequirementMapper:
        if self._mapper is None:
            self._mapper = RequirementMapper(self.registry)
        return self._mapper

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_default_provider(self.settings)
        return self._provider

    @property
    def store(self) -> TemplateStore:
        if self._store is None:
            self._store = TemplateStore(self.settings.resolved_templates_dir)
        return self._store

    def set_progress_callback(
        self,
        callback: Callable[[PipelineStatus, float], None],
    ) -> None:
        """Set callback for progress updates."""
        self._progress_callback = callback

    def _report_progress(self, status: PipelineStatus, progress: float) -> None:
        if self._progress_callback:
            self._progress_callback(status, progress)

    # =========================================================================
    # Classification
    # =========================================================================

    def classify(self, ctx: ProductContext) -> tuple[MappingResult, AggregatedRequirements]:
        """Map every target jurisdiction and aggregate the results."""
        mapping = self.mapper.map_all_jurisdictions(ctx)
        aggregate = self.mapper.aggregate_requirements(mapping.results, ctx)
        return mapping, aggregate

    # =========================================================================
    # Main Pipeline
    # =========================================================================

    async def run(
        self,
        ctx: ProductContext,
        generate: bool = True,
        output_dir: Path | str | None = None,
        concurrency: int | None = None,
    ) -> PipelineResult:
        """
        Run the full pipeline.

        Args:
            ctx: Product under assessment
            generate: Draft documents for the required artifacts
            output_dir: Write documents and report.json here; nothing is written when None
            concurrency: Maximum concurrent provider calls (defaults to settings)

        Returns:
            PipelineResult with mapping, aggregate and generation output
        """
        pipeline_id = uuid4()
        started_at = datetime.now()

        logger.info(
            "pipeline_started",
            pipeline_id=str(pipeline_id),
            jurisdictions=list(ctx.target_jurisdictions),
            generate=generate,
        )

        mapping: MappingResult | None = None
        aggregate: AggregatedRequirements | None = None
        generation: GenerationResult | None = None

        try:
            self._report_progress(PipelineStatus.MAPPING, 0.0)
            mapping, aggregate = self.classify(ctx)
            self._report_progress(PipelineStatus.MAPPING, 1.0)

            if generate:
                self._report_progress(PipelineStatus.GENERATING, 0.0)
                generator = ArtifactGenerator(
                    self.provider,
                    store=self.store,
                    concurrency=concurrency or self.settings.generation_concurrency,
                )
                generation = await generator.generate_artifacts(ctx, mapping.results)
                self._report_progress(PipelineStatus.GENERATING, 1.0)

            report = build_report(ctx, mapping, aggregate, generation)

            written: list[Path] = []
            if output_dir is not None:
                self._report_progress(PipelineStatus.WRITING, 0.0)
                if generation:
                    written = write_artifacts(generation, output_dir)
                report = build_report(ctx, mapping, aggregate, generation, written)
                written.append(write_report(report, output_dir))
                self._report_progress(PipelineStatus.WRITING, 1.0)

            completed_at = datetime.now()

            logger.info(
                "pipeline_completed",
                pipeline_id=str(pipeline_id),
                highest_risk=(
                    aggregate.highest_risk.level.value if aggregate.highest_risk else None
                ),
                artifacts=len(generation.artifacts) if generation else 0,
                duration_seconds=(completed_at - started_at).total_seconds(),
            )

            self._report_progress(PipelineStatus.COMPLETED, 1.0)

            return PipelineResult(
                pipeline_id=pipeline_id,
                status=PipelineStatus.COMPLETED,
                mapping=mapping,
                aggregate=aggregate,
                generation=generation,
                written=written,
                report=report,
                started_at=started_at,
                completed_at=completed_at,
            )

        except Exception as e:
            logger.error(
                "pipeline_failed",
                pipeline_id=str(pipeline_id),
                error=str(e),
            )

            return PipelineResult(
                pipeline_id=pipeline_id,
                status=PipelineStatus.FAILED,
                mapping=mapping,
                aggregate=aggregate,
                generation=generation,
                error=str(e),
                started_at=started_at,
                completed_at=datetime.now(),
            )
