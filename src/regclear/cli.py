"""
Command-line interface for RegClear.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from pydantic import ValidationError

from regclear.config import get_settings
from regclear.errors import RegClearError
from regclear.models.context import ProductContext

logger = structlog.get_logger(__name__)


def load_context(path: str) -> ProductContext:
    """Read a ProductContext from a JSON file."""
    try:
        return ProductContext.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except ValidationError as e:
        raise click.ClickException(f"Invalid product context in {path}:\n{e}") from e


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """RegClear: AI regulatory classification and compliance document drafting."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug

    level = 10 if debug else getattr(logging, get_settings().log_level)
    # Logs go to stderr so that --json output stays parseable
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


# =========================================================================
# Listing Commands
# =========================================================================


@cli.command()
def jurisdictions() -> None:
    """List registered jurisdictions."""
    from regclear.jurisdictions.registry import get_registry

    click.echo("\n=== Registered Jurisdictions ===\n")
    for entry in get_registry().entries():
        region = entry.metadata.get("region", "")
        click.echo(f"  {entry.id:<12} {entry.name}" + (f" ({region})" if region else ""))


@cli.command()
def templates() -> None:
    """List available document templates."""
    from regclear.artifacts.templates import TemplateStore

    store = TemplateStore()

    click.echo(f"\n=== Templates ({store.templates_dir}) ===\n")
    for template_id in store.list_available_templates():
        try:
            template = store.load_template(template_id)
        except RegClearError as e:
            click.echo(f"  {template_id:<28} ERROR: {e.message}", err=True)
            continue
        click.echo(f"  {template_id:<28} {template.metadata.name}")
        click.echo(f"  {'':<28} {template.metadata.legal_basis}")


@cli.command()
def providers() -> None:
    """List text-generation providers and whether each is configured."""
    from regclear.providers import list_providers

    click.echo("\n=== Providers ===\n")
    for info in list_providers():
        status_str = "✓" if info.configured else "✗"
        click.echo(f"  {info.id:<10} {status_str}  {info.name}")


# =========================================================================
# Pipeline Commands
# =========================================================================


@cli.command()
@click.argument("context_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the machine-readable report")
def classify(context_json: str, as_json: bool) -> None:
    """Classify a product in every target jurisdiction."""
    from regclear.pipeline.orchestrator import ComplianceOrchestrator
    from regclear.pipeline.output import build_report

    product = load_context(context_json)
    orchestrator = ComplianceOrchestrator()
    mapping, aggregate = orchestrator.classify(product)

    if as_json:
        click.echo(json.dumps(build_report(product, mapping, aggregate), indent=2, default=str))
        return

    click.echo("\n=== Risk Classification ===\n")
    for result in mapping.results:
        risk = result.risk_classification
        click.echo(f"  {result.jurisdiction:<12} {risk.level.value:<13} {risk.justification}")
        if result.secondary_classification and result.secondary_classification.applies:
            secondary = result.secondary_classification
            click.echo(f"  {'':<12} {secondary.kind}: {secondary.justification}")

    if aggregate.highest_risk:
        click.echo(f"\nHighest risk: {aggregate.highest_risk.level.value}")
    click.echo(f"Artifacts required: {aggregate.total_artifacts}")
    click.echo(f"Actions: {aggregate.total_actions}")

    plan = aggregate.action_plan
    for label, actions in (("Critical", plan.critical), ("Important", plan.important)):
        if actions:
            click.echo(f"\n{label} actions:")
            for action in actions:
                deadline = f" (by {action.deadline})" if action.deadline else ""
                click.echo(f"  - {action.title}{deadline} [{', '.join(action.jurisdictions)}]")

    if aggregate.conflicts:
        click.echo("\n=== Cross-Jurisdiction Tensions ===\n")
        for conflict in aggregate.conflicts:
            click.echo(f"  {conflict.title} [{', '.join(conflict.jurisdictions)}]")
            click.echo(f"    {conflict.recommendation}")

    for error in mapping.errors:
        click.echo(f"Error: {error.jurisdiction}: {error.error}", err=True)


@cli.command()
@click.argument("context_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(file_okay=False), help="Output directory")
@click.option("--provider", "provider_id", help="Provider id (anthropic, openai, ollama)")
@click.option("--concurrency", type=click.IntRange(min=1), help="Maximum concurrent provider calls")
def generate(
    context_json: str,
    output: Optional[str],
    provider_id: Optional[str],
    concurrency: Optional[int],
) -> None:
    """Classify a product and draft its compliance documents."""
    from regclear.pipeline.orchestrator import ComplianceOrchestrator, PipelineStatus
    from regclear.providers import create_provider, get_default_provider

    settings = get_settings()
    product = load_context(context_json)
    output_dir = Path(output) if output else settings.output_dir

    try:
        provider = create_provider(provider_id, settings) if provider_id else get_default_provider(settings)
    except RegClearError as e:
        raise click.ClickException(e.message) from e

    async def run_generation():
        orchestrator = ComplianceOrchestrator(provider=provider, settings=settings)

        click.echo(
            f"Generating documents for {len(product.target_jurisdictions)} jurisdiction(s) "
            f"with {provider.id} ({provider.model})..."
        )

        return await orchestrator.run(product, output_dir=output_dir, concurrency=concurrency)

    result = asyncio.run(run_generation())

    click.echo(f"\nPipeline Status: {result.status.value}")
    if result.aggregate and result.aggregate.highest_risk:
        click.echo(f"Highest risk: {result.aggregate.highest_risk.level.value}")
    if result.generation:
        click.echo(f"Documents generated: {len(result.generation.artifacts)}")
        for error in result.generation.errors:
            click.echo(f"  Failed: {error.template_id}: {error.error}", err=True)
    if result.mapping:
        for error in result.mapping.errors:
            click.echo(f"  Unmapped: {error.jurisdiction}: {error.error}", err=True)

    if result.duration_seconds:
        click.echo(f"Duration: {result.duration_seconds:.2f}s")

    if result.written:
        click.echo(f"\nResults written to: {output_dir}")

    if result.status == PipelineStatus.FAILED:
        raise click.ClickException(result.error or "Pipeline failed")


# =========================================================================
# Config Commands
# =========================================================================


@cli.command()
def config() -> None:
    """Show current configuration."""
    settings = get_settings()

    click.echo("\n=== RegClear Configuration ===\n")
    for key, value in settings.public_dict().items():
        click.echo(f"{key}: {value}")


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
