"""
Output writing.

Generated documents are written as markdown files with their review notes
in a header block, next to a machine-readable `report.json`.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from regclear.errors import ErrorCategory, RegClearError
from regclear.jurisdictions.mapper import AggregatedRequirements, MappingResult
from regclear.models.artifacts import GeneratedArtifact, GenerationResult
from regclear.models.context import ProductContext

logger = structlog.get_logger(__name__)

REPORT_FILENAME = "report.json"


def render_artifact(artifact: GeneratedArtifact) -> str:
    """Document text preceded by a review-notes block."""
    lines = [
        f"<!-- {artifact.name} | jurisdictions: {', '.join(artifact.jurisdictions)} -->",
        "",
        "> **Review notes**",
        ">",
    ]
    lines.extend(f"> - {note}" for note in artifact.review_notes)
    lines.extend(["", "---", "", artifact.content.strip(), ""])
    return "\n".join(lines)


def _ensure_dir(output_dir: Path) -> None:
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RegClearError(
            f"Cannot create output directory {output_dir}: {e}", ErrorCategory.FILE_IO
        ) from e


def write_artifacts(generation: GenerationResult, output_dir: Path | str) -> list[Path]:
    """
    Write every generated artifact to `output_dir/<filename>`.

    Raises:
        RegClearError: With category file-io if a file cannot be written
    """
    output_dir = Path(output_dir)
    _ensure_dir(output_dir)

    paths = []
    for artifact in generation.artifacts:
        path = output_dir / artifact.filename
        try:
            path.write_text(render_artifact(artifact), encoding="utf-8")
        except OSError as e:
            raise RegClearError(f"Cannot write {path}: {e}", ErrorCategory.FILE_IO) from e
        paths.append(path)
        logger.debug("artifact_written", path=str(path))

    return paths


def build_report(
    ctx: ProductContext,
    mapping: MappingResult,
    aggregate: AggregatedRequirements,
    generation: GenerationResult | None = None,
    written: list[Path] | None = None,
) -> dict[str, Any]:
    """JSON-serialisable summary of one pipeline run."""
    return {
        "product": {
            "description": ctx.description,
            "product_type": ctx.product_type.value,
            "target_jurisdictions": list(ctx.target_jurisdictions),
            "launch_date": ctx.launch_date,
        },
        "summary": aggregate.to_dict(),
        "jurisdictions": [r.to_dict() for r in mapping.results],
        "mapping_errors": [e.model_dump() for e in mapping.errors],
        "generation": generation.to_dict() if generation else None,
        "files": [str(p) for p in written or []],
    }


def write_report(report: dict[str, Any], output_dir: Path | str) -> Path:
    output_dir = Path(output_dir)
    _ensure_dir(output_dir)

    path = output_dir / REPORT_FILENAME
    try:
        path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
    except OSError as e:
        raise RegClearError(f"Cannot write {path}: {e}", ErrorCategory.FILE_IO) from e

    logger.info("report_written", path=str(path))
    return path
