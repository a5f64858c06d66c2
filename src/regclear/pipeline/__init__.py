"""
End-to-end compliance pipeline.

1. Mapping - Classify the product in every target jurisdiction
2. Aggregation - Merge requirements across jurisdictions
3. Generation - Draft the required compliance documents
4. Output - Write documents and a JSON report
"""

from regclear.pipeline.orchestrator import (
    ComplianceOrchestrator,
    PipelineResult,
    PipelineStatus,
)
from regclear.pipeline.output import build_report, write_artifacts, write_report

__all__ = [
    "ComplianceOrchestrator",
    "PipelineResult",
    "PipelineStatus",
    "build_report",
    "write_artifacts",
    "write_report",
]
