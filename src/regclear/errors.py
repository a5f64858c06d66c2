"""
Error types for RegClear.

Every failure carries a category so batch boundaries can report it as data.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Broad failure categories."""
    TEMPLATE_LOAD = "template-load"
    LLM_PROVIDER = "llm-provider"
    VALIDATION = "validation"
    FILE_IO = "file-io"
    JURISDICTION_MAPPING = "jurisdiction-mapping"
    CONFIGURATION = "configuration"


class RegClearError(Exception):
    """Base class for all RegClear errors."""

    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(self, message: str, category: ErrorCategory | None = None):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category


class JurisdictionNotFoundError(RegClearError):
    category = ErrorCategory.JURISDICTION_MAPPING

    def __init__(self, jurisdiction_id: str):
        super().__init__(f'Jurisdiction "{jurisdiction_id}" is not registered')
        self.jurisdiction_id = jurisdiction_id


class TemplateNotFoundError(RegClearError):
    category = ErrorCategory.TEMPLATE_LOAD

    def __init__(self, template_id: str, detail: str | None = None):
        message = f'Template "{template_id}" not found'
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.template_id = template_id


class TemplateFormatError(RegClearError):
    category = ErrorCategory.TEMPLATE_LOAD


class ProviderError(RegClearError):
    """A text-generation provider failed; `status` is the HTTP status when known."""

    category = ErrorCategory.LLM_PROVIDER

    def __init__(self, provider: str, message: str, status: int | None = None):
        super().__init__(f"[{provider}] {message}")
        self.provider = provider
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.status is not None and (self.status == 429 or 500 <= self.status < 600)


class TemplateFillError(RegClearError):
    category = ErrorCategory.LLM_PROVIDER

    def __init__(self, template_id: str, cause: Exception):
        super().__init__(f'LLM completion failed for template "{template_id}": {cause}')
        self.template_id = template_id
        self.cause = cause
