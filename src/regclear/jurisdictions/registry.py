"""
Jurisdiction registry.

An explicit object mapping jurisdiction ids to modules. Components receive
a registry through their constructors; `get_registry()` provides the shared
default used by the CLI.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

import structlog

from regclear.errors import JurisdictionNotFoundError
from regclear.jurisdictions.base import JurisdictionModule

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    id: str
    name: str
    module: JurisdictionModule
    metadata: dict[str, Any] = field(default_factory=dict)


class JurisdictionRegistry:
    """Ordered id -> module table."""

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}

    def register(
        self, module: JurisdictionModule, metadata: dict[str, Any] | None = None
    ) -> RegistryEntry:
        if module.id in self._entries:
            logger.warning("jurisdiction_replaced", jurisdiction=module.id)
        entry = RegistryEntry(
            id=module.id,
            name=module.name,
            module=module,
            metadata=dict(metadata or {}),
        )
        self._entries[module.id] = entry
        logger.debug("jurisdiction_registered", jurisdiction=module.id)
        return entry

    def get(self, jurisdiction_id: str) -> JurisdictionModule:
        entry = self._entries.get(jurisdiction_id)
        if entry is None:
            raise JurisdictionNotFoundError(jurisdiction_id)
        return entry.module

    def find(self, jurisdiction_id: str) -> JurisdictionModule | None:
        entry = self._entries.get(jurisdiction_id)
        return entry.module if entry else None

    def entry(self, jurisdiction_id: str) -> RegistryEntry:
        entry = self._entries.get(jurisdiction_id)
        if entry is None:
            raise JurisdictionNotFoundError(jurisdiction_id)
        return entry

    def has(self, jurisdiction_id: str) -> bool:
        return jurisdiction_id in self._entries

    def entries(self) -> list[RegistryEntry]:
        return list(self._entries.values())

    def list_ids(self) -> list[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, jurisdiction_id: object) -> bool:
        return jurisdiction_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def build_default_registry() -> JurisdictionRegistry:
    """Fresh registry with every built-in jurisdiction."""
    from regclear.jurisdictions.eu_ai_act import EuAiActJurisdiction
    from regclear.jurisdictions.eu_gdpr import EuGdprJurisdiction
    from regclear.jurisdictions.us_co import UsColoradoJurisdiction
    from regclear.jurisdictions.us_federal import UsFederalJurisdiction
    from regclear.jurisdictions.us_ny import UsNewYorkJurisdiction

    registry = JurisdictionRegistry()
    registry.register(EuAiActJurisdiction(), {"region": "EU"})
    registry.register(EuGdprJurisdiction(), {"region": "EU"})
    registry.register(UsFederalJurisdiction(), {"region": "US"})
    registry.register(UsNewYorkJurisdiction(), {"region": "US"})
    registry.register(UsColoradoJurisdiction(), {"region": "US"})
    return registry


@lru_cache()
def get_registry() -> JurisdictionRegistry:
    """Get the shared default registry."""
    return build_default_registry()
