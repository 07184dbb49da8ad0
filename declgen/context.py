"""Per-run state threaded through the generator and the overlay merge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Set

from .errors import RunReport
from .models import MemberKind
from .overlays.store import OverlayStore
from .overlays.templating import DEFAULT_TEMPLATES

WILDCARD_TYPE = "any"


class EmissionCache:
    """Remembers which signatures were already emitted into a shared namespace."""

    def __init__(self) -> None:
        self._seen: Dict[str, Set[str]] = {}

    def claim(self, scope: str, signature: str) -> bool:
        """Return True the first time ``signature`` is emitted in ``scope``."""
        seen = self._seen.setdefault(scope, set())
        if signature in seen:
            return False
        seen.add(signature)
        return True

    def reset(self) -> None:
        self._seen.clear()


@dataclass
class GenerationContext:
    """Overlay store, emission cache and issue report for one generation run."""

    overlays: OverlayStore = field(default_factory=OverlayStore)
    cache: EmissionCache = field(default_factory=EmissionCache)
    report: RunReport = field(default_factory=RunReport)
    wildcard_type: str = WILDCARD_TYPE
    templates: Dict[MemberKind, str] = field(default_factory=lambda: dict(DEFAULT_TEMPLATES))

    def reset(self) -> None:
        """Start a fresh run: empty emission cache and issue report."""
        self.cache.reset()
        self.report = RunReport()


__all__ = ["EmissionCache", "GenerationContext", "WILDCARD_TYPE"]
