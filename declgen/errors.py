"""Error types and the per-run issue report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple


class DeclgenError(RuntimeError):
    """Base class for declgen failures."""


class ModelError(DeclgenError):
    pass


class GenerationError(DeclgenError):
    """Raised when output directories cannot be prepared; stops the run."""


class MarkerError(DeclgenError):
    """Raised when a partial would not hold exactly one start and one stop marker line.

    Only whole marker lines count. The generator reports it for the offending
    fragment and keeps going.
    """


class UnresolvedTypeError(DeclgenError):
    """A member type is unresolved and its overlay forbids the wildcard fallback.

    ``detail`` names the unresolved slots, e.g. ``"parameter 'x', return type"``.
    """

    def __init__(self, identity: str, detail: str | None = None) -> None:
        message = f"Unresolved type for {identity}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.identity = identity
        self.detail = detail


class OverlayCorruptError(DeclgenError):
    """A persisted overlay record could not be parsed."""

    def __init__(self, identity: str, reason: str, raw: object = None) -> None:
        super().__init__(f"Corrupt overlay record for {identity}: {reason}")
        self.identity = identity
        self.reason = reason
        self.raw = raw


class TemplateResolutionError(DeclgenError):
    """A template references placeholders outside the registered resolver set."""

    def __init__(self, template_name: str, placeholders: Sequence[str]) -> None:
        names = ", ".join("${" + name + "}" for name in placeholders)
        super().__init__(f"Template '{template_name}' uses unknown placeholder(s): {names}")
        self.template_name = template_name
        self.placeholders = tuple(placeholders)


@dataclass(frozen=True)
class RunIssue:
    """Single non-fatal problem collected during a generation run."""

    kind: str
    subject: str
    message: str


@dataclass
class RunReport:
    """Collects non-fatal issues; identical (kind, subject) pairs are kept once."""

    issues: List[RunIssue] = field(default_factory=list)
    _seen: Dict[Tuple[str, str], RunIssue] = field(default_factory=dict, repr=False)

    def add(self, error: DeclgenError, *, subject: Optional[str] = None) -> bool:
        """Record ``error``; return False when it was already reported."""
        kind = type(error).__name__
        key = (kind, subject or _subject_for(error))
        if key in self._seen:
            return False
        issue = RunIssue(kind=kind, subject=key[1], message=str(error))
        self._seen[key] = issue
        self.issues.append(issue)
        return True

    def of_kind(self, kind: type[DeclgenError]) -> List[RunIssue]:
        """Issues raised as ``kind``, in report order."""
        return [issue for issue in self.issues if issue.kind == kind.__name__]

    def __iter__(self) -> Iterator[RunIssue]:
        return iter(self.issues)

    def __len__(self) -> int:
        return len(self.issues)

    def __bool__(self) -> bool:
        return bool(self.issues)


def _subject_for(error: DeclgenError) -> str:
    # Per-member errors dedupe on identity; template errors on name and placeholders.
    if isinstance(error, (UnresolvedTypeError, OverlayCorruptError)):
        return error.identity
    if isinstance(error, TemplateResolutionError):
        return f"{error.template_name}:{','.join(error.placeholders)}"
    return str(error)


__all__ = [
    "DeclgenError",
    "GenerationError",
    "MarkerError",
    "ModelError",
    "OverlayCorruptError",
    "RunIssue",
    "RunReport",
    "TemplateResolutionError",
    "UnresolvedTypeError",
]
