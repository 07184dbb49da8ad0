"""Core data models shared across declgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

from .errors import UnresolvedTypeError

_UNRESOLVED_MARKERS = {"", "?"}


def is_unresolved(type_expr: Optional[str]) -> bool:
    """Return True when the parser could not determine ``type_expr``."""
    return type_expr is None or type_expr.strip() in _UNRESOLVED_MARKERS


class MemberKind(str, Enum):
    """Tag shared by signatures, overlays and merged members."""

    FIELD = "field"
    FUNCTION = "function"
    MODULE = "module"


@dataclass(frozen=True)
class ParamShape:
    """Parameter name and parsed type (``None`` when unresolved)."""

    name: str
    type: Optional[str] = None


@dataclass(frozen=True)
class FieldSignature:
    """Parsed module-level field."""

    name: str
    type: Optional[str] = None

    kind = MemberKind.FIELD

    def identity(self, unit_id: str) -> str:
        return f"{unit_id}#{self.name}"


@dataclass(frozen=True)
class FunctionSignature:
    """Parsed module-level function."""

    name: str
    params: Tuple[ParamShape, ...] = ()
    returns: Optional[str] = None

    kind = MemberKind.FUNCTION

    @property
    def shape(self) -> str:
        return f"{self.name}({', '.join(param.name for param in self.params)})"

    def identity(self, unit_id: str) -> str:
        return f"{unit_id}#{self.shape}"


MemberSignature = Union[FieldSignature, FunctionSignature]


@dataclass(frozen=True)
class StructuralUnit:
    """Parsed facts for one native source module."""

    id: str
    fields: Tuple[FieldSignature, ...] = ()
    functions: Tuple[FunctionSignature, ...] = ()

    @property
    def name(self) -> str:
        stem = self.id.rsplit("/", 1)[-1]
        return stem.rsplit(".", 1)[0] if "." in stem else stem

    @property
    def folder(self) -> str:
        return self.id.rsplit("/", 1)[0] if "/" in self.id else ""

    def members(self) -> Iterator[Tuple[str, MemberSignature]]:
        """Yield ``(identity, signature)`` pairs in lexicographic identity order."""
        keyed = [(member.identity(self.id), member) for member in (*self.fields, *self.functions)]
        keyed.sort(key=lambda item: item[0])
        return iter(keyed)


@dataclass(frozen=True)
class MergedMember:
    """A member combined with its overlay; recomputed on every run."""

    identity: str
    kind: MemberKind
    name: str
    types: Tuple[str, ...] = ()
    doc_lines: Tuple[str, ...] = ()
    apply_unknown_type: bool = True
    params: Tuple[ParamShape, ...] = ()
    unresolved: Tuple[str, ...] = field(default=())

    @property
    def signature_key(self) -> str:
        """Structural signature used to suppress duplicate emission."""
        if self.kind is MemberKind.FUNCTION:
            return f"{self.name}({', '.join(param.name for param in self.params)})"
        return self.name

    def require_resolved(self) -> "MergedMember":
        if self.unresolved:
            raise UnresolvedTypeError(self.identity, ", ".join(self.unresolved))
        return self


__all__ = [
    "FieldSignature",
    "FunctionSignature",
    "MemberKind",
    "MemberSignature",
    "MergedMember",
    "ParamShape",
    "StructuralUnit",
    "is_unresolved",
]
