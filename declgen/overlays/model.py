"""Human-editable documentation overlay records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..models import MemberKind

_RECORD_KEYS = {"doc", "types", "applyUnknownType"}


def split_identity(identity: str) -> tuple[MemberKind, str]:
    """Return the member kind and member shape encoded in an overlay identity."""
    if "#" not in identity:
        return MemberKind.MODULE, identity
    member = identity.split("#", 1)[1]
    kind = MemberKind.FUNCTION if member.endswith(")") else MemberKind.FIELD
    return kind, member


@dataclass
class DocOverlay:
    """Persisted type and documentation refinements for one member.

    ``name`` is the member shape the record was written for: the field name,
    ``name(p1, p2)`` for functions, or the unit id for module records.
    """

    kind: MemberKind
    name: str
    types: List[str] = field(default_factory=list)
    doc_lines: List[str] = field(default_factory=list)
    apply_unknown_type: bool = True

    @classmethod
    def for_identity(cls, identity: str) -> "DocOverlay":
        kind, name = split_identity(identity)
        return cls(kind=kind, name=name)

    @classmethod
    def from_json(cls, identity: str, payload: object) -> "DocOverlay":
        """Build an overlay from its stored record; raises ValueError when malformed."""
        if not isinstance(payload, dict):
            raise ValueError("record must be an object")
        overlay = cls.for_identity(identity)
        overlay.load(payload)
        return overlay

    def load(self, payload: Dict[str, Any]) -> None:
        unknown = sorted(set(payload) - _RECORD_KEYS)
        if unknown:
            raise ValueError(f"unexpected key(s): {', '.join(unknown)}")

        doc = payload.get("doc")
        lines: List[str] = []
        if doc is not None:
            if not isinstance(doc, dict):
                raise ValueError("'doc' must be an object")
            raw_lines = doc.get("lines", [])
            if not isinstance(raw_lines, list) or not all(isinstance(line, str) for line in raw_lines):
                raise ValueError("'doc.lines' must be a list of strings")
            lines = list(raw_lines)

        raw_types = payload.get("types", [])
        if not isinstance(raw_types, list) or not all(isinstance(item, str) for item in raw_types):
            raise ValueError("'types' must be a list of strings")

        apply_unknown = payload.get("applyUnknownType", True)
        if not isinstance(apply_unknown, bool):
            raise ValueError("'applyUnknownType' must be a boolean")

        self.doc_lines = lines
        self.types = list(raw_types)
        self.apply_unknown_type = apply_unknown

    def save(self) -> Dict[str, Any]:
        return {
            "doc": {"lines": list(self.doc_lines)},
            "types": list(self.types),
            "applyUnknownType": self.apply_unknown_type,
        }


__all__ = ["DocOverlay", "split_identity"]
