"""Merge parsed signatures with their documentation overlays."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .context import WILDCARD_TYPE, GenerationContext
from .errors import OverlayCorruptError
from .logging import get_logger
from .models import (
    FunctionSignature,
    MemberKind,
    MemberSignature,
    MergedMember,
    ParamShape,
    StructuralUnit,
    is_unresolved,
)
from .overlays.model import DocOverlay

logger = get_logger("merge")


@dataclass(frozen=True)
class MergeResult:
    """Merged member plus the overlay it came from."""

    member: MergedMember
    overlay: DocOverlay
    created: bool


def merge(
    unit_id: str,
    signature: MemberSignature,
    overlay: Optional[DocOverlay],
    *,
    wildcard_type: str = WILDCARD_TYPE,
) -> MergeResult:
    """Combine one parsed member with its overlay.

    Without an overlay a default one is synthesized (no types, no doc,
    unknown types allowed) and ``created`` is set. Overlay types replace the
    parsed field type or function return type. Unresolved parsed types fall
    back to ``wildcard_type`` when the overlay allows it; otherwise the member
    is returned with ``unresolved`` slots and refuses emission.
    """
    identity = signature.identity(unit_id)
    created = overlay is None
    if overlay is None:
        overlay = DocOverlay.for_identity(identity)

    unresolved: List[str] = []

    def _resolve(slot: str, parsed: Optional[str]) -> Optional[str]:
        if not is_unresolved(parsed):
            return parsed
        if overlay.apply_unknown_type:
            return wildcard_type
        unresolved.append(slot)
        return None

    params: tuple[ParamShape, ...] = ()
    if isinstance(signature, FunctionSignature):
        params = tuple(
            ParamShape(param.name, _resolve(f"parameter '{param.name}'", param.type))
            for param in signature.params
        )
        parsed, slot = signature.returns, "return type"
    else:
        parsed, slot = signature.type, "type"

    if overlay.types:
        types = tuple(overlay.types)
    else:
        resolved = _resolve(slot, parsed)
        types = (resolved,) if resolved is not None else ()

    member = MergedMember(
        identity=identity,
        kind=signature.kind,
        name=signature.name,
        types=types,
        doc_lines=tuple(overlay.doc_lines),
        apply_unknown_type=overlay.apply_unknown_type,
        params=params,
        unresolved=tuple(unresolved),
    )
    return MergeResult(member=member, overlay=overlay, created=created)


def merge_member(
    context: GenerationContext, unit: StructuralUnit, signature: MemberSignature
) -> MergeResult:
    """Look up the member's overlay in the run context and merge it."""
    identity = signature.identity(unit.id)
    overlay = _lookup(context, identity)
    result = merge(unit.id, signature, overlay, wildcard_type=context.wildcard_type)
    if result.created:
        context.overlays.adopt(identity, result.overlay)
    return result


def merge_module(context: GenerationContext, unit: StructuralUnit) -> MergeResult:
    """Merge the module-level overlay that documents a whole unit."""
    overlay = _lookup(context, unit.id)
    created = overlay is None
    if overlay is None:
        overlay = DocOverlay.for_identity(unit.id)
        context.overlays.adopt(unit.id, overlay)
    member = MergedMember(
        identity=unit.id,
        kind=MemberKind.MODULE,
        name=unit.name,
        doc_lines=tuple(overlay.doc_lines),
        apply_unknown_type=overlay.apply_unknown_type,
    )
    return MergeResult(member=member, overlay=overlay, created=created)


def _lookup(context: GenerationContext, identity: str) -> Optional[DocOverlay]:
    try:
        return context.overlays.get(identity)
    except OverlayCorruptError as exc:
        if context.report.add(exc):
            logger.warning("%s; using a default overlay for this run", exc)
        return None


__all__ = ["MergeResult", "merge", "merge_member", "merge_module"]
