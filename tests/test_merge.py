"""Tests for declgen.merge."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from declgen.context import GenerationContext
from declgen.errors import OverlayCorruptError, UnresolvedTypeError
from declgen.merge import merge, merge_member, merge_module
from declgen.models import (
    FieldSignature,
    FunctionSignature,
    MemberKind,
    ParamShape,
    StructuralUnit,
)
from declgen.overlays.model import DocOverlay
from declgen.overlays.store import OverlayStore


def _overlay(identity: str, *, types=(), lines=(), apply_unknown_type: bool = True) -> DocOverlay:
    overlay = DocOverlay.for_identity(identity)
    overlay.types = list(types)
    overlay.doc_lines = list(lines)
    overlay.apply_unknown_type = apply_unknown_type
    return overlay


def test_merge_without_overlay_synthesizes_default() -> None:
    result = merge("shared/Foo.lua", FieldSignature("bar", "number"), None)

    assert result.created is True
    assert result.overlay.types == []
    assert result.overlay.doc_lines == []
    assert result.overlay.apply_unknown_type is True
    assert result.member.identity == "shared/Foo.lua#bar"
    assert result.member.kind is MemberKind.FIELD
    assert result.member.types == ("number",)
    assert result.member.doc_lines == ()
    assert result.member.apply_unknown_type is True


def test_merge_falls_back_to_wildcard_for_unresolved_types() -> None:
    result = merge("shared/Foo.lua", FieldSignature("bar", None), None, wildcard_type="unknown")

    assert result.member.types == ("unknown",)
    assert result.member.unresolved == ()


def test_merge_copies_overlay_types_and_doc_verbatim() -> None:
    overlay = _overlay(
        "shared/Foo.lua#bar",
        types=["string", "nil"],
        lines=["First line.", "  indented ${FIELD_NAME} line"],
    )

    result = merge("shared/Foo.lua", FieldSignature("bar", "number"), overlay)

    assert result.created is False
    assert result.member.types == ("string", "nil")
    assert result.member.doc_lines == ("First line.", "  indented ${FIELD_NAME} line")


def test_merge_marks_member_unresolved_when_overlay_forbids_wildcard() -> None:
    overlay = _overlay("shared/Foo.lua#bar", apply_unknown_type=False)

    result = merge("shared/Foo.lua", FieldSignature("bar", "?"), overlay)

    assert result.member.types == ()
    assert result.member.unresolved == ("type",)
    with pytest.raises(UnresolvedTypeError) as excinfo:
        result.member.require_resolved()
    assert excinfo.value.identity == "shared/Foo.lua#bar"


def test_merge_overlay_types_resolve_unknown_return_type() -> None:
    signature = FunctionSignature("baz", (ParamShape("a", "string"),), returns=None)
    overlay = _overlay("shared/Foo.lua#baz(a)", types=["boolean"], apply_unknown_type=False)

    result = merge("shared/Foo.lua", signature, overlay)

    assert result.member.types == ("boolean",)
    assert result.member.params == (ParamShape("a", "string"),)
    assert result.member.require_resolved() is result.member


def test_merge_function_parameters_use_wildcard_or_report() -> None:
    signature = FunctionSignature("baz", (ParamShape("a"), ParamShape("b", "number")), "nil")

    permissive = merge("shared/Foo.lua", signature, None)
    assert permissive.member.params == (ParamShape("a", "any"), ParamShape("b", "number"))

    strict = merge("shared/Foo.lua", signature, _overlay("shared/Foo.lua#baz(a, b)", apply_unknown_type=False))
    assert strict.member.unresolved == ("parameter 'a'",)


def test_merge_is_pure() -> None:
    signature = FunctionSignature("baz", (ParamShape("a"),), None)
    overlay = _overlay("shared/Foo.lua#baz(a)", types=["number"], lines=["Doc"])

    first = merge("shared/Foo.lua", signature, overlay)
    second = merge("shared/Foo.lua", signature, overlay)

    assert first.member == second.member
    assert overlay.types == ["number"]


def test_merge_member_adopts_default_overlay_once(context: GenerationContext) -> None:
    unit = StructuralUnit(id="shared/Foo.lua", fields=(FieldSignature("bar", "number"),))

    first = merge_member(context, unit, unit.fields[0])
    second = merge_member(context, unit, unit.fields[0])

    assert first.created is True
    assert second.created is False
    assert context.overlays.created == ["shared/Foo.lua#bar"]


def test_merge_member_treats_corrupt_overlay_as_absent(tmp_path: Path) -> None:
    store_path = tmp_path / "overlays.json"
    store_path.write_text(
        json.dumps({"shared/Foo.lua#bar": {"types": "number"}}),
        encoding="utf-8",
    )
    context = GenerationContext(overlays=OverlayStore(store_path))
    unit = StructuralUnit(id="shared/Foo.lua", fields=(FieldSignature("bar", "number"),))

    first = merge_member(context, unit, unit.fields[0])
    merge_member(context, unit, unit.fields[0])

    assert first.created is True
    assert first.member.types == ("number",)
    issues = context.report.of_kind(OverlayCorruptError)
    assert len(issues) == 1
    assert issues[0].subject == "shared/Foo.lua#bar"


def test_merge_module_uses_module_overlay(context: GenerationContext) -> None:
    unit = StructuralUnit(id="shared/Foo.lua")
    context.overlays.put("shared/Foo.lua", _overlay("shared/Foo.lua", lines=["Foo helpers."]))

    result = merge_module(context, unit)

    assert result.created is False
    assert result.member.kind is MemberKind.MODULE
    assert result.member.name == "Foo"
    assert result.member.doc_lines == ("Foo helpers.",)
