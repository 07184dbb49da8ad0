"""Tests for documentation overlay records."""

from __future__ import annotations

import pytest

from declgen.models import MemberKind
from declgen.overlays.model import DocOverlay, split_identity


def test_split_identity_detects_kind() -> None:
    assert split_identity("shared/Foo.lua") == (MemberKind.MODULE, "shared/Foo.lua")
    assert split_identity("shared/Foo.lua#bar") == (MemberKind.FIELD, "bar")
    assert split_identity("shared/Foo.lua#baz(a, b)") == (MemberKind.FUNCTION, "baz(a, b)")


def test_overlay_load_and_save_use_persisted_shape() -> None:
    payload = {"doc": {"lines": ["One", "Two"]}, "types": ["number"], "applyUnknownType": False}

    overlay = DocOverlay.from_json("shared/Foo.lua#bar", payload)

    assert overlay.kind is MemberKind.FIELD
    assert overlay.doc_lines == ["One", "Two"]
    assert overlay.types == ["number"]
    assert overlay.apply_unknown_type is False
    assert overlay.save() == payload


def test_overlay_defaults_when_keys_missing() -> None:
    overlay = DocOverlay.from_json("shared/Foo.lua#bar", {})

    assert overlay.types == []
    assert overlay.doc_lines == []
    assert overlay.apply_unknown_type is True


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"doc": "text"},
        {"doc": {"lines": [1, 2]}},
        {"types": "number"},
        {"applyUnknownType": "yes"},
        {"doc": {"lines": []}, "note": "stray"},
    ],
)
def test_overlay_rejects_malformed_records(payload: object) -> None:
    with pytest.raises(ValueError):
        DocOverlay.from_json("shared/Foo.lua#bar", payload)
