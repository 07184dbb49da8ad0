"""Tests for the overlay store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from declgen.errors import OverlayCorruptError
from declgen.overlays.model import DocOverlay
from declgen.overlays.store import OverlayStore


def _write_store(path: Path, overlays: dict) -> None:
    path.write_text(json.dumps(overlays), encoding="utf-8")


def test_store_round_trip_persists_adopted_defaults(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    store = OverlayStore(path)
    store.adopt("shared/Foo.lua#bar", DocOverlay.for_identity("shared/Foo.lua#bar"))
    store.persist()

    reloaded = OverlayStore(path)
    overlay = reloaded.get("shared/Foo.lua#bar")

    assert overlay is not None
    assert overlay.save() == {"doc": {"lines": []}, "types": [], "applyUnknownType": True}
    assert store.created == ["shared/Foo.lua#bar"]
    assert reloaded.created == []


def test_store_adopt_keeps_existing_record(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    _write_store(path, {"shared/Foo.lua#bar": {"doc": {"lines": ["Kept"]}, "types": [], "applyUnknownType": True}})
    store = OverlayStore(path)

    store.adopt("shared/Foo.lua#bar", DocOverlay.for_identity("shared/Foo.lua#bar"))

    assert store.get("shared/Foo.lua#bar").doc_lines == ["Kept"]
    assert store.created == []


def test_store_reports_corrupt_record_and_keeps_it(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    corrupt = {"doc": {"lines": "not a list"}}
    _write_store(path, {"shared/Foo.lua#bar": corrupt})
    store = OverlayStore(path)

    with pytest.raises(OverlayCorruptError) as excinfo:
        store.get("shared/Foo.lua#bar")
    assert excinfo.value.raw == corrupt

    store.adopt("shared/Foo.lua#bar", DocOverlay.for_identity("shared/Foo.lua#bar"))
    store.adopt("shared/Foo.lua#qux", DocOverlay.for_identity("shared/Foo.lua#qux"))
    store.persist()

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["shared/Foo.lua#bar"] == corrupt
    assert "shared/Foo.lua#qux" in saved


def test_store_put_replaces_corrupt_record(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    _write_store(path, {"shared/Foo.lua#bar": "garbage"})
    store = OverlayStore(path)
    fixed = DocOverlay.for_identity("shared/Foo.lua#bar")
    fixed.doc_lines = ["Fixed"]

    store.put("shared/Foo.lua#bar", fixed)

    assert store.get("shared/Foo.lua#bar") is fixed


def test_store_never_overwrites_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    path.write_text("{ not json", encoding="utf-8")
    store = OverlayStore(path)

    assert len(store.load_errors) == 1
    store.adopt("shared/Foo.lua#bar", DocOverlay.for_identity("shared/Foo.lua#bar"))
    store.persist()

    assert path.read_text(encoding="utf-8") == "{ not json"


def test_store_lists_orphans_without_pruning(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    record = {"doc": {"lines": []}, "types": [], "applyUnknownType": True}
    _write_store(path, {"shared/Foo.lua#bar": record, "shared/Old.lua#gone": record})
    store = OverlayStore(path)

    assert store.orphans(["shared/Foo.lua#bar"]) == ["shared/Old.lua#gone"]
    assert store.get("shared/Old.lua#gone") is not None


def test_store_without_path_is_memory_only() -> None:
    store = OverlayStore()
    store.adopt("a.lua#x", DocOverlay.for_identity("a.lua#x"))
    store.persist()

    assert store.path is None
    assert store.identities() == ["a.lua#x"]


def test_store_reads_identity_to_record_mapping(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    record = {"doc": {"lines": ["Doc"]}, "types": ["string"], "applyUnknownType": True}
    _write_store(path, {"shared/Foo.lua#bar": record})

    store = OverlayStore(path)

    assert store.load_errors == []
    overlay = store.get("shared/Foo.lua#bar")
    assert overlay.doc_lines == ["Doc"]
    assert overlay.types == ["string"]


def test_store_persists_identity_to_record_mapping(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    store = OverlayStore(path)
    store.adopt("shared/Foo.lua", DocOverlay.for_identity("shared/Foo.lua"))
    store.persist()

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "shared/Foo.lua": {"doc": {"lines": []}, "types": [], "applyUnknownType": True}
    }


def test_store_rejects_non_object_root(tmp_path: Path) -> None:
    path = tmp_path / "overlays.json"
    path.write_text("[]", encoding="utf-8")

    store = OverlayStore(path)
    store.adopt("shared/Foo.lua#bar", DocOverlay.for_identity("shared/Foo.lua#bar"))
    store.persist()

    assert len(store.load_errors) == 1
    assert path.read_text(encoding="utf-8") == "[]"
