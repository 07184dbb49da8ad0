"""Helper utilities for constructing throwaway generation projects in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Callable, List, Mapping

from declgen.config import DeclgenConfig, load_config
from declgen.context import GenerationContext
from declgen.generator import Generator
from declgen.overlays.store import OverlayStore
from declgen.partials.assembler import PartialKind
from declgen.source import build_model

SAMPLE_UNITS: dict[str, Any] = {
    "shared/Foo.lua": {
        "fields": [{"name": "bar", "type": "number"}],
        "functions": [
            {"name": "baz", "params": [{"name": "a", "type": "string"}], "returns": "boolean"}
        ],
    },
    "client/ISUI/ISButton.lua": {
        "fields": [{"name": "ISButton", "type": "table"}],
        "functions": [{"name": "create", "params": ["x", "y"], "returns": None}],
    },
}


class ProjectBuilder:
    """Writes a model, overlays and .declgen.yml into a project directory."""

    def __init__(self, tmp_path: Path, name: str = "project") -> None:
        self.root = tmp_path / name
        self.root.mkdir()
        self.announced: List[str] = []

    def write_model(self, units: Mapping[str, Any]) -> Path:
        path = self.root / "model.json"
        path.write_text(json.dumps({"units": dict(units)}, indent=2), encoding="utf-8")
        return path

    def write_overlays(self, records: Mapping[str, Any]) -> Path:
        path = self.root / "overlays.json"
        path.write_text(json.dumps(dict(records), indent=2), encoding="utf-8")
        return path

    def write_config(self, content: str) -> Path:
        path = self.root / ".declgen.yml"
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    def config(self) -> DeclgenConfig:
        return load_config(self.root)

    def generator(
        self,
        units: Mapping[str, Any] | None = None,
        *,
        announce: Callable[[str], None] | None = None,
    ) -> Generator:
        config = self.config()
        if units is None:
            units = json.loads(config.paths.model.read_text(encoding="utf-8"))["units"]
        context = GenerationContext(overlays=OverlayStore(config.paths.overlays))
        return Generator(
            config,
            build_model(units),
            context=context,
            announce=announce or self.announced.append,
        )

    def partial(self, kind: PartialKind) -> str:
        config = self.config()
        path = config.paths.partials_dir / kind.filename(config.native.label)
        return path.read_text(encoding="utf-8")

    def snapshot(self) -> dict[str, bytes]:
        """Return every generated file keyed by its path below the generation root."""
        base = self.config().paths.root
        return {
            path.relative_to(base).as_posix(): path.read_bytes()
            for path in sorted(base.rglob("*"))
            if path.is_file()
        }


__all__ = ["ProjectBuilder", "SAMPLE_UNITS"]
