"""Filesystem primitives used by the generator."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List

from .logging import get_logger
from .partials.markers import PartialMarkers
from .tree import DirectoryTree, scan_directory

_INDENT = "  "


def prettify(code: str) -> str:
    """Normalise generated TypeScript: brace-depth indentation, no trailing blanks."""
    normalized = code.replace("\r\n", "\n").replace("\r", "\n")
    cleaned: List[str] = []
    depth = 0
    previous_blank = False

    for line in normalized.split("\n"):
        stripped = line.strip()
        if not stripped:
            if previous_blank or not cleaned:
                continue
            previous_blank = True
            cleaned.append("")
            continue

        is_comment = stripped.startswith(("//", "/*", "*"))
        opens = 0 if is_comment else stripped.count("{")
        closes = 0 if is_comment else stripped.count("}")
        if closes and stripped.startswith("}"):
            depth = max(depth - 1, 0)
            closes -= 1
        indent = _INDENT * depth
        if stripped.startswith("*"):
            indent += " "
        cleaned.append(f"{indent}{stripped}")
        depth = max(depth + opens - closes, 0)
        previous_blank = False

    while cleaned and cleaned[-1] == "":
        cleaned.pop()

    return "\n".join(cleaned) + "\n"


class FileSystem:
    """Directory management and writers for generated artifacts."""

    def __init__(self) -> None:
        self.logger = get_logger("filesystem")

    def mkdirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def clear_dir(self, path: Path) -> None:
        """Remove everything inside ``path`` but keep the directory itself."""
        for child in path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()

    def scan(self, path: Path) -> DirectoryTree:
        return scan_directory(path)

    def prettify(self, code: str) -> str:
        return prettify(code)

    def write_declaration_file(self, path: Path, code: str) -> None:
        self._write(path, code)

    def write_native_file(self, path: Path, code: str, *, comment: str = "--") -> None:
        """Write Lua source, splicing into the marker region of an existing file."""
        self._write(path, self._splice(path, code, comment))

    def write_partial(self, path: Path, text: str, *, comment: str = "//") -> None:
        """Write a declaration partial, keeping hand-edited text outside an existing marker pair."""
        self._write(path, self._splice(path, text, comment))

    def _splice(self, path: Path, text: str, comment: str) -> str:
        markers = PartialMarkers(comment)
        if not path.exists() or not markers.has_region(text):
            return text
        return markers.replace(path.read_text(encoding="utf-8"), text)

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8", newline="\n")
        self.logger.debug("Wrote %s", path)


__all__ = ["FileSystem", "prettify"]
