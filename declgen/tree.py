"""In-memory mirror of a generated output tree and reference derivation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

REFERENCE_FORMAT = '/// <reference path="{path}" />'
DEFAULT_ROOT_LABEL = "dist"


@dataclass
class FileNode:
    """A file in the tree and its resolved path on disk."""

    name: str
    path: str


@dataclass
class DirectoryTree:
    """Directory node holding child files and child directories by name."""

    name: str
    path: str
    files: Dict[str, FileNode] = field(default_factory=dict)
    dirs: Dict[str, "DirectoryTree"] = field(default_factory=dict)

    def find(self, *parts: str) -> Optional["DirectoryTree"]:
        """Return the descendant directory at ``parts``, or None."""
        node: Optional[DirectoryTree] = self
        for part in parts:
            if node is None:
                return None
            node = node.dirs.get(part)
        return node

    def add_file(self, name: str) -> FileNode:
        node = FileNode(name=name, path=Path(self.path, name).as_posix())
        self.files[name] = node
        return node

    def add_dir(self, name: str) -> "DirectoryTree":
        node = self.dirs.get(name)
        if node is None:
            node = DirectoryTree(name=name, path=Path(self.path, name).as_posix())
            self.dirs[name] = node
        return node

    def file_count(self) -> int:
        return len(self.files) + sum(child.file_count() for child in self.dirs.values())


def scan_directory(root: Path) -> DirectoryTree:
    """Build a DirectoryTree for everything under ``root``.

    A missing root yields an empty tree.
    """
    root = Path(root)
    tree = DirectoryTree(name=root.name, path=root.as_posix())
    if not root.is_dir():
        return tree
    nodes: Dict[Path, DirectoryTree] = {root: tree}
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        node = nodes[current]
        dirnames.sort()
        for name in dirnames:
            nodes[current / name] = node.add_dir(name)
        for name in sorted(filenames):
            node.add_file(name)
    return tree


def build_reference_list(
    tree: DirectoryTree,
    root_label: str = DEFAULT_ROOT_LABEL,
    *,
    output_root: Path | str | None = None,
) -> List[str]:
    """Return reference directives for every file below ``tree``.

    Directories are visited depth-first in name order; files of a directory
    named ``root_label`` are skipped but its subdirectories are still walked.
    Paths are made relative to ``output_root`` (defaults to the tree's parent).
    The collected list is sorted once more before it is returned.
    """
    base = Path(output_root) if output_root is not None else Path(tree.path).parent
    references: List[str] = []
    stack: List[DirectoryTree] = [tree]
    while stack:
        node = stack.pop()
        if node.name != root_label:
            for file_name in sorted(node.files):
                file_path = Path(node.files[file_name].path)
                references.append(REFERENCE_FORMAT.format(path=_relative(file_path, base)))
        for subdir_name in sorted(node.dirs, reverse=True):
            stack.append(node.dirs[subdir_name])
    references.sort()
    return references


def _relative(path: Path, base: Path) -> str:
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = [
    "DEFAULT_ROOT_LABEL",
    "DirectoryTree",
    "FileNode",
    "REFERENCE_FORMAT",
    "build_reference_list",
    "scan_directory",
]
