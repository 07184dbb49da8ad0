"""Assembly of marker-delimited partial files."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Sequence, Tuple

from jinja2 import Environment

from ..rendering import create_environment
from .markers import PartialMarkers


class PartialKind(str, Enum):
    """The three partial files produced by every run."""

    API = "api"
    REFERENCE = "reference"
    INTERFACE = "interface"

    @property
    def comment(self) -> str:
        return "--" if self is PartialKind.INTERFACE else "//"

    @property
    def extension(self) -> str:
        return ".lua" if self is PartialKind.INTERFACE else ".d.ts"

    def filename(self, label: str) -> str:
        return f"{label}.{self.value}.partial{self.extension}"


def assemble_partial(
    kind: PartialKind,
    fragments: Sequence[str],
    prefix: str = "",
    suffix: str = "",
) -> str:
    """Join ``fragments`` between the kind's marker pair, wrapped in boilerplate.

    Fragments keep the caller's order; each non-empty fragment is followed by a
    newline. Raises MarkerError when the result would not contain exactly one
    marker pair.
    """
    markers = PartialMarkers(kind.comment)
    body = "".join(f"{fragment}\n" for fragment in fragments if fragment)
    text = f"{prefix}{markers.wrap(body)}{suffix}"
    markers.validate(text)
    return text


class PartialAssembler:
    """Renders kind-specific boilerplate from templates and assembles partials."""

    def __init__(
        self,
        module_name: str,
        *,
        templates_dir: Path | None = None,
        env: Environment | None = None,
    ) -> None:
        self.module_name = module_name
        self._env = env or create_environment(templates_dir)

    def boilerplate(self, kind: PartialKind) -> Tuple[str, str]:
        macros = self._macros(kind)
        return (
            str(macros.prefix(module_name=self.module_name)),
            str(macros.suffix(module_name=self.module_name)),
        )

    def interface_scaffold(self, ready_flag: str, boot_event: str, indent: str) -> Tuple[str, str]:
        """Return the opening and closing fragments of the deferred boot block."""
        macros = self._macros(PartialKind.INTERFACE)
        opening = str(macros.open(ready_flag=ready_flag, boot_event=boot_event))
        closing = str(
            macros.close(
                ready_flag=ready_flag,
                boot_event=boot_event,
                module_name=self.module_name,
                indent=indent,
            )
        )
        return opening, closing

    def assemble(self, kind: PartialKind, fragments: Sequence[str]) -> str:
        prefix, suffix = self.boilerplate(kind)
        return assemble_partial(kind, fragments, prefix, suffix)

    def _macros(self, kind: PartialKind):
        return self._env.get_template(f"partials/{kind.value}.j2").module


__all__ = ["PartialAssembler", "PartialKind", "assemble_partial"]
