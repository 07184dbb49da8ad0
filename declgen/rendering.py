"""Jinja environment for declaration and partial boilerplate templates."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Return an environment that prefers ``templates_dir`` over the bundled templates."""
    loader = FileSystemLoader([str(d) for d in (templates_dir, TEMPLATES_DIR) if d])
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["TEMPLATES_DIR", "create_environment"]
