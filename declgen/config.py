"""Configuration loading for declgen (.declgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import MemberKind

CONFIG_FILENAME = ".declgen.yml"
UNRESOLVED_POLICIES = ("skip", "abort")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PathsConfig:
    """Locations of the generation root and the model/overlay inputs."""

    root: Path
    model: Path
    overlays: Path

    @property
    def output_dir(self) -> Path:
        return self.root / "output"

    @property
    def generated_dir(self) -> Path:
        return self.root / "generated"

    @property
    def partials_dir(self) -> Path:
        return self.generated_dir / "partials"


@dataclass
class NativeConfig:
    """Naming of the native (scripting) side of the generated artifacts."""

    label: str = "Lua"
    dir: str = "lua"
    source_ext: str = ".lua"
    declaration_ext: str = ".d.ts"
    ready_flag: str = "PIPEWRENCH_READY"
    boot_event: str = "OnPipeWrenchBoot"


@dataclass
class TemplateConfig:
    """Member templates (``${NAME}`` syntax) and an optional Jinja override directory."""

    members: Dict[MemberKind, str] = field(default_factory=dict)
    templates_dir: Optional[Path] = None


@dataclass
class DeclgenConfig:
    """Represents the settings defined in .declgen.yml."""

    root: Path
    paths: PathsConfig
    module_name: str = "PipeWrench"
    native: NativeConfig = field(default_factory=NativeConfig)
    wildcard_type: str = "any"
    reference_skip: str = "dist"
    on_unresolved: str = "skip"
    templates: TemplateConfig = field(default_factory=TemplateConfig)

    @property
    def native_dir(self) -> Path:
        return self.paths.output_dir / self.native.dir


def default_config(root: Path) -> DeclgenConfig:
    root = root.resolve()
    return DeclgenConfig(
        root=root,
        paths=PathsConfig(
            root=root / "dist",
            model=root / "model.json",
            overlays=root / "overlays.json",
        ),
    )


def load_config(config_path: Path) -> DeclgenConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    config = default_config(root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config.module_name = _as_str(data.get("module_name")) or config.module_name
    config.wildcard_type = _as_str(data.get("wildcard_type")) or config.wildcard_type
    config.reference_skip = _as_str(data.get("reference_skip")) or config.reference_skip

    policy = _as_str(data.get("on_unresolved"))
    if policy is not None:
        policy = policy.strip().lower()
        if policy not in UNRESOLVED_POLICIES:
            raise ConfigError(
                f"on_unresolved must be one of {', '.join(UNRESOLVED_POLICIES)}, got '{policy}'"
            )
        config.on_unresolved = policy

    paths_data = _as_dict(data.get("paths"))
    if paths_data:
        config.paths = PathsConfig(
            root=_as_path(root, paths_data.get("root")) or config.paths.root,
            model=_as_path(root, paths_data.get("model")) or config.paths.model,
            overlays=_as_path(root, paths_data.get("overlays")) or config.paths.overlays,
        )

    native_data = _as_dict(data.get("native"))
    if native_data:
        defaults = NativeConfig()
        config.native = NativeConfig(
            label=_as_str(native_data.get("label")) or defaults.label,
            dir=_as_str(native_data.get("dir")) or defaults.dir,
            source_ext=_as_str(native_data.get("source_ext")) or defaults.source_ext,
            declaration_ext=_as_str(native_data.get("declaration_ext")) or defaults.declaration_ext,
            ready_flag=_as_str(native_data.get("ready_flag")) or defaults.ready_flag,
            boot_event=_as_str(native_data.get("boot_event")) or defaults.boot_event,
        )

    templates_data = _as_dict(data.get("templates"))
    if templates_data:
        members: Dict[MemberKind, str] = {}
        for kind in MemberKind:
            template = templates_data.get(kind.value)
            if isinstance(template, str):
                members[kind] = template
        config.templates = TemplateConfig(
            members=members,
            templates_dir=_as_path(root, templates_data.get("dir")),
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else root / path


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DeclgenConfig",
    "NativeConfig",
    "PathsConfig",
    "TemplateConfig",
    "default_config",
    "load_config",
]
