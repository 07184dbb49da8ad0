"""Loader for the structural model exported by the native API parser."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .errors import ModelError
from .models import FieldSignature, FunctionSignature, ParamShape, StructuralUnit


def load_model(path: Path) -> Dict[str, StructuralUnit]:
    """Read ``{"units": {...}}`` from ``path`` into units ordered by identity."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ModelError(f"Structural model not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ModelError(f"Failed to read structural model {path}: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("units"), dict):
        raise ModelError(f"{path}: expected an object with a 'units' mapping")
    return build_model(data["units"])


def build_model(units: Mapping[str, Any]) -> Dict[str, StructuralUnit]:
    model: Dict[str, StructuralUnit] = {}
    for unit_id in sorted(units):
        model[unit_id] = _build_unit(unit_id, units[unit_id])
    return model


def _build_unit(unit_id: str, payload: Any) -> StructuralUnit:
    if not isinstance(unit_id, str) or not unit_id:
        raise ModelError("Unit identities must be non-empty strings")
    if not isinstance(payload, dict):
        raise ModelError(f"{unit_id}: unit must be an object")

    fields = [_build_field(unit_id, item) for item in _as_list(unit_id, payload, "fields")]
    functions = [_build_function(unit_id, item) for item in _as_list(unit_id, payload, "functions")]

    seen: set[str] = set()
    for member in (*fields, *functions):
        identity = member.identity(unit_id)
        if identity in seen:
            raise ModelError(f"Duplicate member identity {identity}")
        seen.add(identity)

    return StructuralUnit(id=unit_id, fields=tuple(fields), functions=tuple(functions))


def _build_field(unit_id: str, item: Any) -> FieldSignature:
    if not isinstance(item, dict) or not isinstance(item.get("name"), str):
        raise ModelError(f"{unit_id}: every field needs a string 'name'")
    return FieldSignature(name=item["name"], type=_as_type(unit_id, item.get("type")))


def _build_function(unit_id: str, item: Any) -> FunctionSignature:
    if not isinstance(item, dict) or not isinstance(item.get("name"), str):
        raise ModelError(f"{unit_id}: every function needs a string 'name'")
    params: List[ParamShape] = []
    for raw in item.get("params") or []:
        if isinstance(raw, str):
            params.append(ParamShape(name=raw))
        elif isinstance(raw, dict) and isinstance(raw.get("name"), str):
            params.append(ParamShape(name=raw["name"], type=_as_type(unit_id, raw.get("type"))))
        else:
            raise ModelError(f"{unit_id}.{item['name']}: invalid parameter {raw!r}")
    return FunctionSignature(
        name=item["name"],
        params=tuple(params),
        returns=_as_type(unit_id, item.get("returns")),
    )


def _as_list(unit_id: str, payload: Dict[str, Any], key: str) -> List[Any]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ModelError(f"{unit_id}: '{key}' must be a list")
    return value


def _as_type(unit_id: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ModelError(f"{unit_id}: type expressions must be strings, got {value!r}")


__all__ = ["build_model", "load_model"]
