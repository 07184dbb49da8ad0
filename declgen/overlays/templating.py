"""``${NAME}`` placeholder rendering for merged members."""

from __future__ import annotations

import re
from typing import Callable, Dict, List

from ..errors import TemplateResolutionError
from ..models import MemberKind, MergedMember

_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

DEFAULT_TEMPLATES: Dict[MemberKind, str] = {
    MemberKind.FIELD: "${DOC}export const ${FIELD_NAME}: ${TYPES};",
    MemberKind.FUNCTION: "${DOC}export function ${FUNCTION_NAME}(${PARAMS}): ${TYPES};",
    MemberKind.MODULE: "${DOC}",
}


def _lines(member: MergedMember) -> str:
    return "\n".join(member.doc_lines)


def _doc_block(member: MergedMember) -> str:
    if not member.doc_lines:
        return ""
    body = "\n".join(f" * {line}".rstrip() for line in member.doc_lines)
    return f"/**\n{body}\n */\n"


def _types(member: MergedMember) -> str:
    return " | ".join(member.types)


def _params(member: MergedMember) -> str:
    return ", ".join(f"{param.name}: {param.type}" for param in member.params)


_COMMON: Dict[str, Callable[[MergedMember], str]] = {
    "NAME": lambda member: member.name,
    "LINES": _lines,
    "DOC": _doc_block,
}

RESOLVERS: Dict[MemberKind, Dict[str, Callable[[MergedMember], str]]] = {
    MemberKind.FIELD: {
        **_COMMON,
        "FIELD_NAME": lambda member: member.name,
        "TYPES": _types,
    },
    MemberKind.FUNCTION: {
        **_COMMON,
        "FUNCTION_NAME": lambda member: member.name,
        "TYPES": _types,
        "PARAMS": _params,
    },
    MemberKind.MODULE: {
        **_COMMON,
        "MODULE_NAME": lambda member: member.name,
    },
}


def placeholders(template: str) -> List[str]:
    """Return distinct placeholder names in first-seen order."""
    seen: List[str] = []
    for match in _PLACEHOLDER.finditer(template):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen


def check_template(kind: MemberKind, template: str, *, name: str | None = None) -> None:
    """Raise TemplateResolutionError when ``template`` uses unregistered placeholders."""
    resolvers = RESOLVERS[kind]
    unknown = [placeholder for placeholder in placeholders(template) if placeholder not in resolvers]
    if unknown:
        raise TemplateResolutionError(name or kind.value, unknown)


def render(member: MergedMember, template: str, *, name: str | None = None) -> str:
    """Substitute every placeholder in ``template`` for ``member``.

    Each placeholder is computed once; substituted text is never rescanned,
    so doc lines that contain ``${...}`` are emitted literally.
    """
    check_template(member.kind, template, name=name)
    resolvers = RESOLVERS[member.kind]
    values = {placeholder: resolvers[placeholder](member) for placeholder in placeholders(template)}
    return _PLACEHOLDER.sub(lambda match: values[match.group(1)], template)


__all__ = ["DEFAULT_TEMPLATES", "RESOLVERS", "check_template", "placeholders", "render"]
