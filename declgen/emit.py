"""Rendering of merged members into declaration text and Lua glue."""

from __future__ import annotations

from typing import List, Optional

from jinja2 import Environment

from .context import GenerationContext
from .errors import TemplateResolutionError, UnresolvedTypeError
from .logging import get_logger
from .merge import merge_member, merge_module
from .models import MemberKind, MergedMember, StructuralUnit
from .overlays.templating import render
from .rendering import create_environment

API_SCOPE = "api"
INTERFACE_SCOPE = "interface"


class DeclarationEmitter:
    """Turns structural units into declaration files and partial fragments."""

    def __init__(
        self,
        context: GenerationContext,
        *,
        module_name: str,
        env: Environment | None = None,
        indent: str = "  ",
        abort_on_unresolved: bool = False,
    ) -> None:
        self.context = context
        self.module_name = module_name
        self.indent = indent
        self.abort_on_unresolved = abort_on_unresolved
        self._env = env or create_environment()
        self.logger = get_logger("emit")

    def resolved_members(
        self, unit: StructuralUnit, *, scope: Optional[str] = None
    ) -> List[MergedMember]:
        """Merge every member of ``unit`` and keep those that can be emitted.

        Unresolved members are reported and skipped (or re-raised when the
        run aborts on them). With ``scope`` set, a function whose signature was
        already emitted in that scope is skipped.
        """
        members: List[MergedMember] = []
        for _identity, signature in unit.members():
            result = merge_member(self.context, unit, signature)
            try:
                member = result.member.require_resolved()
            except UnresolvedTypeError as exc:
                if self.context.report.add(exc):
                    self.logger.warning("Skipping %s", exc)
                if self.abort_on_unresolved:
                    raise
                continue
            if (
                scope is not None
                and member.kind is MemberKind.FUNCTION
                and not self.context.cache.claim(scope, member.signature_key)
            ):
                self.logger.debug("Duplicate signature %s suppressed in %s", member.signature_key, scope)
                continue
            members.append(member)
        return members

    def render_member(self, member: MergedMember) -> str:
        """Render one member with its kind's template; empty string on template errors."""
        template = self.context.templates[member.kind]
        try:
            return render(member, template, name=f"{member.kind.value} template")
        except TemplateResolutionError as exc:
            if self.context.report.add(exc):
                self.logger.error("%s", exc)
            return ""

    def definition_file(self, unit: StructuralUnit) -> str:
        module_doc = self.render_member(merge_module(self.context, unit).member).strip()
        declarations = [
            text for text in (self.render_member(member) for member in self.resolved_members(unit)) if text
        ]
        template = self._env.get_template("declaration.d.ts.j2")
        return template.render(
            module_name=self.module_name,
            module_doc=module_doc,
            unit_id=unit.id,
            declarations=declarations,
        )

    def api_fragment(self, unit: StructuralUnit) -> str:
        blocks = []
        for member in self.resolved_members(unit, scope=API_SCOPE):
            text = self.render_member(member)
            if text:
                blocks.append(self._indent(text))
        return "\n".join(blocks)

    def interface_fragment(self, unit: StructuralUnit) -> str:
        members = self.resolved_members(unit, scope=INTERFACE_SCOPE)
        if not members:
            return ""
        lines = [f"{self.indent}-- {unit.id}"]
        for member in members:
            if member.kind is MemberKind.FUNCTION:
                lines.append(
                    f"{self.indent}Exports.{member.name} = function(...) return _G['{member.name}'](...) end"
                )
            else:
                lines.append(f"{self.indent}Exports.{member.name} = _G['{member.name}']")
        return "\n".join(lines)

    def _indent(self, text: str) -> str:
        return "\n".join(f"{self.indent}{line}" if line else line for line in text.split("\n"))


__all__ = ["API_SCOPE", "INTERFACE_SCOPE", "DeclarationEmitter"]
