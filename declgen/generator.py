"""Pipeline orchestration for a declaration generation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import DeclgenConfig
from .context import GenerationContext
from .emit import DeclarationEmitter
from .errors import GenerationError, MarkerError, RunReport
from .filesystem import FileSystem
from .logging import get_logger
from .models import StructuralUnit
from .partials.assembler import PartialAssembler, PartialKind
from .partials.markers import PartialMarkers
from .rendering import create_environment
from .tree import DirectoryTree, build_reference_list

PHASES = (
    "setupDirectories",
    "generateDefinitions",
    "generateReferencePartial",
    "generateLuaInterfacePartial",
    "generateAPIPartial",
)


@dataclass
class RunResult:
    """Artifacts and issues produced by one run."""

    definitions: List[Path] = field(default_factory=list)
    partials: Dict[PartialKind, Path] = field(default_factory=dict)
    report: RunReport = field(default_factory=RunReport)
    created_overlays: List[str] = field(default_factory=list)
    orphan_overlays: List[str] = field(default_factory=list)


def _announce(phase: str) -> None:
    print(f"- {phase}...")


class Generator:
    """Runs directory setup, definition emission and the three partial passes."""

    def __init__(
        self,
        config: DeclgenConfig,
        model: Mapping[str, StructuralUnit],
        *,
        context: GenerationContext | None = None,
        filesystem: FileSystem | None = None,
        announce: Callable[[str], None] = _announce,
    ) -> None:
        self.config = config
        self.model = model
        self.context = context or GenerationContext()
        self.context.wildcard_type = config.wildcard_type
        self.context.templates.update(config.templates.members)
        self.filesystem = filesystem or FileSystem()
        self.announce = announce
        self.logger = get_logger("generator")
        env = create_environment(config.templates.templates_dir)
        self.assembler = PartialAssembler(config.module_name, env=env)
        self.emitter = DeclarationEmitter(
            self.context,
            module_name=config.module_name,
            env=env,
            abort_on_unresolved=config.on_unresolved == "abort",
        )
        self._result: Optional[RunResult] = None

    def run(self) -> RunResult:
        self.context.reset()
        self._result = RunResult(report=self.context.report)
        for error in self.context.overlays.load_errors:
            self.context.report.add(error)
            self.logger.error("%s", error)

        steps = (
            self.setup_directories,
            self.generate_definitions,
            self.generate_reference_partial,
            self.generate_interface_partial,
            self.generate_api_partial,
        )
        for phase, step in zip(PHASES, steps):
            self.announce(phase)
            step()

        result = self._result
        result.created_overlays = self.context.overlays.created
        result.orphan_overlays = self.context.overlays.orphans(self._known_identities())
        if result.orphan_overlays:
            self.logger.info(
                "%d overlay record(s) have no matching member and were not emitted",
                len(result.orphan_overlays),
            )
        if result.report:
            self.logger.warning("Run finished with %d issue(s)", len(result.report))
        return result

    def setup_directories(self) -> None:
        paths = self.config.paths
        native_dir = self.config.native_dir
        try:
            for directory in (paths.root, paths.generated_dir, paths.partials_dir, paths.output_dir):
                self.filesystem.mkdirs(directory)
            if native_dir.exists():
                self.filesystem.clear_dir(native_dir)
            else:
                self.filesystem.mkdirs(native_dir)
        except OSError as exc:
            raise GenerationError(f"Failed to prepare output directories under {paths.root}: {exc}") from exc

    def generate_definitions(self) -> None:
        for unit_id in sorted(self.model):
            unit = self.model[unit_id]
            target = self.declaration_path(unit)
            self.logger.debug("Generating: %s..", target.relative_to(self.config.native_dir).as_posix())
            code = self.emitter.definition_file(unit)
            self.filesystem.mkdirs(target.parent)
            self.filesystem.write_declaration_file(target, self.filesystem.prettify(code))
            self._results().definitions.append(target)

    def generate_reference_partial(self) -> None:
        tree = self.filesystem.scan(self.config.paths.root)
        native_tree = tree.find("output", self.config.native.dir)
        if native_tree is None:
            native_tree = DirectoryTree(name=self.config.native.dir, path=self.config.native_dir.as_posix())
        self.logger.debug("Scanned %d file(s) under %s", native_tree.file_count(), native_tree.path)
        references = build_reference_list(
            native_tree,
            self.config.reference_skip,
            output_root=self.config.paths.output_dir,
        )
        text = self._assemble(PartialKind.REFERENCE, [(reference, reference) for reference in references])
        if text is not None:
            self._write_partial(PartialKind.REFERENCE, self.filesystem.prettify(text))

    def generate_interface_partial(self) -> None:
        native = self.config.native
        opening, closing = self.assembler.interface_scaffold(
            native.ready_flag, native.boot_event, self.emitter.indent
        )
        fragments = [("interface scaffold", opening)]
        for unit_id in sorted(self.model):
            fragments.append((unit_id, self.emitter.interface_fragment(self.model[unit_id])))
        fragments.append(("interface scaffold", closing))
        text = self._assemble(PartialKind.INTERFACE, fragments)
        if text is not None:
            self._write_partial(PartialKind.INTERFACE, text)

    def generate_api_partial(self) -> None:
        fragments = [
            (unit_id, self.emitter.api_fragment(self.model[unit_id])) for unit_id in sorted(self.model)
        ]
        text = self._assemble(PartialKind.API, fragments)
        if text is not None:
            self._write_partial(PartialKind.API, self.filesystem.prettify(text))

    def declaration_path(self, unit: StructuralUnit) -> Path:
        native = self.config.native
        relative = unit.id
        if relative.endswith(native.source_ext):
            relative = relative[: -len(native.source_ext)]
        return self.config.native_dir / f"{relative}{native.declaration_ext}"

    def partial_path(self, kind: PartialKind) -> Path:
        return self.config.paths.partials_dir / kind.filename(self.config.native.label)

    def _assemble(self, kind: PartialKind, fragments: Sequence[Tuple[str, str]]) -> Optional[str]:
        """Assemble ``(subject, fragment)`` pairs, dropping fragments that hold a marker line.

        Returns None when the boilerplate itself breaks the marker pair; the
        partial is then left as it was on disk.
        """
        markers = PartialMarkers(kind.comment)
        kept: List[str] = []
        for subject, fragment in fragments:
            if fragment and markers.marker_lines(fragment):
                self._report(
                    MarkerError(f"{subject}: {kind.value} partial fragment contains a marker line")
                )
                fragment = ""
            kept.append(fragment)
        try:
            return self.assembler.assemble(kind, kept)
        except MarkerError as exc:
            self._report(MarkerError(f"{kind.value} partial not written: {exc}"))
            return None

    def _report(self, error: MarkerError) -> None:
        if self.context.report.add(error):
            self.logger.error("%s", error)

    def _write_partial(self, kind: PartialKind, text: str) -> None:
        path = self.partial_path(kind)
        if kind is PartialKind.INTERFACE:
            self.filesystem.write_native_file(path, text, comment=kind.comment)
        else:
            self.filesystem.write_partial(path, text, comment=kind.comment)
        self._results().partials[kind] = path

    def _results(self) -> RunResult:
        if self._result is None:
            self._result = RunResult(report=self.context.report)
        return self._result

    def _known_identities(self) -> List[str]:
        known: List[str] = []
        for unit in self.model.values():
            known.append(unit.id)
            known.extend(identity for identity, _signature in unit.members())
        return known


__all__ = ["Generator", "PHASES", "RunResult"]
