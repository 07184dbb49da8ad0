"""CLI entrypoints for declgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .context import GenerationContext
from .errors import DeclgenError
from .generator import Generator, RunResult
from .logging import configure_logging, get_logger
from .overlays.store import OverlayStore
from .source import load_model


def _add_logging_options(parser: argparse.ArgumentParser, *, inherited: bool = False) -> None:
    """Attach ``-v`` and ``--log-file``; subcommands must not reset the top-level values."""
    default_verbose: object = argparse.SUPPRESS if inherited else False
    default_log: object = argparse.SUPPRESS if inherited else None
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default_verbose,
        help="Log per-file progress at DEBUG level.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=default_log,
        metavar="PATH",
        help="Also write log records to PATH.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="declgen",
        description="Generate type declarations and Lua glue from a parsed API model and doc overlays.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Regenerate declaration files and partials.",
    )
    _add_logging_options(run_parser, inherited=True)
    run_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory holding .declgen.yml (defaults to current directory).",
    )
    return parser


def run(path: str) -> RunResult:
    """Load configuration and inputs, run the generator and persist new overlays."""
    config = load_config(Path(path))
    model = load_model(config.paths.model)
    overlays = OverlayStore(config.paths.overlays)
    generator = Generator(config, model, context=GenerationContext(overlays=overlays))
    result = generator.run()
    if result.created_overlays:
        get_logger("cli").info(
            "Created %d default overlay(s) in %s", len(result.created_overlays), config.paths.overlays
        )
    overlays.persist()
    return result


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for declgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "run":
        try:
            result = run(args.path)
        except (ConfigError, DeclgenError) as exc:
            parser.exit(1, f"declgen run failed: {exc}\n")
        if result.report:
            print(f"Completed with {len(result.report)} issue(s):")
            for issue in result.report:
                print(f"  [{issue.kind}] {issue.message}")
        else:
            print(f"Generated {len(result.definitions)} declaration file(s)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
