"""CLI entrypoints for uicontext commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .analyzer import ContextAnalyzer
from .config import load_config_or_default
from .graph import walk_descendants
from .logging import configure_logging
from .stores import ContextNotFoundError, read_context, write_context
from .synth import generate_props_data, to_jsonable


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uicontext",
        description="Map the components of a TSX application and preview their props.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        metavar="PATH",
        help="Also append log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Analyze a source tree and write the context artifact.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Root directory of the application (defaults to current directory).",
    )
    build_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Where to write the artifact (defaults to context.json).",
    )
    build_parser.add_argument(
        "--ignore",
        action="append",
        default=None,
        metavar="GLOB",
        help="Glob of files to skip; repeat to add more. Replaces the default ignore list.",
    )
    build_parser.add_argument("--tsconfig", default=None, help="Path to a tsconfig.json.")
    build_parser.add_argument("--name", default=None, help="Display name of the application.")
    build_parser.add_argument(
        "--translations",
        default=None,
        help="Directory of <locale>-translation.json catalogs to embed.",
    )

    mock_parser = subparsers.add_parser(
        "mock",
        help="Print sample props for one component of a built artifact.",
    )
    _add_verbose_option(mock_parser, suppress_default=True)
    mock_parser.add_argument("context", help="Path to a context.json artifact.")
    mock_parser.add_argument("component_id", help="Id of the component to mock.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve a built artifact over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--context", default="context.json", help="Artifact to serve.")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=3001)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for uicontext commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "build":
        _run_build(parser, args)
    elif args.command == "mock":
        _run_mock(parser, args)
    elif args.command == "serve":
        from .service import run_service

        try:
            run_service(Path(args.context), host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_build(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        config = load_config_or_default(Path(args.path))
    except OSError as exc:
        parser.exit(1, f"{exc}\n")
    if args.ignore:
        config.ignore = list(args.ignore)
    if args.tsconfig:
        config.tsconfig = Path(args.tsconfig)
    if args.name:
        config.name = args.name
    if args.translations:
        config.translations_dir = Path(args.translations)
    output = Path(args.output) if args.output else config.output

    try:
        app = ContextAnalyzer(config).analyze()
    except Exception as exc:  # pragma: no cover - unexpected failure
        parser.exit(1, f"uicontext build failed: {exc}\nRun with --verbose for more details.\n")

    written = write_context(app, output)
    print(f"Context file generated: {_relativize(written)}")
    print(f"Found {len(app.root_components)} root component(s)")
    reachable = set(app.root_components)
    for root_id in app.root_components:
        reachable.update(walk_descendants(app.components, root_id))
    print(f"Total components: {len(app.components)} ({len(reachable)} reachable from roots)")
    print(f"Total translation keys: {len(app.translations)}")


def _run_mock(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        data = read_context(Path(args.context))
    except (ContextNotFoundError, ValueError) as exc:
        parser.exit(1, f"{exc}\n")
    component = data["components"].get(args.component_id)
    if not isinstance(component, dict):
        parser.exit(1, f"Unknown component: {args.component_id}\n")
    values = generate_props_data(component.get("props", []))
    print(json.dumps(to_jsonable(values), indent=2))


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
