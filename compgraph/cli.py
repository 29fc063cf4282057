"""CLI entrypoints for compgraph commands."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from .config import ConfigError, parse_prefix_overrides
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _add_prefix_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--prefix",
        action="append",
        default=[],
        metavar="NAME=PREFIX",
        help="Prefix components of vendored package NAME with PREFIX (repeatable).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compgraph",
        description="Track component usage of a mini-program project and keep pack ignores current.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Index the project and update packOptions.ignore for unused components.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_path_argument(scan_parser)
    _add_prefix_option(scan_parser)
    scan_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the ignore patterns without writing project.config.json.",
    )

    report_parser = subparsers.add_parser(
        "report",
        help="Print reached and unreached components and unresolved references.",
    )
    _add_verbose_option(report_parser, suppress_default=True)
    _add_path_argument(report_parser)
    _add_prefix_option(report_parser)
    report_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the report as JSON.",
    )

    sync_parser = subparsers.add_parser(
        "sync-json",
        help="Rewrite usingComponents of declaration files from the tags their markup uses.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    _add_prefix_option(sync_parser)
    sync_parser.add_argument(
        "markup",
        nargs="+",
        help="Project-relative markup files to synchronise.",
    )
    sync_parser.add_argument(
        "--path",
        dest="path",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the component graph over HTTP for editors and watchers.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_path_argument(serve_parser)
    _add_prefix_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for compgraph commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        prefixes = parse_prefix_overrides(getattr(args, "prefix", []))
        orchestrator = Orchestrator(args.path, prefixes=prefixes)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"compgraph: {exc}\n")

    if args.command == "serve":
        from .service import run_service

        orchestrator.bootstrap()
        run_service(orchestrator, host=args.host, port=args.port)
        return

    try:
        orchestrator.bootstrap()
    except OSError as exc:
        parser.exit(1, f"compgraph {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    if args.command == "scan":
        dry_run = bool(getattr(args, "dry_run", False))
        update = orchestrator.check_update_pack_ignore(dry_run=dry_run)
        if not update.changed:
            print("Pack ignores already up to date")
        elif dry_run:
            print("Pack ignores (dry-run):")
            for pattern in update.patterns:
                print(f"  {pattern}")
        else:
            print(f"Pack ignores updated ({len(update.patterns)} patterns)")
    elif args.command == "report":
        report = orchestrator.report()
        if args.json:
            print(json.dumps(asdict(report), indent=2, ensure_ascii=False))
        else:
            _print_report(report)
    elif args.command == "sync-json":
        for markup in args.markup:
            using = orchestrator.update_using_components_in_json(markup)
            if using is None:
                print(f"Skipped {markup}: no declaration file")
            else:
                print(f"Synchronised {markup} ({len(using)} components)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_report(report) -> None:
    print(f"Pages: {len(report.pages)}")
    print(f"Reached components: {len(report.reached)}")
    print(f"Unreached components: {len(report.unreached)}")
    for path in report.unreached:
        print(f"  {path}")
    if report.unresolved:
        print(f"Unresolved references: {len(report.unresolved)}")
        for item in report.unresolved:
            print(f"  {item.tag}: {item.reference} in {item.declaration_file}")


if __name__ == "__main__":
    main(sys.argv[1:])
