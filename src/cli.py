"""Command-line interface for layerlint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from analysis import run_analysis
from logging_config import setup_logging
from report.formatters import format_json_report, format_text_report
from rules.config import ConfigError, LintConfig, load_config


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Analysis root (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: <root>/layerlint.toml if present)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Parallel parse workers (default: config value)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log errors"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="layerlint")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Check layering and domain rules"
    )
    _add_common_args(check_parser)
    check_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report format (default: text)",
    )
    check_parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=None,
        help="Report at most the first violation of each rule",
    )

    layers_parser = subparsers.add_parser(
        "layers", help="Print the layer assigned to every analyzed file"
    )
    _add_common_args(layers_parser)

    graph_parser = subparsers.add_parser(
        "graph", help="Print the internal dependency edges"
    )
    _add_common_args(graph_parser)

    return parser


def _resolve_config(root: Path, args: argparse.Namespace) -> LintConfig:
    config_path = None
    if args.config is not None:
        config_path = Path(args.config).expanduser().resolve()
    config = load_config(root, config_path)

    overrides: dict[str, object] = {}
    if args.workers is not None:
        if args.workers < 1:
            msg = f"--workers must be at least 1, got {args.workers}"
            raise ConfigError(msg)
        overrides["workers"] = args.workers
    if getattr(args, "fail_fast", None):
        overrides["fail_fast"] = True
    if overrides:
        config = config.model_copy(update=overrides)
    return config


def _handle_check(root: Path, config: LintConfig, output_format: str) -> int:
    result = run_analysis(root=root, config=config)
    if output_format == "json":
        report = format_json_report(result.checks, package_count=len(result.packages))
    else:
        report = format_text_report(result.checks, package_count=len(result.packages))
    sys.stdout.write(report)
    return 0 if result.ok else 1


def _handle_layers(root: Path, config: LintConfig) -> int:
    result = run_analysis(root=root, config=config)
    for package in result.packages:
        sys.stdout.write(f"{package.path}\t{package.layer}\n")
    return 0


def _handle_graph(root: Path, config: LintConfig) -> int:
    result = run_analysis(root=root, config=config)
    for source, target in result.graph.edge_list():
        sys.stdout.write(f"{source} -> {target}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)
    root = Path(args.root).expanduser().resolve()

    try:
        config = _resolve_config(root, args)

        if args.command == "check":
            return _handle_check(root, config, args.format)

        if args.command == "layers":
            return _handle_layers(root, config)

        if args.command == "graph":
            return _handle_graph(root, config)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except OSError as exc:
        sys.stderr.write(f"root: {root}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
