"""CLI entry point for itree — I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ignotree import IgnotreeError
from ignotree.resolver import Resolver
from ignotree.scanner import Entry, ScanOptions, scan


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``itree`` command.
    """
    parser = argparse.ArgumentParser(
        prog="itree",
        description="list a directory tree the way git sees it, hiding ignored entries",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Root directory to list (default: current directory)",
    )
    parser.add_argument(
        "-L",
        "--level",
        type=int,
        default=None,
        dest="max_depth",
        help="Max display depth of the directory tree",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        dest="all_files",
        help="Include hidden files (starting with .)",
    )
    parser.add_argument(
        "-d",
        "--dirs-only",
        action="store_true",
        dest="dirs_only",
        help="List directories only",
    )
    parser.add_argument(
        "--no-gitignore",
        action="store_false",
        dest="gitignore",
        help="Do not hide entries matched by ignore files",
    )
    parser.add_argument(
        "--check",
        action="append",
        default=[],
        dest="check_paths",
        metavar="PATH",
        help="Report whether PATH is kept or ignored (can be specified multiple times)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        dest="output_file",
        help="Write output to a file instead of stdout",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log ignore-file loading to stderr",
    )
    return parser


def run_itree(argv: list[str] | None = None) -> str:
    """Run itree with provided CLI args and return formatted output.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.

    Returns:
        str: Final rendered output.

    Raises:
        IgnotreeError: On any user-facing validation or I/O error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args)


def _resolve_root(directory: str) -> Path:
    """Resolve directory and validate it is a directory.

    Raises:
        IgnotreeError: If directory does not exist or is not a directory.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        raise IgnotreeError(f"'{directory}' is not a directory")
    return root


def _translate_level_to_scan_depth(level_arg: int | None) -> int | None:
    """Translate ``-L`` level semantics to scanner depth.

    Raises:
        IgnotreeError: If level is less than 1.
    """
    if level_arg is None:
        return None
    if level_arg < 1:
        raise IgnotreeError("Invalid level, must be greater than 0.")
    return level_arg - 1


def _format_entries(root: Path, entries: list[Entry]) -> str:
    """Render entries as root-relative POSIX paths, directories with ``/``."""
    lines: list[str] = []
    for entry in entries:
        display = entry.path.relative_to(root).as_posix()
        lines.append(f"{display}/" if entry.is_dir else display)
    return "\n".join(lines)


def _check_paths(resolver: Resolver, raw_paths: list[str]) -> str:
    """Report ``kept`` or ``ignored`` for each path.

    Only the path's own verdict is reported, in the chain of its parent
    directory; ignored ancestors are not taken into account.

    Raises:
        IgnotreeError: If a path does not exist.
    """
    lines: list[str] = []
    for raw in raw_paths:
        path = Path(raw).resolve()
        if not path.exists():
            raise IgnotreeError(f"'{raw}' does not exist")
        chain = resolver.root_chain(path.parent)
        kept = resolver.accepts(chain, path, path.name, path.is_dir())
        lines.append(f"{'kept' if kept else 'ignored'} {raw}")
    return "\n".join(lines)


def _run_with_args(args: argparse.Namespace) -> str:
    """Run the scan or check pipeline for parsed arguments.

    Raises:
        IgnotreeError: On any user-facing validation or I/O error.
    """
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    resolver = Resolver()
    if args.check_paths:
        return _check_paths(resolver, args.check_paths)

    root = _resolve_root(args.directory)
    scan_opts = ScanOptions(
        max_depth=_translate_level_to_scan_depth(args.max_depth),
        dirs_only=args.dirs_only,
        all_files=args.all_files,
        gitignore=args.gitignore,
    )
    entries = scan(root, scan_opts, resolver)
    return _format_entries(root, entries)


def main() -> None:
    """Run the CLI entry point with process arguments.

    Parses args exactly once and writes output to stdout or ``-o`` file.
    Exits with code 1 on user-facing errors.
    """
    parser = build_parser()
    args = parser.parse_args()

    try:
        output = _run_with_args(args)
    except IgnotreeError as exc:
        sys.stderr.write(f"itree: {exc}\n")
        sys.exit(1)

    if args.output_file:
        try:
            Path(args.output_file).write_text(
                output + "\n", encoding="utf-8", newline=""
            )
        except OSError as exc:
            sys.stderr.write(f"itree: cannot write to '{args.output_file}': {exc}\n")
            sys.exit(1)
    else:
        sys.stdout.write(output + "\n")
