"""Directory scanner using os.scandir with explicit stack (DFS) and ignore chains."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ignotree.discovery import GIT_DIR_NAME
from ignotree.resolver import Chain, Resolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem entry that survived scanning.

    Attributes:
        path: Absolute path of the filesystem entry.
        name: Basename of the entry.
        is_dir: Whether the entry is a directory.
        depth: Parent directory depth from scanning root.
        parent_path: Absolute parent directory path.
    """

    path: Path
    name: str
    is_dir: bool
    depth: int
    parent_path: Path


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling scanner behavior.

    Attributes:
        max_depth: Maximum parent depth to scan. ``None`` means unlimited.
        dirs_only: Whether to include only directories.
        all_files: Whether to include hidden entries.
        gitignore: Whether ignore files hide entries.
    """

    max_depth: int | None = None
    dirs_only: bool = False
    all_files: bool = False
    gitignore: bool = True


def scan(
    root: Path,
    options: ScanOptions | None = None,
    resolver: Resolver | None = None,
) -> list[Entry]:
    """Scan root directory and return visible entries in deterministic DFS order.

    One chain is built for *root* and one derived for every directory
    entered. Ignored directories are not entered.

    Args:
        root: Root directory to scan.
        options: Scanner options. Defaults to ``ScanOptions()``.
        resolver: Resolver to share parsed ignore files with. A private
            one is created when omitted.

    Returns:
        list[Entry]: Flat list of visible entries.
    """
    scan_options = options or ScanOptions()
    root = root.resolve()

    if not root.is_dir():
        return []

    if resolver is None:
        resolver = Resolver()
    root_chain = resolver.root_chain(root) if scan_options.gitignore else Chain()

    result: list[Entry] = []

    # Stack items: (directory_path, depth, chain)
    stack: list[tuple[Path, int, Chain]] = [(root, 0, root_chain)]

    while stack:
        current_dir, depth, chain = stack.pop()

        try:
            raw_entries = list(os.scandir(current_dir))
        except OSError:
            logger.debug("Cannot list directory: %s", current_dir)
            continue

        raw_entries.sort(key=lambda e: e.name)

        child_dirs: list[tuple[Path, int, Chain]] = []

        for dir_entry in raw_entries:
            name = dir_entry.name
            if name == GIT_DIR_NAME:
                continue
            if not scan_options.all_files and name.startswith("."):
                continue
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
            except OSError:
                logger.debug("Cannot stat: %s", dir_entry.path)
                continue

            path = Path(dir_entry.path)
            if not resolver.accepts(chain, path, name, is_dir):
                continue

            if is_dir:
                # Depth limit: chains are only derived for directories we enter
                if scan_options.max_depth is None or depth < scan_options.max_depth:
                    child_chain = (
                        resolver.deeper_chain(chain, path)
                        if scan_options.gitignore
                        else chain
                    )
                    child_dirs.append((path, depth + 1, child_chain))
            elif scan_options.dirs_only:
                continue

            result.append(
                Entry(
                    path=path,
                    name=name,
                    is_dir=is_dir,
                    depth=depth,
                    parent_path=current_dir,
                )
            )

        # Push children in reverse so first-alphabetical is popped first
        for child in reversed(child_dirs):
            stack.append(child)

    return result
