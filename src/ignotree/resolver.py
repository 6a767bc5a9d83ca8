"""Ignore chains — which ignore files apply to a directory, and in what order."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from ignotree.discovery import (
    GIT_DIR_NAME,
    IGNORE_FILE_NAME,
    INFO_EXCLUDE,
    find_global_ignore,
    is_repo,
)
from ignotree.gitignore import RuleFile, load_rule_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Chain:
    """The ignore files in scope for one directory.

    Attributes:
        in_repo: Whether the directory lies inside a git repository.
            Outside a repository every rule is inert.
        file_ids: Handles into the owning :class:`Resolver`, shallowest
            scope first. They are consulted deepest first.
    """

    in_repo: bool = False
    file_ids: tuple[int, ...] = ()

    def push(self, file_id: int) -> Chain:
        """Return a copy of this chain with *file_id* appended."""
        return Chain(in_repo=self.in_repo, file_ids=(*self.file_ids, file_id))


class Resolver:
    """Owns every parsed ignore file and answers accept queries.

    Each ignore file is parsed once per reference directory and shared by
    handle between all chains that include it. Registration is serialized
    by a lock; :meth:`accepts` only reads registered files and takes no
    lock.
    """

    def __init__(self) -> None:
        self._files: list[RuleFile] = []
        self._index: dict[tuple[Path, Path], int | None] = {}
        self._lock = threading.Lock()
        self.reads = 0

    def __len__(self) -> int:
        return len(self._files)

    def rule_file(self, file_id: int) -> RuleFile:
        """Return the registered rule file behind *file_id*."""
        return self._files[file_id]

    def invalidate(self) -> None:
        """Forget which files were already read.

        Later requests read ignore files again. Handles held by existing
        chains stay valid.
        """
        with self._lock:
            self._index.clear()

    def _register(self, file_path: Path, ref_dir: Path) -> int | None:
        key = (file_path, ref_dir)
        with self._lock:
            if key in self._index:
                return self._index[key]
            self.reads += 1
            try:
                rule_file = load_rule_file(file_path, ref_dir)
            except OSError as exc:
                logger.debug("Cannot read ignore file %s: %s", file_path, exc)
                file_id = None
            else:
                file_id = len(self._files)
                self._files.append(rule_file)
            self._index[key] = file_id
            return file_id

    def _push(self, chain: Chain, file_path: Path, ref_dir: Path) -> Chain:
        file_id = self._register(file_path, ref_dir)
        return chain if file_id is None else chain.push(file_id)

    def _repo_chain(self, repo_dir: Path) -> Chain:
        """Start a chain at a repository root with its repository-wide files."""
        chain = Chain(in_repo=True)
        global_ignore = find_global_ignore()
        if global_ignore is not None:
            chain = self._push(chain, global_ignore, repo_dir)
        return self._push(
            chain, repo_dir.joinpath(GIT_DIR_NAME, *INFO_EXCLUDE), repo_dir
        )

    def root_chain(self, start_dir: Path) -> Chain:
        """Build the chain for the directory a walk starts from.

        Ascends from *start_dir* to the nearest repository root. Outside
        any repository the returned chain is inert.

        Args:
            start_dir: Directory the tree walk starts at.

        Returns:
            Chain: Global excludes, ``.git/info/exclude`` and every
            ``.gitignore`` from the repository root down to *start_dir*.
        """
        directory = Path(start_dir).absolute()
        scopes: list[Path] = []
        for candidate in (directory, *directory.parents):
            scopes.append(candidate)
            if is_repo(candidate):
                break
        else:
            logger.debug("Not inside a repository: %s", directory)
            return Chain()

        chain = self._repo_chain(scopes[-1])
        for scope in reversed(scopes):
            chain = self._push(chain, scope / IGNORE_FILE_NAME, scope)
        return chain

    def deeper_chain(self, parent_chain: Chain, directory: Path) -> Chain:
        """Derive the chain of a child directory from its parent's chain.

        A nested repository starts over: rules of the enclosing
        repository do not apply inside it.

        Args:
            parent_chain: Chain of the parent directory.
            directory: Child directory being entered.

        Returns:
            Chain: New chain; *parent_chain* is left untouched.
        """
        if is_repo(directory):
            chain = self._repo_chain(directory)
        else:
            chain = parent_chain
        if chain.in_repo:
            chain = self._push(chain, directory / IGNORE_FILE_NAME, directory)
        return chain

    def accepts(
        self, chain: Chain, path: Path, filename: str, is_directory: bool
    ) -> bool:
        """Return whether *path* should be shown.

        Deeper files are consulted first and, inside a file, later lines
        first; the first matching rule decides.

        Args:
            chain: Chain of the directory containing *path*.
            path: Full path of the candidate.
            filename: Bare filename of the candidate.
            is_directory: Whether the candidate is a directory.

        Returns:
            bool: ``False`` when an ignore rule hides the path.
        """
        if not chain.in_repo:
            return True
        for file_id in reversed(chain.file_ids):
            for rule in self._files[file_id].rules:
                if rule.directory_only and not is_directory:
                    continue
                if rule.matches(path, filename):
                    return rule.negated
        return True
