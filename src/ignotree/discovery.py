"""Repository detection and global excludes file discovery."""

from __future__ import annotations

import logging
import os
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Final

logger = logging.getLogger(__name__)

GIT_DIR_NAME: Final[str] = ".git"
IGNORE_FILE_NAME: Final[str] = ".gitignore"
INFO_EXCLUDE: Final[tuple[str, ...]] = ("info", "exclude")
_GLOBAL_IGNORE: Final[tuple[str, ...]] = ("git", "ignore")
_GIT_CONFIG_TIMEOUT: Final[float] = 2.0
_GIT_CONFIG_SCOPES: Final[tuple[str, ...]] = ("--global", "--system")


def is_repo(directory: Path) -> bool:
    """Return whether *directory* is the root of a git repository.

    A ``.git`` file (worktrees, submodules) counts as well as a
    ``.git`` directory.
    """
    return (directory / GIT_DIR_NAME).exists()


def _configured_excludes_file() -> Path | None:
    """Read ``core.excludesFile`` from the user's git configuration.

    The user-level files (``~/.gitconfig`` and ``$XDG_CONFIG_HOME/git/config``)
    take precedence over the system file. Repository-local configuration is
    not consulted.
    """
    for scope in _GIT_CONFIG_SCOPES:
        try:
            result = subprocess.run(
                ["git", "config", scope, "--path", "--get", "core.excludesFile"],
                capture_output=True,
                text=True,
                timeout=_GIT_CONFIG_TIMEOUT,
                check=False,
            )
        except (subprocess.SubprocessError, OSError):
            logger.debug("Cannot run git config", exc_info=True)
            return None
        value = result.stdout.strip()
        if result.returncode == 0 and value:
            return Path(value).expanduser()
    return None


def _user_config_ignore() -> Path | None:
    """Return ``$XDG_CONFIG_HOME/git/ignore`` when it exists."""
    config_home = os.environ.get("XDG_CONFIG_HOME", "")
    if not config_home:
        return None
    candidate = Path(config_home).joinpath(*_GLOBAL_IGNORE)
    return candidate if candidate.is_file() else None


def _home_config_ignore() -> Path | None:
    """Return ``~/.config/git/ignore`` when it exists."""
    try:
        home = Path.home()
    except RuntimeError:
        return None
    candidate = home.joinpath(".config", *_GLOBAL_IGNORE)
    return candidate if candidate.is_file() else None


@lru_cache(maxsize=1)
def find_global_ignore() -> Path | None:
    """Locate the user's global excludes file.

    Candidates, first success wins:

    1. ``core.excludesFile`` from the user or system git configuration.
    2. ``git/ignore`` in the user config directory (``$XDG_CONFIG_HOME``).
    3. ``~/.config/git/ignore``.

    The result is computed at most once per process and never
    invalidated. Concurrent first callers may compute it redundantly.

    Returns:
        Path of the global excludes file, or ``None`` when there is none.
    """
    for candidate in (
        _configured_excludes_file,
        _user_config_ignore,
        _home_config_ignore,
    ):
        path = candidate()
        if path is not None:
            logger.debug("Global excludes file: %s", path)
            return path
    logger.debug("No global excludes file found")
    return None
