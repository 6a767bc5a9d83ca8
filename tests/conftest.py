"""Shared fixtures for ignotree tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def no_global_ignore(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's real global excludes file out of resolution."""
    monkeypatch.setattr("ignotree.resolver.find_global_ignore", lambda: None)


@pytest.fixture
def repo_tree(tmp_path: Path) -> Path:
    """Repository with a negation in a subdirectory.

    Structure::

        repo/
        ├── .git/
        ├── .gitignore          (*.tmp)
        ├── a.tmp
        ├── a.txt
        └── src/
            ├── .gitignore      (!keep.tmp)
            ├── keep.tmp
            ├── main.py
            └── other.tmp
    """
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / ".gitignore").write_text("*.tmp\n")
    (repo / "a.tmp").write_text("a")
    (repo / "a.txt").write_text("a")
    (repo / "src").mkdir()
    (repo / "src" / ".gitignore").write_text("!keep.tmp\n")
    (repo / "src" / "keep.tmp").write_text("keep")
    (repo / "src" / "main.py").write_text("main")
    (repo / "src" / "other.tmp").write_text("other")
    return repo


@pytest.fixture
def gitignore_tree(tmp_path: Path) -> Path:
    """Repository whose .gitignore hides files and whole directories.

    Structure::

        root/
        ├── .git/
        ├── .gitignore          (*.pyc, node_modules/, dist/)
        ├── dist/
        │   └── bundle.js
        ├── node_modules/
        │   ├── .gitignore      (!*.pyc)
        │   └── pkg/
        │       └── index.js
        ├── src/
        │   ├── app.py
        │   └── app.pyc
        └── README.md
    """
    (tmp_path / ".git").mkdir()
    (tmp_path / ".gitignore").write_text("*.pyc\nnode_modules/\ndist/\n")
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "bundle.js").write_text("bundle")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / ".gitignore").write_text("!*.pyc\n")
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("js")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("app")
    (tmp_path / "src" / "app.pyc").write_bytes(b"\x00")
    (tmp_path / "README.md").write_text("readme")
    return tmp_path


@pytest.fixture
def nested_repo_tree(tmp_path: Path) -> Path:
    """Repository containing a vendored repository.

    Structure::

        outer/
        ├── .git/
        ├── .gitignore          (*.log)
        ├── app.log
        └── vendor/
            ├── .git/
            ├── .gitignore      (*.bak)
            ├── lib.bak
            └── lib.log
    """
    outer = tmp_path / "outer"
    (outer / ".git").mkdir(parents=True)
    (outer / ".gitignore").write_text("*.log\n")
    (outer / "app.log").write_text("log")
    vendor = outer / "vendor"
    (vendor / ".git").mkdir(parents=True)
    (vendor / ".gitignore").write_text("*.bak\n")
    (vendor / "lib.bak").write_text("bak")
    (vendor / "lib.log").write_text("log")
    return outer
