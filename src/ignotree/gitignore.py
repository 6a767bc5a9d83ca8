"""Gitignore rules — parse ignore-file lines into compiled rules via pathspec."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from pathspec.patterns.gitignore.spec import GitIgnoreSpecPattern
from pathspec.util import normalize_file

logger = logging.getLogger(__name__)

# One structural pattern per line: negation, body, directory marker.
_LINE_RE = re.compile(
    r"""
    ^\s*
    (?P<negation>!)?
    (?P<body>.+?)
    (?P<directory>/)?
    \s*$
    """,
    re.VERBOSE,
)

# pathspec's regex group for the optional "/<descendants>" tail of a pattern.
_DESCENDANT_GROUP = "ps_d"


@dataclass(frozen=True, slots=True)
class Rule:
    """A single compiled line of an ignore file.

    Attributes:
        negated: Whether a match keeps the path (``!pattern`` line).
        directory_only: Whether the rule only applies to directories.
        filename_only: Whether the rule is matched against the bare
            filename instead of the full path.
        pattern: Compiled glob for the (possibly anchored) body.
        source: The raw line the rule was parsed from.
    """

    negated: bool
    directory_only: bool
    filename_only: bool
    pattern: GitIgnoreSpecPattern = field(repr=False, compare=False)
    source: str = ""

    def matches(self, path: Path, filename: str) -> bool:
        """Return whether the rule pattern matches the whole candidate.

        Paths below the pattern's target do not match: ``/build`` matches
        ``build`` but not ``build/x.txt``, and ``*`` never crosses ``/``.

        Args:
            path: Full path of the candidate.
            filename: Bare filename of the candidate.

        Returns:
            bool: ``True`` when the pattern matches. Directory-only
            handling is left to the caller.
        """
        candidate = filename if self.filename_only else normalize_file(path)
        regex = self.pattern.regex
        if regex.fullmatch(candidate) is not None:
            return True
        # "dir/**" and catch-all patterns compile to prefix-only regexes
        match = regex.match(candidate)
        return match is not None and match.groupdict().get(_DESCENDANT_GROUP) is None


def parse_rule(line: str, ref_dir: Path) -> Rule | None:
    """Parse one line of an ignore file.

    Args:
        line: Raw text line.
        ref_dir: Directory that patterns starting with ``/`` are anchored to.

    Returns:
        The compiled rule, or ``None`` for comments, blank lines and
        patterns that fail to compile.
    """
    if line.startswith("#") or not line.strip():
        return None
    match = _LINE_RE.match(line)
    if match is None:
        return None

    body = match.group("body")
    has_separator = "/" in body
    if has_separator and body.startswith("/"):
        body = GitIgnoreSpecPattern.escape(ref_dir.as_posix().rstrip("/")) + body
    elif body[0] in "!#":
        # the leading character was not a marker on this line
        body = "\\" + body

    try:
        pattern = GitIgnoreSpecPattern(body)
    except ValueError:
        logger.debug("Skipping unparseable ignore pattern: %r", line)
        return None
    if pattern.regex is None:
        # pathspec discards some lines (e.g. unterminated ranges) as no-ops
        logger.debug("Skipping ignore pattern that matches nothing: %r", line)
        return None

    return Rule(
        negated=match.group("negation") is not None,
        directory_only=match.group("directory") is not None,
        filename_only=not has_separator,
        pattern=pattern,
        source=line.strip(),
    )


@dataclass(frozen=True, slots=True)
class RuleFile:
    """The rules of one physical ignore file.

    ``rules`` holds the rules in reverse file order: the last line of the
    file comes first, so the first matching rule is the one that wins.
    """

    path: Path
    rules: tuple[Rule, ...]


def load_rule_file(file_path: Path, ref_dir: Path) -> RuleFile:
    """Read and parse an ignore file.

    Args:
        file_path: Path of the ignore file.
        ref_dir: Reference directory for anchored patterns. This is the
            directory holding a ``.gitignore``, or the repository root for
            the global excludes file and ``.git/info/exclude``.

    Returns:
        RuleFile: Parsed rules, last line first.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    rules: list[Rule] = []
    with file_path.open(encoding="utf-8", errors="replace") as handle:
        for line in handle:
            rule = parse_rule(line.rstrip("\r\n"), ref_dir)
            if rule is not None:
                rules.append(rule)
    rules.reverse()
    logger.debug("Loaded %d rules from %s", len(rules), file_path)
    return RuleFile(path=file_path, rules=tuple(rules))
