from __future__ import annotations

"""
Directory Exclusion Filters.

Translates gitignore-style glob patterns into compiled regex rules used to
prune directories during workspace resolution. A pattern without a slash
matches a directory's basename at any depth; a pattern containing a slash
is matched against the path relative to the include root.
"""

import fnmatch
import re
from dataclasses import dataclass
from typing import List

from tkeys.domain.errors import PatternError

# -----------------------------------------------------------------------------
# RULE MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExcludeRule:
    """
    A compiled exclusion glob.

    Attributes:
        pattern: Original glob as written in the configuration.
        regex: Compiled translation of the glob.
        anchored: True if the rule matches relative paths instead of basenames.
    """
    pattern: str
    regex: re.Pattern
    anchored: bool

    def matches(self, name: str, rel_path: str) -> bool:
        subject = rel_path if self.anchored else name
        return self.regex.match(subject) is not None


# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: List[str]) -> List[ExcludeRule]:
    """
    Compile gitignore-style globs into exclusion rules.

    Blank patterns are ignored. Unlike a best-effort filter, a pattern that
    cannot be compiled aborts the run.

    Args:
        patterns: Raw glob strings.

    Returns:
        List[ExcludeRule]: Compiled rules, in input order.

    Raises:
        PatternError: If a pattern translates to an invalid regex.
    """
    rules: List[ExcludeRule] = []
    for raw in patterns:
        glob = raw.strip()
        if glob.endswith("/"):
            glob = glob.rstrip("/")
        if not glob:
            continue

        anchored = "/" in glob
        if anchored:
            glob = glob.lstrip("/")

        try:
            regex = re.compile(_glob_to_regex(glob))
        except re.error as e:
            raise PatternError(raw, str(e)) from e
        rules.append(ExcludeRule(pattern=raw, regex=regex, anchored=anchored))
    return rules


def matches_any(name: str, rel_path: str, rules: List[ExcludeRule]) -> bool:
    """
    Verify if a directory is hit by at least one exclusion rule.

    Args:
        name: Directory basename.
        rel_path: Directory path relative to the include root, '/'-separated.
        rules: Compiled exclusion rules.

    Returns:
        bool: True if any rule matches.
    """
    return any(rule.matches(name, rel_path) for rule in rules)


def _glob_to_regex(glob_pattern: str) -> str:
    """Translate shell glob syntax to a Python regex ('**' behaves like '*')."""
    return fnmatch.translate(glob_pattern.replace("**", "*"))
