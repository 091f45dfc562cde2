# BucketSync Pattern Utilities
# Glob matching shared by local paths and remote keys

import fnmatch
import logging
import re
from collections.abc import Callable, Sequence
from pathlib import PurePath

logger = logging.getLogger(__name__)

_RANGE_RE = re.compile(r"^(-?\d+)\.\.(-?\d+)$")


def _split_top_level(body: str) -> list[str]:
    """Split a brace body on commas that are not nested in inner braces."""
    parts: list[str] = []
    depth = 0
    current = ""
    for ch in body:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        current += ch
    parts.append(current)
    return parts


def expand_braces(pattern: str) -> list[str]:
    """
    Expand brace alternations in a glob pattern.

    ``{a,b}`` yields one pattern per alternative (nesting allowed) and
    ``{1..3}`` yields a numeric range. A brace group without a comma or a
    range is kept literally.

    Args:
        pattern: Glob pattern.

    Returns:
        List of patterns without alternations, in expansion order.
    """
    depth = 0
    start = 0
    for i, ch in enumerate(pattern):
        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth != 0:
                continue

            body = pattern[start + 1 : i]
            options = _split_top_level(body)
            if len(options) == 1:
                range_match = _RANGE_RE.match(body)
                if not range_match:
                    continue
                first, last = int(range_match.group(1)), int(range_match.group(2))
                step = 1 if last >= first else -1
                options = [str(n) for n in range(first, last + step, step)]

            prefix, suffix = pattern[:start], pattern[i + 1 :]
            expanded: list[str] = []
            for option in options:
                expanded.extend(expand_braces(prefix + option + suffix))
            return expanded

    return [pattern]


def _match_parts(path_parts: Sequence[str], pattern_parts: Sequence[str]) -> bool:
    """Match path segments against pattern segments, ``**`` spanning segments."""
    if not pattern_parts:
        return not path_parts

    head = pattern_parts[0]
    if head == "**":
        rest = pattern_parts[1:]
        if not rest:
            return True
        return any(_match_parts(path_parts[i:], rest) for i in range(len(path_parts) + 1))

    if not path_parts:
        return False

    return fnmatch.fnmatchcase(path_parts[0], head) and _match_parts(path_parts[1:], pattern_parts[1:])


def _match_single(path: str, pattern: str) -> bool:
    if not pattern:
        return path == ""

    path_parts = path.split("/")

    # Patterns without a separator match the base name anywhere in the tree
    if "/" not in pattern:
        return fnmatch.fnmatchcase(path_parts[-1], pattern)

    return _match_parts(path_parts, pattern.split("/"))


def matches_pattern(path: str | PurePath, pattern: str) -> bool:
    """
    Check if a relative path matches a glob pattern.

    Supports:
    - * and ? within a single path segment
    - ** as a whole segment for any number of segments
    - [abc] / [!abc] character classes
    - {a,b} alternation and {1..3} ranges
    - a leading ! to negate the pattern

    Matching is case-sensitive, wildcards match dotfiles, and a pattern
    without a slash is matched against the base name only.

    Args:
        path: Slash-separated relative path.
        pattern: Glob pattern.

    Returns:
        True if path matches pattern.
    """
    path_str = path.as_posix() if isinstance(path, PurePath) else path

    negated = False
    while pattern.startswith("!"):
        negated = not negated
        pattern = pattern[1:]

    matched = any(_match_single(path_str, expanded) for expanded in expand_braces(pattern))
    return matched != negated


def first_match(path: str | PurePath, patterns: Sequence[str]) -> int | None:
    """Return the index of the first pattern matching path, or None."""
    for index, pattern in enumerate(patterns):
        if matches_pattern(path, pattern):
            return index
    return None


def glob_filter(includes: Sequence[str], excludes: Sequence[str]) -> Callable[[str], bool]:
    """
    Build the include/exclude predicate.

    Excludes are checked first and win over includes. A path that
    matches no include pattern is rejected.

    Args:
        includes: Include patterns (at least one is needed to keep anything).
        excludes: Exclude patterns.

    Returns:
        Predicate returning True for paths to keep.
    """

    def predicate(path: str) -> bool:
        for exclude in excludes:
            if matches_pattern(path, exclude):
                logger.debug(f"File {path} excluded by exclude glob {exclude}")
                return False
        for include in includes:
            if matches_pattern(path, include):
                logger.debug(f"File {path} included by include glob {include}")
                return True
        logger.debug(f"File {path} excluded (no glob matched)")
        return False

    return predicate
