"""Glob matching of event names against listener patterns.

Patterns use :mod:`fnmatch` syntax. ``*`` matches any run of characters,
segment separators (``.`` and ``/``) included, so ``order.*`` matches
``order.created`` as well as ``order.line.added``. A leading ``!`` turns a
pattern into an exclusion.
"""

from collections.abc import Iterable
from fnmatch import fnmatchcase


def _normalize(patterns: str | Iterable[str]) -> list[str]:
    if isinstance(patterns, str):
        return [patterns]
    return list(patterns)


def is_match(
    name: str,
    patterns: str | Iterable[str],
    *,
    case_sensitive: bool = True,
) -> bool:
    """Return whether *name* matches *patterns*.

    A name matches when no exclusion (``!pattern``) matches it and either
    one of the positive patterns matches or there are only exclusions.

    Example:
        >>> is_match("order.created", "order.*")
        True
        >>> is_match("order.created", ["*", "!order.*"])
        False

    Args:
        name: Event name to test.
        patterns: A single pattern or an iterable of patterns.
        case_sensitive: Compare case-sensitively (default).

    Returns:
        True if the name matches.
    """
    if not case_sensitive:
        name = name.lower()

    positives: list[str] = []
    negatives: list[str] = []
    for pattern in _normalize(patterns):
        if not case_sensitive:
            pattern = pattern.lower()
        if pattern.startswith("!"):
            negatives.append(pattern[1:])
        else:
            positives.append(pattern)

    if any(fnmatchcase(name, pattern) for pattern in negatives):
        return False
    if not positives:
        return bool(negatives)
    return any(fnmatchcase(name, pattern) for pattern in positives)
