"""
Glob and regex primitives used by the classifier and the diff budgeter.

Globs follow the usual ``**`` conventions: ``**`` spans zero or more whole
path segments, ``*`` and ``?`` stay inside one segment. Dot-prefixed
segments are ordinary, so ``.github/workflows/**`` matches workflow files.
A pattern without ``/`` only matches root-level paths.
"""

import re
from functools import lru_cache
from typing import TYPE_CHECKING, Iterable, Pattern

if TYPE_CHECKING:
    from app.services.deploy_checklist.rules.types import ContentPattern


def _translate(pattern: str) -> str:
    out = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            segment_start = i == 0 or pattern[i - 1] == "/"
            segment_end = j == n or pattern[j] == "/"
            if j - i >= 2 and segment_start and segment_end:
                if j == n:
                    out.append(".*")
                    i = j
                else:
                    # "**/" may match nothing at all
                    out.append("(?:[^/]*/)*")
                    i = j + 1
                continue
            out.append("[^/]*")
            i = j
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            end = pattern.find("]", i + 2 if pattern[i + 1 : i + 2] in ("!", "^") else i + 1)
            if end == -1:
                out.append(re.escape(c))
                i += 1
                continue
            body = pattern[i + 1 : end]
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
            i = end + 1
        elif c == "{":
            end = pattern.find("}", i)
            if end == -1:
                out.append(re.escape(c))
                i += 1
                continue
            options = pattern[i + 1 : end].split(",")
            out.append("(?:" + "|".join(_translate(o) for o in options) + ")")
            i = end + 1
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out)


@lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> Pattern[str]:
    """Compile a glob into an anchored regular expression."""
    return re.compile(_translate(pattern), re.DOTALL)


def glob_match(path: str, pattern: str) -> bool:
    """Check whether *path* matches glob *pattern*."""
    return compile_glob(pattern).fullmatch(path) is not None


def path_matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(glob_match(path, p) for p in patterns)


def any_path_matches(paths: Iterable[str], patterns: Iterable[str]) -> bool:
    """True if any of *paths* matches any of *patterns*."""
    patterns = tuple(patterns)
    if not patterns:
        return False
    return any(path_matches_any(path, patterns) for path in paths)


@lru_cache(maxsize=1024)
def _compile_content(pattern: str, ignore_case: bool) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE if ignore_case else 0)


def content_matches(text: str, patterns: Iterable["ContentPattern"]) -> bool:
    """True if any content pattern is found anywhere in *text*."""
    return any(
        _compile_content(p.pattern, p.ignore_case).search(text) is not None
        for p in patterns
    )
