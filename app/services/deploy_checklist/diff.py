"""Unified diff helpers: changed-path extraction and per-file sections."""

import re
from dataclasses import dataclass
from typing import List

_FILE_HEADER = re.compile(r"^diff --git ", re.MULTILINE)
_HEADER_PATHS = re.compile(r"^diff --git a/(.+?) b/", re.MULTILINE)

UNKNOWN_SECTION = "unknown"


@dataclass(frozen=True)
class DiffSection:
    """One file's slice of a unified diff, header line included."""

    filename: str
    content: str


def extract_changed_paths(diff: str) -> List[str]:
    """Extract file paths from ``diff --git`` headers, deduplicated, in order."""
    return list(dict.fromkeys(_HEADER_PATHS.findall(diff)))


def split_sections(diff: str) -> List[DiffSection]:
    """
    Split a unified diff on its ``diff --git`` headers.

    Text with no header at all becomes a single ``unknown`` section, as does
    any preamble before the first header. Never raises.
    """
    starts = [m.start() for m in _FILE_HEADER.finditer(diff)]
    if not starts:
        return [DiffSection(UNKNOWN_SECTION, diff)] if diff else []

    sections: List[DiffSection] = []
    preamble = diff[: starts[0]]
    if preamble.strip():
        sections.append(DiffSection(UNKNOWN_SECTION, preamble.rstrip("\n")))

    for start, end in zip(starts, starts[1:] + [len(diff)]):
        content = diff[start:end].rstrip("\n")
        match = _HEADER_PATHS.match(content)
        filename = match.group(1) if match else UNKNOWN_SECTION
        sections.append(DiffSection(filename, content))
    return sections
