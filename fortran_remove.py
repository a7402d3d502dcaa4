#!/usr/bin/env python3
"""Replace located Fortran units (and optionally their call sites) with audit markers."""

from __future__ import annotations

from datetime import datetime
from typing import List, Tuple

import fortran_scan as fscan

TOOL_NAME = "sparseFortran"
MARKER_STAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MARKER_PREFIX = "! Code removed by "

SCOPE_SELF = "self"
SCOPE_ALL = "all"


def marker_line(when: datetime, tool_name: str = TOOL_NAME) -> str:
    """Return the comment left in place of removed code."""
    return f"{MARKER_PREFIX}{tool_name} application on date {when.strftime(MARKER_STAMP_FORMAT)}"


def count_markers(text: str) -> int:
    """Count audit markers present in a text."""
    return text.count(MARKER_PREFIX)


def strip_module_block(lines: List[str], construct: fscan.Construct, marker: str) -> List[str]:
    """Drop a module's lines and leave one marker line where the block began."""
    start_idx = construct.start_line - 1
    end_idx = construct.end_line
    eol = fscan.get_eol(lines[end_idx - 1])
    return lines[:start_idx] + [marker + eol] + lines[end_idx:]


def remove_call_sites(text: str, name: str, marker: str) -> Tuple[str, int]:
    """Replace each ``call NAME`` head with the marker, keeping what follows it."""
    return fscan.call_pattern(name).subn(lambda _m: marker, text)


def apply_removal(
    text: str,
    construct: fscan.Construct,
    scope: str,
    marker: str,
) -> Tuple[str, int]:
    """Return updated text and the number of call sites replaced.

    The definition is replaced first; with ``SCOPE_ALL`` call sites are then
    searched in the already-updated text, so calls inside the removed body
    are not counted.
    """
    if construct.kind == fscan.KIND_MODULE:
        lines = fscan.split_lines(text)
        return "".join(strip_module_block(lines, construct, marker)), 0

    updated = text[:construct.start] + marker + text[construct.end:]
    if scope != SCOPE_ALL:
        return updated, 0
    return remove_call_sites(updated, construct.name, marker)
