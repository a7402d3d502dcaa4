#!/usr/bin/env python3
"""Shared Fortran source scanning utilities for locating program units."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

KIND_MODULE = "module"
KIND_FUNCTION = "function"
KIND_SUBROUTINE = "subroutine"
UNIT_KINDS = (KIND_MODULE, KIND_FUNCTION, KIND_SUBROUTINE)

UNIT_DEF_RE = re.compile(
    r"^(?![ \t]*end\b)[^!\n]*?\b(module|function|subroutine)[ \t]+([A-Za-z][A-Za-z0-9_]*)\b",
    re.MULTILINE,
)
MODULE_OPEN_RE = re.compile(r"^\s*module\s+(?!procedure\b)([A-Za-z][A-Za-z0-9_]*)\b")
MODULE_END_RE = re.compile(r"^\s*end\s+module\b")
LINE_SPLIT_RE = re.compile(r"(?<=\n)")

# Undecodable bytes round-trip unchanged through read_source/write_source.
SOURCE_ERRORS = "surrogateescape"


@dataclass
class Construct:
    """Location of one named program unit inside a source text."""

    kind: str
    name: str
    start: int
    end: int
    start_line: int
    end_line: int
    source: str = field(default="", repr=False)

    @property
    def text(self) -> str:
        """Exact source text covered by the span."""
        return self.source[self.start:self.end]


@dataclass
class ReferenceSite:
    """One ``call NAME`` occurrence."""

    offset: int
    end: int
    line: int
    kind: str = "call"


def display_path(path: Path) -> str:
    """Return the short display form for a source path."""
    return path.name


def read_source(path: Path) -> str:
    """Read a source file keeping its original line endings."""
    with path.open("r", encoding="utf-8", errors=SOURCE_ERRORS, newline="") as f:
        return f.read()


def write_source(path: Path, text: str) -> None:
    """Write source text without newline translation."""
    with path.open("w", encoding="utf-8", errors=SOURCE_ERRORS, newline="") as f:
        f.write(text)


def get_eol(line: str) -> str:
    """Return the end-of-line marker used by a line."""
    if line.endswith("\r\n"):
        return "\r\n"
    if line.endswith("\n"):
        return "\n"
    return ""


def split_lines(text: str) -> List[str]:
    """Split on \\n only, keeping line endings (unlike str.splitlines)."""
    return [ln for ln in LINE_SPLIT_RE.split(text) if ln]


def line_of_offset(text: str, offset: int) -> int:
    """Return the 1-based line number containing a character offset."""
    return text.count("\n", 0, offset) + 1


def classify_identifier(text: str, name: str) -> Optional[str]:
    """Return the unit kind that first declares ``name`` in document order.

    A single pass looks for ``module|function|subroutine NAME``; the keyword
    of the earliest match wins, so a name reused across kinds resolves to
    whichever declaration appears first.
    """
    pat = re.compile(rf"\b({'|'.join(UNIT_KINDS)})\s+{re.escape(name)}\b")
    m = pat.search(text)
    if not m:
        return None
    return m.group(1)


def procedure_pattern(kind: str, name: str) -> re.Pattern:
    """Build the lazy open-to-close pattern for a function or subroutine."""
    ident = re.escape(name)
    return re.compile(
        rf"\b{kind}\s+{ident}\b(?:\s*\([^)]*\))?[\s\S]*?\bend\s+{kind}\s+{ident}\b"
    )


def locate_procedure(text: str, kind: str, name: str) -> Optional[Construct]:
    """Locate the first ``KIND NAME ... end KIND NAME`` span."""
    m = procedure_pattern(kind, name).search(text)
    if not m:
        return None
    start, end = m.span()
    return Construct(
        kind=kind,
        name=name,
        start=start,
        end=end,
        start_line=line_of_offset(text, start),
        end_line=line_of_offset(text, end),
        source=text,
    )


def scan_module_blocks(text: str) -> List[Tuple[int, int, bool]]:
    """Return module blocks as (first_line_idx, last_line_idx, closed)."""
    lines = split_lines(text)
    blocks: List[Tuple[int, int, bool]] = []
    inside_module = False
    first = 0
    for i, line in enumerate(lines):
        if not inside_module and MODULE_OPEN_RE.match(line):
            inside_module = True
            first = i
        if inside_module and MODULE_END_RE.match(line):
            blocks.append((first, i, True))
            inside_module = False
    if inside_module:
        blocks.append((first, len(lines) - 1, False))
    return blocks


def locate_module(text: str, name: str) -> Optional[Construct]:
    """Locate a module block by line scanning.

    Every module block in the file is accumulated first; only when the
    combined text opens ``module NAME`` are the blocks re-scanned to pick
    the one that does.
    """
    lines = split_lines(text)
    offsets: List[int] = []
    pos = 0
    for line in lines:
        offsets.append(pos)
        pos += len(line)

    blocks = scan_module_blocks(text)
    opens_target = re.compile(rf"^\s*module\s+{re.escape(name)}\b", re.MULTILINE)
    accumulated = "".join("".join(lines[a:b + 1]) for a, b, _closed in blocks)
    if not opens_target.search(accumulated):
        return None

    for first, last, closed in blocks:
        if not closed:
            continue
        block_text = "".join(lines[first:last + 1])
        if not opens_target.search(block_text):
            continue
        last_line = lines[last]
        start = offsets[first]
        end = offsets[last] + len(last_line) - len(get_eol(last_line))
        return Construct(
            kind=KIND_MODULE,
            name=name,
            start=start,
            end=end,
            start_line=first + 1,
            end_line=last + 1,
            source=text,
        )
    return None


def locate_construct(text: str, kind: str, name: str) -> Optional[Construct]:
    """Locate the definition span of ``name`` for a classified kind."""
    if kind == KIND_MODULE:
        return locate_module(text, name)
    if kind in (KIND_FUNCTION, KIND_SUBROUTINE):
        return locate_procedure(text, kind, name)
    raise ValueError(f"Unknown unit kind: {kind}")


def call_pattern(name: str) -> re.Pattern:
    """Pattern for a ``call NAME`` statement head."""
    return re.compile(rf"\bcall\s+{re.escape(name)}\b")


def find_references(text: str, name: str) -> List[ReferenceSite]:
    """Find every ``call NAME`` site, including ones inside the definition."""
    return [
        ReferenceSite(offset=m.start(), end=m.end(), line=line_of_offset(text, m.start()))
        for m in call_pattern(name).finditer(text)
    ]


def external_references(text: str, construct: Construct) -> List[ReferenceSite]:
    """Call sites of a construct that lie outside its own span."""
    return [
        r
        for r in find_references(text, construct.name)
        if r.end <= construct.start or r.offset >= construct.end
    ]
