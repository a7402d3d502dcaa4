#!/usr/bin/env python3
"""Suggest declared Fortran unit names close to a requested identifier."""

from __future__ import annotations

from typing import List, Optional, Tuple

import fortran_scan as fscan


def declared_units(text: str) -> List[Tuple[str, str, int]]:
    """Return (kind, name, line) for each declared unit name, first occurrence only."""
    out: List[Tuple[str, str, int]] = []
    seen = set()
    for m in fscan.UNIT_DEF_RE.finditer(text):
        kind, name = m.group(1), m.group(2)
        if kind == fscan.KIND_MODULE and name.lower() == "procedure":
            continue
        if name in seen:
            continue
        seen.add(name)
        out.append((kind, name, fscan.line_of_offset(text, m.start())))
    return out


def declared_names(text: str) -> List[str]:
    """Declared module/function/subroutine names in document order."""
    return [name for _kind, name, _line in declared_units(text)]


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs."""
    if len(a) < len(b):
        a, b = b, a
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i]
        for j, cb in enumerate(b, start=1):
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + (ca != cb)))
        prev = cur
    return prev[-1]


def suggest(text: str, query: str, limit: Optional[int] = None) -> List[str]:
    """Rank declared names against ``query``.

    Names containing the query sort first, then by edit distance, then by
    order of first appearance in the source.
    """
    ranked = sorted(
        enumerate(declared_names(text)),
        key=lambda item: (query not in item[1], edit_distance(query, item[1]), item[0]),
    )
    names = [name for _idx, name in ranked]
    if limit is not None and limit >= 0:
        names = names[:limit]
    return names
