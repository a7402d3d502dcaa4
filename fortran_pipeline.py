#!/usr/bin/env python3
"""Classify, locate, confirm, back up and remove one Fortran program unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

import fortran_backup as fbackup
import fortran_remove as fremove
import fortran_scan as fscan
import fortran_suggest as fsuggest

STAGE_CLASSIFY = "classify"
STAGE_LOCATE = "locate"


@dataclass
class Preview:
    """What the confirmation prompt is asked about."""

    construct: fscan.Construct
    references: List[fscan.ReferenceSite] = field(default_factory=list)


@dataclass
class RemovalResult:
    construct: fscan.Construct
    updated_text: str
    backup: fbackup.BackupRecord
    scope: str
    reference_count: int = 0


@dataclass
class Cancelled:
    construct: fscan.Construct


@dataclass
class LookupFailure:
    """Identifier could not be classified or its span could not be delimited."""

    stage: str
    identifier: str
    kind: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


Outcome = Union[RemovalResult, Cancelled, LookupFailure]
ConfirmFn = Callable[[Preview], str]


def parse_choice(token: Optional[str]) -> Optional[str]:
    """Map a confirmation answer to a removal scope, or None to cancel."""
    choice = (token or "").strip().lower()
    if choice == "y":
        return fremove.SCOPE_SELF
    if choice == "all":
        return fremove.SCOPE_ALL
    return None


def run_removal(
    text: str,
    name: str,
    confirm: ConfirmFn,
    *,
    backup_dir: Path = fbackup.DEFAULT_BACKUP_DIR,
    tool_name: str = fremove.TOOL_NAME,
    now: Optional[Callable[[], datetime]] = None,
) -> Outcome:
    """Run the removal pipeline over source text.

    Nothing is written unless the confirmation answer selects a scope; the
    backup is then written before the updated text is produced.
    """
    kind = fscan.classify_identifier(text, name)
    if kind is None:
        return LookupFailure(STAGE_CLASSIFY, name, suggestions=fsuggest.suggest(text, name))

    construct = fscan.locate_construct(text, kind, name)
    if construct is None:
        return LookupFailure(STAGE_LOCATE, name, kind=kind, suggestions=fsuggest.suggest(text, name))

    preview = Preview(construct, fscan.external_references(text, construct))
    scope = parse_choice(confirm(preview))
    if scope is None:
        return Cancelled(construct)
    if construct.kind == fscan.KIND_MODULE:
        scope = fremove.SCOPE_SELF

    stamp = (now or datetime.now)().replace(microsecond=0)
    record = fbackup.write_backup(construct.text, name, backup_dir, stamp)
    marker = fremove.marker_line(stamp, tool_name)
    updated, n_refs = fremove.apply_removal(text, construct, scope, marker)
    return RemovalResult(construct, updated, record, scope, n_refs)


def remove_from_file(
    path: Path,
    name: str,
    confirm: ConfirmFn,
    *,
    backup_dir: Path = fbackup.DEFAULT_BACKUP_DIR,
    tool_name: str = fremove.TOOL_NAME,
    now: Optional[Callable[[], datetime]] = None,
) -> Outcome:
    """Read ``path``, run the pipeline, and write the file back on success."""
    text = fscan.read_source(path)
    outcome = run_removal(text, name, confirm, backup_dir=backup_dir, tool_name=tool_name, now=now)
    if isinstance(outcome, RemovalResult):
        fscan.write_source(path, outcome.updated_text)
    return outcome
