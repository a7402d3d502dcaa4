#!/usr/bin/env python3
"""Timestamped backups of removed Fortran program units."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

DEFAULT_BACKUP_DIR = Path("bkp")
BACKUP_STAMP_FORMAT = "%Y-%m-%d-%H%M%S"


@dataclass(frozen=True)
class BackupRecord:
    """One saved copy of a removed span."""

    timestamp: datetime
    name: str
    path: Path
    text: str


def backup_path(name: str, backup_dir: Path, when: datetime) -> Path:
    """Return ``<backup_dir>/<stamp>-<name>.f90``.

    Two backups of the same name within one second share a path; the later
    one overwrites the earlier.
    """
    return backup_dir / f"{when.strftime(BACKUP_STAMP_FORMAT)}-{name}.f90"


def write_backup(
    text: str,
    name: str,
    backup_dir: Path = DEFAULT_BACKUP_DIR,
    when: Optional[datetime] = None,
) -> BackupRecord:
    """Write the exact span text to a new backup file and return its record."""
    stamp = (when or datetime.now()).replace(microsecond=0)
    backup_dir.mkdir(parents=True, exist_ok=True)
    path = backup_path(name, backup_dir, stamp)
    with path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(text)
    return BackupRecord(timestamp=stamp, name=name, path=path, text=text)
