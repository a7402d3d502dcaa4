from __future__ import annotations

from datetime import datetime
from pathlib import Path

import fortran_backup as fbackup


def test_backup_path_layout() -> None:
    when = datetime(2026, 10, 19, 8, 5, 3)
    assert fbackup.backup_path("foo", Path("bkp"), when) == Path("bkp/2026-10-19-080503-foo.f90")


def test_write_backup_creates_directory_and_keeps_bytes(tmp_path: Path) -> None:
    text = "subroutine foo(x)\r\n x = x+1\r\nend subroutine foo"
    when = datetime(2026, 10, 19, 8, 5, 3, 999)
    record = fbackup.write_backup(text, "foo", tmp_path / "nested" / "bkp", when)
    assert record.path.exists()
    assert record.path.read_bytes() == text.encode("utf-8")
    assert record.timestamp == datetime(2026, 10, 19, 8, 5, 3)
    assert record.name == "foo"
    assert record.text == text


def test_same_second_backups_overwrite(tmp_path: Path) -> None:
    when = datetime(2026, 1, 1, 0, 0, 0)
    first = fbackup.write_backup("one", "foo", tmp_path, when)
    second = fbackup.write_backup("two", "foo", tmp_path, when)
    assert first.path == second.path
    assert second.path.read_text(encoding="utf-8") == "two"
    assert len(list(tmp_path.iterdir())) == 1
