#!/usr/bin/env python3
"""Locate a Fortran module/function/subroutine, preview it, and remove it on confirmation."""

from __future__ import annotations

import argparse
import difflib
from pathlib import Path
from typing import List, Optional

import fortran_backup as fbackup
import fortran_pipeline as fpipe
import fortran_remove as fremove
import fortran_scan as fscan
import fortran_suggest as fsuggest

__version__ = "1.0.0"


def print_file_info(path: Path, text: str) -> None:
    """Print basic metadata about the input file."""
    print(f"File Name: {path.name}")
    print(f"File Path: {path}")
    print(f"File Extension: {path.suffix.lstrip('.') or 'unknown'}")
    print(f"File Size: {path.stat().st_size} bytes")
    print(f"Number of Lines: {len(text.splitlines())}")
    print()


def printable(text: str) -> str:
    """Replace bytes that were not valid UTF-8 so the text can be printed."""
    return text.encode("utf-8", fscan.SOURCE_ERRORS).decode("utf-8", "replace")


def print_preview(path: Path, preview: fpipe.Preview) -> None:
    """Show the located unit before asking for confirmation."""
    c = preview.construct
    print(f"{c.kind.capitalize()} '{c.name}' found in the file '{fscan.display_path(path)}'")
    print(f"Line: {c.start_line}")
    print(f"Full content of the {c.kind}:")
    print(printable(c.text))
    if c.kind != fscan.KIND_MODULE and preview.references:
        lines = ", ".join(str(r.line) for r in preview.references)
        print(f"Call sites outside the definition: {len(preview.references)} (lines {lines})")


def ask_confirmation(kind: str) -> str:
    """Prompt on the terminal; end of input counts as cancel."""
    if kind == fscan.KIND_MODULE:
        print("\nDo you want to remove the content? [Y] to remove, [n] to cancel")
    else:
        print(f"\nDo you want to remove the {kind}?")
        print("  [Y] to remove, [ALL] to remove it and its call sites, [n] to cancel")
    try:
        return input()
    except EOFError:
        return ""


def print_suggestions(failure: fpipe.LookupFailure, path: Path, shown: List[str]) -> None:
    """Report a lookup failure with the closest declared names."""
    where = fscan.display_path(path)
    if failure.stage == fpipe.STAGE_CLASSIFY:
        print(f"Module, function, or subroutine '{failure.identifier}' not found in the file '{where}'")
    else:
        print(f"{(failure.kind or 'unit').capitalize()} '{failure.identifier}' not found in the file '{where}'")
    if shown:
        print(f"Did you mean: {', '.join(shown)}?")


def list_constructs(path: Path, text: str) -> int:
    """Print declared units with kind and first line."""
    units = fsuggest.declared_units(text)
    if not units:
        print(f"No modules, functions, or subroutines found in {fscan.display_path(path)}.")
        return 0
    w_kind = max(len("kind"), max(len(k) for k, _n, _l in units))
    w_name = max(len("name"), max(len(n) for _k, n, _l in units))
    print(f"{'kind':<{w_kind}}  {'name':<{w_name}}  line")
    for kind, name, line in units:
        print(f"{kind:<{w_kind}}  {name:<{w_name}}  {line}")
    return 0


def show_diff(path: Path, old_text: str, new_text: str) -> None:
    """Print a unified diff of the removal."""
    diff = difflib.unified_diff(
        old_text.splitlines(keepends=True),
        new_text.splitlines(keepends=True),
        fromfile=str(path),
        tofile=str(path),
        lineterm="",
    )
    print("\nApplied diff:")
    for d in diff:
        print(printable(d.rstrip("\r\n")))


def main(argv: Optional[List[str]] = None) -> int:
    """Parse CLI options and run the removal pipeline for one file."""
    parser = argparse.ArgumentParser(
        description="Find a Fortran module, function, or subroutine and remove it after confirmation"
    )
    parser.add_argument("fortran_file", type=Path, help="Path to the Fortran source file")
    parser.add_argument("-f", "--name", help="Name of the module, function, or subroutine to remove")
    parser.add_argument(
        "--answer",
        help='Confirmation answer to use instead of prompting ("y", "all", anything else cancels)',
    )
    parser.add_argument(
        "--backup-dir",
        type=Path,
        default=fbackup.DEFAULT_BACKUP_DIR,
        help=f"Directory for removed-code backups (default: {fbackup.DEFAULT_BACKUP_DIR})",
    )
    parser.add_argument(
        "--tool-name",
        default=fremove.TOOL_NAME,
        help=f"Tool name written into removal markers (default: {fremove.TOOL_NAME})",
    )
    parser.add_argument("--suggest", type=int, default=3, help="Number of name suggestions on lookup failure (default: 3)")
    parser.add_argument("--list", action="store_true", help="List declared units and exit")
    parser.add_argument("--diff", action="store_true", help="Print a unified diff after removal")
    parser.add_argument("--quiet", action="store_true", help="Do not print file information")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    path: Path = args.fortran_file
    if not path.exists():
        print(f"File not found: {fscan.display_path(path)}")
        return 2
    if not args.list and not args.name:
        print("--name is required unless --list is given.")
        return 2

    try:
        text = fscan.read_source(path)
        if not args.quiet:
            print_file_info(path, text)
        if args.list:
            return list_constructs(path, text)

        def confirm(preview: fpipe.Preview) -> str:
            print_preview(path, preview)
            if args.answer is not None:
                return args.answer
            return ask_confirmation(preview.construct.kind)

        outcome = fpipe.remove_from_file(
            path,
            args.name,
            confirm,
            backup_dir=args.backup_dir,
            tool_name=args.tool_name,
        )
    except OSError as exc:
        print(f"Storage error: {exc}")
        return 1

    if isinstance(outcome, fpipe.LookupFailure):
        shown = outcome.suggestions[: args.suggest] if args.suggest >= 0 else outcome.suggestions
        print_suggestions(outcome, path, shown)
        return 1
    if isinstance(outcome, fpipe.Cancelled):
        print("Operation cancelled.")
        return 0

    c = outcome.construct
    print(f"Backup written: {outcome.backup.path}")
    print(f"Removed: {fscan.display_path(path)} {c.kind} {c.name} [{c.start_line}-{c.end_line}]")
    if outcome.scope == fremove.SCOPE_ALL:
        print(f"Call sites removed: {outcome.reference_count}")
    if args.diff:
        show_diff(path, c.source, outcome.updated_text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
