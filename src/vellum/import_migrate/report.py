"""Diagnostic output for migration/import runs."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .models import RunContext


class Reporter:
    """
    Line-oriented run log.

    Every emitted line is kept in `lines` (so a dry run can be compared with
    a live one) and printed unless `quiet` is set; errors and the summary
    are printed regardless. Verbose lines exist only in verbose mode.
    """

    def __init__(self, verbose: bool = False, quiet: bool = False, stream: TextIO | None = None):
        self.verbose_enabled = verbose
        self.quiet = quiet
        self.stream = stream
        self.lines: list[str] = []

    def _emit(self, line: str, always: bool = False, blank_before: bool = False) -> None:
        self.lines.append(line)
        if self.quiet and not always:
            return
        out = self.stream or sys.stdout
        if blank_before:
            print(file=out)
        print(line, file=out)

    def step(self, tag: str, message: str) -> None:
        self._emit(f"[{tag}] {message}", blank_before=True)

    def info(self, message: str) -> None:
        self._emit(message)

    def success(self, message: str) -> None:
        self._emit(f"✓ {message}")

    def warning(self, message: str) -> None:
        self._emit(f"⚠ {message}")

    def error(self, message: str) -> None:
        self._emit(f"✗ {message}", always=True)

    def verbose(self, message: str) -> None:
        if self.verbose_enabled:
            self._emit(f"· {message}")

    def summary(self, lines: list[str]) -> None:
        for i, line in enumerate(lines):
            self._emit(line, always=True, blank_before=(i == 0))


def format_summary(ctx: RunContext, completed_label: str, unit: str) -> list[str]:
    """Summary lines for a finished run, e.g. completed_label="Migrated", unit="folders"."""
    c = ctx.counters
    lines = [
        "Summary:",
        f"  Processed: {c.processed} {unit}",
        f"  {completed_label}: {c.completed} {unit}",
        f"  Skipped: {c.skipped} {unit}",
        f"  Errors: {c.errors} {unit}",
        f"  Conflicts: {c.conflicts} {unit}",
    ]
    if ctx.failed:
        lines.append("Some documents failed or conflicted. Review the output above.")
    return lines


def format_closing(ctx: RunContext, command: str) -> list[str]:
    if ctx.dry_run:
        return [
            "This was a dry run. No files were modified.",
            f"Run without --dry-run to perform the {command}.",
        ]
    lines = [f"The {command} has finished."]
    if ctx.backup_path is not None:
        lines.append(f"Backup available at: {ctx.backup_path}")
    return lines
