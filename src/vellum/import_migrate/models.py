"""Data models for migration/import runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from ..core.slugs import SlugRegistry
from .report import Reporter

Outcome = Literal["migrated", "imported", "repaired", "skipped", "conflict", "error"]

COMPLETED_OUTCOMES = ("migrated", "imported", "repaired")


class PreconditionError(Exception):
    """A run cannot start: missing source tree, missing settings, bad config."""


@dataclass
class RunCounters:
    """Per-outcome document counts for one run."""

    processed: int = 0
    completed: int = 0  # migrated, imported or repaired
    skipped: int = 0
    errors: int = 0
    conflicts: int = 0

    def count(self, outcome: Outcome) -> None:
        self.processed += 1
        if outcome in COMPLETED_OUTCOMES:
            self.completed += 1
        elif outcome == "skipped":
            self.skipped += 1
        elif outcome == "conflict":
            self.conflicts += 1
        elif outcome == "error":
            self.errors += 1
        else:
            raise ValueError(f"Unknown outcome: {outcome}")


@dataclass
class DocumentRecord:
    """Final state of one document in a run."""

    name: str  # Source folder or file name
    outcome: Outcome
    reason: str | None = None
    target: str | None = None  # New folder name, when one was computed


@dataclass
class RunContext:
    """
    Everything owned by a single invocation of a workflow.

    Counters, the slug reservation table and the diagnostic sink live here
    and are passed explicitly to every component; nothing is kept globally.
    """

    dry_run: bool = False
    reporter: Reporter = field(default_factory=Reporter)
    slugs: SlugRegistry = field(default_factory=SlugRegistry)
    counters: RunCounters = field(default_factory=RunCounters)
    records: list[DocumentRecord] = field(default_factory=list)
    backup_path: Path | None = None

    def record(
        self,
        name: str,
        outcome: Outcome,
        reason: str | None = None,
        target: str | None = None,
    ) -> DocumentRecord:
        rec = DocumentRecord(name=name, outcome=outcome, reason=reason, target=target)
        self.counters.count(outcome)
        self.records.append(rec)
        return rec

    @property
    def failed(self) -> bool:
        return self.counters.errors > 0 or self.counters.conflicts > 0

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
