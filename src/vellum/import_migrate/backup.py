"""Single-generation snapshot of a tree before a run mutates it."""

import shutil
from pathlib import Path

from .models import PreconditionError, RunContext


def create_backup(tree: Path, backup_path: Path, ctx: RunContext) -> Path | None:
    """
    Copy `tree` to `backup_path`, replacing any previous backup there.

    Must run before the first per-document write. In a dry run the same
    lines are logged but nothing is removed or copied.

    Args:
        tree: Directory the run is about to mutate
        backup_path: Where the snapshot goes (outside `tree`)
        ctx: Run context

    Returns:
        The backup path, or None when nothing was copied
    """
    tree = tree.resolve()
    backup_path = backup_path.resolve()
    if backup_path.is_relative_to(tree):
        raise PreconditionError(f"Backup location must be outside {tree}: {backup_path}")
    if tree.is_relative_to(backup_path):
        # the previous backup is removed before copying
        raise PreconditionError(f"Backup location must not contain {tree}: {backup_path}")

    ctx.reporter.step("BACKUP", f"Snapshot of {tree} -> {backup_path}")

    if not tree.exists():
        ctx.reporter.info(f"Nothing to back up: {tree} does not exist yet")
        return None

    if backup_path.exists():
        ctx.reporter.warning(f"Backup directory {backup_path} already exists. Replacing it.")

    if ctx.dry_run:
        return None

    if backup_path.exists():
        shutil.rmtree(backup_path)
    shutil.copytree(tree, backup_path)
    ctx.backup_path = backup_path
    return backup_path
