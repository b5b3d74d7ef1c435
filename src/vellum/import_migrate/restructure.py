"""Structural migration: <ULID>/ folders -> <ULID>--<slug>/ folders."""

from pathlib import Path

from ..adapters.frontmatter import RestrictedFrontmatter
from ..adapters.fs_storage import DocumentStore
from ..adapters.idgen import is_migrated_dirname, is_ulid, split_migrated_dirname
from ..config import MIGRATION_BACKUP_DIR, VellumConfig
from ..core.model import ContentIdentity
from ..core.ports import FrontmatterCodec
from ..core.slugs import Conflict
from ..core.utils import is_safe_dirname_part
from .backup import create_backup
from .fields import render_alias
from .models import PreconditionError, RunContext


def reserve_collection_slugs(root: Path, ctx: RunContext) -> None:
    """Claim the slugs of folders that already carry one, before any new claims."""
    if not root.is_dir():
        return
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.is_dir() and is_migrated_dirname(entry.name):
            _, slug = split_migrated_dirname(entry.name)
            result = ctx.slugs.reserve(slug, entry.name)
            if isinstance(result, Conflict):
                ctx.reporter.warning(
                    f'Slug "{slug}" is already shared by {result.existing_owner} and {entry.name}'
                )
    ctx.reporter.verbose(f"Reserved {len(ctx.slugs)} existing slugs")


def migrate_collection(
    root: Path,
    ctx: RunContext,
    config: VellumConfig | None = None,
    codec: FrontmatterCodec | None = None,
) -> RunContext:
    """
    Rename every `<ULID>` document folder under `root` to `<ULID>--<slug>`.

    The slug comes from the document's own header; documents without one are
    skipped. The pre-migration URL is appended to the document's aliases.
    Failures are recorded per folder and never stop the run.

    Args:
        root: Collection directory holding one folder per document
        ctx: Run context (dry-run flag, counters, slug table, reporter)
        config: Settings (index file name, alias pattern, backup)
        codec: Frontmatter codec (default: RestrictedFrontmatter)

    Returns:
        The same run context, with counters and records filled in
    """
    if config is None:
        config = VellumConfig()
    if codec is None:
        codec = RestrictedFrontmatter()

    r = ctx.reporter
    r.step("INIT", f"Starting ULID--slug migration of {root}")

    if not root.is_dir():
        raise PreconditionError(f"Content directory not found: {root}")

    if config.backup.enabled:
        create_backup(root, config.backup.location(root, MIGRATION_BACKUP_DIR), ctx)

    store = DocumentStore(root, codec, config.index_name)
    folders = [p.name for p in store.entries() if p.is_dir()]
    r.step("SCAN", f"Found {len(folders)} folders in {root}")

    reserve_collection_slugs(root, ctx)

    for name in folders:
        _migrate_folder(name, store, ctx, config.content.alias_pattern)

    return ctx


def _migrate_folder(name: str, store: DocumentStore, ctx: RunContext, alias_pattern: str) -> None:
    r = ctx.reporter

    # Classify
    if is_migrated_dirname(name):
        r.info(f"Skipping {name} (already migrated)")
        ctx.record(name, "skipped", "already migrated")
        return

    if not is_ulid(name):
        r.warning(f"Skipping {name} (not a valid ULID)")
        ctx.record(name, "skipped", "not a ULID")
        return

    if not store.has_index(name):
        r.error(f"No {store.index_name} found in {name}")
        ctx.record(name, "error", f"missing {store.index_name}")
        return

    try:
        document = store.read(name)
    except (OSError, UnicodeDecodeError) as e:
        r.error(f"Error reading {name}: {e}")
        ctx.record(name, "error", str(e))
        return

    slug = (document.header.get_text("slug") or "").strip()
    if not slug:
        r.warning(f"No slug found in {name}, skipping...")
        ctx.record(name, "skipped", "missing slug")
        return

    if not is_safe_dirname_part(slug):
        r.error(f'Slug "{slug}" in {name} cannot be used in a folder name')
        ctx.record(name, "error", "invalid slug")
        return

    identity = ContentIdentity(identifier=name, slug=slug)
    new_name = identity.dirname

    reservation = ctx.slugs.reserve(slug, new_name)
    if isinstance(reservation, Conflict):
        r.error(f'Slug conflict: "{slug}" already used by {reservation.existing_owner}')
        ctx.record(name, "conflict", "slug already used", target=new_name)
        return

    if store.exists(new_name):
        r.error(f"Target folder already exists: {new_name}")
        ctx.record(name, "conflict", "target exists", target=new_name)
        return

    r.info(f"Migrating: {name} → {new_name}")

    # Transform and persist
    try:
        document.add_alias(render_alias(alias_pattern, slug, name))
        if not ctx.dry_run:
            _persist(store, name, new_name, document)
    except Exception as e:
        r.error(f"Error processing {name}: {e}")
        ctx.record(name, "error", str(e), target=new_name)
        return

    ctx.record(name, "migrated", target=new_name)
    r.success(f"Migrated: {name} → {new_name}")


def _persist(store: DocumentStore, old_name: str, new_name: str, document) -> None:
    """Copy the folder (assets included), rewrite its index, then drop the old folder."""
    store.copy_dir(old_name, new_name)
    try:
        store.write(new_name, document)
    except Exception:
        store.remove(new_name)
        raise
    store.remove(old_name)
