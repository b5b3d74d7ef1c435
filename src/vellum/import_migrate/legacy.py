"""Import: bring external Markdown documents into the managed collection."""

import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from ..adapters.frontmatter import RestrictedFrontmatter
from ..adapters.fs_storage import read_document, write_document
from ..adapters.idgen import UlidGenerator
from ..assets.relocate import get_collision_policy, relocate_assets
from ..assets.rewrite import rewrite_references
from ..assets.scanner import find_references
from ..config import IMPORT_BACKUP_DIR, VellumConfig
from ..core.model import ContentIdentity, Document
from ..core.ports import CollisionPolicy, FrontmatterCodec, IdGenerator
from ..core.slugs import Conflict
from .backup import create_backup
from .fields import convert_header
from .models import PreconditionError, RunContext
from .restructure import reserve_collection_slugs


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def import_legacy(
    source: Path,
    target: Path,
    ctx: RunContext,
    config: VellumConfig | None = None,
    idgen: IdGenerator | None = None,
    codec: FrontmatterCodec | None = None,
    now: Callable[[], str] | None = None,
) -> RunContext:
    """
    Import every legacy document in `source` into `target`.

    Each document gets a new identifier, a slug derived from its mapped
    title, an `<id>--<slug>/` folder with the converted header, and its
    local images copied to the folder's `assets/` directory.

    Args:
        source: Directory holding the legacy documents
        target: Managed collection directory
        ctx: Run context (dry-run flag, counters, slug table, reporter)
        config: Settings (field mappings, content toggles, backup, author...)
        idgen: Identifier generator (default: UlidGenerator)
        codec: Frontmatter codec (default: RestrictedFrontmatter)
        now: Returns the date used for documents without one

    Returns:
        The same run context, with counters and records filled in
    """
    if config is None:
        config = VellumConfig()
    if idgen is None:
        idgen = UlidGenerator()
    if codec is None:
        codec = RestrictedFrontmatter()
    if now is None:
        now = _utc_now

    r = ctx.reporter
    r.step("INIT", "Legacy content import")
    r.info(f"Source: {source}")
    r.info(f"Target: {target}")

    if not source.is_dir():
        raise PreconditionError(f"Source directory not found: {source}")
    try:
        policy = get_collision_policy(config.content.asset_collisions)
    except ValueError as e:
        raise PreconditionError(str(e)) from e

    if config.backup.enabled:
        create_backup(target, config.backup.location(target, IMPORT_BACKUP_DIR), ctx)

    if not ctx.dry_run:
        target.mkdir(parents=True, exist_ok=True)

    files = sorted(p for p in source.glob(config.glob) if p.is_file())
    r.step("SCAN", f"Found {len(files)} markdown files in {source}")

    reserve_collection_slugs(target, ctx)

    for path in files:
        _import_file(path, source, target, ctx, config, idgen, codec, policy, now)

    return ctx


def _import_file(
    path: Path,
    source: Path,
    target: Path,
    ctx: RunContext,
    config: VellumConfig,
    idgen: IdGenerator,
    codec: FrontmatterCodec,
    policy: CollisionPolicy,
    now: Callable[[], str],
) -> None:
    r = ctx.reporter
    name = path.relative_to(source).as_posix()

    try:
        legacy = read_document(path, codec)
    except (OSError, UnicodeDecodeError) as e:
        r.error(f"Error reading {name}: {e}")
        ctx.record(name, "error", str(e))
        return

    identifier = idgen.new_id()
    header = convert_header(
        legacy.header,
        path.name,
        identifier,
        config.field_mappings,
        default_author=config.author,
        now=now(),
        add_category_to_tags=config.content.add_category_to_tags,
        create_aliases=config.content.create_aliases,
        alias_pattern=config.content.alias_pattern,
    )
    identity = ContentIdentity(identifier=identifier, slug=header["slug"])
    dirname = identity.dirname

    reservation = ctx.slugs.reserve(identity.slug, name)
    if isinstance(reservation, Conflict):
        r.error(f'Slug conflict: "{identity.slug}" already used by {reservation.existing_owner}')
        ctx.record(name, "conflict", "slug already used", target=dirname)
        return

    dest = target / dirname
    if dest.exists():
        r.warning(f"Target directory already exists: {dirname}")
        ctx.record(name, "skipped", "target exists", target=dirname)
        return

    r.info(f"Importing: {name} → {dirname}")
    r.verbose(f"Title: {header['title']}")
    r.verbose(f"Slug: {identity.slug}")
    r.verbose(f"Tags: {', '.join(header['tags'])}")

    created = False
    try:
        refs = find_references(
            legacy.body,
            source_dir=path.parent,
            source_root=source,
            asset_prefix=config.image_path,
        )
        for ref in refs:
            if ref.resolved_path is None:
                r.warning(f"Asset not found: {ref.asset_path}")

        if not ctx.dry_run:
            dest.mkdir(parents=True)
            created = True

        relocated = relocate_assets(refs, dest, ctx, policy)
        body = rewrite_references(legacy.body, relocated)

        if not ctx.dry_run:
            write_document(dest / config.index_name, Document(header=header, body=body), codec)
    except Exception as e:
        if created and dest.exists():
            shutil.rmtree(dest)
        r.error(f"Error processing {name}: {e}")
        ctx.record(name, "error", str(e), target=dirname)
        return

    ctx.record(name, "imported", target=dirname)
    r.success(f"Imported: {name} → {dirname}")
