"""Copy referenced assets into a document's own asset directory."""

from __future__ import annotations

import hashlib
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.ports import CollisionPolicy
from .scanner import AssetRef

if TYPE_CHECKING:
    from ..import_migrate.models import RunContext

ASSETS_DIRNAME = "assets"


@dataclass
class RelocatedAsset:
    """Where a referenced asset ended up."""

    original_path: str  # As written in the source body
    source: Path
    target_path: Path
    new_path: str  # Body reference relative to the document, e.g. "assets/a.png"
    copied: bool = True
    duplicate: bool = False  # A different source already owned the name


class KeepFirst:
    """The file already holding the name wins; the reference points at it."""

    name = "keep-first"

    def resolve(self, source: Path, taken_name: str) -> str:
        return taken_name


class HashSuffix:
    """Suffix the colliding name with a short content hash."""

    name = "hash-suffix"

    def __init__(self, length: int = 8):
        self.length = length

    def resolve(self, source: Path, taken_name: str) -> str:
        p = Path(taken_name)
        digest = compute_file_hash(source)[:self.length]
        return f"{p.stem}-{digest}{p.suffix}"


def get_collision_policy(name: str) -> CollisionPolicy:
    """Factory function to get a collision policy by name."""
    if name == "keep-first":
        return KeepFirst()
    elif name == "hash-suffix":
        return HashSuffix()
    else:
        raise ValueError(f"Unknown asset collision policy: {name}")


def compute_file_hash(file_path: Path) -> str:
    """Compute SHA256 hash of a file."""
    sha256 = hashlib.sha256()
    with file_path.open('rb') as f:
        # Read in chunks for large files
        while chunk := f.read(8192):
            sha256.update(chunk)
    return sha256.hexdigest()


def relocate_assets(
    refs: list[AssetRef],
    target_dir: Path,
    ctx: RunContext,
    policy: CollisionPolicy | None = None,
) -> list[RelocatedAsset]:
    """Copy resolvable assets into `target_dir/assets/`.

    Args:
        refs: References found in the body; unresolved ones are ignored
        target_dir: The owning document's directory
        ctx: Run context (dry-run flag, reporter)
        policy: Name collision policy (default: KeepFirst)

    Returns:
        One RelocatedAsset per resolvable reference, in input order
    """
    if policy is None:
        policy = KeepFirst()

    assets_dir = target_dir / ASSETS_DIRNAME
    # name -> source, for names handed out during this call
    claimed: dict[str, Path] = {}
    relocated: list[RelocatedAsset] = []

    for ref in refs:
        source = ref.resolved_path
        if source is None:
            continue

        name = source.name
        duplicate = False
        if claimed.get(name) == source:
            relocated.append(_entry(ref, source, assets_dir, name, copied=False))
            continue

        if name in claimed or (assets_dir / name).exists():
            new_name = policy.resolve(source, name)
            if new_name == name:
                ctx.reporter.warning(f"Asset already exists: {name} (skipping copy)")
                relocated.append(_entry(ref, source, assets_dir, name, copied=False, duplicate=True))
                continue
            ctx.reporter.warning(f"Asset name taken: {name} (using {new_name})")
            name = new_name
            duplicate = True
            if name in claimed or (assets_dir / name).exists():
                # same content already copied under the suffixed name
                relocated.append(_entry(ref, source, assets_dir, name, copied=False, duplicate=True))
                continue

        if not ctx.dry_run:
            assets_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, assets_dir / name)
        claimed[name] = source
        ctx.reporter.verbose(f"Copied asset: {name}")
        relocated.append(_entry(ref, source, assets_dir, name, duplicate=duplicate))

    return relocated


def _entry(
    ref: AssetRef,
    source: Path,
    assets_dir: Path,
    name: str,
    copied: bool = True,
    duplicate: bool = False,
) -> RelocatedAsset:
    return RelocatedAsset(
        original_path=ref.asset_path,
        source=source,
        target_path=assets_dir / name,
        new_path=f"{ASSETS_DIRNAME}/{name}",
        copied=copied,
        duplicate=duplicate,
    )
