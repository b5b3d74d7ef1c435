"""Asset reference scanner for document bodies."""

import re
from dataclasses import dataclass
from pathlib import Path

# ![alt](path) or ![alt](path "title"); <path> form allows spaces.
IMAGE_PATTERN = re.compile(
    r'!\[(?P<alt>[^\]]*)\]\(\s*(?P<path><[^>\n]*>|[^)\s]+)(?P<rest>[^)]*)\)'
)
_NETWORK = re.compile(r'^(?:[a-zA-Z][a-zA-Z0-9+.-]*://|//)')
_INLINE = ('data:', 'mailto:')


@dataclass
class AssetRef:
    """A local image referenced from a document body."""

    asset_path: str  # As written in the body (angle brackets removed)
    resolved_path: Path | None  # Existing source file, None if not found
    range_start: int | None = None
    range_end: int | None = None


def is_external(path_str: str) -> bool:
    """True for network URLs and inline payloads, which are never relocated."""
    return bool(_NETWORK.match(path_str)) or path_str.lower().startswith(_INLINE)


def find_references(
    body: str,
    source_dir: Path,
    source_root: Path | None = None,
    asset_prefix: str = "/img/",
) -> list[AssetRef]:
    """Find local image references in a document body.

    Args:
        body: Document body
        source_dir: Directory of the document the body came from
        source_root: Root for `/rooted` paths (default: source_dir)
        asset_prefix: Fallback location (under source_root) tried for
            relative paths not found next to the document

    Returns:
        One AssetRef per reference, in body order. References whose file
        does not exist have `resolved_path` set to None.
    """
    if source_root is None:
        source_root = source_dir

    refs = []
    for match in IMAGE_PATTERN.finditer(body):
        path_str = unwrap_path(match.group('path'))
        if not path_str or is_external(path_str):
            continue

        refs.append(AssetRef(
            asset_path=path_str,
            resolved_path=_resolve_asset_path(path_str, source_dir, source_root, asset_prefix),
            range_start=match.start(),
            range_end=match.end(),
        ))

    return refs


def unwrap_path(path_str: str) -> str:
    path_str = path_str.strip()
    if path_str.startswith('<') and path_str.endswith('>'):
        return path_str[1:-1].strip()
    return path_str


def _strip_suffixes(path_str: str) -> str:
    """Remove any URL fragments or query strings."""
    return path_str.split('#')[0].split('?')[0]


def _resolve_asset_path(
    path_str: str,
    source_dir: Path,
    source_root: Path,
    asset_prefix: str,
) -> Path | None:
    """Resolve an asset path to an existing file.

    Args:
        path_str: The path as written in the body
        source_dir: Directory of the referencing document
        source_root: Root for rooted paths
        asset_prefix: Fallback directory (relative to source_root)

    Returns:
        Resolved absolute path, or None if no candidate exists
    """
    path_str = _strip_suffixes(path_str)
    if not path_str:
        return None

    candidates: list[Path] = []
    if path_str.startswith('/'):
        # Rooted paths are relative to the source root
        candidates.append(source_root / path_str.lstrip('/'))
    else:
        candidates.append(source_dir / path_str)
        prefix = asset_prefix.strip('/')
        if prefix:
            candidates.append(source_root / prefix / path_str)

    for candidate in candidates:
        if candidate.is_file():
            return candidate.resolve()
    return None
