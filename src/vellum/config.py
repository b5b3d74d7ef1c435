"""Configuration loader for vellum.toml (or a YAML settings file)."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

import yaml

from .import_migrate.fields import DEFAULT_ALIAS_PATTERN, FieldMapping

CONFIG_FILENAME = "vellum.toml"
MIGRATION_BACKUP_DIR = "backup-before-migration"
IMPORT_BACKUP_DIR = "backup-before-import"
COLLISION_POLICIES = ("keep-first", "hash-suffix")


class ConfigError(Exception):
    """Configuration file missing, unreadable or invalid."""


@dataclass
class ContentOptions:
    """Content processing toggles for import and migration."""
    add_category_to_tags: bool = True
    create_aliases: bool = True
    alias_pattern: str = DEFAULT_ALIAS_PATTERN
    asset_collisions: str = "keep-first"


@dataclass
class BackupOptions:
    """Backup configuration. `directory` is relative to the tree's parent."""
    enabled: bool = True
    directory: str | None = None

    def location(self, tree: Path, default: str) -> Path:
        p = Path(self.directory or default)
        return p if p.is_absolute() else tree.parent / p


@dataclass
class VellumConfig:
    """Complete vellum configuration."""
    source: Path | None = None
    target: Path | None = None
    content_dir: Path = Path("src/content/posts")
    index_name: str = "index.md"
    author: str = "Author"
    image_path: str = "/img/"
    glob: str = "*.md"
    dry_run: bool = False
    verbose: bool = False
    field_mappings: FieldMapping = field(default_factory=FieldMapping)
    content: ContentOptions = field(default_factory=ContentOptions)
    backup: BackupOptions = field(default_factory=BackupOptions)
    path: Path | None = None  # File the settings came from


def _get(data: dict[str, Any], key: str, camel: str | None = None, default: Any = None) -> Any:
    """Look up a snake_case key, accepting the camelCase spelling of older configs."""
    if key in data:
        return data[key]
    if camel and camel in data:
        return data[camel]
    return default


def _read_file(path: Path) -> dict[str, Any]:
    try:
        if path.suffix.lower() in (".yml", ".yaml"):
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(config_path: Path | None = None, cwd: Path | None = None) -> VellumConfig:
    """
    Load configuration.

    Search order:
    1. config_path (if provided; it must exist)
    2. cwd/vellum.toml

    Relative paths in the file are resolved against the file's directory.

    Args:
        config_path: Explicit path to config file (.toml, .yml or .yaml)
        cwd: Directory searched for vellum.toml (default: current directory)

    Returns:
        VellumConfig with resolved settings
    """
    data: dict[str, Any] = {}
    found: Path | None = None

    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        found = config_path
    else:
        candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
        if candidate.exists():
            found = candidate

    if found is not None:
        data = _read_file(found)

    base = found.parent if found is not None else None

    def _path(value: Any) -> Path | None:
        if value in (None, ""):
            return None
        p = Path(str(value))
        return p if p.is_absolute() or base is None else base / p

    config = VellumConfig(path=found)
    config.source = _path(data.get("source"))
    config.target = _path(data.get("target"))
    content_dir = _path(_get(data, "content_dir", "contentDir"))
    if content_dir is not None:
        config.content_dir = content_dir
    config.index_name = str(_get(data, "index_name", "indexName", config.index_name))
    config.author = str(data.get("author", config.author))
    config.image_path = str(_get(data, "image_path", "imagePath", config.image_path))
    config.glob = str(data.get("glob", config.glob))
    config.dry_run = bool(_get(data, "dry_run", "dryRun", False))
    config.verbose = bool(data.get("verbose", False))

    # Parse field mappings
    mappings = _get(data, "field_mappings", "fieldMappings", {})
    if not isinstance(mappings, dict):
        raise ConfigError("field_mappings must be a table of canonical key -> legacy keys")
    try:
        config.field_mappings = FieldMapping.from_config(mappings)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    # Parse content options
    content_data = data.get("content", {}) or {}
    config.content = ContentOptions(
        add_category_to_tags=bool(_get(content_data, "add_category_to_tags", "addCategoryToTags", True)),
        create_aliases=bool(_get(content_data, "create_aliases", "createAliases", True)),
        alias_pattern=str(_get(content_data, "alias_pattern", "aliasPattern", DEFAULT_ALIAS_PATTERN)),
        asset_collisions=str(_get(content_data, "asset_collisions", "assetCollisions", "keep-first")),
    )
    if config.content.asset_collisions not in COLLISION_POLICIES:
        raise ConfigError(
            f"Unknown asset collision policy: {config.content.asset_collisions} "
            f"(expected one of: {', '.join(COLLISION_POLICIES)})"
        )

    # Parse backup options
    backup_data = data.get("backup", {}) or {}
    directory = backup_data.get("directory")
    config.backup = BackupOptions(
        enabled=bool(backup_data.get("enabled", True)),
        directory=str(directory) if directory else None,
    )

    return config
