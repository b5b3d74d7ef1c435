"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest

from vellum.config import ConfigError, load_config


def test_load_config_defaults(tmp_path):
    """Test loading config with defaults when no file exists."""
    config = load_config(cwd=tmp_path)

    assert config.path is None
    assert config.source is None
    assert config.content_dir == Path("src/content/posts")
    assert config.author == "Author"
    assert config.image_path == "/img/"
    assert config.glob == "*.md"
    assert config.content.alias_pattern == "/blog/{slug}/"
    assert config.content.asset_collisions == "keep-first"
    assert config.backup.enabled is True
    assert config.field_mappings.keys_for("title") == ("page-title", "seoTitle", "title")


def test_load_config_from_toml():
    """Test loading config from a TOML file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "vellum.toml"
        config_path.write_text("""
source = "legacy"
target = "/abs/posts"
author = "Jane"
dry_run = true

[field_mappings]
title = ["headline", "title"]
description = "lede"

[content]
add_category_to_tags = false
alias_pattern = "/posts/{slug}"
asset_collisions = "hash-suffix"

[backup]
enabled = false
directory = "snapshots"
""")

        config = load_config(config_path=config_path)

        assert config.path == config_path
        assert config.source == Path(tmpdir) / "legacy"
        assert config.target == Path("/abs/posts")
        assert config.author == "Jane"
        assert config.dry_run is True
        assert config.field_mappings.keys_for("title") == ("headline", "title")
        assert config.field_mappings.keys_for("description") == ("lede",)
        assert config.field_mappings.keys_for("date") == ("date",)
        assert config.content.add_category_to_tags is False
        assert config.content.alias_pattern == "/posts/{slug}"
        assert config.content.asset_collisions == "hash-suffix"
        assert config.backup.enabled is False
        assert config.backup.location(Path("/site/posts"), "unused") == Path("/site/snapshots")


def test_load_config_from_yaml_with_camel_case(tmp_path):
    """Test YAML settings using the older camelCase keys."""
    config_path = tmp_path / "import-config.yml"
    config_path.write_text("""
source: ./old-site
target: ./src/content/posts
author: Team
imagePath: /images/
dryRun: false
fieldMappings:
  title: [page-title, title]
content:
  addCategoryToTags: true
  createAliases: false
  aliasPattern: /blog/{slug}/
""")

    config = load_config(config_path=config_path)

    assert config.source == tmp_path / "old-site"
    assert config.target == tmp_path / "src" / "content" / "posts"
    assert config.image_path == "/images/"
    assert config.content.create_aliases is False
    assert config.field_mappings.keys_for("title") == ("page-title", "title")


def test_load_config_search_cwd(tmp_path):
    """Test config search in the given working directory."""
    (tmp_path / "vellum.toml").write_text('author = "Found"\n')

    config = load_config(cwd=tmp_path)

    assert config.author == "Found"
    assert config.path == tmp_path / "vellum.toml"


def test_load_config_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(config_path=tmp_path / "missing.toml")


def test_load_config_invalid_toml(tmp_path):
    config_path = tmp_path / "vellum.toml"
    config_path.write_text("author = [unclosed\n")

    with pytest.raises(ConfigError):
        load_config(config_path=config_path)


def test_load_config_unknown_collision_policy(tmp_path):
    config_path = tmp_path / "vellum.toml"
    config_path.write_text('[content]\nasset_collisions = "overwrite"\n')

    with pytest.raises(ConfigError):
        load_config(config_path=config_path)


def test_backup_location_default(tmp_path):
    config = load_config(cwd=tmp_path)
    tree = tmp_path / "posts"

    assert config.backup.location(tree, "backup-before-import") == tmp_path / "backup-before-import"
