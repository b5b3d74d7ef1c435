"""Tests for the <ULID> -> <ULID>--<slug> folder migration."""

from pathlib import Path

import pytest

from vellum.adapters import fs_storage
from vellum.adapters.frontmatter import RestrictedFrontmatter
from vellum.config import VellumConfig
from vellum.import_migrate.models import PreconditionError, RunContext
from vellum.import_migrate.report import Reporter
from vellum.import_migrate.restructure import migrate_collection

ID_A = "01HZX3K9QW8E2M4N6P7R8S9T0A"
ID_B = "01HZX3K9QW8E2M4N6P7R8S9T0B"
ID_C = "01HZX3K9QW8E2M4N6P7R8S9T0C"


def _config(backup=False):
    config = VellumConfig()
    config.backup.enabled = backup
    return config


def _ctx(dry_run=False):
    return RunContext(dry_run=dry_run, reporter=Reporter(quiet=True))


def _doc(root: Path, dirname: str, header: str, body: str = "# Post\n") -> Path:
    folder = root / dirname
    folder.mkdir(parents=True)
    (folder / "index.md").write_text(f"---\n{header}\n---\n\n{body}", encoding="utf-8")
    return folder


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


def _read(path: Path):
    return RestrictedFrontmatter().decode(path.read_text(encoding="utf-8"))


@pytest.fixture
def collection(tmp_path):
    root = tmp_path / "posts"
    folder = _doc(root, ID_A, 'title: "First Post"\nslug: first-post\naliases: []')
    (folder / "cover.png").write_bytes(b"cover")
    _doc(root, ID_B, 'title: "Second"\nslug: second\naliases:\n  - "/old/second/"')
    return root


def test_migrate_renames_folders(collection):
    """Test that folders get the slug suffix and keep their assets."""
    ctx = migrate_collection(collection, _ctx(), config=_config())

    assert sorted(p.name for p in collection.iterdir()) == [
        f"{ID_A}--first-post",
        f"{ID_B}--second",
    ]
    moved = collection / f"{ID_A}--first-post"
    assert (moved / "cover.png").read_bytes() == b"cover"
    header, body = _read(moved / "index.md")
    assert header["aliases"] == ["/blog/first-post/"]
    assert header["slug"] == "first-post"
    assert body == "# Post\n"

    assert ctx.counters.processed == 2
    assert ctx.counters.completed == 2
    assert ctx.exit_code == 0
    assert [r.target for r in ctx.records] == [f"{ID_A}--first-post", f"{ID_B}--second"]


def test_migrate_keeps_existing_aliases(collection):
    migrate_collection(collection, _ctx(), config=_config())

    header, _ = _read(collection / f"{ID_B}--second" / "index.md")
    assert header["aliases"] == ["/old/second/", "/blog/second/"]


def test_migrate_does_not_duplicate_alias(tmp_path):
    root = tmp_path / "posts"
    _doc(root, ID_A, 'slug: post\naliases:\n  - "/blog/post/"\n  -')

    migrate_collection(root, _ctx(), config=_config())

    header, _ = _read(root / f"{ID_A}--post" / "index.md")
    assert header["aliases"] == ["/blog/post/"]


def test_migrate_custom_alias_pattern(tmp_path):
    root = tmp_path / "posts"
    _doc(root, ID_A, "slug: post")
    config = _config()
    config.content.alias_pattern = "/p/{id}/{slug}"

    migrate_collection(root, _ctx(), config=config)

    header, _ = _read(root / f"{ID_A}--post" / "index.md")
    assert header["aliases"] == [f"/p/{ID_A}/post"]


def test_migrate_is_idempotent(collection):
    """Test that a second run changes nothing."""
    migrate_collection(collection, _ctx(), config=_config())
    before = _snapshot(collection)

    ctx = migrate_collection(collection, _ctx(), config=_config())

    assert _snapshot(collection) == before
    assert ctx.counters.completed == 0
    assert ctx.counters.skipped == 2
    assert all(r.reason == "already migrated" for r in ctx.records)
    assert ctx.exit_code == 0


def test_migrate_dry_run_changes_nothing(collection):
    """Test that a dry run leaves the tree alone and logs like a live run."""
    before = _snapshot(collection)

    dry = migrate_collection(collection, _ctx(dry_run=True), config=_config())

    assert _snapshot(collection) == before
    assert dry.counters.completed == 2

    live = migrate_collection(collection, _ctx(), config=_config())

    assert dry.reporter.lines == live.reporter.lines
    assert dry.counters == live.counters


def test_migrate_missing_slug_skips(tmp_path):
    root = tmp_path / "posts"
    _doc(root, ID_A, 'title: "No slug"')

    ctx = migrate_collection(root, _ctx(), config=_config())

    assert (root / ID_A).is_dir()
    assert ctx.records[0].outcome == "skipped"
    assert ctx.records[0].reason == "missing slug"
    assert ctx.exit_code == 0


def test_migrate_slug_conflict(tmp_path):
    """Test that the second folder claiming a slug is left in place."""
    root = tmp_path / "posts"
    _doc(root, ID_A, "slug: same")
    _doc(root, ID_B, "slug: same")

    ctx = migrate_collection(root, _ctx(), config=_config())

    assert (root / f"{ID_A}--same").is_dir()
    assert (root / ID_B).is_dir()
    assert [r.outcome for r in ctx.records] == ["migrated", "conflict"]
    assert ctx.counters.conflicts == 1
    assert ctx.exit_code == 1


def test_migrate_conflict_with_migrated_folder(tmp_path):
    root = tmp_path / "posts"
    _doc(root, f"{ID_A}--taken", "slug: taken")
    _doc(root, ID_B, "slug: taken")

    ctx = migrate_collection(root, _ctx(), config=_config())

    assert (root / ID_B).is_dir()
    assert ctx.records[1].outcome == "conflict"


def test_migrate_classifies_odd_folders(tmp_path):
    """Test non-ULID folders, missing index files and unusable slugs."""
    root = tmp_path / "posts"
    _doc(root, "drafts", "slug: drafts")
    (root / ID_A).mkdir()
    _doc(root, ID_B, 'slug: "../escape"')
    (root / "notes.txt").write_text("not a folder")

    ctx = migrate_collection(root, _ctx(), config=_config())

    outcomes = {r.name: (r.outcome, r.reason) for r in ctx.records}
    assert outcomes[ID_A] == ("error", "missing index.md")
    assert outcomes[ID_B] == ("error", "invalid slug")
    assert outcomes["drafts"] == ("skipped", "not a ULID")
    assert "notes.txt" not in outcomes
    assert (root / "drafts").is_dir()
    assert ctx.exit_code == 1


def test_migrate_missing_root(tmp_path):
    with pytest.raises(PreconditionError):
        migrate_collection(tmp_path / "nope", _ctx(), config=_config())


def test_migrate_creates_backup(collection):
    before = _snapshot(collection)

    ctx = migrate_collection(collection, _ctx(), config=_config(backup=True))

    backup = collection.parent / "backup-before-migration"
    assert ctx.backup_path == backup.resolve()
    assert _snapshot(backup) == before


def test_migrate_backup_inside_tree_refused(collection):
    config = _config(backup=True)
    config.backup.directory = str(collection / "backup")

    with pytest.raises(PreconditionError):
        migrate_collection(collection, _ctx(), config=config)


def test_migrate_backup_containing_tree_refused(collection):
    """Test that a backup location above the collection is never replaced."""
    before = _snapshot(collection)

    for directory in (".", "..", str(collection.parent)):
        config = _config(backup=True)
        config.backup.directory = directory
        with pytest.raises(PreconditionError):
            migrate_collection(collection, _ctx(), config=config)

    assert _snapshot(collection) == before


def test_migrate_lowercase_ulid_folder_is_recognised(tmp_path):
    """Test that folders migrated from lower-case ids stay migrated and keep their slug."""
    root = tmp_path / "posts"
    lower = ID_A.lower()
    _doc(root, lower, "slug: same")
    migrate_collection(root, _ctx(), config=_config())
    _doc(root, ID_B, "slug: same")

    ctx = migrate_collection(root, _ctx(), config=_config())

    outcomes = {r.name: (r.outcome, r.reason) for r in ctx.records}
    assert outcomes[f"{lower}--same"] == ("skipped", "already migrated")
    assert outcomes[ID_B] == ("conflict", "slug already used")
    assert sorted(p.name for p in root.iterdir()) == [ID_B, f"{lower}--same"]


def test_migrate_boolean_looking_slug(tmp_path):
    root = tmp_path / "posts"
    _doc(root, ID_A, "slug: true")

    ctx = migrate_collection(root, _ctx(), config=_config())

    assert ctx.records[0].outcome == "migrated"
    assert (root / f"{ID_A}--true").is_dir()


def test_migrate_write_failure_rolls_back(tmp_path, monkeypatch):
    """Test that a failed write leaves the old folder and the run goes on."""
    root = tmp_path / "posts"
    folder = _doc(root, ID_A, "slug: broken")
    (folder / "cover.png").write_bytes(b"cover")
    original = (folder / "index.md").read_bytes()
    _doc(root, ID_B, "slug: fine")

    real_write = fs_storage.write_document

    def failing_write(path, document, codec):
        if path.parent.name.endswith("--broken"):
            raise OSError("disk full")
        real_write(path, document, codec)

    monkeypatch.setattr(fs_storage, "write_document", failing_write)

    ctx = migrate_collection(root, _ctx(), config=_config())

    assert ctx.counters.errors == 1
    assert ctx.counters.completed == 1
    assert ctx.records[0].reason == "disk full"
    assert not (root / f"{ID_A}--broken").exists()
    assert (folder / "index.md").read_bytes() == original
    assert (folder / "cover.png").read_bytes() == b"cover"
    assert (root / f"{ID_B}--fine" / "index.md").is_file()
    assert ctx.exit_code == 1
