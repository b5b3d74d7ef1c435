"""CLI for vellum - legacy content migration and import."""

import argparse
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.utils import slugify
from .import_migrate.aliases import repair_aliases
from .import_migrate.legacy import import_legacy
from .import_migrate.models import RunContext
from .import_migrate.report import format_closing, format_summary
from .import_migrate.restructure import migrate_collection
from .runtime import build_runtime


def _banner(args: argparse.Namespace, rt: Any, title: str, dry_run: bool) -> None:
    if args.quiet:
        return
    print(title)
    if rt.config.path is not None:
        print(f"Loaded configuration from: {rt.config.path}")
    print(f"Mode: {'DRY RUN' if dry_run else 'LIVE'}")


def _finish(args: argparse.Namespace, ctx: RunContext, completed_label: str, unit: str, command: str) -> int:
    ctx.reporter.summary(format_summary(ctx, completed_label, unit))
    if not args.quiet and not ctx.failed:
        print()
        for line in format_closing(ctx, command):
            print(line)
    return ctx.exit_code


def cmd_id(args: argparse.Namespace, rt: Any) -> int:
    """Print a new identifier."""
    print(rt.idgen.new_id())
    return 0


def cmd_slug(args: argparse.Namespace, rt: Any) -> int:
    """Print the slug for a title."""
    slug = slugify(args.title)
    if not slug:
        print(f"Title has no usable characters: {args.title!r}", file=sys.stderr)
        return 1
    print(slug)
    return 0


def cmd_migrate(args: argparse.Namespace, rt: Any) -> int:
    """Rename <ULID> folders to <ULID>--<slug>."""
    config = rt.config
    root = Path(args.content_dir) if args.content_dir else config.content_dir
    if args.no_backup:
        config.backup.enabled = False
    if args.alias_pattern:
        config.content.alias_pattern = args.alias_pattern
    dry_run = args.dry_run or config.dry_run

    _banner(args, rt, "ULID--slug migration", dry_run)
    ctx = rt.new_run(dry_run)
    migrate_collection(root.resolve(), ctx, config=config, codec=rt.codec)
    return _finish(args, ctx, "Migrated", "folders", "migration")


def cmd_import(args: argparse.Namespace, rt: Any) -> int:
    """Import legacy Markdown files into the collection."""
    config = rt.config
    source = Path(args.source) if args.source else config.source
    target = Path(args.target) if args.target else config.target
    if source is None or target is None:
        print(
            "Error: Either --config or both --source and --target must be provided",
            file=sys.stderr,
        )
        return 1

    if args.author:
        config.author = args.author
    if args.image_path:
        config.image_path = args.image_path
    if args.glob:
        config.glob = args.glob
    if args.no_backup:
        config.backup.enabled = False
    dry_run = args.dry_run or config.dry_run

    _banner(args, rt, "Legacy content importer", dry_run)
    ctx = rt.new_run(dry_run)
    import_legacy(
        source.resolve(),
        target.resolve(),
        ctx,
        config=config,
        idgen=rt.idgen,
        codec=rt.codec,
    )
    return _finish(args, ctx, "Imported", "files", "import")


def cmd_fix_aliases(args: argparse.Namespace, rt: Any) -> int:
    """Remove blank alias entries."""
    config = rt.config
    root = Path(args.content_dir) if args.content_dir else config.content_dir
    dry_run = args.dry_run or config.dry_run

    _banner(args, rt, "Alias repair", dry_run)
    ctx = rt.new_run(dry_run)
    repair_aliases(root.resolve(), ctx, config=config)
    return _finish(args, ctx, "Repaired", "documents", "alias repair")


def _version() -> str:
    return (
        f"vellum {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vellum", description="Migrate and import Markdown content collections"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file, .toml or .yml (default: cwd/vellum.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only print errors and the summary"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print per-asset and per-field details"
    )
    parser.add_argument("--version", action="version", version=_version())

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # id command
    subparsers.add_parser("id", help="Print a new identifier")

    # slug command
    parser_slug = subparsers.add_parser("slug", help="Print the slug for a title")
    parser_slug.add_argument("title", help="Title to slugify")

    # migrate command
    parser_migrate = subparsers.add_parser(
        "migrate", help="Rename <ULID> folders to <ULID>--<slug>"
    )
    parser_migrate.add_argument(
        "content_dir", nargs="?", default=None,
        help="Collection directory (default: content_dir from config)"
    )
    parser_migrate.add_argument(
        "-c", "--config", dest="sub_config", type=Path, default=None,
        help="Path to config file"
    )
    parser_migrate.add_argument(
        "-d", "--dry-run", action="store_true",
        help="Show what would change without writing"
    )
    parser_migrate.add_argument(
        "--no-backup", action="store_true",
        help="Do not snapshot the collection first"
    )
    parser_migrate.add_argument(
        "--alias-pattern", default=None,
        help="Alias recorded for the old URL (default: /blog/{slug}/)"
    )

    # import command
    parser_import = subparsers.add_parser(
        "import", help="Import legacy Markdown files"
    )
    parser_import.add_argument(
        "-s", "--source", default=None,
        help="Directory containing legacy Markdown files"
    )
    parser_import.add_argument(
        "-t", "--target", default=None,
        help="Collection directory, e.g. src/content/posts"
    )
    parser_import.add_argument(
        "-c", "--config", dest="sub_config", type=Path, default=None,
        help="Path to config file"
    )
    parser_import.add_argument(
        "-a", "--author", default=None,
        help="Author for documents without one (default: Author)"
    )
    parser_import.add_argument(
        "-i", "--image-path", default=None,
        help="Asset path prefix searched under the source (default: /img/)"
    )
    parser_import.add_argument(
        "--glob", default=None,
        help="Source file pattern (default: *.md)"
    )
    parser_import.add_argument(
        "-d", "--dry-run", action="store_true",
        help="Show what would be imported without writing"
    )
    parser_import.add_argument(
        "--no-backup", action="store_true",
        help="Do not snapshot the target first"
    )

    # fix-aliases command
    parser_fix = subparsers.add_parser(
        "fix-aliases", help="Remove blank alias entries"
    )
    parser_fix.add_argument(
        "content_dir", nargs="?", default=None,
        help="Collection directory (default: content_dir from config)"
    )
    parser_fix.add_argument(
        "-c", "--config", dest="sub_config", type=Path, default=None,
        help="Path to config file"
    )
    parser_fix.add_argument(
        "-d", "--dry-run", action="store_true",
        help="Show what would change without writing"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_path = getattr(args, "sub_config", None) or args.config
    try:
        rt = build_runtime(config_path=config_path, verbose=args.verbose, quiet=args.quiet)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Dispatch to command handlers
    handlers = {
        "id": cmd_id,
        "slug": cmd_slug,
        "migrate": cmd_migrate,
        "import": cmd_import,
        "fix-aliases": cmd_fix_aliases,
    }
    handler = handlers.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
