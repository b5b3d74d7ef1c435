"""Alias repair: drop blank alias entries left behind by earlier tools."""

import re
from pathlib import Path

from ..adapters.frontmatter import RestrictedFrontmatter, unquote
from ..adapters.fs_storage import DocumentStore, write_text_atomic
from ..config import VellumConfig
from .models import PreconditionError, RunContext

_ALIASES_KEY = re.compile(r"^aliases:[ \t]*(?:#.*)?$")


def clean_alias_block(block: str) -> str:
    """
    Remove blank items from the top-level `aliases:` block list of a raw header.

    Bare `-` lines and items that are empty once unquoted go; every other line
    is returned byte for byte. A list left with no items becomes
    `aliases: []`.
    """
    out: list[str] = []
    key_pos: int | None = None  # position in `out` of the open aliases key
    kept = dropped = total_dropped = 0

    def close() -> None:
        if key_pos is not None and dropped and not kept:
            line = out[key_pos]
            out[key_pos] = "aliases: []" + line[len(line.rstrip("\r\n")) :]

    for line in block.splitlines(keepends=True):
        content = line.rstrip("\r\n")
        stripped = content.strip()
        if key_pos is not None:
            if stripped == "-" or stripped.startswith("- "):
                if unquote(stripped[1:].strip()).strip():
                    kept += 1
                    out.append(line)
                else:
                    dropped += 1
                    total_dropped += 1
                continue
            if not stripped or stripped.startswith("#"):
                out.append(line)
                continue
            close()
            key_pos = None
        if _ALIASES_KEY.match(content):
            key_pos = len(out)
            kept = dropped = 0
        out.append(line)
    close()

    if not total_dropped:
        return block
    cleaned = "".join(out)
    if not block.endswith("\n") and cleaned.endswith("\n"):
        cleaned = cleaned[:-2] if cleaned.endswith("\r\n") else cleaned[:-1]
    return cleaned


def repair_aliases(
    root: Path,
    ctx: RunContext,
    config: VellumConfig | None = None,
) -> RunContext:
    """
    Remove empty alias entries from every document folder under `root`.

    Only the lines of the `aliases:` block are edited; the rest of the file,
    comments and formatting included, is left untouched. Files are rewritten
    only when something was removed. Folders without an index file are
    ignored.
    """
    if config is None:
        config = VellumConfig()
    codec = RestrictedFrontmatter()

    r = ctx.reporter
    r.step("INIT", f"Repairing aliases in {root}")
    if not root.is_dir():
        raise PreconditionError(f"Content directory not found: {root}")

    store = DocumentStore(root, codec, config.index_name)
    for entry in store.entries():
        if not entry.is_dir() or not store.has_index(entry.name):
            continue
        name = entry.name
        try:
            index_path = entry / config.index_name
            text = index_path.read_bytes().decode("utf-8")
            span = codec.header_span(text)
            if span is None:
                ctx.record(name, "skipped", "no header")
                r.verbose(f"No header in {name}")
                continue

            start, end = span
            block = text[start:end]
            cleaned = clean_alias_block(block)
            if cleaned == block:
                ctx.record(name, "skipped", "nothing to repair")
                r.verbose(f"No blank aliases in {name}")
                continue

            if not ctx.dry_run:
                write_text_atomic(index_path, text[:start] + cleaned + text[end:])
        except Exception as e:
            r.error(f"Error processing {name}: {e}")
            ctx.record(name, "error", str(e))
            continue

        ctx.record(name, "repaired")
        r.success(f"Fixed aliases in {name}")

    return ctx
