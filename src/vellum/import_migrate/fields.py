"""Legacy header -> canonical header mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Iterable, Mapping

from ..core.meta import Header
from ..core.utils import slug_for

# Candidate legacy keys per canonical key, tried in order.
DEFAULT_FIELD_MAPPINGS: dict[str, tuple[str, ...]] = {
    "title": ("page-title", "seoTitle", "title"),
    "description": ("descrizione", "description", "excerpt", "summary"),
    "date": ("date",),
    "tags": ("tags",),
    "category": ("category",),
    "image": ("image",),
    "author": ("author",),
    "draft": ("draft",),
    "featured": ("featured",),
    "type": ("type",),
}

DEFAULT_ALIAS_PATTERN = "/blog/{slug}/"


@dataclass
class FieldMapping:
    """Ordered candidate keys per canonical field; first present value wins."""

    candidates: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_FIELD_MAPPINGS)
    )

    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> FieldMapping:
        """Defaults overlaid with `data`; a single string is one candidate."""
        candidates = dict(DEFAULT_FIELD_MAPPINGS)
        for canonical, keys in data.items():
            if isinstance(keys, str):
                candidates[canonical] = (keys,)
            elif isinstance(keys, Iterable):
                candidates[canonical] = tuple(str(k) for k in keys)
            else:
                raise ValueError(f"Invalid field mapping for '{canonical}': {keys!r}")
        return cls(candidates=candidates)

    def keys_for(self, canonical: str) -> tuple[str, ...]:
        return self.candidates.get(canonical, (canonical,))

    def lookup(self, legacy: Header, canonical: str) -> Any:
        return legacy.first_present(self.keys_for(canonical))


def render_alias(pattern: str, slug: str, identifier: str = "") -> str:
    """Fill `{slug}` / `{id}` placeholders; other braces are left alone."""
    return pattern.replace("{slug}", slug).replace("{id}", identifier)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ", ".join(value)
    return str(value)


def _as_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [v for v in value if v.strip()]
    if isinstance(value, str) and value.strip():
        return [value]
    return []


def _as_flag(value: Any) -> bool | str:
    if isinstance(value, bool):
        return value
    text = _as_text(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("", "false", "no", "off", "0"):
        return False
    return _as_text(value)


def convert_header(
    legacy: Header,
    source_name: str,
    identifier: str,
    mapping: FieldMapping,
    *,
    default_author: str,
    now: str,
    add_category_to_tags: bool = True,
    create_aliases: bool = True,
    alias_pattern: str = DEFAULT_ALIAS_PATTERN,
) -> Header:
    """
    Build the canonical header for an imported document.

    Args:
        legacy: Header decoded from the legacy file
        source_name: Legacy file name; its stem is the last-resort title
        identifier: Freshly generated identifier (legacy ids are ignored)
        mapping: Legacy field candidates
        default_author: Author when no legacy author field is set
        now: Date used when no legacy date field is set

    Returns:
        Header with keys in canonical order
    """
    title = _as_text(mapping.lookup(legacy, "title")).strip()
    if not title:
        title = PurePosixPath(source_name).stem
    description = _as_text(mapping.lookup(legacy, "description"))
    slug = slug_for(title, identifier)

    tags = _as_list(mapping.lookup(legacy, "tags"))
    if add_category_to_tags:
        for category in _as_list(mapping.lookup(legacy, "category")):
            if category not in tags:
                tags.append(category)

    aliases: list[str] = []
    if create_aliases:
        aliases.append(render_alias(alias_pattern, slug, identifier))

    header = Header()
    header["id"] = identifier
    header["title"] = title
    header["slug"] = slug
    header["description"] = description
    header["date"] = _as_text(mapping.lookup(legacy, "date")) or now
    header["author"] = _as_text(mapping.lookup(legacy, "author")) or default_author
    header["tags"] = tags
    header["draft"] = _as_flag(mapping.lookup(legacy, "draft"))
    header["aliases"] = aliases
    header["seoTitle"] = _as_text(legacy.first_present(("seoTitle",))) or title
    header["seoDescription"] = _as_text(legacy.first_present(("seoDescription",))) or description

    image = _as_text(mapping.lookup(legacy, "image"))
    if image:
        # only the file name; the image is expected next to the document
        header["image"] = PurePosixPath(image.replace("\\", "/")).name

    for optional in ("featured", "type"):
        value = mapping.lookup(legacy, optional)
        if value is not None:
            header[optional] = value if isinstance(value, (bool, list)) else _as_text(value)

    return header
