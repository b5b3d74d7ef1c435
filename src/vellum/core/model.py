from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

from .meta import Header

# Closed set of header value shapes; anything else is rejected by the codec.
HeaderValue = Union[str, bool, list[str]]

Identifier = str


@dataclass(frozen=True)
class ContentIdentity:
    identifier: Identifier  # generated once, never changed afterwards
    slug: str  # derived from the title, unique within a collection

    @property
    def dirname(self) -> str:
        return f"{self.identifier}--{self.slug}"


@dataclass
class Document:
    header: Header = field(default_factory=Header)
    body: str = ""

    @property
    def aliases(self) -> list[str]:
        return self.header.get_list("aliases")

    def add_alias(self, alias: str) -> bool:
        """
        Append an alias, pruning blank entries on the way.

        Existing aliases are never removed; an alias that is already
        recorded is not appended a second time. Returns True when the
        alias list changed.
        """
        current = self.aliases
        kept = [a for a in current if a.strip()]
        changed = kept != current or "aliases" not in self.header
        if alias and alias not in kept:
            kept.append(alias)
            changed = True
        if changed:
            self.header["aliases"] = kept
        return changed
