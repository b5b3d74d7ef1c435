"""Per-run slug reservation table."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Accepted:
    slug: str
    owner: str


@dataclass(frozen=True)
class Conflict:
    slug: str
    existing_owner: str


class SlugRegistry:
    """
    Slugs claimed so far in one run, mapped to the document that claimed them.

    A second reservation of the same slug is refused; the caller decides what
    to do with the refused document. Slugs are never renamed here.
    """

    def __init__(self) -> None:
        self._owners: dict[str, str] = {}

    def reserve(self, slug: str, owner: str) -> Accepted | Conflict:
        existing = self._owners.get(slug)
        if existing is not None:
            return Conflict(slug=slug, existing_owner=existing)
        self._owners[slug] = owner
        return Accepted(slug=slug, owner=owner)

    def __len__(self) -> int:
        return len(self._owners)
