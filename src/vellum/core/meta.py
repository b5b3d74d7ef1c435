from typing import MutableMapping, Iterator, Iterable, Any


class Header(MutableMapping[str, Any]):
    """
    Ordered key/value preamble of a document, e.g.,
    - "title": "My Post"
    - "draft": False
    - "aliases": ["/blog/my-post/"]
    Values are str, bool or a flat list of str. Key order is kept for
    round-trip fidelity only; nothing depends on it.
    """

    def __init__(self, initial: dict | None = None):
        self._d = dict(initial or {})

    # MutableMapping interface
    def __getitem__(self, k: str) -> Any:
        return self._d[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self._d[k] = v

    def __delitem__(self, k: str) -> None:
        del self._d[k]

    def __iter__(self) -> Iterator[str]:
        return iter(self._d)

    def __len__(self) -> int:
        return len(self._d)

    def __repr__(self) -> str:
        return f"Header({self._d!r})"

    # Convenience
    def get_str(self, key: str, default: str | None = None) -> str | None:
        v = self._d.get(key, default)
        return v if isinstance(v, str) else default

    def get_text(self, key: str) -> str | None:
        """Scalar value as text: strings as-is, booleans as `true`/`false`."""
        v = self._d.get(key)
        if isinstance(v, bool):
            return "true" if v else "false"
        return v if isinstance(v, str) else None

    def get_list(self, key: str) -> list[str]:
        """Return a list value; a non-blank scalar string becomes a one-item list."""
        v = self._d.get(key)
        if isinstance(v, list):
            return list(v)
        if isinstance(v, str) and v.strip():
            return [v]
        return []

    def first_present(self, keys: Iterable[str]) -> Any:
        """Value of the first key in `keys` that is set and non-empty, else None."""
        for key in keys:
            v = self._d.get(key)
            if v is None or v == "" or v == []:
                continue
            if isinstance(v, str) and not v.strip():
                continue
            return v
        return None
