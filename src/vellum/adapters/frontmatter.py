import re
from typing import Any
from ..core.meta import Header
from ..core.ports import FrontmatterCodec

_FM = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

# Written double-quoted whatever their content.
QUOTED_KEYS = frozenset({"title", "description", "author", "seoTitle", "seoDescription"})

# Plain values matching this would be misread by this codec or by a YAML reader.
_AMBIGUOUS = re.compile(r"""^[\s#\-\[\]{}"'*&!|>%@`,?]|:\s|:$|\s#|\s$""")
_ESCAPE = re.compile(r'\\(["\\])')


def unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        inner = value[1:-1]
        if value[0] == '"':
            return _ESCAPE.sub(r"\1", inner)
        return inner.replace("''", "'")
    return value


def _parse_value(value: str) -> Any:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return unquote(value)
    if value.startswith("[") and value.endswith("]"):
        items = (item.strip() for item in value[1:-1].split(","))
        return [unquote(item) for item in items if item]
    if value in ("true", "false"):
        return value == "true"
    return value


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class RestrictedFrontmatter(FrontmatterCodec):
    """
    Minimal YAML-like header: `key: value`, `key: [a, b]` and block lists.

    No nesting, no multi-line scalars, no type inference beyond unquoted
    `true`/`false`. Anything that does not look like a header is body.
    """

    def decode(self, text: str) -> tuple[Header, str]:
        m = _FM.match(text)
        if not m:
            return Header(), text
        header = self._parse_block(m.group(1) or "")
        body = text[m.end() :]
        # the encoder writes exactly one blank line after the closing delimiter
        if body.startswith("\r\n"):
            body = body[2:]
        elif body.startswith("\n"):
            body = body[1:]
        return header, body

    def header_block(self, text: str) -> str | None:
        """Raw text between the delimiters, or None when there is no header."""
        span = self.header_span(text)
        return text[span[0] : span[1]] if span else None

    def header_span(self, text: str) -> tuple[int, int] | None:
        """Offsets of the raw header text in `text`, or None when there is no header."""
        m = _FM.match(text)
        if not m:
            return None
        if m.group(1) is None:
            # empty header: the block sits right after the opening delimiter line
            start = text.index("\n") + 1
            return start, start
        return m.start(1), m.end(1)

    def _parse_block(self, block: str) -> Header:
        header = Header()
        list_key: str | None = None
        for raw in block.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if line == "-" or line.startswith("- "):
                if list_key is None:
                    continue
                item = line[1:].strip()
                if not item:
                    continue  # bare "-": blank entry
                if not isinstance(header[list_key], list):
                    header[list_key] = []
                header[list_key].append(unquote(item))
                continue

            if raw[:1] in (" ", "\t"):
                continue  # nested mapping content is not supported
            list_key = None
            idx = line.find(":")
            if idx <= 0:
                continue
            key = line[:idx].strip()
            value = line[idx + 1 :].strip()
            if not value:
                # may be followed by "- item" lines
                header[key] = ""
                list_key = key
                continue
            header[key] = _parse_value(value)
        return header

    def encode(self, header: Header, body: str) -> str:
        lines = ["---"]
        for key, value in header.items():
            lines.extend(self._encode_item(key, value))
        lines.append("---")
        return "\n".join(lines) + "\n\n" + body

    def _encode_item(self, key: str, value: Any) -> list[str]:
        if isinstance(value, (list, tuple)):
            if not value:
                return [f"{key}: []"]
            return [f"{key}:"] + [f"  - {_quote(self._scalar(key, item))}" for item in value]
        if isinstance(value, bool):
            return [f"{key}: {'true' if value else 'false'}"]
        if value is None:
            return [f'{key}: ""']
        if isinstance(value, (int, float)):
            return [f"{key}: {value}"]
        text = self._scalar(key, value)
        if text == "":
            return [f'{key}: ""']
        if key in QUOTED_KEYS or text in ("true", "false") or _AMBIGUOUS.search(text):
            return [f"{key}: {_quote(text)}"]
        return [f"{key}: {text}"]

    @staticmethod
    def _scalar(key: str, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError(f"Unsupported header value for '{key}': {type(value).__name__}")
        if "\n" in value or "\r" in value:
            raise ValueError(f"Multi-line header values are not supported: '{key}'")
        return value
