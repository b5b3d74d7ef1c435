"""Point image references at relocated assets."""

import re

from .relocate import RelocatedAsset
from .scanner import IMAGE_PATTERN, unwrap_path


def rewrite_references(body: str, relocated: list[RelocatedAsset]) -> str:
    """
    Replace the path of every image reference that was relocated.

    Only the path token changes: alt text, titles and surrounding text are
    kept byte for byte. References without a relocation (missing files,
    URLs) are left as written.
    """
    mapping = {asset.original_path: asset.new_path for asset in relocated}
    if not mapping:
        return body

    def replace(match: re.Match[str]) -> str:
        raw = match.group('path')
        new_path = mapping.get(unwrap_path(raw))
        if new_path is None:
            return match.group(0)

        if raw.startswith('<') or ' ' in new_path:
            new_path = f"<{new_path}>"

        full = match.group(0)
        start = match.start('path') - match.start()
        end = match.end('path') - match.start()
        return full[:start] + new_path + full[end:]

    return IMAGE_PATTERN.sub(replace, body)
