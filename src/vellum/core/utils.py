"""Utility functions for vellum."""

import re
import unicodedata


def slugify(text: str) -> str:
    """
    Convert text to a URL-safe slug.

    - Lowercase
    - Unicode normalize (NFKD), drop combining marks
    - Remove everything except letters, digits, whitespace and hyphens
    - Convert whitespace to single `-`
    - Collapse multiple `-` to single, strip leading/trailing `-`

    Examples:
        >>> slugify("My Post")
        'my-post'
        >>> slugify("Caffè – ricette")
        'caffe-ricette'
    """
    # Lowercase
    text = text.lower()

    # Replace various dash-like characters with regular hyphen
    # En dash (–), em dash (—), minus sign (−)
    text = text.replace('–', '-').replace('—', '-').replace('−', '-')

    # Unicode normalize (NFKD) and drop combining marks
    text = unicodedata.normalize('NFKD', text)
    text = ''.join(c for c in text if not unicodedata.combining(c))

    # Keep letters, digits, whitespace and hyphens (\w also matches "_")
    text = re.sub(r'[^\w\s-]|_', '', text)

    # Convert whitespace to single `-`
    text = re.sub(r'\s+', '-', text)

    # Collapse multiple `-` to single
    text = re.sub(r'-+', '-', text)

    # Strip leading/trailing `-`
    text = text.strip('-')

    return text


def slug_for(title: str, identifier: str) -> str:
    """Slug for `title`, falling back to the lower-cased identifier when empty."""
    return slugify(title) or identifier.lower()


def is_safe_dirname_part(value: str) -> bool:
    """True when `value` can be embedded in a single directory name."""
    if not value or value in (".", ".."):
        return False
    return "/" not in value and "\\" not in value and "\x00" not in value
