"""
Text normalization helpers for slugs and Notion identifiers.
"""

import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")


def slugify(value: str) -> str:
    """
    Convert a display name into a URL-safe slug.

    Accents are stripped, text is lowercased and runs of whitespace
    become a single hyphen:
        >>> slugify("  Café Ñandú  Sport ")
        'cafe-nandu-sport'
    """
    decomposed = unicodedata.normalize("NFD", value)
    without_marks = _COMBINING_MARKS.sub("", decomposed)
    return _WHITESPACE.sub("-", without_marks.lower().strip())


def normalize_notion_id(notion_id: str) -> str:
    """Strip hyphens and lowercase a Notion page/database id."""
    return notion_id.replace("-", "").lower()


def to_uuid(notion_id: str) -> str:
    """
    Convert a 32-hex Notion id to the hyphenated UUID form.

    Raises:
        ValueError: If the id does not hold exactly 32 characters once
            hyphens are removed.
    """
    raw = notion_id.replace("-", "")
    if len(raw) != 32:
        raise ValueError(f'Database ID invalido: "{notion_id}"')
    return f"{raw[:8]}-{raw[8:12]}-{raw[12:16]}-{raw[16:20]}-{raw[20:]}"
