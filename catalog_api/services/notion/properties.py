"""
Schema-tolerant readers for Notion page properties.

The databases are edited by hand, so a property may be missing, renamed or
hold a different type than expected. Raw property dicts are parsed into a
small tagged union and the extractors pick the first non-empty value in a
fixed priority order, returning an empty value instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union


# =============================================================================
# Property Variants
# =============================================================================


@dataclass(frozen=True, slots=True)
class Title:
    texts: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RichText:
    texts: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Select:
    name: str = ""


@dataclass(frozen=True, slots=True)
class Formula:
    string: str = ""
    number: float | None = None


@dataclass(frozen=True, slots=True)
class Number:
    value: float | None = None


@dataclass(frozen=True, slots=True)
class Url:
    url: str = ""


@dataclass(frozen=True, slots=True)
class FileRef:
    hosted_url: str = ""
    external_url: str = ""


@dataclass(frozen=True, slots=True)
class Files:
    files: tuple[FileRef, ...] = ()


@dataclass(frozen=True, slots=True)
class Relation:
    ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Unknown:
    type: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)


PropertyValue = Union[Title, RichText, Select, Formula, Number, Url, Files, Relation, Unknown]


# =============================================================================
# Parsing
# =============================================================================


def _plain_texts(fragments: Any) -> tuple[str, ...]:
    if not isinstance(fragments, list):
        return ()
    return tuple(
        fragment.get("plain_text") or ""
        for fragment in fragments
        if isinstance(fragment, dict)
    )


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _parse_files(raw: Any) -> Files:
    if not isinstance(raw, list):
        return Files()
    refs = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        hosted = (item.get("file") or {}).get("url") or ""
        external = (item.get("external") or {}).get("url") or ""
        refs.append(FileRef(hosted_url=hosted, external_url=external))
    return Files(tuple(refs))


def _parse_relation(raw: Any) -> Relation:
    if not isinstance(raw, list):
        return Relation()
    return Relation(
        tuple(item["id"] for item in raw if isinstance(item, dict) and item.get("id"))
    )


def _parse_select(raw: Any) -> Select:
    if not isinstance(raw, dict):
        return Select()
    return Select(raw.get("name") or "")


def _parse_formula(raw: Any) -> Formula:
    if not isinstance(raw, dict):
        return Formula()
    string = raw.get("string")
    return Formula(
        string=string if isinstance(string, str) else "",
        number=_as_number(raw.get("number")),
    )


_PARSERS = {
    "title": lambda raw: Title(_plain_texts(raw)),
    "rich_text": lambda raw: RichText(_plain_texts(raw)),
    "select": _parse_select,
    "formula": _parse_formula,
    "number": lambda raw: Number(_as_number(raw)),
    "url": lambda raw: Url(raw if isinstance(raw, str) else ""),
    "files": _parse_files,
    "relation": _parse_relation,
}

# Order used when a property carries no "type" discriminator.
_SHAPE_ORDER = ("title", "rich_text", "select", "formula", "url", "files", "relation", "number")


def parse_property(raw: Any) -> PropertyValue:
    """
    Parse one raw Notion property into its variant.

    Uses the ``type`` discriminator when present. Hand-built or partial
    payloads without ``type`` are recognised by the first known key they
    carry.
    """
    if not isinstance(raw, dict):
        return Unknown()

    prop_type = raw.get("type")
    if prop_type in _PARSERS:
        return _PARSERS[prop_type](raw.get(prop_type))

    if prop_type is None:
        for key in _SHAPE_ORDER:
            if raw.get(key):
                return _PARSERS[key](raw[key])

    return Unknown(type=prop_type or "", raw=raw)


def parse_properties(properties: Any) -> dict[str, PropertyValue]:
    """Parse a page's ``properties`` mapping. Non-dict input yields ``{}``."""
    if not isinstance(properties, dict):
        return {}
    return {name: parse_property(raw) for name, raw in properties.items()}


# =============================================================================
# Extractors
# =============================================================================


def text_value(prop: PropertyValue | None) -> str:
    """Title, rich text, select name, formula string or url. Else ``""``."""
    if isinstance(prop, (Title, RichText)):
        return prop.texts[0] if prop.texts else ""
    if isinstance(prop, Select):
        return prop.name
    if isinstance(prop, Formula):
        return prop.string
    if isinstance(prop, Url):
        return prop.url
    return ""


def image_value(prop: PropertyValue | None) -> str:
    """Direct url, else the first file's hosted url, else its external url."""
    if isinstance(prop, Url):
        return prop.url
    if isinstance(prop, Files) and prop.files:
        first = prop.files[0]
        return first.hosted_url or first.external_url
    return ""


def number_value(prop: PropertyValue | None) -> float:
    """Formula or number result, ``0`` when absent."""
    if isinstance(prop, Formula) and prop.number is not None:
        return prop.number
    if isinstance(prop, Number) and prop.value is not None:
        return prop.value
    return 0.0


def first_text(properties: Mapping[str, PropertyValue], names: Iterable[str], default: str = "") -> str:
    """First non-empty text among the candidate property names."""
    for name in names:
        value = text_value(properties.get(name))
        if value:
            return value
    return default


def first_image(properties: Mapping[str, PropertyValue], names: Iterable[str]) -> str:
    """First non-empty image url among the candidate property names."""
    for name in names:
        value = image_value(properties.get(name))
        if value:
            return value
    return ""


def relation_ids(properties: Mapping[str, PropertyValue], names: Iterable[str]) -> list[str]:
    """Related page ids from the relation properties with the given names."""
    ids: list[str] = []
    for name in names:
        prop = properties.get(name)
        if isinstance(prop, Relation):
            ids.extend(prop.ids)
    return ids


def all_relation_ids(properties: Mapping[str, PropertyValue]) -> list[str]:
    """Related page ids from every relation property, whatever its name."""
    ids: list[str] = []
    for prop in properties.values():
        if isinstance(prop, Relation):
            ids.extend(prop.ids)
    return ids
