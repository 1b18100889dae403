"""Whitelist policy.

A whitelist maps lower-cased tag names to what each tag may keep:

- ``STRIP_ALL_ATTRIBUTES``: the tag survives, every attribute is dropped.
- ``AllowedAttributes(names)``: the tag survives with only these attributes.

Tags missing from the mapping are disallowed. ``Whitelist(None)`` is the
disabled whitelist: every tag and every attribute passes through.

Attribute names are compared exactly as written in the markup, so register
them in the case they are expected to appear (normally lower-case).
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field

from .constants import BOOLEAN_ATTRIBUTES, SELF_CLOSING_TAGS


class StripAllAttributes:
    """Marker for a whitelisted tag that keeps none of its attributes."""

    __slots__ = ()

    def __repr__(self):
        return "STRIP_ALL_ATTRIBUTES"


STRIP_ALL_ATTRIBUTES = StripAllAttributes()


@dataclass(frozen=True, slots=True)
class AllowedAttributes:
    """Explicit set of attribute names a whitelisted tag may keep."""

    names: Collection[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if isinstance(self.names, str):
            raise TypeError("attribute names must be a collection of strings, not a string")
        if not isinstance(self.names, frozenset):
            object.__setattr__(self, "names", frozenset(self.names))

    def __contains__(self, name: object) -> bool:
        return name in self.names


AttributeRule = StripAllAttributes | AllowedAttributes


def _normalize_rule(tag: str, rule: object) -> AttributeRule:
    if rule is None or isinstance(rule, StripAllAttributes):
        return STRIP_ALL_ATTRIBUTES
    if isinstance(rule, AllowedAttributes):
        return rule
    if isinstance(rule, str) or not isinstance(rule, Collection):
        raise TypeError(f"whitelist entry for {tag!r} must be None or a collection of attribute names")
    return AllowedAttributes(rule)


@dataclass(frozen=True, slots=True)
class Whitelist:
    """Read-only tag/attribute whitelist, safe to share between threads.

    ``tags`` accepts plain data, e.g. ``{"p": None, "img": ["src", "alt"]}``;
    it is normalized once here so lookups during filtering are plain dict and
    frozenset membership checks.
    """

    tags: Mapping[str, AttributeRule] | None = None

    def __post_init__(self) -> None:
        if self.tags is None:
            return
        if not isinstance(self.tags, Mapping):
            raise TypeError("whitelist must be a mapping of tag name to allowed attributes")
        normalized: dict[str, AttributeRule] = {}
        for tag, rule in self.tags.items():
            if not isinstance(tag, str):
                raise TypeError(f"whitelist tag names must be strings, got {tag!r}")
            normalized[tag.lower()] = _normalize_rule(tag, rule)
        object.__setattr__(self, "tags", normalized)

    @property
    def enabled(self) -> bool:
        return self.tags is not None

    def is_tag_allowed(self, name: str) -> bool:
        if self.tags is None:
            return True
        # Presence of the key is what matters, STRIP_ALL_ATTRIBUTES included.
        return name.lower() in self.tags

    def allowed_attributes_for(self, name: str) -> frozenset[str] | None:
        """Return the attribute names ``name`` may keep.

        ``None`` means "strip every attribute": the tag is either absent or
        registered with ``STRIP_ALL_ATTRIBUTES``. It never means "keep all".
        The disabled whitelist has no per-tag rules and also returns ``None``;
        callers check ``enabled`` first.
        """
        if self.tags is None:
            return None
        rule = self.tags.get(name.lower())
        if rule is None or isinstance(rule, StripAllAttributes):
            return None
        return rule.names


DISABLED = Whitelist(None)


def as_whitelist(value) -> Whitelist:
    """Coerce ``None``, a plain mapping or a ``Whitelist`` into a ``Whitelist``."""
    if value is None:
        return DISABLED
    if isinstance(value, Whitelist):
        return value
    return Whitelist(value)


def is_self_closing(name: str, table=SELF_CLOSING_TAGS) -> bool:
    return name.lower() in table


def is_boolean_attribute(name: str, table=BOOLEAN_ATTRIBUTES) -> bool:
    return name in table


DEFAULT_WHITELIST: Whitelist = Whitelist(
    {
        # Structure
        "p": None,
        "div": None,
        "span": None,
        # Headings
        "h1": None,
        "h2": None,
        "h3": None,
        "h4": None,
        "h5": None,
        "h6": None,
        # Lists
        "ul": None,
        "ol": None,
        "li": None,
        # Text formatting
        "b": None,
        "strong": None,
        "i": None,
        "em": None,
        "u": None,
        "s": None,
        "sub": None,
        "sup": None,
        "small": None,
        # Quotes/code
        "blockquote": None,
        "code": None,
        "pre": None,
        # Line breaks
        "br": None,
        "hr": None,
        # Links and images
        "a": ["href", "title"],
        "img": ["src", "alt", "title", "width", "height"],
    }
)
