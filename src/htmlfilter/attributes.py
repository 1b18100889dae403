"""Attribute blob parsing and serialization."""

from __future__ import annotations

import re

from .constants import BOOLEAN_ATTRIBUTES

# Groups: 1 leading whitespace, 2 name, 3 double-quoted, 4 single-quoted, 5 unquoted.
ATTRIBUTE_PATTERN = re.compile(
    r"""(\s*)([\w\-:]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^>\s]+)))?""",
    re.ASCII,
)


def parse_attributes(raw: str, boolean_attributes=BOOLEAN_ATTRIBUTES) -> dict[str, str]:
    """Parse a raw attribute blob into an ordered ``{name: value}`` dict.

    Names keep their case. A bare name maps to ``""``. A name listed in
    ``boolean_attributes`` always maps to itself, whatever value was written.
    When a name repeats, the last value wins but the entry keeps the position
    of the first occurrence.

    Parsing stops at the first piece that does not look like an attribute;
    the tokenizer never hands over such blobs, other callers get a prefix.
    """
    attrs: dict[str, str] = {}
    if not raw:
        return attrs

    pos = 0
    length = len(raw)
    while pos < length:
        match = ATTRIBUTE_PATTERN.match(raw, pos)
        if match is None:
            break
        # Consecutive attributes must be separated by whitespace.
        if pos and not match.group(1):
            break
        name = match.group(2)
        if name in boolean_attributes:
            attrs[name] = name
        else:
            value = match.group(3)
            if value is None:
                value = match.group(4)
            if value is None:
                value = match.group(5)
            attrs[name] = value or ""
        pos = match.end()
    return attrs


def serialize_attributes(attrs) -> str:
    """Render ``attrs`` as `` name="value"`` pairs in iteration order.

    A double quote inside a value is written as ``&quot;`` so that scanning
    the output again yields the same attributes.
    """
    if not attrs:
        return ""
    parts = []
    for name, value in attrs.items():
        if '"' in value:
            value = value.replace('"', "&quot;")
        parts.append(f' {name}="{value}"')
    return "".join(parts)
