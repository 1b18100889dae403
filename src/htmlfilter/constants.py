"""Built-in tables used by the filter.

Both tables are kept as ordered lists (stable iteration for docs and tests)
plus frozensets for lookups. Engines accept replacements for either table at
construction time; nothing mutates them at runtime.

Usage:
    from htmlfilter.constants import SELF_CLOSING_TAGS, BOOLEAN_ATTRIBUTES
"""

# Tags that never get a body or a matching close tag. A disallowed tag from
# this table is dropped on its own and never starts a suppressed subtree.
# textarea and object are not void elements in HTML5; they stay in the table
# so existing whitelists keep rendering them as `<tag ... />`.
SELF_CLOSING_TAG_LIST = [
    "meta",
    "base",
    "link",
    "hr",
    "br",
    "wbr",
    "col",
    "img",
    "area",
    "input",
    "textarea",
    "embed",
    "param",
    "source",
    "object",
]

# Attributes whose presence is the whole meaning. Their value is always
# rewritten to the attribute name (checked="no" -> checked="checked").
BOOLEAN_ATTRIBUTE_LIST = [
    "checked",
    "compact",
    "declare",
    "defer",
    "disabled",
    "ismap",
    "multiple",
    "nohref",
    "noresize",
    "noshade",
    "nowrap",
    "readonly",
    "selected",
]

SELF_CLOSING_TAGS = frozenset(SELF_CLOSING_TAG_LIST)
BOOLEAN_ATTRIBUTES = frozenset(BOOLEAN_ATTRIBUTE_LIST)
