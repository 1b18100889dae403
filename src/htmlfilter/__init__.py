from .attributes import parse_attributes, serialize_attributes
from .constants import BOOLEAN_ATTRIBUTES, SELF_CLOSING_TAGS
from .engine import FilterResult, HtmlFilter, StrictModeError, filter_html
from .policy import (
    DEFAULT_WHITELIST,
    DISABLED,
    STRIP_ALL_ATTRIBUTES,
    AllowedAttributes,
    Whitelist,
    is_boolean_attribute,
    is_self_closing,
)
from .stack import SuppressionStack
from .tokenizer import Tokenizer, tokenize
from .tokens import CloseTag, Comment, OpenTag, ParseError, Text

__all__ = [
    "BOOLEAN_ATTRIBUTES",
    "DEFAULT_WHITELIST",
    "DISABLED",
    "SELF_CLOSING_TAGS",
    "STRIP_ALL_ATTRIBUTES",
    "AllowedAttributes",
    "CloseTag",
    "Comment",
    "FilterResult",
    "HtmlFilter",
    "OpenTag",
    "ParseError",
    "StrictModeError",
    "SuppressionStack",
    "Text",
    "Tokenizer",
    "Whitelist",
    "filter_html",
    "is_boolean_attribute",
    "is_self_closing",
    "parse_attributes",
    "serialize_attributes",
    "tokenize",
]
