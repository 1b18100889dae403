"""Single-pass markup scanner.

The scanner recognizes three constructs and leaves everything else alone:

- opening tags: ``<name attr="v" attr2='v' attr3=v attr4 ...>`` (``/>`` too)
- closing tags: ``</anything-but-gt>``
- comments: ``<!-- shortest body -->``

Text is whatever lies between two matches. Malformed markup (a stray ``<``,
an unterminated tag) never raises; it simply stays in the text gaps.
"""

import re

from .tokens import CloseTag, Comment, OpenTag, Text

_ATTRIBUTE_VALUE = r"""(?:"[^"]*"|'[^']*'|[^>\s]+)"""
_ATTRIBUTE = rf"""\s+[\w\-:]+(?:\s*=\s*{_ATTRIBUTE_VALUE})?"""

# The character after "<" decides which construct can start there, so each
# construct has its own pattern. Groups: tag name, raw attribute blob.
OPEN_TAG_PATTERN = re.compile(rf"""<(\w+)((?:{_ATTRIBUTE})*)[\s\S]*?/?>""", re.ASCII)
CLOSE_TAG_PATTERN = re.compile(r"</([^>]+)>")
COMMENT_PATTERN = re.compile(r"<!--([\s\S]*?)-->")


class Tokenizer:
    """Lazy iterator over the raw markup matches of one input string.

    Yields ``OpenTag``, ``CloseTag`` and ``Comment`` tokens in source order.
    Each iteration is a fresh scan from position 0.
    """

    __slots__ = ("comment_end", "html", "scan_end")

    def __init__(self, html):
        self.html = html or ""
        # Every match ends with ">", so nothing can match past the last one.
        # Below that bound an open or close tag attempt always finds its ">".
        self.scan_end = self.html.rfind(">") + 1
        # A comment needs a "-->" at least four characters after its "<".
        # Past the last one a "<!--" is text without searching further.
        self.comment_end = self.html.rfind("-->", 0, self.scan_end)

    def __iter__(self):
        return self._scan()

    def _scan(self):
        html = self.html
        end = self.scan_end
        pos = html.find("<", 0, end)
        while pos != -1:
            following = html[pos + 1 : pos + 2]
            match = None
            if following == "/":
                match = CLOSE_TAG_PATTERN.match(html, pos, end)
                if match is not None:
                    yield CloseTag(match.group(1), pos, match.end())
            elif following == "!":
                if pos + 4 <= self.comment_end:
                    match = COMMENT_PATTERN.match(html, pos, end)
                    if match is not None:
                        yield Comment(match.group(1), pos, match.end())
            else:
                match = OPEN_TAG_PATTERN.match(html, pos, end)
                if match is not None:
                    yield OpenTag(match.group(1), match.group(2), pos, match.end())
            pos = html.find("<", pos + 1 if match is None else match.end(), end)


def tokenize(html):
    """Yield every token of ``html``, including the ``Text`` gaps.

    The spans of the yielded tokens cover the input exactly, in order.
    """
    html = html or ""
    last = 0
    for token in Tokenizer(html):
        if token.start > last:
            yield Text(html[last : token.start], last, token.start)
        yield token
        last = token.end
    if last < len(html):
        yield Text(html[last:], last, len(html))
