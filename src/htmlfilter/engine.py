"""Whitelist-driven HTML filter.

One scan walks the token stream once, left to right, and keeps two pieces of
state: the output buffer and a suppression stack. While the stack is empty
accepted markup is re-serialized into the buffer; a disallowed element that
can have content pushes onto the stack, and from then on everything is
discarded until close tags have popped the stack empty again. The stack only
counts depth: any close tag pops it, whatever its name.

A scan can leave new markup behind: text on both sides of a removed tag can
meet and form a tag, and comment bodies are emitted as plain text. ``filter``
therefore scans its own output again whenever a scan removed or unwrapped
markup. A scan that removes nothing returns a fixed point. Nested leftovers
need one scan per level, so the number of scans is capped at ``max_passes``:
the last allowed scan also drops every ``<`` it would keep as text, which
leaves only re-serialized tags in the output and makes it a fixed point too.
"""

from __future__ import annotations

from bisect import bisect_right

from .attributes import parse_attributes, serialize_attributes
from .constants import BOOLEAN_ATTRIBUTES, SELF_CLOSING_TAGS
from .policy import DEFAULT_WHITELIST, as_whitelist
from .stack import SuppressionStack
from .tokenizer import Tokenizer
from .tokens import CloseTag, OpenTag, ParseError

MAX_PASSES = 8


class StrictModeError(ValueError):
    """Raised by a strict filter on the first best-effort recovery."""

    def __init__(self, error: ParseError):
        self.error = error
        super().__init__(str(error))


class FilterResult:
    __slots__ = ("errors", "html", "passes")

    def __init__(self, html, errors=None, passes=1):
        self.html = html
        self.errors = errors if errors is not None else []
        self.passes = passes

    def get_html(self):
        return self.html

    def __str__(self):
        return self.html

    def __repr__(self):
        return f"FilterResult({self.html!r}, errors={len(self.errors)}, passes={self.passes})"


class _Scan:
    """Working state of one scan. Never shared between calls."""

    __slots__ = (
        "buffer",
        "errors",
        "final",
        "newline_positions",
        "open_counts",
        "rewrote",
        "source",
        "stack",
    )

    def __init__(self, source, errors=None, final=False):
        self.source = source
        self.buffer = []
        self.stack = SuppressionStack()
        self.rewrote = False
        # The last allowed scan keeps no "<" outside re-serialized tags.
        self.final = final
        # Only the first scan reports; later scans read our own output.
        self.errors = errors
        self.open_counts = {}
        self.newline_positions = None

    def line_and_column(self, pos):
        """1-based line and column of ``pos`` in the source."""
        if self.newline_positions is None:
            positions = []
            index = self.source.find("\n")
            while index != -1:
                positions.append(index)
                index = self.source.find("\n", index + 1)
            self.newline_positions = positions
        count = bisect_right(self.newline_positions, pos - 1)
        line_start = self.newline_positions[count - 1] if count else -1
        return count + 1, pos - line_start


class HtmlFilter:
    """Rewrite untrusted markup against a tag/attribute whitelist.

    ``whitelist`` may be a ``Whitelist``, a plain mapping such as
    ``{"p": None, "img": ["src"]}``, or ``None`` to let everything through.
    The engine holds configuration only, so one instance can serve many
    threads.
    """

    __slots__ = (
        "boolean_attributes",
        "collect_errors",
        "env_debug",
        "max_passes",
        "self_closing_tags",
        "strict",
        "whitelist",
    )

    def __init__(
        self,
        whitelist=None,
        *,
        self_closing_tags=SELF_CLOSING_TAGS,
        boolean_attributes=BOOLEAN_ATTRIBUTES,
        debug=False,
        collect_errors=False,
        strict=False,
        max_passes=MAX_PASSES,
    ):
        if not isinstance(max_passes, int) or max_passes < 2:
            raise ValueError(f"max_passes must be an int >= 2, got {max_passes!r}")
        self.max_passes = max_passes
        self.whitelist = as_whitelist(whitelist)
        self.self_closing_tags = frozenset(name.lower() for name in self_closing_tags)
        self.boolean_attributes = frozenset(boolean_attributes)
        self.env_debug = bool(debug)
        self.strict = bool(strict)
        self.collect_errors = bool(collect_errors) or self.strict

    def configure(self, whitelist):
        """Replace the whitelist. ``None`` disables filtering."""
        self.whitelist = as_whitelist(whitelist)
        return self

    def debug(self, message, indent=4):
        if self.env_debug:
            print(f"{' ' * indent}{message}")

    def filter(self, html):
        if html is None:
            html = ""
        elif not isinstance(html, str):
            raise TypeError(f"filter() expects a str, got {type(html).__name__}")

        # A configure() from another thread must not change rules mid-call.
        whitelist = self.whitelist
        errors = [] if self.collect_errors else None
        source = html
        passes = 0
        while True:
            passes += 1
            final = passes == self.max_passes
            scan = _Scan(source, errors if passes == 1 else None, final)
            self._run(scan, whitelist)
            output = "".join(scan.buffer)
            if not scan.rewrote or final:
                break
            if self.env_debug:
                if passes + 1 == self.max_passes:
                    self.debug(f"scan {passes} removed markup, last scan drops stray '<'", indent=0)
                else:
                    self.debug(f"scan {passes} removed markup, scanning output again", indent=0)
            source = output
        return FilterResult(output, errors, passes)

    def _run(self, scan, whitelist):
        html = scan.source
        last = 0
        for token in Tokenizer(html):
            if token.start > last:
                self._on_text(scan, html[last : token.start], last)
            last = token.end
            if isinstance(token, OpenTag):
                self._on_open(scan, whitelist, token)
            elif isinstance(token, CloseTag):
                self._on_close(scan, token)
            else:
                scan.rewrote = True
                self._on_text(scan, token.body, token.start + 4)
        if last < len(html):
            self._on_text(scan, html[last:], last)

        if scan.stack and scan.errors is not None:
            self._emit_error(
                scan,
                "unclosed-suppressed-element",
                len(html),
                f"input ended inside {len(scan.stack)} suppressed element(s), innermost <{scan.stack.peek()}>",
            )

    def _on_text(self, scan, text, pos):
        if scan.stack:
            return
        if scan.errors is not None and "<" in text:
            index = text.find("<")
            while index != -1:
                self._emit_error(scan, "literal-less-than", pos + index, "'<' kept as text")
                index = text.find("<", index + 1)
        if scan.final and "<" in text:
            text = text.replace("<", "")
        scan.buffer.append(text)

    def _on_open(self, scan, whitelist, token):
        name = token.name.lower()
        self_closing = name in self.self_closing_tags

        if not whitelist.is_tag_allowed(name):
            scan.rewrote = True
            if not self_closing:
                scan.stack.push(name)
                if self.env_debug:
                    self.debug(f"suppress <{name}> depth={len(scan.stack)}")
            elif self.env_debug:
                self.debug(f"drop <{name} />")
            return

        # Allowed tags inside a suppressed subtree are suppressed as well.
        if scan.stack:
            scan.rewrote = True
            if not self_closing:
                scan.stack.push(name)
            return

        if not whitelist.enabled:
            attrs = parse_attributes(token.raw_attributes, self.boolean_attributes)
        else:
            allowed = whitelist.allowed_attributes_for(name)
            if allowed is None:
                attrs = None
            else:
                attrs = {
                    attr: value
                    for attr, value in parse_attributes(token.raw_attributes, self.boolean_attributes).items()
                    if attr in allowed
                }

        closing = " />" if self_closing else ">"
        scan.buffer.append(f"<{name}{serialize_attributes(attrs)}{closing}")

        if scan.errors is not None and not self_closing:
            scan.open_counts[name] = scan.open_counts.get(name, 0) + 1

    def _on_close(self, scan, token):
        if scan.stack:
            scan.rewrote = True
            popped = scan.stack.pop()
            if self.env_debug:
                self.debug(f"close </{token.name}> pops <{popped}> depth={len(scan.stack)}")
            return

        name = token.name.lower()
        if scan.errors is not None:
            count = scan.open_counts.get(name, 0)
            if count:
                scan.open_counts[name] = count - 1
            else:
                self._emit_error(scan, "unexpected-end-tag", token.start, f"</{name}> has no open element")
        scan.buffer.append(f"</{name}>")

    def _emit_error(self, scan, code, pos, message=None):
        line, column = scan.line_and_column(pos)
        error = ParseError(code, line=line, column=column, message=message)
        if self.strict:
            raise StrictModeError(error)
        scan.errors.append(error)


def filter_html(html, whitelist=DEFAULT_WHITELIST):
    """Filter ``html`` with ``whitelist`` and return the resulting string."""
    return HtmlFilter(whitelist).filter(html).html
