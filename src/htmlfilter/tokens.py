class OpenTag:
    __slots__ = ("end", "name", "raw_attributes", "start")

    def __init__(self, name, raw_attributes="", start=0, end=0):
        self.name = name
        self.raw_attributes = raw_attributes
        self.start = start
        self.end = end

    def __repr__(self):
        if self.raw_attributes:
            return f"<open:{self.name} {self.raw_attributes.strip()!r} @{self.start}:{self.end}>"
        return f"<open:{self.name} @{self.start}:{self.end}>"


class CloseTag:
    __slots__ = ("end", "name", "start")

    def __init__(self, name, start=0, end=0):
        # Raw text between "</" and ">", not trimmed or validated.
        self.name = name
        self.start = start
        self.end = end

    def __repr__(self):
        return f"<close:{self.name} @{self.start}:{self.end}>"


class Comment:
    __slots__ = ("body", "end", "start")

    def __init__(self, body, start=0, end=0):
        self.body = body
        self.start = start
        self.end = end

    def __repr__(self):
        return f"<comment:{self.body!r} @{self.start}:{self.end}>"


class Text:
    __slots__ = ("content", "end", "start")

    def __init__(self, content, start=0, end=0):
        self.content = content
        self.start = start
        self.end = end

    def __repr__(self):
        return f"<text:{self.content!r} @{self.start}:{self.end}>"


class ParseError:
    """A best-effort recovery made while filtering, with its source location."""

    __slots__ = ("code", "column", "line", "message")

    def __init__(self, code, line=None, column=None, message=None):
        self.code = code
        self.line = line
        self.column = column
        self.message = message or code

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.line == other.line and self.column == other.column

    __hash__ = None  # Unhashable since we define __eq__
