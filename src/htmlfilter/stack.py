class SuppressionStack:
    """Names of the elements currently being suppressed, innermost last.

    Used as a depth counter: any close tag pops the top entry, whatever its
    name. Non-empty means everything is being discarded.
    """

    __slots__ = ("_names",)

    def __init__(self):
        self._names = []

    def push(self, name):
        self._names.append(name)

    def pop(self):
        if not self._names:
            return None
        return self._names.pop()

    def peek(self):
        return self._names[-1] if self._names else None

    def clear(self):
        self._names.clear()

    def __len__(self):
        return len(self._names)

    def __bool__(self):
        return bool(self._names)

    def __repr__(self):
        return f"SuppressionStack({self._names!r})"
