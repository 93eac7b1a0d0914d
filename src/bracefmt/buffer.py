from __future__ import annotations


class FormatBuffer:
    """Append-only output of one formatting pass."""

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def push_str(self, s: str) -> None:
        if s:
            self._parts.append(s)

    def is_empty(self) -> bool:
        return not self._parts

    def last_line_width(self) -> int:
        width = 0
        for part in reversed(self._parts):
            nl = part.rfind("\n")
            if nl != -1:
                return width + len(part) - nl - 1
            width += len(part)
        return width

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.getvalue()
