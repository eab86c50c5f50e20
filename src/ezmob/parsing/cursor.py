"""
Line cursor over the raw lines of one stat block.
"""

from __future__ import annotations


def normalize(line: str | None) -> str:
    """Trim a line and collapse interior whitespace runs to one space."""
    return " ".join((line or "").split())


class LineCursor:
    """Sequential reader with one-line pushback and absolute peeks.

    Line numbers are 1-based. ``position`` is the number of the line most
    recently returned by :meth:`next_line` (0 before the first read).
    """

    def __init__(self, lines: list[str] | None = None):
        self.lines: list[str] = list(lines or [])
        self.position = 0
        self.at_end = len(self.lines) == 0

    def next_line(self) -> str:
        """Advance and return the next normalized line, or "" past the end."""
        self.position += 1
        self.at_end = self.position > len(self.lines)
        return self.line()

    def push_back(self) -> None:
        """Un-read the current line so the next call returns it again."""
        self.position = max(1, self.position - 1)
        self.at_end = self.position > len(self.lines)

    def peek_at(self, number: int) -> str:
        """Normalized text of line *number* without moving the cursor."""
        if 1 <= number <= len(self.lines):
            return normalize(self.lines[number - 1])
        return ""

    def line(self) -> str:
        """Normalized text of the current line."""
        return self.peek_at(self.position)

    def seek(self, number: int) -> None:
        """Position the cursor so the next read returns line *number*."""
        self.position = max(0, number - 1)
        self.at_end = self.position > len(self.lines)

    def full_text(self) -> str:
        return "\n".join(self.lines)

    def __len__(self) -> int:
        return len(self.lines)
