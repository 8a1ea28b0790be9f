"""
TransformContext: read-only view of the editor selection handed to a task's
transform, plus the in-memory EditorDocument it reads from.

Context attributes are properties evaluated on every access, so they always
reflect the document's current selection.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class Position:
    """Zero-based line/character position."""

    line: int
    character: int


@dataclass
class SelectionRange:
    start: Position
    end: Position


class EditorDocument:
    """
    A document being edited: file name, selection and (optionally) full text.

    When the full text is unknown the caller supplies the selected text
    directly and replace_selection only records the replacement.
    """

    def __init__(
        self,
        *,
        file_name: str,
        selection: SelectionRange,
        text: str | None = None,
        selected_text: str | None = None,
    ) -> None:
        self.file_name = file_name
        self.selection = selection
        self.text = text
        self._selected_text = selected_text

    def offset_at(self, position: Position) -> int:
        """Character offset of position in text; positions past a line or the document are clamped."""
        if self.text is None:
            raise ValueError("document text is not available")
        lines = self.text.splitlines(keepends=True)
        if position.line >= len(lines):
            return len(self.text)
        offset = sum(len(line) for line in lines[: position.line])
        content = lines[position.line].rstrip("\r\n")
        return offset + min(max(position.character, 0), len(content))

    def selected_text(self) -> str:
        if self.text is None:
            return self._selected_text or ""
        start = self.offset_at(self.selection.start)
        end = self.offset_at(self.selection.end)
        return self.text[start:end]

    def replace_selection(self, replacement: str) -> str | None:
        """
        Replace the selected range with replacement and select the inserted text.
        Returns the new document text, or None when the full text is unknown.
        """
        start = self.selection.start
        parts = replacement.split("\n")
        if len(parts) == 1:
            end = Position(start.line, start.character + len(replacement))
        else:
            end = Position(start.line + len(parts) - 1, len(parts[-1]))

        if self.text is None:
            self._selected_text = replacement
            self.selection = SelectionRange(start=start, end=end)
            return None

        begin = self.offset_at(self.selection.start)
        finish = self.offset_at(self.selection.end)
        self.text = self.text[:begin] + replacement + self.text[finish:]
        self.selection = SelectionRange(start=start, end=end)
        return self.text


class TransformContext:
    """
    Read-only context passed as the second argument of every transform.

    Scripts may read start_line, start_character, end_line, end_character
    and file_name; assigning any attribute raises AttributeError.
    """

    __slots__ = ("_document",)

    def __init__(self, document: EditorDocument) -> None:
        self._document = document

    @property
    def start_line(self) -> int:
        return self._document.selection.start.line

    @property
    def start_character(self) -> int:
        return self._document.selection.start.character

    @property
    def end_line(self) -> int:
        return self._document.selection.end.line

    @property
    def end_character(self) -> int:
        return self._document.selection.end.character

    @property
    def file_name(self) -> str:
        return self._document.file_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_line": self.start_line,
            "start_character": self.start_character,
            "end_line": self.end_line,
            "end_character": self.end_character,
            "file_name": self.file_name,
        }

    def __repr__(self) -> str:
        return f"TransformContext({self.to_dict()!r})"
