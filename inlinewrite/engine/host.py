"""Host-side collaborators: the text field being edited and the clipboard.

The engine never owns the host buffer. It talks to it through
``TextDocumentProxy``, which exposes the same four primitives a keyboard
extension gets: optional selected text, the text before the cursor,
delete-one-character-backward and insert-at-cursor.

``TextBuffer`` is an in-memory host used by the HTTP surface and the tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextDocumentProxy(Protocol):
    """Minimum host surface. ``selected_text`` is optional on real hosts."""

    @property
    def document_context_before_input(self) -> str | None: ...

    def delete_backward(self) -> None: ...

    def insert_text(self, text: str) -> None: ...


class TextBuffer:
    """A single-cursor text field.

    A selection is ``text[selection_start:cursor]``. ``delete_backward``
    collapses any selection to its end first and then removes one character
    before the cursor, so deleting ``len(span)`` characters from the end of a
    selection removes exactly that span.
    """

    def __init__(
        self,
        text: str = "",
        cursor: int | None = None,
        selection_start: int | None = None,
    ) -> None:
        self._text = text
        self._cursor = len(text) if cursor is None else cursor
        if not 0 <= self._cursor <= len(text):
            raise ValueError(f"Cursor {self._cursor} outside buffer of length {len(text)}")
        if selection_start is not None and not 0 <= selection_start <= self._cursor:
            raise ValueError("Selection must start between 0 and the cursor")
        self._selection_start = selection_start
        self.deletions = 0
        self.insertions: list[str] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def selected_text(self) -> str | None:
        if self._selection_start is None:
            return None
        return self._text[self._selection_start:self._cursor]

    @property
    def document_context_before_input(self) -> str | None:
        return self._text[: self._cursor]

    def delete_backward(self) -> None:
        self._selection_start = None
        self.deletions += 1
        if self._cursor == 0:
            return
        self._text = self._text[: self._cursor - 1] + self._text[self._cursor:]
        self._cursor -= 1

    def insert_text(self, text: str) -> None:
        self._selection_start = None
        self.insertions.append(text)
        self._text = self._text[: self._cursor] + text + self._text[self._cursor:]
        self._cursor += len(text)


class Pasteboard:
    """General-purpose clipboard. Last write wins."""

    def __init__(self) -> None:
        self.string: str | None = None

    def copy(self, text: str) -> None:
        self.string = text
