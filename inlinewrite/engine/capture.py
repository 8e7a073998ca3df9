"""Snippet capture — pick the span a transformation will operate on."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from inlinewrite.engine.host import TextDocumentProxy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snippet:
    """Trimmed operand text plus the character count to delete before the cursor.

    ``length`` covers the raw span minus its leading whitespace: the trimmed
    text and any whitespace between it and the cursor.
    """

    text: str
    length: int

    @classmethod
    def from_span(cls, raw: str) -> Snippet | None:
        text = raw.strip()
        if not text:
            return None
        return cls(text=text, length=len(raw.lstrip()))


def _selected_text(proxy: TextDocumentProxy) -> str | None:
    try:
        return getattr(proxy, "selected_text", None)
    except NotImplementedError:
        return None


class SnippetCapture:
    """Reads the host buffer; never mutates it."""

    def __init__(self, proxy: TextDocumentProxy) -> None:
        self.proxy = proxy

    def capture(self) -> Snippet | None:
        selection = _selected_text(self.proxy)
        if selection:
            snippet = Snippet.from_span(selection)
            if snippet is None:
                logger.debug("Selection is whitespace only")
            return snippet

        before = self.proxy.document_context_before_input
        if not before:
            return None
        return Snippet.from_span(before)
