"""Buffer replacement — the only mutation of host-owned text.

Not transactional: the host offers no multi-step edit primitive, so an
interruption between the deletions and the insertion leaves the field
partially edited.
"""

from __future__ import annotations

import logging

from inlinewrite.engine.host import Pasteboard, TextDocumentProxy

logger = logging.getLogger(__name__)


class BufferReplacer:
    def __init__(self, proxy: TextDocumentProxy, pasteboard: Pasteboard | None = None) -> None:
        self.proxy = proxy
        self.pasteboard = pasteboard

    def replace(self, original_length: int, new_text: str) -> None:
        """Delete ``original_length`` characters backward, then insert ``new_text``.

        ``new_text`` is also copied to the pasteboard as a manual recovery aid.
        """
        if original_length < 0:
            raise ValueError(f"original_length must be >= 0, got {original_length}")

        for _ in range(original_length):
            self.proxy.delete_backward()
        self.proxy.insert_text(new_text)

        if self.pasteboard is not None:
            self.pasteboard.copy(new_text)
        logger.debug(f"Replaced {original_length} chars with {len(new_text)} chars")
