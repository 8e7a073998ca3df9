"""Status controller — orchestrates one inline transformation and narrates it.

State machine::

    IDLE --invoke--> CAPTURING
    CAPTURING --snippet absent--> IDLE            "No text found."
    CAPTURING --snippet found--> AWAITING_REMOTE  "Processing..."
    AWAITING_REMOTE --empty result--> IDLE        "Empty result."
    AWAITING_REMOTE --failure--> FAILED           "Error: <reason>"
    AWAITING_REMOTE --text--> REPLACING --> DONE  "Done!"
    DONE / FAILED --invoke--> CAPTURING

All buffer and status mutations happen on the event loop that awaits
``invoke``; the remote call is the only suspension point. One invocation
may be in flight at a time. ``abandon`` marks the in-flight one as
superseded so its result is dropped instead of edited into the buffer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from inlinewrite.engine.capture import SnippetCapture
from inlinewrite.engine.errors import (
    EmptyGeneratedText,
    NoCustomInstructionConfigured,
    NoSnippetFound,
    TransformationError,
)
from inlinewrite.engine.prompts import build_prompt
from inlinewrite.engine.replacer import BufferReplacer

if TYPE_CHECKING:
    from inlinewrite.engine.client import TransformationClient
    from inlinewrite.engine.host import Pasteboard, TextDocumentProxy
    from inlinewrite.engine.intents import TransformationIntent
    from inlinewrite.store.shared import SharedConfigReader

logger = logging.getLogger(__name__)

STATUS_PROCESSING = "Processing..."
STATUS_PROCESSING_CUSTOM = "Processing custom..."
STATUS_DONE = "Done!"
STATUS_BUSY = "Still processing..."
STATUS_NO_CUSTOM_SNIPPET = "No text to apply custom prompt."


class ProcessingState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    AWAITING_REMOTE = "awaiting_remote"
    REPLACING = "replacing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class DebugEntry:
    timestamp: datetime
    message: str

    def render(self) -> str:
        return f"[{self.timestamp.isoformat(timespec='milliseconds')}] {self.message}"


@dataclass
class DebugLog:
    """Append-only session log shown in the debug panel."""

    entries: list[DebugEntry] = field(default_factory=list)
    visible: bool = False

    def append(self, message: str) -> DebugEntry:
        entry = DebugEntry(timestamp=datetime.now().astimezone(), message=message)
        self.entries.append(entry)
        logger.debug(message)
        return entry

    def render(self) -> str:
        return "\n".join(entry.render() for entry in self.entries)

    def shown_lines(self) -> list[str]:
        """Rendered entries for the debug panel; empty while the panel is hidden."""
        if not self.visible:
            return []
        return [entry.render() for entry in self.entries]


class StatusController:
    def __init__(
        self,
        proxy: TextDocumentProxy,
        client: TransformationClient,
        config_reader: SharedConfigReader,
        pasteboard: Pasteboard | None = None,
        debug_log: DebugLog | None = None,
    ) -> None:
        self.capture = SnippetCapture(proxy)
        self.replacer = BufferReplacer(proxy, pasteboard)
        self.client = client
        self.config_reader = config_reader
        self.pasteboard = pasteboard
        self.log = debug_log or DebugLog()

        self.state = ProcessingState.IDLE
        self.status = ""
        self.failure: str | None = None
        self.in_flight = False
        self._generation = 0

    # ── State helpers ────────────────────────────────────────────────────

    def _transition(self, state: ProcessingState, message: str) -> None:
        previous = self.state
        self.state = state
        self.log.append(f"{previous.value} -> {state.value}: {message}")

    def _settle(self, state: ProcessingState, status: str, message: str) -> ProcessingState:
        self.status = status
        self._transition(state, message)
        return state

    def _superseded(self, generation: int) -> bool:
        return generation != self._generation

    # ── Public API ───────────────────────────────────────────────────────

    async def invoke(self, intent: TransformationIntent) -> ProcessingState:
        """Run one transformation to completion. Never raises for pipeline failures."""
        label = intent.definition.label
        if self.in_flight:
            self.status = STATUS_BUSY
            self.log.append(f"[{label}] => rejected, a request is still in flight")
            return self.state

        self.in_flight = True
        self._generation += 1
        generation = self._generation
        try:
            return await self._run(intent, label, generation)
        finally:
            if not self._superseded(generation):
                self.in_flight = False

    def abandon(self) -> None:
        """Drop the in-flight invocation; its result will be discarded on arrival."""
        if not self.in_flight:
            return
        self._generation += 1
        self.in_flight = False
        self._settle(ProcessingState.IDLE, "", "in-flight request abandoned")

    # ── Pipeline ─────────────────────────────────────────────────────────

    async def _run(
        self, intent: TransformationIntent, label: str, generation: int
    ) -> ProcessingState:
        self.failure = None
        self._transition(ProcessingState.CAPTURING, f"[{label}] => invoked")
        snippet = self.capture.capture()

        instruction: str | None = None
        if intent.is_custom:
            instruction = self.config_reader.read_custom_instruction()
            if instruction is None:
                return self._settle(
                    ProcessingState.IDLE,
                    NoCustomInstructionConfigured.reason,
                    f"[{label}] => no custom prompt found in shared storage",
                )
            if snippet is None:
                return self._settle(
                    ProcessingState.IDLE,
                    STATUS_NO_CUSTOM_SNIPPET,
                    f"[{label}] => snippet is empty",
                )
        elif snippet is None:
            return self._settle(
                ProcessingState.IDLE,
                NoSnippetFound.reason,
                f"[{label}] => snippet is empty",
            )

        if self.pasteboard is not None:
            self.pasteboard.copy(snippet.text)

        prompt = build_prompt(intent, snippet, instruction)
        self.status = STATUS_PROCESSING_CUSTOM if intent.is_custom else STATUS_PROCESSING
        self._transition(
            ProcessingState.AWAITING_REMOTE,
            f"[{label}] => snippet captured ({snippet.length} chars):\n{snippet.text}",
        )
        self.log.append(f"[{label}] => sending prompt:\n{prompt}")

        try:
            result = await self.client.send(prompt)
        except TransformationError as e:
            if self._superseded(generation):
                self.log.append(f"[{label}] => discarded stale failure: {e}")
                return self.state
            self.failure = e.reason
            return self._settle(
                ProcessingState.FAILED,
                f"Error: {e.reason}",
                f"[{label}] => Error: {type(e).__name__}: {e}",
            )
        except Exception as e:
            logger.error(f"Unexpected error during '{label}': {e}", exc_info=True)
            if self._superseded(generation):
                return self.state
            self.failure = str(e) or type(e).__name__
            return self._settle(
                ProcessingState.FAILED,
                f"Error: {self.failure}",
                f"[{label}] => Error: {type(e).__name__}: {e}",
            )

        if self._superseded(generation):
            self.log.append(f"[{label}] => discarded stale result ({len(result)} chars)")
            return self.state

        trimmed = result.strip()
        self.log.append(f"[{label}] => LLM response:\n{trimmed}")
        if not trimmed:
            return self._settle(
                ProcessingState.IDLE,
                EmptyGeneratedText.reason,
                f"[{label}] => empty result => text preserved",
            )

        self._transition(
            ProcessingState.REPLACING,
            f"[{label}] => deleting {snippet.length} chars, inserting {len(trimmed)} chars",
        )
        self.replacer.replace(snippet.length, trimmed)
        return self._settle(ProcessingState.DONE, STATUS_DONE, f"[{label}] => done")
