"""Chat session — multi-turn conversation over the same remote-call primitive.

Unlike the inline pipeline, a chat keeps an ordered, role-tagged history and
rebuilds one flattened prompt from all of it on every turn.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from inlinewrite.engine.errors import TransformationError

if TYPE_CHECKING:
    from inlinewrite.engine.client import TransformationClient

logger = logging.getLogger(__name__)

CHAT_PREAMBLE = "You are a helpful AI assistant in a multi-turn conversation.\n\n"
CHAT_SUFFIX = "\nContinue the conversation. Respond directly, referencing the entire history.\n"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class ChatSession:
    def __init__(self, client: TransformationClient) -> None:
        self.client = client
        self.conversation: list[ChatMessage] = []
        self.is_processing = False

    def build_context(self) -> str:
        lines = [CHAT_PREAMBLE]
        for msg in self.conversation:
            speaker = "User" if msg.role is Role.USER else "Assistant"
            lines.append(f"{speaker}: {msg.text}\n")
        lines.append(CHAT_SUFFIX)
        return "".join(lines)

    async def send_message(self, text: str) -> ChatMessage | None:
        """Append the user turn, ask the model, append its answer.

        Blank input is ignored and returns None. Failures become an
        assistant message starting with "Error:".
        """
        trimmed = text.strip()
        if not trimmed:
            return None

        self.conversation.append(ChatMessage(role=Role.USER, text=trimmed))
        prompt = self.build_context()

        self.is_processing = True
        try:
            result = await self.client.send(prompt)
            reply = ChatMessage(role=Role.ASSISTANT, text=result)
        except TransformationError as e:
            logger.warning(f"Chat turn failed: {e}")
            reply = ChatMessage(role=Role.ASSISTANT, text=f"Error: {e.reason}")
        except Exception as e:
            logger.error(f"Unexpected error during chat turn: {e}", exc_info=True)
            reply = ChatMessage(role=Role.ASSISTANT, text=f"Error: {str(e) or type(e).__name__}")
        finally:
            self.is_processing = False

        self.conversation.append(reply)
        return reply

    def clear(self) -> None:
        self.conversation.clear()
