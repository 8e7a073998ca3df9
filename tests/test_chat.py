"""Tests for the multi-turn chat session."""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import pytest

from conftest import FakeGemini
from inlinewrite.chat import CHAT_PREAMBLE, CHAT_SUFFIX, ChatSession, Role


class TestChatSession:
    @pytest.mark.asyncio
    async def test_turns_accumulate(self, fake_gemini: FakeGemini, make_client) -> None:
        async with make_client() as client:
            session = ChatSession(client)
            fake_gemini.reply_with("Hi there.")
            first = await session.send_message("  hello  ")
            fake_gemini.reply_with("Paris.")
            await session.send_message("Capital of France?")

        assert first.role is Role.ASSISTANT and first.text == "Hi there."
        assert [(m.role, m.text) for m in session.conversation] == [
            (Role.USER, "hello"),
            (Role.ASSISTANT, "Hi there."),
            (Role.USER, "Capital of France?"),
            (Role.ASSISTANT, "Paris."),
        ]
        assert fake_gemini.sent_prompts()[1] == (
            CHAT_PREAMBLE
            + "User: hello\n"
            + "Assistant: Hi there.\n"
            + "User: Capital of France?\n"
            + CHAT_SUFFIX
        )
        assert not session.is_processing

    @pytest.mark.asyncio
    async def test_blank_message_ignored(self, fake_gemini: FakeGemini, make_client) -> None:
        async with make_client() as client:
            session = ChatSession(client)
            assert await session.send_message("   ") is None
        assert session.conversation == []
        assert fake_gemini.requests == []

    @pytest.mark.asyncio
    async def test_failure_becomes_error_message(self, fake_gemini: FakeGemini, make_client) -> None:
        fake_gemini.status_code = 429
        async with make_client() as client:
            session = ChatSession(client)
            reply = await session.send_message("hello")
        assert reply.text == "Error: Server error 429"
        assert len(session.conversation) == 2

    @pytest.mark.asyncio
    async def test_clear(self, fake_gemini: FakeGemini, make_client) -> None:
        fake_gemini.reply_with("ok")
        async with make_client() as client:
            session = ChatSession(client)
            await session.send_message("hello")
        session.clear()
        assert session.conversation == []
        assert session.build_context() == CHAT_PREAMBLE + CHAT_SUFFIX

    @pytest.mark.asyncio
    async def test_unexpected_error_still_gets_reply(self) -> None:
        client = Mock()
        client.send = AsyncMock(side_effect=RuntimeError("client has been closed"))
        session = ChatSession(client)

        reply = await session.send_message("hello")

        assert reply.role is Role.ASSISTANT
        assert reply.text == "Error: client has been closed"
        assert [m.role for m in session.conversation] == [Role.USER, Role.ASSISTANT]
        assert not session.is_processing
