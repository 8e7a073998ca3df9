"""Shared fixtures: temporary shared-store roots and a fake generative-text endpoint."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from inlinewrite.engine.client import TransformationClient
from inlinewrite.store.shared import SharedConfigReader, SharedStore

CONFIG_GROUP = "group.com.red.keygem"
HANDOFF_GROUP = "group.red.tools"


def gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class FakeGemini:
    """Records requests and answers with a canned response."""

    def __init__(self, status_code: int = 200, body: object | None = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else gemini_body("")
        self.requests: list[httpx.Request] = []

    def reply_with(self, text: str) -> None:
        self.status_code = 200
        self.body = gemini_body(text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=str(self.body))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def sent_prompts(self) -> list[str]:
        return [
            json.loads(r.content)["contents"][0]["parts"][0]["text"]
            for r in self.requests
        ]


@pytest.fixture
def fake_gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def make_client(fake_gemini: FakeGemini) -> Callable[..., TransformationClient]:
    def _make(api_key: str = "test-key", model: str = "gemini-2.0-flash") -> TransformationClient:
        return TransformationClient(api_key, model, transport=fake_gemini.transport)

    return _make


@pytest.fixture
def shared_root(tmp_path):
    root = tmp_path / "groups"
    root.mkdir()
    return root


@pytest.fixture
def config_store(shared_root) -> SharedStore:
    return SharedStore(shared_root, CONFIG_GROUP)


@pytest.fixture
def config_reader(config_store: SharedStore) -> SharedConfigReader:
    return SharedConfigReader(config_store)
