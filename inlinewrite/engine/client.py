"""Transformation client — one generateContent call per prompt.

Install: pip install httpx
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import httpx

from inlinewrite.engine.errors import (
    InvalidEndpoint,
    MalformedResponse,
    MissingCredential,
    NetworkError,
    RemoteError,
)

if TYPE_CHECKING:
    from inlinewrite.config import GeminiSettings

logger = logging.getLogger(__name__)

_MODEL_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def extract_generated_text(data: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or raise MalformedResponse."""
    try:
        candidates = data["candidates"]
        if not isinstance(candidates, list) or not candidates:
            raise MalformedResponse("Response has no candidates")
        parts = candidates[0]["content"]["parts"]
        if not isinstance(parts, list) or not parts:
            raise MalformedResponse("First candidate has no parts")
        text = parts[0]["text"]
    except (KeyError, TypeError) as e:
        raise MalformedResponse(f"Missing field in response: {e}") from e
    if not isinstance(text, str):
        raise MalformedResponse(f"Generated text is {type(text).__name__}, not a string")
    return text


class TransformationClient:
    """Async client for the generative-text endpoint.

    No retries. The timeout is whatever the settings carry (60 s by default).
    Owns its ``httpx.AsyncClient``; call ``aclose()`` when done.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str = "https://generativelanguage.googleapis.com",
        api_version: str = "v1beta",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key.strip()
        self.model = model
        self.base_url = base_url
        self.api_version = api_version
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: GeminiSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TransformationClient:
        return cls(
            settings.api_key,
            settings.model,
            base_url=settings.base_url,
            api_version=settings.api_version,
            timeout=settings.request_timeout,
            transport=transport,
        )

    def endpoint_url(self) -> httpx.URL:
        """Build the generateContent URL. Raises InvalidEndpoint."""
        if not _MODEL_NAME_RE.match(self.model or ""):
            raise InvalidEndpoint(f"Invalid model name '{self.model}'")
        raw = (
            f"{self.base_url.rstrip('/')}/{self.api_version.strip('/')}"
            f"/models/{self.model}:generateContent"
        )
        try:
            url = httpx.URL(raw, params={"key": self.api_key})
        except (httpx.InvalidURL, TypeError) as e:
            raise InvalidEndpoint(f"Invalid endpoint URL '{raw}': {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidEndpoint(f"Invalid endpoint URL '{raw}'")
        return url

    async def send(self, prompt: str) -> str:
        """Send ``prompt`` and return the first generated text, untrimmed."""
        if not self.api_key:
            raise MissingCredential()

        url = self.endpoint_url()
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        logger.info(f"Sending prompt to model '{self.model}' ({len(prompt)} chars)")
        try:
            resp = await self._http.post(url, json=body)
        except httpx.HTTPError as e:
            raise NetworkError(f"Request to model '{self.model}' failed: {e}") from e

        if resp.status_code != 200:
            logger.warning(f"Model '{self.model}' returned HTTP {resp.status_code}")
            raise RemoteError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponse(f"Response body is not JSON: {e}") from e

        return extract_generated_text(data)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> TransformationClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
