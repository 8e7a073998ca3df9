"""Failure taxonomy for one transformation invocation.

Every failure is terminal for the invocation that raised it. Each carries a
short ``reason`` for the status label; ``str(exc)`` is the detail line that
goes to the debug log.
"""

from __future__ import annotations


class TransformationError(Exception):
    """Base class for everything the pipeline reports instead of raising."""

    reason: str = "Transformation failed."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.reason)


class NoSnippetFound(TransformationError):
    reason = "No text found."


class NoCustomInstructionConfigured(TransformationError):
    reason = "No custom prompt set."


class MissingCredential(TransformationError):
    reason = "API key is missing."


class InvalidEndpoint(TransformationError):
    reason = "Invalid URL."


class RemoteError(TransformationError):
    """Non-200 answer from the generative-text endpoint."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.reason = f"Server error {status_code}"
        detail = self.reason
        if body:
            detail = f"{detail}: {body[:500]}"
        super().__init__(detail)


class MalformedResponse(TransformationError):
    reason = "No valid content in response."


class NetworkError(TransformationError):
    reason = "Network error."


class EmptyGeneratedText(TransformationError):
    reason = "Empty result."
