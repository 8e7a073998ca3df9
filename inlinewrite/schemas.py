"""Request/response models — the contract between the engine and its collaborators."""

from __future__ import annotations

from pydantic import BaseModel, field_validator, model_validator

from inlinewrite.config import GeminiModel


class TransformRequest(BaseModel):
    """A host buffer to run one intent against.

    The cursor defaults to the end of ``text``. A selection is given as
    ``selection_start``..``selection_end``; the cursor sits at its end.
    ``debug`` returns the invocation's debug log with the response.
    """

    text: str
    cursor: int | None = None
    selection_start: int | None = None
    selection_end: int | None = None
    debug: bool = False

    @model_validator(mode="after")
    def check_positions(self) -> TransformRequest:
        length = len(self.text)
        if self.cursor is not None and not 0 <= self.cursor <= length:
            raise ValueError(f"cursor must be between 0 and {length}")
        if (self.selection_start is None) != (self.selection_end is None):
            raise ValueError("selection_start and selection_end must be given together")
        if self.selection_start is not None:
            if not 0 <= self.selection_start <= self.selection_end <= length:
                raise ValueError("selection must satisfy 0 <= start <= end <= len(text)")
            if self.cursor is not None and self.cursor != self.selection_end:
                raise ValueError("cursor must equal selection_end when a selection is given")
        return self


class TransformResponse(BaseModel):
    text: str
    status: str
    state: str
    failure: str | None = None
    log: list[str] = []


class CustomPromptRequest(BaseModel):
    prompt: str


class CustomPromptResponse(BaseModel):
    prompt: str | None = None
    storage_ok: bool | None = None


class SettingsRequest(BaseModel):
    api_key: str
    model: GeminiModel = GeminiModel.FLASH


class SettingsResponse(BaseModel):
    api_key_configured: bool
    model: str


class ShareRequest(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be empty")
        return v


class HandoffResponse(BaseModel):
    timestamp: float
    content: str | None = None


class ChatRequest(BaseModel):
    message: str


class ChatMessageOut(BaseModel):
    role: str
    text: str


class ChatResponse(BaseModel):
    reply: ChatMessageOut | None = None
    conversation: list[ChatMessageOut] = []
