"""Inline transformation engine: capture → prompt → remote call → replace."""

from inlinewrite.engine.capture import Snippet, SnippetCapture
from inlinewrite.engine.client import TransformationClient
from inlinewrite.engine.controller import DebugLog, ProcessingState, StatusController
from inlinewrite.engine.host import Pasteboard, TextBuffer, TextDocumentProxy
from inlinewrite.engine.intents import TransformationIntent, resolve_intent
from inlinewrite.engine.prompts import build_prompt
from inlinewrite.engine.replacer import BufferReplacer

__all__ = [
    "BufferReplacer",
    "DebugLog",
    "Pasteboard",
    "ProcessingState",
    "Snippet",
    "SnippetCapture",
    "StatusController",
    "TextBuffer",
    "TextDocumentProxy",
    "TransformationClient",
    "TransformationIntent",
    "build_prompt",
    "resolve_intent",
]
