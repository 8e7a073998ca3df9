"""Prompt construction — intent + snippet (+ custom instruction) into one string."""

from __future__ import annotations

from inlinewrite.engine.capture import Snippet
from inlinewrite.engine.errors import NoCustomInstructionConfigured
from inlinewrite.engine.intents import CUSTOM_TEMPLATE, TransformationIntent

SEPARATOR = "\n\n"


def build_prompt(
    intent: TransformationIntent,
    snippet: Snippet,
    custom_instruction: str | None = None,
) -> str:
    """Return the single prompt string sent to the remote model.

    Pure: the same arguments always give the same string. Callers must
    check for a custom instruction before calling with CUSTOM; reaching
    here without one raises NoCustomInstructionConfigured.
    """
    if intent.is_custom:
        instruction = (custom_instruction or "").strip()
        if not instruction:
            raise NoCustomInstructionConfigured()
        return CUSTOM_TEMPLATE.format(instruction=instruction) + "\n" + snippet.text

    return intent.definition.template + SEPARATOR + snippet.text
