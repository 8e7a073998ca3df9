"""Intent registry — the fixed set of transformations offered inline.

The only place where instruction templates and display metadata live.
Custom has no fixed instruction; its text comes from the shared store at
invocation time and is wrapped by ``CUSTOM_TEMPLATE``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TransformationIntent(str, Enum):
    PROOFREAD = "proofread"
    REWRITE = "rewrite"
    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    CONCISE = "concise"
    SUMMARY = "summary"
    KEY_POINTS = "key_points"
    CUSTOM = "custom"

    @property
    def is_custom(self) -> bool:
        return self is TransformationIntent.CUSTOM

    @property
    def definition(self) -> IntentDefinition:
        return INTENT_REGISTRY[self]


@dataclass(frozen=True)
class IntentDefinition:
    label: str
    icon: str
    template: str


CUSTOM_TEMPLATE = (
    "Apply the user's changes to the text. Output only modified text.\n\n"
    "Instruction:\n{instruction}\n\n"
    "Text:"
)


INTENT_REGISTRY: dict[TransformationIntent, IntentDefinition] = {
    TransformationIntent.PROOFREAD: IntentDefinition(
        label="Proofread",
        icon="magnifyingglass",
        template=(
            "You are a grammar proofreading assistant. Correct grammar, spelling, "
            "punctuation, keeping style. Output only corrected text."
        ),
    ),
    TransformationIntent.REWRITE: IntentDefinition(
        label="Rewrite",
        icon="arrow.triangle.2.circlepath",
        template=(
            "Rewrite to improve phrasing, grammar, readability. "
            "Output only the rewritten text."
        ),
    ),
    TransformationIntent.FRIENDLY: IntentDefinition(
        label="Friendly",
        icon="face.smiling",
        template=(
            "Rewrite text to be more friendly. Keep meaning and structure. "
            "Output only new text."
        ),
    ),
    TransformationIntent.PROFESSIONAL: IntentDefinition(
        label="Professional",
        icon="briefcase",
        template=(
            "Rewrite text to be more formal/professional. Keep meaning. "
            "Output only new text."
        ),
    ),
    TransformationIntent.CONCISE: IntentDefinition(
        label="Concise",
        icon="scissors",
        template=(
            "Rewrite text to be concise and clear. Keep original meaning/tone. "
            "Output only the rewritten text."
        ),
    ),
    TransformationIntent.SUMMARY: IntentDefinition(
        label="Summary",
        icon="doc.text",
        template="Summarize the text succinctly. Output only the summary.",
    ),
    TransformationIntent.KEY_POINTS: IntentDefinition(
        label="Key Points",
        icon="list.bullet",
        template=(
            "Extract the key points from the text. "
            "Output only those key points."
        ),
    ),
    TransformationIntent.CUSTOM: IntentDefinition(
        label="Custom",
        icon="pencil",
        template=CUSTOM_TEMPLATE,
    ),
}


def resolve_intent(name: str) -> TransformationIntent:
    """Look up an intent by value or member name. Raises ValueError if unknown."""
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    for intent in TransformationIntent:
        if key in (intent.value, intent.name.lower()):
            return intent
    raise ValueError(
        f"Unknown intent '{name}'. "
        f"Available: {[i.value for i in TransformationIntent]}"
    )
