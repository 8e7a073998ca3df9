"""Tests for intents and prompt construction."""

from __future__ import annotations

import pytest

from inlinewrite.engine.capture import Snippet
from inlinewrite.engine.errors import NoCustomInstructionConfigured
from inlinewrite.engine.intents import (
    INTENT_REGISTRY,
    TransformationIntent,
    resolve_intent,
)
from inlinewrite.engine.prompts import build_prompt

SNIPPET = Snippet(text="i has a apple", length=13)


class TestIntentRegistry:
    def test_every_intent_has_a_definition(self) -> None:
        assert set(INTENT_REGISTRY) == set(TransformationIntent)
        for intent in TransformationIntent:
            assert intent.definition.label
            assert intent.definition.icon
            assert intent.definition.template

    def test_only_custom_is_custom(self) -> None:
        assert [i for i in TransformationIntent if i.is_custom] == [TransformationIntent.CUSTOM]

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("proofread", TransformationIntent.PROOFREAD),
            ("KEY_POINTS", TransformationIntent.KEY_POINTS),
            ("key-points", TransformationIntent.KEY_POINTS),
            ("Key Points", TransformationIntent.KEY_POINTS),
            (" custom ", TransformationIntent.CUSTOM),
        ],
    )
    def test_resolve_intent(self, name: str, expected: TransformationIntent) -> None:
        assert resolve_intent(name) is expected

    def test_resolve_unknown_intent(self) -> None:
        with pytest.raises(ValueError, match="Unknown intent 'table'"):
            resolve_intent("table")


class TestBuildPrompt:
    def test_fixed_intent_joins_template_and_snippet_with_blank_line(self) -> None:
        prompt = build_prompt(TransformationIntent.PROOFREAD, SNIPPET)

        template = TransformationIntent.PROOFREAD.definition.template
        assert prompt == template + "\n\n" + "i has a apple"

    @pytest.mark.parametrize("intent", [i for i in TransformationIntent if not i.is_custom])
    def test_fixed_intents_ignore_custom_instruction(self, intent: TransformationIntent) -> None:
        assert build_prompt(intent, SNIPPET, "shout it") == build_prompt(intent, SNIPPET)

    @pytest.mark.parametrize("intent", list(TransformationIntent))
    def test_is_deterministic(self, intent: TransformationIntent) -> None:
        first = build_prompt(intent, SNIPPET, "Make it rhyme")
        second = build_prompt(intent, SNIPPET, "Make it rhyme")
        assert first == second

    def test_custom_wraps_instruction_then_text(self) -> None:
        prompt = build_prompt(TransformationIntent.CUSTOM, SNIPPET, "Make it rhyme")

        assert prompt == (
            "Apply the user's changes to the text. Output only modified text.\n\n"
            "Instruction:\nMake it rhyme\n\n"
            "Text:\ni has a apple"
        )

    @pytest.mark.parametrize("instruction", [None, "", "   "])
    def test_custom_without_instruction_raises(self, instruction: str | None) -> None:
        with pytest.raises(NoCustomInstructionConfigured):
            build_prompt(TransformationIntent.CUSTOM, SNIPPET, instruction)
