"""
Tests for the LLM prompt builder
"""
import json

import pytest

from models.conversation import Message, MessageRole
from models.generation import Framework, GenerationOptions
from prompts.generation_prompts import FRAMEWORK_PROMPTS
from services.exceptions import ValidationError
from services.prompt_builder import (
    build_generation_prompt,
    format_conversation,
    get_framework_label,
    serialize_options,
)


@pytest.fixture
def history():
    return [
        Message(role=MessageRole.USER, content="A bakery landing page"),
        Message(role=MessageRole.ASSISTANT, content="Here it is."),
    ]


class TestInitialPrompt:
    def test_contains_prompt_and_vanilla_instructions(self):
        text = build_generation_prompt("A bakery landing page")

        assert text.startswith("Generate code for a website based on this description: A bakery landing page")
        assert "use these options: {}" in text
        assert "```html" in text
        assert "```css" in text
        assert "```javascript" in text
        assert "conversation history" not in text

    def test_framework_label_and_instructions(self):
        options = GenerationOptions(framework=Framework.REACT)
        text = build_generation_prompt("A todo app", options=options)

        assert "Generate code for a react website" in text
        assert FRAMEWORK_PROMPTS["react"]["instructions"] in text

    def test_astro_asks_for_additional_components(self):
        text = build_generation_prompt("A blog", options=GenerationOptions(framework=Framework.ASTRO))

        assert "2. Additional components if needed (wrapped in appropriate ``` tags)" in text
        assert "Additional CSS if needed" not in text

    @pytest.mark.parametrize("framework", [Framework.VUE, Framework.SVELTE])
    def test_vue_and_svelte_ask_for_additional_css(self, framework):
        text = build_generation_prompt("A blog", options=GenerationOptions(framework=framework))
        assert "2. Additional CSS if needed (wrapped in ```css tags)" in text

    def test_react_asks_for_css(self):
        text = build_generation_prompt("A blog", options=GenerationOptions(framework=Framework.REACT))
        assert "2. CSS code (wrapped in ```css tags)" in text

    def test_options_are_serialized_in_camel_case(self):
        options = GenerationOptions(features=["responsive", "dark-mode", "responsive"])
        text = build_generation_prompt("A blog", options=options)

        payload = json.loads(serialize_options(options))
        assert payload["features"] == ["responsive", "dark-mode"]
        assert payload["style"] == {"colorScheme": "blue", "layout": "modern"}
        assert serialize_options(options) in text

    def test_same_inputs_give_same_prompt(self):
        options = GenerationOptions(framework="vue", features=["a", "b"])
        assert build_generation_prompt("x", options=options) == build_generation_prompt("x", options=options)

    @pytest.mark.parametrize("prompt", ["", "   ", None])
    def test_blank_prompt_is_rejected(self, prompt):
        with pytest.raises(ValidationError):
            build_generation_prompt(prompt)


class TestRefinementPrompt:
    def test_includes_history_and_change_request(self, history):
        text = build_generation_prompt("Make the header blue", history)

        assert "Here's our conversation history:" in text
        assert "User: A bakery landing page\nAssistant: Here it is." in text
        assert "Now the user wants the following changes:\nMake the header blue" in text
        assert "Please provide the COMPLETE updated code for a website." in text
        assert "Include ALL the previous functionality plus the requested changes." in text

    def test_options_json_is_not_repeated(self, history):
        text = build_generation_prompt("Add a footer", history, GenerationOptions())
        assert "use these options" not in text

    def test_empty_history_means_initial_mode(self):
        # Prompts that merely mention history must not switch modes
        text = build_generation_prompt("conversation history: previously created", [])
        assert text.startswith("Generate code for a website")

    def test_refinement_is_deterministic(self, history):
        assert build_generation_prompt("Add a footer", history) == build_generation_prompt("Add a footer", history)


class TestHelpers:
    def test_framework_label(self):
        assert get_framework_label(Framework.VANILLA) == ""
        assert get_framework_label("svelte") == "svelte "

    def test_format_conversation(self, history):
        assert format_conversation(history) == "User: A bakery landing page\nAssistant: Here it is."
        assert format_conversation([]) == ""
