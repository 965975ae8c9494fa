"""
Builds the text sent to the LLM for initial generation and for refinement.
"""
import json
from typing import List, Optional, Sequence

from models.conversation import Message, MessageRole
from models.generation import Framework, GenerationOptions
from prompts.generation_prompts import (
    COMPLETENESS_FOOTER,
    FRAMEWORK_PROMPTS,
    INITIAL_PROMPT,
    REFINEMENT_CONTEXT,
    REFINEMENT_PROMPT,
)
from services.exceptions import ValidationError


def get_framework_instructions(framework: Framework) -> str:
    """Get the formatting instructions for a framework."""
    return FRAMEWORK_PROMPTS[Framework(framework).value]["instructions"]


def get_framework_label(framework: Framework) -> str:
    # "Generate code for a react website" but "Generate code for a website" for vanilla
    framework = Framework(framework)
    return "" if framework == Framework.VANILLA else f"{framework.value} "


def format_conversation(conversation_history: Sequence[Message]) -> str:
    """Render messages as 'User: ...' / 'Assistant: ...' lines."""
    lines = []
    for message in conversation_history:
        role = "User" if message.role == MessageRole.USER else "Assistant"
        lines.append(f"{role}: {message.content}")
    return "\n".join(lines)


def serialize_options(options: Optional[GenerationOptions]) -> str:
    if options is None:
        return "{}"
    return json.dumps(options.model_dump(mode="json", by_alias=True))


def build_generation_prompt(
    user_prompt: str,
    conversation_history: Optional[List[Message]] = None,
    options: Optional[GenerationOptions] = None,
) -> str:
    """
    Build the full prompt for the LLM.

    A non-empty conversation_history puts the builder in refinement mode: the
    prior messages are included and the model is asked for the complete
    updated code. Otherwise the initial generation template is used along with
    the serialized options.

    Same inputs always give the same string.
    """
    if not user_prompt or not user_prompt.strip():
        raise ValidationError("Prompt is required")

    framework = options.framework if options else Framework.VANILLA
    framework_label = get_framework_label(framework)
    framework_instructions = get_framework_instructions(framework)

    if conversation_history:
        refinement_context = REFINEMENT_CONTEXT.format(
            conversation_context=format_conversation(conversation_history),
            user_prompt=user_prompt,
        )
        return REFINEMENT_PROMPT.format(
            refinement_context=refinement_context,
            framework_label=framework_label,
            framework_instructions=framework_instructions,
            footer=COMPLETENESS_FOOTER,
        )

    return INITIAL_PROMPT.format(
        framework_label=framework_label,
        user_prompt=user_prompt,
        options_json=serialize_options(options),
        framework_instructions=framework_instructions,
        footer=COMPLETENESS_FOOTER,
    )
