"""Prompt templates and builders for the professional headshot edit."""

from __future__ import annotations

from dataclasses import dataclass

from proheadshot.core.catalog import (
    GLOBAL_NEGATIVE_PROMPT,
    BackgroundColor,
    OutfitOption,
    background_prompt,
)


# --- GENERATION PROMPT ---

PROMPT_TEMPLATE = """Act as a professional photo editor.
Edit this image to create a high-quality professional headshot suitable for a passport, ID card, or official profile.

Instructions:
1. {IDENTITY_DIRECTIVE}
2. Change the person's outfit: {OUTFIT_DESCRIPTION}. Ensure the fit looks natural and tailored.
3. Change the background to: {BACKGROUND_DESCRIPTION}.
4. {LIGHTING_DIRECTIVE}

CRITICAL NEGATIVE CONSTRAINTS (Avoid these):
{NEGATIVE_CONSTRAINTS}
{ADDITIONAL_REQUEST}
Output a high-quality, photorealistic image.
"""

ADDITIONAL_REQUEST_TEMPLATE = "\nAdditional Request: {CUSTOM_INSTRUCTION}\n"


@dataclass(frozen=True)
class PromptDefaults:
    """Fixed directives shared by every headshot prompt."""

    identity_directive: str = (
        "Keep the person's face and identity exactly the same. Do not change facial features."
    )
    lighting_directive: str = (
        "Ensure the lighting is professional studio lighting (soft, even, flattering). "
        "Aspect ratio should be strictly maintained or cropped to a 3:4 portrait ratio "
        "if possible within the square frame."
    )
    aspect_ratio: str = "3:4"


DEFAULTS = PromptDefaults()


@dataclass(frozen=True)
class InstructionPayload:
    """Text instruction sent with the source image, plus the requested framing."""

    text: str
    aspect_ratio: str = DEFAULTS.aspect_ratio


def assemble(
    outfit: OutfitOption,
    background: BackgroundColor,
    custom_instruction: str = "",
) -> InstructionPayload:
    """Render the headshot edit prompt. Identical inputs give identical payloads."""
    additional = ""
    if custom_instruction and custom_instruction.strip():
        additional = ADDITIONAL_REQUEST_TEMPLATE.format(
            CUSTOM_INSTRUCTION=custom_instruction
        )

    text = PROMPT_TEMPLATE.format(
        IDENTITY_DIRECTIVE=DEFAULTS.identity_directive,
        OUTFIT_DESCRIPTION=outfit.prompt_fragment,
        BACKGROUND_DESCRIPTION=background_prompt(background),
        LIGHTING_DIRECTIVE=DEFAULTS.lighting_directive,
        NEGATIVE_CONSTRAINTS=GLOBAL_NEGATIVE_PROMPT,
        ADDITIONAL_REQUEST=additional,
    )
    return InstructionPayload(text=text)


__all__ = [
    "PROMPT_TEMPLATE",
    "DEFAULTS",
    "PromptDefaults",
    "InstructionPayload",
    "assemble",
]
