"""Tests for headshot prompt assembly."""

from proheadshot.core import catalog
from proheadshot.core.catalog import BackgroundColor, Gender
from proheadshot.core.prompt_templates import DEFAULTS, assemble


def _suit():
    return catalog.get_outfit("m-corp-suit")


def test_assemble_is_deterministic():
    first = assemble(_suit(), BackgroundColor.BLUE, "")
    second = assemble(_suit(), BackgroundColor.BLUE, "")

    assert first == second
    assert first.text == second.text


def test_assemble_sections_in_order():
    outfit = _suit()
    text = assemble(outfit, BackgroundColor.GREY, "").text

    positions = [
        text.index(DEFAULTS.identity_directive),
        text.index(outfit.prompt_fragment),
        text.index(catalog.background_prompt(BackgroundColor.GREY)),
        text.index(DEFAULTS.lighting_directive),
        text.index(catalog.GLOBAL_NEGATIVE_PROMPT),
    ]
    assert positions == sorted(positions)


def test_empty_custom_instruction_is_omitted():
    text = assemble(_suit(), BackgroundColor.WHITE, "").text

    assert "Additional Request" not in text


def test_custom_instruction_included_verbatim_at_end():
    instruction = "Keep my glasses {clear lenses}, tidy hair"
    base = assemble(_suit(), BackgroundColor.WHITE, "")
    custom = assemble(_suit(), BackgroundColor.WHITE, instruction)

    assert custom.text != base.text
    assert instruction in custom.text
    assert custom.text.index(instruction) > custom.text.index(catalog.GLOBAL_NEGATIVE_PROMPT)


def test_payload_requests_portrait_aspect_ratio():
    assert assemble(_suit(), BackgroundColor.OFFICE).aspect_ratio == "3:4"


def test_different_outfits_give_different_payloads():
    male = assemble(_suit(), BackgroundColor.WHITE, "")
    female = assemble(catalog.default_outfit(Gender.FEMALE), BackgroundColor.WHITE, "")

    assert male.text != female.text
