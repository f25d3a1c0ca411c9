"""Tests for the pure session transition function."""

import pytest

from proheadshot.core.errors import InvalidTransition, ServiceErrorKind
from proheadshot.core.prompt_templates import InstructionPayload
from proheadshot.core.state import (
    DispatchRequest,
    Failed,
    GenerateRequested,
    Generating,
    Idle,
    ImageCleared,
    ImageLoaded,
    NotifyQuotaExceeded,
    Ready,
    RecordAttempt,
    ResponseReceived,
    Succeeded,
    transition,
)
from tests.conftest import TODAY, make_artifact

PAYLOAD = InstructionPayload(text="edit")


def test_upload_moves_idle_to_ready(selfie):
    result = transition(Idle(), ImageLoaded(selfie), 0)

    assert result.state == Ready(image=selfie)
    assert result.effects == ()


def test_clear_returns_to_idle_from_any_state(selfie):
    for state in (
        Ready(selfie),
        Generating(selfie, 3),
        Succeeded(selfie, make_artifact("a"), 3),
        Failed(selfie, "boom", 3),
    ):
        assert transition(state, ImageCleared(), 3).state == Idle()


def test_clear_when_idle_keeps_state():
    idle = Idle()
    result = transition(idle, ImageCleared(), 1)

    assert result.state is idle
    assert result.effects == ()


def test_generate_allowed_charges_then_dispatches(selfie):
    result = transition(
        Ready(selfie), GenerateRequested(allowed=True, today=TODAY, payload=PAYLOAD), 7
    )

    assert result.state == Generating(image=selfie, token=7)
    assert result.effects == (
        RecordAttempt(today=TODAY),
        DispatchRequest(token=7, image=selfie, payload=PAYLOAD),
    )


def test_generate_blocked_by_quota_keeps_state(selfie):
    state = Failed(selfie, "earlier", 2)

    result = transition(state, GenerateRequested(allowed=False, today=TODAY), 3)

    assert result.state is state
    assert result.effects == (NotifyQuotaExceeded(),)


@pytest.mark.parametrize("allowed", [True, False])
def test_generate_without_image_is_invalid(allowed):
    with pytest.raises(InvalidTransition):
        transition(Idle(), GenerateRequested(allowed=allowed, today=TODAY, payload=PAYLOAD), 1)


def test_generate_while_generating_is_invalid(selfie):
    with pytest.raises(InvalidTransition):
        transition(
            Generating(selfie, 1),
            GenerateRequested(allowed=True, today=TODAY, payload=PAYLOAD),
            2,
        )


def test_upload_while_generating_is_invalid(selfie):
    with pytest.raises(InvalidTransition):
        transition(Generating(selfie, 1), ImageLoaded(selfie), 1)


def test_matching_response_succeeds(selfie):
    artifact = make_artifact("done")

    result = transition(Generating(selfie, 4), ResponseReceived(4, artifact=artifact), 4)

    assert result.state == Succeeded(image=selfie, artifact=artifact, token=4)


def test_matching_error_fails_and_keeps_image(selfie):
    result = transition(
        Generating(selfie, 4),
        ResponseReceived(4, error="no image", kind=ServiceErrorKind.NO_IMAGE_RETURNED),
        4,
    )

    assert result.state == Failed(
        image=selfie, error="no image", token=4, kind=ServiceErrorKind.NO_IMAGE_RETURNED
    )


def test_stale_response_is_ignored(selfie):
    state = Generating(selfie, 5)

    result = transition(state, ResponseReceived(4, artifact=make_artifact("old")), 5)

    assert result.state is state
    assert result.effects == ()


def test_response_after_clear_is_ignored():
    state = Idle()

    assert transition(state, ResponseReceived(1, error="late"), 1).state is state
