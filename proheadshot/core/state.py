"""
Session state machine for headshot generation.

``transition`` is pure: it maps (state, event) to the next state plus the
effects the caller must perform, in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

from proheadshot.core.errors import InvalidTransition, ServiceErrorKind
from proheadshot.core.image_io import ImageArtifact, SourceImage
from proheadshot.core.prompt_templates import InstructionPayload


# --- STATES ---


@dataclass(frozen=True)
class Idle:
    status: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Ready:
    image: SourceImage
    status: ClassVar[str] = "ready"


@dataclass(frozen=True)
class Generating:
    image: SourceImage
    token: int
    status: ClassVar[str] = "generating"


@dataclass(frozen=True)
class Succeeded:
    image: SourceImage
    artifact: ImageArtifact
    token: int
    status: ClassVar[str] = "succeeded"


@dataclass(frozen=True)
class Failed:
    image: SourceImage
    error: str
    token: int
    kind: Optional[ServiceErrorKind] = None
    status: ClassVar[str] = "failed"


SessionState = Union[Idle, Ready, Generating, Succeeded, Failed]


# --- EVENTS ---


@dataclass(frozen=True)
class ImageLoaded:
    image: SourceImage


@dataclass(frozen=True)
class ImageCleared:
    pass


@dataclass(frozen=True)
class GenerateRequested:
    allowed: bool
    today: str
    payload: Optional[InstructionPayload] = None


@dataclass(frozen=True)
class ResponseReceived:
    token: int
    artifact: Optional[ImageArtifact] = None
    error: Optional[str] = None
    kind: Optional[ServiceErrorKind] = None


Event = Union[ImageLoaded, ImageCleared, GenerateRequested, ResponseReceived]


# --- EFFECTS ---


@dataclass(frozen=True)
class RecordAttempt:
    today: str


@dataclass(frozen=True)
class DispatchRequest:
    token: int
    image: SourceImage
    payload: InstructionPayload


@dataclass(frozen=True)
class NotifyQuotaExceeded:
    pass


Effect = Union[RecordAttempt, DispatchRequest, NotifyQuotaExceeded]


@dataclass(frozen=True)
class Transition:
    state: SessionState
    effects: Tuple[Effect, ...] = ()


def ensure_can_generate(state: SessionState) -> None:
    """Raise InvalidTransition unless a new request may start from ``state``."""
    if isinstance(state, Idle):
        raise InvalidTransition("Upload a photo before generating")
    if isinstance(state, Generating):
        raise InvalidTransition("A headshot is already being generated")


def transition(state: SessionState, event: Event, next_token: int) -> Transition:
    """
    Compute the next state.

    Args:
        state: Current session state
        event: What happened
        next_token: Generation token to mint if this event starts a request

    Raises:
        InvalidTransition: If the event is not allowed in ``state``
    """
    if isinstance(event, ImageLoaded):
        if isinstance(state, Generating):
            raise InvalidTransition("Cannot replace the image while a headshot is generating")
        return Transition(Ready(image=event.image))

    if isinstance(event, ImageCleared):
        if isinstance(state, Idle):
            return Transition(state)
        return Transition(Idle())

    if isinstance(event, GenerateRequested):
        ensure_can_generate(state)
        if not event.allowed:
            return Transition(state, (NotifyQuotaExceeded(),))
        if event.payload is None:
            raise InvalidTransition("Generation requested without an instruction payload")

        return Transition(
            Generating(image=state.image, token=next_token),
            (
                RecordAttempt(today=event.today),
                DispatchRequest(token=next_token, image=state.image, payload=event.payload),
            ),
        )

    if isinstance(event, ResponseReceived):
        # Responses for superseded or discarded requests leave the state alone
        if not isinstance(state, Generating) or state.token != event.token:
            return Transition(state)
        if event.artifact is not None:
            return Transition(
                Succeeded(image=state.image, artifact=event.artifact, token=event.token)
            )
        return Transition(
            Failed(
                image=state.image,
                error=event.error or "An unexpected error occurred",
                token=event.token,
                kind=event.kind,
            )
        )

    raise InvalidTransition(f"Unknown event: {event!r}")


__all__ = [
    "Idle",
    "Ready",
    "Generating",
    "Succeeded",
    "Failed",
    "SessionState",
    "ensure_can_generate",
    "ImageLoaded",
    "ImageCleared",
    "GenerateRequested",
    "ResponseReceived",
    "RecordAttempt",
    "DispatchRequest",
    "NotifyQuotaExceeded",
    "Transition",
    "transition",
]
