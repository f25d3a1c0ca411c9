"""Orchestrates quota gating, prompt assembly and dispatch for one device session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

from proheadshot.config import logger
from proheadshot.core import catalog
from proheadshot.core.catalog import BackgroundColor, Gender, OutfitOption
from proheadshot.core.errors import (
    ConfigurationError,
    InvalidTransition,
    QuotaExceeded,
    ServiceError,
)
from proheadshot.core.gemini import ImageServiceAdapter
from proheadshot.core.image_io import SourceImage
from proheadshot.core.prompt_templates import assemble
from proheadshot.core.rate_limit import QuotaTracker, today_key
from proheadshot.core.state import (
    DispatchRequest,
    Failed,
    GenerateRequested,
    Generating,
    Idle,
    ImageCleared,
    ImageLoaded,
    NotifyQuotaExceeded,
    RecordAttempt,
    ResponseReceived,
    SessionState,
    Succeeded,
    Transition,
    ensure_can_generate,
    transition,
)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

StateListener = Callable[[SessionState], None]
NoticeListener = Callable[[str], None]


def _log(level: int, message: str, **context: Any) -> None:
    """Helper to emit structured logs with contextual metadata."""
    logger.log(level, "%s | context=%s", message, context)


@dataclass
class GenerationConfig:
    """Selected outfit, background and free-text instruction."""

    gender: Gender = Gender.MALE
    outfit_id: Optional[str] = None
    background: BackgroundColor = BackgroundColor.WHITE
    custom_instruction: str = ""

    def __post_init__(self) -> None:
        self.gender = Gender(self.gender)
        self.background = BackgroundColor(self.background)
        if self.outfit_id is None:
            self.outfit_id = catalog.default_outfit(self.gender).id
        self._check_outfit(self.outfit_id, self.gender)

    @staticmethod
    def _check_outfit(outfit_id: str, gender: Gender) -> OutfitOption:
        outfit = catalog.get_outfit(outfit_id)
        if not outfit.is_available_for(gender):
            raise ConfigurationError(
                f"Outfit {outfit_id} is not available for {gender.value}"
            )
        return outfit

    @property
    def outfit(self) -> OutfitOption:
        return catalog.get_outfit(self.outfit_id)

    def set_gender(self, gender: Gender) -> None:
        """Switch gender and move to the first outfit offered for it."""
        gender = Gender(gender)
        if gender == self.gender:
            return
        first = catalog.default_outfit(gender)
        self.gender, self.outfit_id = gender, first.id

    def select_outfit(self, outfit_id: str) -> None:
        self._check_outfit(outfit_id, self.gender)
        self.outfit_id = outfit_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gender": self.gender.value,
            "outfit_id": self.outfit_id,
            "background": self.background.value,
            "custom_instruction": self.custom_instruction,
        }


class GenerationOrchestrator:
    """
    Drives one device's session: upload, configure, generate, result/error.

    At most one request is live at a time. Every entry into ``Generating``
    mints a new token; a response carrying an older token is dropped.
    """

    def __init__(
        self,
        tracker: QuotaTracker,
        adapter: ImageServiceAdapter,
        config: Optional[GenerationConfig] = None,
        clock: Callable[[], str] = today_key,
    ):
        self.tracker = tracker
        self.adapter = adapter
        self.config = config or GenerationConfig()
        self._clock = clock
        self._state: SessionState = Idle()
        self._last_token = 0
        self._state_listeners: List[StateListener] = []
        self._notice_listeners: List[NoticeListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_generating(self) -> bool:
        return isinstance(self._state, Generating)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new state. Returns an unsubscribe function."""
        self._state_listeners.append(listener)
        return lambda: self._state_listeners.remove(listener)

    def on_notice(self, listener: NoticeListener) -> None:
        self._notice_listeners.append(listener)

    # --- configuration ---

    def set_gender(self, gender: Gender) -> None:
        self.config.set_gender(gender)

    def select_outfit(self, outfit_id: str) -> None:
        self.config.select_outfit(outfit_id)

    def set_background(self, background: BackgroundColor) -> None:
        self.config.background = BackgroundColor(background)

    def set_custom_instruction(self, text: str) -> None:
        self.config.custom_instruction = text or ""

    def update_config(
        self,
        gender: Optional[Gender] = None,
        outfit_id: Optional[str] = None,
        background: Optional[BackgroundColor] = None,
        custom_instruction: Optional[str] = None,
    ) -> GenerationConfig:
        """Apply a partial update all at once; on error nothing changes."""
        candidate = replace(self.config)
        if gender is not None:
            candidate.set_gender(gender)
        if outfit_id is not None:
            candidate.select_outfit(outfit_id)
        if background is not None:
            candidate.background = BackgroundColor(background)
        if custom_instruction is not None:
            candidate.custom_instruction = custom_instruction
        self.config = candidate
        return candidate

    def quota_status(self) -> Dict[str, Any]:
        return self.tracker.status(self._clock())

    # --- image ---

    def load_image(self, image: SourceImage) -> SessionState:
        self._apply(transition(self._state, ImageLoaded(image), self._last_token))
        return self._state

    def clear_image(self) -> SessionState:
        if isinstance(self._state, Generating):
            _log(
                logging.INFO,
                "in_flight_request_discarded",
                token=self._state.token,
            )
        self._apply(transition(self._state, ImageCleared(), self._last_token))
        return self._state

    # --- generation ---

    def request_generation(self) -> DispatchRequest:
        """
        Gate on quota, charge the attempt and enter ``Generating``.

        Returns:
            The request to hand to ``dispatch``

        Raises:
            InvalidTransition: No image loaded, or a request is already live
            QuotaExceeded: Daily allowance used up; nothing is charged
        """
        ensure_can_generate(self._state)

        today = self._clock()
        allowed = self.tracker.may_generate(today)
        payload = None
        if allowed:
            payload = assemble(
                self.config.outfit,
                self.config.background,
                self.config.custom_instruction,
            )

        request = self._apply(
            transition(
                self._state,
                GenerateRequested(allowed=allowed, today=today, payload=payload),
                self._last_token + 1,
            )
        )
        if request is None:
            raise QuotaExceeded(self.tracker.limit)
        return request

    async def dispatch(self, request: DispatchRequest) -> SessionState:
        """Send the request and apply its outcome unless it has been superseded."""
        _log(
            logging.INFO,
            "generation_dispatched",
            token=request.token,
            outfit_id=self.config.outfit_id,
            background=self.config.background.value,
        )

        try:
            artifact = await self.adapter.submit(
                request.image.data, request.image.mime_type, request.payload
            )
            event = ResponseReceived(token=request.token, artifact=artifact)
        except ServiceError as exc:
            _log(
                logging.ERROR,
                "generation_error",
                token=request.token,
                kind=exc.kind.value,
                error=exc.message,
            )
            event = ResponseReceived(
                token=request.token, error=exc.message, kind=exc.kind
            )
        except Exception as exc:
            logger.error("Unexpected error during generation", exc_info=True)
            event = ResponseReceived(
                token=request.token, error=str(exc) or UNEXPECTED_ERROR_MESSAGE
            )

        if not self._is_live(request.token):
            _log(logging.INFO, "stale_response_ignored", token=request.token)
            return self._state

        self._apply(transition(self._state, event, self._last_token))
        if isinstance(self._state, Succeeded):
            _log(logging.INFO, "generation_complete", token=request.token)
        return self._state

    async def generate(self) -> SessionState:
        """Charge an attempt and run it to completion."""
        request = self.request_generation()
        return await self.dispatch(request)

    async def regenerate(self) -> SessionState:
        """Retry with the current configuration after a result or an error."""
        if not isinstance(self._state, (Succeeded, Failed)):
            raise InvalidTransition("Nothing to regenerate yet")
        return await self.generate()

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the session for API responses."""
        state = self._state
        data: Dict[str, Any] = {
            "status": state.status,
            "has_image": not isinstance(state, Idle),
            "generating": isinstance(state, Generating),
            "token": getattr(state, "token", None),
            "result_url": None,
            "prompt_used": None,
            "error": None,
            "error_kind": None,
            "config": self.config.to_dict(),
        }
        if isinstance(state, Succeeded):
            data["result_url"] = state.artifact.data_url
            data["prompt_used"] = state.artifact.prompt_used
        elif isinstance(state, Failed):
            data["error"] = state.error
            data["error_kind"] = state.kind.value if state.kind else None
        return data

    # --- internals ---

    def _is_live(self, token: int) -> bool:
        return isinstance(self._state, Generating) and self._state.token == token

    def _apply(self, result: Transition) -> Optional[DispatchRequest]:
        """Commit a transition, run its effects in order and notify listeners."""
        previous = self._state
        self._state = result.state
        request: Optional[DispatchRequest] = None

        for effect in result.effects:
            if isinstance(effect, RecordAttempt):
                self.tracker.record_attempt(effect.today)
            elif isinstance(effect, DispatchRequest):
                self._last_token = effect.token
                request = effect
            elif isinstance(effect, NotifyQuotaExceeded):
                self._notify_quota_exceeded()

        if self._state is not previous:
            for listener in list(self._state_listeners):
                listener(self._state)

        return request

    def _notify_quota_exceeded(self) -> None:
        message = str(QuotaExceeded(self.tracker.limit))
        _log(logging.WARNING, "quota_exceeded", limit=self.tracker.limit)
        for listener in list(self._notice_listeners):
            listener(message)


__all__ = [
    "GenerationConfig",
    "GenerationOrchestrator",
    "UNEXPECTED_ERROR_MESSAGE",
]
