"""FastAPI router for headshot generation endpoints."""

from typing import Any, Dict, List

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    HTTPException,
    Response,
    UploadFile,
)

from proheadshot.config import logger
from proheadshot.core import catalog
from proheadshot.core.catalog import BackgroundColor, Gender
from proheadshot.core.errors import (
    ConfigurationError,
    ImageRejected,
    InvalidTransition,
    QuotaExceeded,
)
from proheadshot.core.image_io import (
    SourceImage,
    build_download,
    decode_upload,
    parse_data_uri,
)
from proheadshot.core.state import Succeeded
from proheadshot.services.generation_service import GenerationOrchestrator

from .dependencies import get_session
from .models import (
    BackgroundResponse,
    CatalogOutfitsResponse,
    ConfigUpdateRequest,
    DataUriUploadRequest,
    OutfitResponse,
    RateLimitResponse,
    SessionResponse,
)
from .utils import quota_message, rate_limit_headers

router = APIRouter(prefix="/api/v1", tags=["Professional Headshot"])


def _rate_limit_response(status: Dict[str, Any]) -> RateLimitResponse:
    return RateLimitResponse(
        allowed=status["allowed"],
        remaining=status["remaining"],
        total_today=status["total_today"],
        limit=status["limit"],
        message=quota_message(status),
    )


def _session_response(session: GenerationOrchestrator) -> SessionResponse:
    return SessionResponse(
        **session.snapshot(),
        quota=_rate_limit_response(session.quota_status()),
    )


@router.get("/catalog/outfits", response_model=CatalogOutfitsResponse)
async def list_catalog_outfits(gender: Gender = Gender.MALE) -> CatalogOutfitsResponse:
    """List outfits offered for a gender, in catalog order."""

    return CatalogOutfitsResponse(
        gender=gender,
        outfits=[
            OutfitResponse(
                id=option.id,
                label=option.label,
                description=option.description,
                gender=getattr(option.gender, "value", option.gender),
            )
            for option in catalog.list_outfits(gender)
        ],
    )


@router.get("/catalog/backgrounds", response_model=List[BackgroundResponse])
async def list_catalog_backgrounds() -> List[BackgroundResponse]:
    return [
        BackgroundResponse(
            tag=tag, label=tag.label, prompt_fragment=catalog.background_prompt(tag)
        )
        for tag in BackgroundColor
    ]


@router.get("/session", response_model=SessionResponse)
async def get_session_state(
    session: GenerationOrchestrator = Depends(get_session),
) -> SessionResponse:
    return _session_response(session)


@router.post("/session/image", response_model=SessionResponse)
async def upload_session_image(
    image: UploadFile = File(..., description="Selfie to turn into a headshot"),
    session: GenerationOrchestrator = Depends(get_session),
) -> SessionResponse:
    """Load a selfie into the session, replacing any previous image and result."""

    raw = await image.read()
    try:
        source = decode_upload(raw, image.content_type, image.filename)
    except ImageRejected as exc:
        status_code = 400 if raw == b"" else 415
        logger.warning("Upload rejected", extra={"error": str(exc)})
        raise HTTPException(status_code=status_code, detail=str(exc))

    return _load_image(session, source)


@router.put("/session/image", response_model=SessionResponse)
async def upload_session_image_data_uri(
    payload: DataUriUploadRequest,
    session: GenerationOrchestrator = Depends(get_session),
) -> SessionResponse:
    """Load a selfie given as a data URI."""

    try:
        source = parse_data_uri(payload.data_uri)
    except ImageRejected as exc:
        raise HTTPException(status_code=415, detail=str(exc))

    return _load_image(session, source)


def _load_image(session: GenerationOrchestrator, source: SourceImage) -> SessionResponse:
    try:
        session.load_image(source)
    except InvalidTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    logger.info(
        "Image loaded",
        extra={"mime_type": source.mime_type, "size_b64": len(source.data)},
    )
    return _session_response(session)


@router.delete("/session/image", response_model=SessionResponse)
async def clear_session_image(
    session: GenerationOrchestrator = Depends(get_session),
) -> SessionResponse:
    """Remove the image. A request still in flight will have its result discarded."""

    session.clear_image()
    return _session_response(session)


@router.put("/session/config", response_model=SessionResponse)
async def update_session_config(
    update: ConfigUpdateRequest,
    session: GenerationOrchestrator = Depends(get_session),
) -> SessionResponse:
    try:
        session.update_config(
            gender=update.gender,
            outfit_id=update.outfit_id,
            background=update.background,
            custom_instruction=update.custom_instruction,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return _session_response(session)


@router.post("/session/generate", response_model=SessionResponse)
async def generate_headshot(
    response: Response,
    background_tasks: BackgroundTasks,
    wait: bool = False,
    session: GenerationOrchestrator = Depends(get_session),
) -> SessionResponse:
    """
    Charge one attempt and start generating.

    By default the request runs in the background and the ``generating``
    snapshot is returned with 202; poll ``GET /session`` for the outcome.
    With ``wait=true`` the call returns the final state.
    """
    return await _start_generation(session, response, background_tasks, wait)


@router.post("/session/regenerate", response_model=SessionResponse)
async def regenerate_headshot(
    response: Response,
    background_tasks: BackgroundTasks,
    wait: bool = False,
    session: GenerationOrchestrator = Depends(get_session),
) -> SessionResponse:
    """Retry after a result or an error, using the current configuration."""

    if session.state.status not in ("succeeded", "failed"):
        raise HTTPException(status_code=409, detail="Nothing to regenerate yet")
    return await _start_generation(session, response, background_tasks, wait)


async def _start_generation(
    session: GenerationOrchestrator,
    response: Response,
    background_tasks: BackgroundTasks,
    wait: bool,
) -> SessionResponse:
    try:
        request = session.request_generation()
    except InvalidTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except QuotaExceeded as exc:
        status = session.quota_status()
        logger.warning(
            "Daily limit reached",
            extra={"total_today": status["total_today"], "limit": status["limit"]},
        )
        raise HTTPException(
            status_code=429,
            detail=str(exc),
            headers=rate_limit_headers(status),
        )
    except Exception as exc:
        logger.error("Unexpected error starting generation", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"An unexpected error occurred: {exc}",
        )

    response.headers.update(rate_limit_headers(session.quota_status()))

    if wait:
        await session.dispatch(request)
        return _session_response(session)

    background_tasks.add_task(session.dispatch, request)
    logger.info("Background generation scheduled", extra={"token": request.token})
    response.status_code = 202
    return _session_response(session)


@router.get("/session/result")
async def download_result(
    session: GenerationOrchestrator = Depends(get_session),
) -> Response:
    """Download the generated headshot as a file."""

    state = session.state
    if not isinstance(state, Succeeded):
        raise HTTPException(status_code=404, detail="No generated headshot available")

    try:
        content, filename, mime_type = build_download(state.artifact)
    except Exception as exc:
        logger.error("Failed to decode generated image", extra={"error": str(exc)})
        raise HTTPException(
            status_code=500, detail=f"Failed to prepare download: {exc}"
        )

    return Response(
        content=content,
        media_type=mime_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/ratelimit", response_model=RateLimitResponse)
async def check_rate_limit_status(
    session: GenerationOrchestrator = Depends(get_session),
) -> RateLimitResponse:
    """Report the remaining generations for the caller's device."""

    return _rate_limit_response(session.quota_status())


@router.get("/health")
async def health_check() -> dict:
    """Simple health check endpoint."""

    return {
        "status": "healthy",
        "service": "proheadshot-api",
        "version": "1.0.0",
    }
