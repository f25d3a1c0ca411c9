"""FastAPI dependencies shared across headshot endpoints."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from proheadshot.config import logger
from proheadshot.core.gemini import ImageServiceAdapter
from proheadshot.core.quota_store import create_quota_store
from proheadshot.services.generation_service import GenerationOrchestrator
from proheadshot.services.session_registry import SessionRegistry

from .utils import build_device_key, get_client_ip

_registry: Optional[SessionRegistry] = None


def get_registry() -> SessionRegistry:
    """Get or create the process-wide session registry."""
    global _registry

    if _registry is None:
        _registry = SessionRegistry(create_quota_store(), ImageServiceAdapter())
        logger.info("Session registry initialized")

    return _registry


def get_device_id(
    request: Request,
    device_id: Optional[str] = Header(default=None, alias="X-Device-Id"),
) -> str:
    """Identify the device by explicit header, falling back to IP and user agent."""
    if device_id and device_id.strip():
        return device_id.strip()

    derived = build_device_key(request, get_client_ip(request))
    if not derived:
        raise HTTPException(
            status_code=400,
            detail="Unable to identify device: send an X-Device-Id header",
        )
    return derived


def get_session(
    device_id: str = Depends(get_device_id),
    registry: SessionRegistry = Depends(get_registry),
) -> GenerationOrchestrator:
    return registry.get(device_id)
