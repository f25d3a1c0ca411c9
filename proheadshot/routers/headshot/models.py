"""Pydantic models used by the headshot router."""

from typing import List, Optional

from pydantic import BaseModel, Field

from proheadshot.core.catalog import BackgroundColor, Gender


class OutfitResponse(BaseModel):
    """One selectable outfit."""

    id: str
    label: str
    description: str
    gender: str


class BackgroundResponse(BaseModel):
    """One background preset."""

    tag: BackgroundColor
    label: str
    prompt_fragment: str


class ConfigResponse(BaseModel):
    gender: Gender
    outfit_id: str
    background: BackgroundColor
    custom_instruction: str = ""


class ConfigUpdateRequest(BaseModel):
    """Partial configuration update; omitted fields are left unchanged."""

    gender: Optional[Gender] = None
    outfit_id: Optional[str] = None
    background: Optional[BackgroundColor] = None
    custom_instruction: Optional[str] = Field(None, max_length=1000)


class DataUriUploadRequest(BaseModel):
    """Selfie supplied as a ``data:image/...;base64,...`` reference."""

    data_uri: str


class RateLimitResponse(BaseModel):
    """Daily quota details for the requesting device."""

    allowed: bool
    remaining: int
    total_today: int
    limit: int
    message: str


class SessionResponse(BaseModel):
    """Current session state for the requesting device."""

    status: str = Field(
        ..., description="idle, ready, generating, succeeded or failed"
    )
    has_image: bool
    generating: bool
    token: Optional[int] = None
    result_url: Optional[str] = Field(
        None, description="Data URL of the generated headshot"
    )
    prompt_used: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    config: ConfigResponse
    quota: RateLimitResponse


class CatalogOutfitsResponse(BaseModel):
    gender: Gender
    outfits: List[OutfitResponse] = Field(default_factory=list)
