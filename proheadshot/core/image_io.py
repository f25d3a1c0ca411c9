"""Boundary helpers for images entering and leaving the generation core."""

from __future__ import annotations

import base64
import binascii
import mimetypes
import time
from dataclasses import dataclass, field
from typing import Optional, Tuple

from proheadshot.core.errors import ImageRejected


@dataclass(frozen=True)
class SourceImage:
    """Uploaded selfie as raw base64 plus its MIME type."""

    data: str
    mime_type: str = "image/jpeg"

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class ImageArtifact:
    """Displayable generated image."""

    data_url: str
    mime_type: str
    prompt_used: str = ""
    created_at: float = field(default_factory=time.time)

    def to_bytes(self) -> bytes:
        _, _, encoded = self.data_url.partition(",")
        return base64.b64decode(encoded)


def _sniff_mime_type(filename: Optional[str]) -> Optional[str]:
    if not filename:
        return None
    guessed, _ = mimetypes.guess_type(filename)
    return guessed


def decode_upload(
    raw: bytes,
    content_type: Optional[str] = None,
    filename: Optional[str] = None,
) -> SourceImage:
    """
    Turn an uploaded file into a SourceImage.

    Raises:
        ImageRejected: If the file is empty or is not an image
    """
    mime_type = content_type or _sniff_mime_type(filename)
    if not mime_type or not mime_type.startswith("image/"):
        raise ImageRejected("Please upload an image file.")
    if not raw:
        raise ImageRejected("Uploaded image is empty.")

    return SourceImage(data=base64.b64encode(raw).decode("utf-8"), mime_type=mime_type)


def parse_data_uri(data_uri: str) -> SourceImage:
    """Split a ``data:<mime>;base64,<data>`` reference into a SourceImage."""
    header, sep, encoded = data_uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ImageRejected("Invalid data URI provided for image input")

    mime_type = header[len("data:") : -len(";base64")]
    if not mime_type.startswith("image/"):
        raise ImageRejected("Please upload an image file.")

    try:
        base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageRejected("Provided image string is not valid base64") from exc

    return SourceImage(data=encoded, mime_type=mime_type)


def build_download(artifact: ImageArtifact) -> Tuple[bytes, str, str]:
    """Return ``(content, filename, mime_type)`` for saving a generated image."""
    filename = f"professional-headshot-{int(artifact.created_at * 1000)}.png"
    return artifact.to_bytes(), filename, artifact.mime_type


__all__ = [
    "SourceImage",
    "ImageArtifact",
    "decode_upload",
    "parse_data_uri",
    "build_download",
]
