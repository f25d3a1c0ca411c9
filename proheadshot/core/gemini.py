"""Gemini image-editing client used to produce professional headshots."""

from typing import Any, Dict, List, Optional

import httpx

from proheadshot.config import (
    GEMINI_API_BASE,
    GEMINI_IMAGE_MODEL,
    GEMINI_KEY,
    GEMINI_TIMEOUT_SECONDS,
    logger,
)
from proheadshot.core.errors import ServiceError, ServiceErrorKind
from proheadshot.core.image_io import ImageArtifact
from proheadshot.core.prompt_templates import InstructionPayload

DEFAULT_RESULT_MIME_TYPE = "image/png"


class ImageServiceAdapter:
    """
    Sends one edit request to the Gemini ``generateContent`` endpoint and
    returns the first inline image of the reply.
    """

    def __init__(
        self,
        api_key: Optional[str] = GEMINI_KEY,
        model: str = GEMINI_IMAGE_MODEL,
        base_url: str = GEMINI_API_BASE,
        timeout: float = GEMINI_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_request(
        self, image_base64: str, mime_type: str, payload: InstructionPayload
    ) -> Dict[str, Any]:
        """Request body: source image first, then the instruction text."""
        return {
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": mime_type, "data": image_base64}},
                        {"text": payload.text},
                    ]
                }
            ],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                "imageConfig": {"aspectRatio": payload.aspect_ratio},
            },
        }

    async def submit(
        self, image_base64: str, mime_type: str, payload: InstructionPayload
    ) -> ImageArtifact:
        """
        Generate a headshot from the source image.

        Args:
            image_base64: Raw base64 data of the uploaded selfie
            mime_type: MIME type of the uploaded selfie
            payload: Assembled instruction payload

        Returns:
            ImageArtifact holding a data URL of the generated image

        Raises:
            ServiceError: MissingCredential before any network call,
                TransportFailure, MalformedResponse or NoImageReturned otherwise
        """
        if not self.api_key:
            logger.error(
                "API Key not found. Please ensure GEMINI_KEY is set in your environment."
            )
            raise ServiceError(
                ServiceErrorKind.MISSING_CREDENTIAL,
                "API Key is missing. Please check your environment variables.",
            )

        logger.info("=" * 80)
        logger.info("HEADSHOT PROMPT:")
        logger.info(payload.text)
        logger.info("=" * 80)

        request_body = self.build_request(image_base64, mime_type, payload)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.endpoint,
                    json=request_body,
                    headers={
                        "Content-Type": "application/json",
                        "x-goog-api-key": self.api_key,
                    },
                )
                response.raise_for_status()
                api_result = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Gemini API HTTP error",
                extra={"status_code": exc.response.status_code},
            )
            raise ServiceError(
                ServiceErrorKind.TRANSPORT_FAILURE,
                f"Gemini API HTTP error: {exc.response.status_code} - {exc.response.text}",
            ) from exc
        except httpx.RequestError as exc:
            logger.error(f"Network error calling Gemini API: {exc}")
            raise ServiceError(
                ServiceErrorKind.TRANSPORT_FAILURE,
                f"Network error calling Gemini API: {exc}",
            ) from exc
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError both derive from ValueError
            raise ServiceError(
                ServiceErrorKind.MALFORMED_RESPONSE,
                "Gemini API returned a response that is not valid JSON",
            ) from exc

        parts = _extract_parts(api_result)
        artifact = _first_inline_image(parts, payload.text)
        if artifact is None:
            logger.error(
                "No image found in Gemini API response",
                extra={"part_count": len(parts)},
            )
            raise ServiceError(
                ServiceErrorKind.NO_IMAGE_RETURNED,
                "No image generated in the response.",
            )

        logger.info("Headshot image received", extra={"mime_type": artifact.mime_type})
        return artifact


def _extract_parts(api_result: Any) -> List[Dict[str, Any]]:
    """Return the parts of the first candidate, validating the response shape."""
    if not isinstance(api_result, dict):
        raise ServiceError(
            ServiceErrorKind.MALFORMED_RESPONSE, "Invalid Gemini API response structure"
        )

    candidates = api_result.get("candidates")
    if not candidates:
        # A well-formed reply with nothing generated, e.g. blocked by safety filters
        if "candidates" in api_result or "promptFeedback" in api_result:
            return []
        raise ServiceError(
            ServiceErrorKind.MALFORMED_RESPONSE, "Gemini API returned no candidates"
        )

    if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise ServiceError(
            ServiceErrorKind.MALFORMED_RESPONSE, "Invalid Gemini API response structure"
        )

    content = candidates[0].get("content")
    if content is None:
        return []
    if not isinstance(content, dict):
        raise ServiceError(
            ServiceErrorKind.MALFORMED_RESPONSE, "Invalid Gemini API response structure"
        )
    parts = content.get("parts")
    if parts is None:
        return []
    if not isinstance(parts, list):
        raise ServiceError(
            ServiceErrorKind.MALFORMED_RESPONSE, "Invalid Gemini API response structure"
        )
    return [part for part in parts if isinstance(part, dict)]


def _first_inline_image(
    parts: List[Dict[str, Any]], prompt_used: str
) -> Optional[ImageArtifact]:
    for part in parts:
        # Check both camelCase and snake_case formats
        inline = part.get("inlineData") or part.get("inline_data")
        if not isinstance(inline, dict) or not inline.get("data"):
            continue

        mime_type = (
            inline.get("mimeType") or inline.get("mime_type") or DEFAULT_RESULT_MIME_TYPE
        )
        return ImageArtifact(
            data_url=f"data:{mime_type};base64,{inline['data']}",
            mime_type=mime_type,
            prompt_used=prompt_used,
        )
    return None


__all__ = ["ImageServiceAdapter", "DEFAULT_RESULT_MIME_TYPE"]
