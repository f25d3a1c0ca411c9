"""Exception types raised by the headshot generation core."""

from enum import Enum


class ConfigurationError(Exception):
    """Raised on an invalid catalog lookup. Indicates a programming error."""


class QuotaExceeded(Exception):
    """Raised when the daily generation allowance for a device is used up."""

    def __init__(self, limit: int, message: str | None = None):
        self.limit = limit
        super().__init__(
            message
            or (
                f"You have used all {limit} free generations for today. "
                "Please come back tomorrow to create more professional headshots."
            )
        )


class ServiceErrorKind(str, Enum):
    MISSING_CREDENTIAL = "MissingCredential"
    NO_IMAGE_RETURNED = "NoImageReturned"
    TRANSPORT_FAILURE = "TransportFailure"
    MALFORMED_RESPONSE = "MalformedResponse"


class ServiceError(Exception):
    """Failure reported by the image service adapter."""

    def __init__(self, kind: ServiceErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"ServiceError(kind={self.kind.value!r}, message={self.message!r})"


class InvalidTransition(Exception):
    """Raised when an operation is not allowed in the current session state."""


class ImageRejected(Exception):
    """Raised by the upload step when the source is not a usable image."""


__all__ = [
    "ConfigurationError",
    "QuotaExceeded",
    "ServiceErrorKind",
    "ServiceError",
    "InvalidTransition",
    "ImageRejected",
]
