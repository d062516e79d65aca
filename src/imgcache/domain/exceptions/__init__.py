"""Domain exceptions.

Every failure a transform request can hit is one of these. Each class carries
the user-facing reason text and the HTTP status the API maps it to, so the
exception handler never has to guess. All of them are terminal for the
request - nothing in the pipeline retries.
"""

from typing import Any, ClassVar


class ImageCacheError(Exception):
    """Base exception for all imgcache errors."""

    # Hey future me - subclasses only override default_message and http_status.
    # The message is stored as an attribute so handlers can put it into the
    # JSON "reason" field without parsing str(exception). DON'T raise this
    # base class directly, always pick the specific subclass!
    default_message: ClassVar[str] = "Unexpected error."
    http_status: ClassVar[int] = 500
    category: ClassVar[str] = "internal"

    def __init__(self, message: str | None = None, *args: Any) -> None:
        message = message or self.default_message
        super().__init__(message, *args)
        self.message = message

    @property
    def reason(self) -> str:
        """Reason text exposed to API clients."""
        return self.message


# =============================================================================
# Validation - raised before any network or disk access
# =============================================================================


class ValidationException(ImageCacheError):
    """Raised when an incoming transform request is not acceptable."""

    http_status = 400
    category = "validation"


class UnsupportedFormatError(ValidationException):
    """Requested output format is not in the format table."""

    default_message = "Unsupported format. Use 'avif', 'heic', 'jxl', or 'qoi'."
    http_status = 422


class BadRequestError(ValidationException):
    """Request body is too large, not UTF-8, or otherwise unusable.

    Also raised when the source server answers with an empty body - there is
    nothing to transform, and nothing gets cached.
    """

    default_message = "Bad request: invalid request format."


class JsonDeserializeError(ValidationException):
    """Request body is not valid JSON for a transform descriptor."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Bad request: invalid JSON - {details}")
        self.details = details


# =============================================================================
# Network
# =============================================================================


class DownloadError(ImageCacheError):
    """Fetching the source image failed (connection, protocol or HTTP status)."""

    default_message = "Failed to download image from URL."
    http_status = 502
    category = "network"


# =============================================================================
# Storage (cache directory I/O)
# =============================================================================


class StorageError(ImageCacheError):
    """Base for cache directory I/O failures."""

    category = "io"


class DirectoryCreationError(StorageError):
    default_message = "Failed to create directories."


class FileCreationError(StorageError):
    default_message = "Failed to create output file."


class FileWriteError(StorageError):
    default_message = "Failed to write image data to file."


class FileReadError(StorageError):
    default_message = "Failed to read image data from file."


class FileCorruptError(StorageError):
    """A cached source blob exists but is zero-length.

    This is NOT a cache miss - the caller must not silently re-download.
    """

    default_message = "File was empty or corrupt."


# =============================================================================
# Codec
# =============================================================================


class CodecError(ImageCacheError):
    """Base for decode/resize/encode failures."""

    category = "codec"


class ImageDecodeError(CodecError):
    default_message = "Failed to decode image. May be corrupt or unsupported."


class ResizeError(CodecError):
    default_message = "Failed to resize image."


class ImageEncodeError(CodecError):
    default_message = "Failed to encode image."


# =============================================================================
# Internal
# =============================================================================


class ProcessingError(ImageCacheError):
    """Unexpected failure inside the offloaded worker job."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Internal processing error: {details}")
        self.details = details


class ConfigurationError(ImageCacheError):
    """Application misconfiguration, raised at startup (never per request).

    Example:
        raise ConfigurationError("No encoder registered for: heic")
    """

    http_status = 503


__all__ = [
    # Base
    "ImageCacheError",
    # Validation
    "ValidationException",
    "UnsupportedFormatError",
    "BadRequestError",
    "JsonDeserializeError",
    # Network
    "DownloadError",
    # Storage
    "StorageError",
    "DirectoryCreationError",
    "FileCreationError",
    "FileWriteError",
    "FileReadError",
    "FileCorruptError",
    # Codec
    "CodecError",
    "ImageDecodeError",
    "ResizeError",
    "ImageEncodeError",
    # Internal
    "ProcessingError",
    "ConfigurationError",
]
