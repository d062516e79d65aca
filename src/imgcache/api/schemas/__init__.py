"""API request/response schemas."""

from imgcache.api.schemas.transform import (
    MAX_TALLEST_SIDE,
    ErrorResponse,
    TransformRequestBody,
    TransformResponse,
)

__all__ = [
    "MAX_TALLEST_SIDE",
    "ErrorResponse",
    "TransformRequestBody",
    "TransformResponse",
]
